"""releasesweep - prune GitHub releases and tags by semantic version

Fetches every release of a repository, classifies those at or below a target
version into prereleases and stable releases, then deletes prereleases and
stable releases beyond a retention count (or only reports them in dry-run
mode).

    Returns:
        int: Exit code
"""
import logging
import os
import sys
from typing import Optional, Tuple

import requests

from constants import Constants, ExitCodes
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from common.http_client import ApiClient
from args import parse_args
from cli_config import RunConfig, ValidationError, resolve_config
from repository.github import FetchError, GitHubReleasesClient
from retention.metrics import RunMetrics
from retention.orchestrator import DeletionOrchestrator, ExecutionMode
from retention.report import Reporter, RunReport
from retention.selector import select
from versioning.classifier import classify

logger = logging.getLogger(__name__)


def _section(title: str) -> None:
    logger.info("")
    logger.info("=" * 63)
    logger.info(title)
    logger.info("=" * 63)


def run_cleanup(
    config: RunConfig,
    *,
    session: Optional[requests.Session] = None,
) -> Tuple[RunReport, ExitCodes]:
    """Run fetch, classification, selection and deletion for one repository.

    Args:
        config: Validated run settings.
        session: Optional requests session (tests inject a fake one).

    Returns:
        The final report and the exit code it implies.
    """
    metrics = RunMetrics()
    reporter = Reporter(config, metrics)
    api = ApiClient(
        config.token,
        metrics=metrics,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
        session=session,
    )
    client = GitHubReleasesClient(api, config.repo, base_url=config.api_url)

    try:
        _section("Fetching Releases")
        try:
            releases = client.fetch_all()
        except FetchError as exc:
            metrics.record_error()
            logger.error("Failed to fetch releases: %s", exc)
            return reporter.summarize(aborted=True)

        _section("Categorizing Releases")
        classification = classify(releases, config.semver, config.ordering)
        decision = select(classification.stables, config.keep, config.ordering)
        if is_debug_enabled(logger):
            logger.debug(
                "Retention decision",
                extra=extra_context(
                    event="decision",
                    component="cli",
                    action="select",
                    kept=[r.tag for r in decision.kept],
                    candidates=[r.tag for r in decision.candidates],
                ),
            )

        orchestrator = DeletionOrchestrator(
            client, metrics, ExecutionMode.from_dry_run(config.dry_run)
        )
        orchestrator.clean_prereleases(classification, config.clean_prereleases)
        orchestrator.clean_old_releases(decision, config.clean_old_releases)
    finally:
        api.close()

    return reporter.summarize()


def publish_report(report: RunReport, environ=None) -> None:
    """Log the summary and write GitHub Actions outputs when available."""
    if environ is None:
        environ = os.environ
    if not report.aborted:
        _section("Cleanup Summary")
        for line in report.render().splitlines()[1:]:
            logger.info(line)
    output_path = environ.get(Constants.ENV_GITHUB_OUTPUT)
    if output_path:
        try:
            report.write_github_outputs(output_path)
        except OSError as exc:
            logger.error("Failed to write GitHub outputs to %s: %s", output_path, exc)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_LEVEL", None))
    if getattr(args, "LOG_FILE", None):
        add_file_handler(args.LOG_FILE)

    _section(f"GitHub Releases Cleanup v{Constants.VERSION}")
    _section("Validating Inputs")
    try:
        config = resolve_config(args)
    except ValidationError as exc:
        for problem in exc.problems:
            logger.error(problem)
        logger.error("Validation failed. Exiting.")
        sys.exit(ExitCodes.FAILURE.value)
    logger.info("All inputs validated successfully")

    report, exit_code = run_cleanup(config)
    publish_report(report)
    sys.exit(exit_code.value)


if __name__ == "__main__":
    main()
