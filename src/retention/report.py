"""Final run summary, GitHub Actions outputs and the exit decision."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Tuple

from constants import ExitCodes
from .metrics import RunMetrics

if TYPE_CHECKING:  # pragma: no cover
    from cli_config import RunConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunReport:
    """Echoed configuration plus the final counters."""
    repo: str
    semver: str
    keep: int
    clean_prereleases: bool
    clean_old_releases: bool
    dry_run: bool
    ordering: str
    metrics: RunMetrics
    aborted: bool = False

    def outputs(self) -> Dict[str, int]:
        return self.metrics.as_outputs()

    def render(self) -> str:
        """Human-readable summary block."""
        m = self.metrics
        lines = [
            "Cleanup Summary",
            "",
            "Configuration:",
            f"  Repository:              {self.repo}",
            f"  Semantic Version:        {self.semver}",
            f"  Retention Count:         {self.keep}",
            f"  Clean Prereleases:       {str(self.clean_prereleases).lower()}",
            f"  Clean Old Releases:      {str(self.clean_old_releases).lower()}",
            f"  Dry Run:                 {str(self.dry_run).lower()}",
            f"  Version Ordering:        {self.ordering}",
            "",
            "Results:",
        ]
        if self.dry_run:
            lines.append("  Mode:                    DRY RUN (no changes made)")
        lines.extend([
            f"  Prereleases Deleted:     {m.prereleases_deleted}",
            f"  Old Releases Deleted:    {m.old_releases_deleted}",
            f"  Tags Deleted:            {m.tags_deleted}",
            f"  Total Releases Deleted:  {m.total_deleted}",
            "",
            "Statistics:",
            f"  API Calls Made:          {m.api_calls}",
            f"  Errors Encountered:      {m.errors}",
        ])
        return "\n".join(lines)

    def write_github_outputs(self, path: str) -> None:
        """Append ``name=value`` lines to a GitHub Actions output file."""
        with open(path, "a", encoding="utf-8") as fh:
            for name, value in self.outputs().items():
                fh.write(f"{name}={value}\n")


class Reporter:
    """Owns the metrics at the end of the run and decides success."""

    def __init__(self, config: RunConfig, metrics: RunMetrics):
        self.config = config
        self.metrics = metrics

    def summarize(self, aborted: bool = False) -> Tuple[RunReport, ExitCodes]:
        """Build the report; failure iff any error was recorded.

        ``aborted`` marks a run stopped before any deletion was attempted.
        """
        report = RunReport(
            repo=self.config.repo,
            semver=self.config.semver,
            keep=self.config.keep,
            clean_prereleases=self.config.clean_prereleases,
            clean_old_releases=self.config.clean_old_releases,
            dry_run=self.config.dry_run,
            ordering=self.config.ordering,
            metrics=self.metrics,
            aborted=aborted,
        )
        if self.metrics.errors > 0:
            logger.warning("Completed with %d error(s)", self.metrics.errors)
            return report, ExitCodes.FAILURE
        logger.info("Cleanup completed successfully!")
        return report, ExitCodes.SUCCESS
