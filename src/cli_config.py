"""Run configuration: source resolution and input validation.

Each setting is taken from the first source that provides it: command-line
flag, environment variable, YAML config file, then the default from
Constants. All values are validated together so a single run reports every
problem at once; nothing touches the network before validation passes.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """One or more run settings are missing or malformed."""

    def __init__(self, problems: Sequence[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


@dataclass(frozen=True)
class RunConfig:
    """Validated settings for one cleanup run."""
    token: str
    repo: str
    semver: str
    keep: int = Constants.DEFAULT_KEEP
    clean_prereleases: bool = Constants.DEFAULT_CLEAN_PRERELEASES
    clean_old_releases: bool = Constants.DEFAULT_CLEAN_OLD_RELEASES
    dry_run: bool = Constants.DEFAULT_DRY_RUN
    ordering: str = Constants.DEFAULT_ORDERING
    api_url: str = Constants.GITHUB_API_BASE
    max_retries: int = Constants.HTTP_RETRY_MAX
    retry_delay: float = Constants.HTTP_RETRY_DELAY_SEC


def _input_env_names(name: str) -> List[str]:
    """Names GitHub Actions may use for an action input."""
    upper = name.upper()
    prefix = Constants.ENV_INPUT_PREFIX
    names = [prefix + upper.replace("-", "_")]
    if "-" in upper:
        names.append(prefix + upper)
    return names


# setting -> (args attribute, environment variable names, config key)
_SOURCES = {
    "token": ("TOKEN", [Constants.ENV_GITHUB_TOKEN] + _input_env_names("token"), "token"),
    "repo": ("REPO", _input_env_names("repo") + [Constants.ENV_GITHUB_REPOSITORY], "repo"),
    "semver": ("SEMVER", _input_env_names("semver"), "semver"),
    "keep": ("KEEP", _input_env_names("keep"), "keep"),
    "clean_prereleases": (
        "CLEAN_PRERELEASES", _input_env_names("clean-prereleases"), "clean_prereleases"
    ),
    "clean_old_releases": (
        "CLEAN_OLD_RELEASES", _input_env_names("clean-old-releases"), "clean_old_releases"
    ),
    "dry_run": ("DRY_RUN", _input_env_names("dry-run"), "dry_run"),
    "ordering": ("ORDERING", _input_env_names("ordering"), "ordering"),
    "api_url": ("API_URL", [Constants.ENV_GITHUB_API_URL], "api_url"),
    "max_retries": ("MAX_RETRIES", [], "max_retries"),
    "retry_delay": ("RETRY_DELAY", [], "retry_delay"),
}

_DEFAULTS: Dict[str, Any] = {
    "keep": Constants.DEFAULT_KEEP,
    "clean_prereleases": Constants.DEFAULT_CLEAN_PRERELEASES,
    "clean_old_releases": Constants.DEFAULT_CLEAN_OLD_RELEASES,
    "dry_run": Constants.DEFAULT_DRY_RUN,
    "ordering": Constants.DEFAULT_ORDERING,
    "api_url": Constants.GITHUB_API_BASE,
    "max_retries": Constants.HTTP_RETRY_MAX,
    "retry_delay": Constants.HTTP_RETRY_DELAY_SEC,
}


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load settings from a YAML file.

    Keys may use dashes or underscores. A top-level ``releasesweep`` section
    is used when present.

    Raises:
        ValidationError: if the file is missing, unreadable or not a mapping.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        raise ValidationError([f"Config file not found: {path}"])
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ValidationError([f"Failed to load config file {path}: {exc}"]) from exc
    if not isinstance(data, dict):
        raise ValidationError([f"Config file {path} must contain a mapping"])
    section = data.get(Constants.PROG_NAME, data)
    if not isinstance(section, dict):
        raise ValidationError([f"Config section '{Constants.PROG_NAME}' must be a mapping"])
    logger.debug("Loaded %d setting(s) from %s", len(section), path)
    return {str(k).replace("-", "_"): v for k, v in section.items()}


def _pick(setting: str, args: Any, environ: Mapping[str, str], file_cfg: Mapping[str, Any]) -> Any:
    attr, env_names, key = _SOURCES[setting]
    value = getattr(args, attr, None) if args is not None else None
    if value is not None:
        return value
    for name in env_names:
        env_value = environ.get(name)
        if env_value is not None and str(env_value).strip() != "":
            return env_value
    if key in file_cfg and file_cfg[key] is not None:
        return file_cfg[key]
    return _DEFAULTS.get(setting)


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value).strip()


def _parse_bool(name: str, value: Any, problems: List[str]) -> bool:
    text = _as_text(value).lower()
    if text not in Constants.BOOLEAN_VALUES:
        problems.append(f"{name} must be 'true' or 'false', got: {_as_text(value)}")
        return False
    return text == "true"


def validate_config(raw: Mapping[str, Any]) -> RunConfig:
    """Validate raw setting values and build a RunConfig.

    Raises:
        ValidationError: listing every problem found.
    """
    problems: List[str] = []

    token = _as_text(raw.get("token"))
    if not token:
        problems.append("GitHub token is required but not provided")

    semver = _as_text(raw.get("semver"))
    if not semver:
        problems.append("Semantic version is required but not provided")
    elif not re.match(Constants.SEMVER_PATTERN, semver):
        problems.append(
            f"Invalid semantic version format: {semver} "
            "(expected MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD])"
        )

    keep_text = _as_text(raw.get("keep"))
    keep = 0
    if not keep_text.isdigit():
        problems.append(f"Keep count must be a non-negative integer, got: {keep_text}")
    else:
        keep = int(keep_text)

    clean_prereleases = _parse_bool("clean-prereleases", raw.get("clean_prereleases"), problems)
    clean_old_releases = _parse_bool("clean-old-releases", raw.get("clean_old_releases"), problems)
    dry_run = _parse_bool("dry-run", raw.get("dry_run"), problems)

    repo = _as_text(raw.get("repo"))
    if not re.match(Constants.REPO_PATTERN, repo):
        problems.append(f"Invalid repository format: {repo} (expected owner/repo)")

    ordering = _as_text(raw.get("ordering")).lower()
    if ordering not in Constants.ORDERINGS:
        problems.append(
            f"Unknown ordering: {ordering} (expected one of {', '.join(Constants.ORDERINGS)})"
        )

    api_url = _as_text(raw.get("api_url")) or Constants.GITHUB_API_BASE
    if not api_url.startswith(("http://", "https://")):
        problems.append(f"API URL must be http(s), got: {api_url}")

    max_retries = Constants.HTTP_RETRY_MAX
    try:
        max_retries = int(raw.get("max_retries"))
        if max_retries < 1:
            problems.append(f"max-retries must be at least 1, got: {max_retries}")
    except (TypeError, ValueError):
        problems.append(f"max-retries must be an integer, got: {raw.get('max_retries')}")

    retry_delay = float(Constants.HTTP_RETRY_DELAY_SEC)
    try:
        retry_delay = float(raw.get("retry_delay"))
        if retry_delay < 0:
            problems.append(f"retry-delay must not be negative, got: {retry_delay}")
    except (TypeError, ValueError):
        problems.append(f"retry-delay must be a number, got: {raw.get('retry_delay')}")

    if problems:
        raise ValidationError(problems)

    return RunConfig(
        token=token,
        repo=repo,
        semver=semver,
        keep=keep,
        clean_prereleases=clean_prereleases,
        clean_old_releases=clean_old_releases,
        dry_run=dry_run,
        ordering=ordering,
        api_url=api_url.rstrip("/"),
        max_retries=max_retries,
        retry_delay=retry_delay,
    )


def resolve_config(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> RunConfig:
    """Merge CLI, environment and config-file sources, then validate.

    Raises:
        ValidationError: if the config file or any setting is invalid.
    """
    if environ is None:
        environ = os.environ
    file_cfg = load_config_file(getattr(args, "CONFIG", None) if args is not None else None)
    raw = {setting: _pick(setting, args, environ, file_cfg) for setting in _SOURCES}
    return validate_config(raw)
