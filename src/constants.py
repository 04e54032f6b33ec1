"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1


class Ordering(Enum):
    """Version ordering rules available for filtering and retention sorting.

    Args:
        Enum (string): Ordering rule names accepted on the command line.
    """

    SIMPLE = "simple"
    SEMVER = "semver"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROG_NAME = "releasesweep"
    VERSION = "2.0.0"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "RELEASESWEEP_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Repository API constants
    GITHUB_API_BASE = "https://api.github.com"
    GITHUB_API_VERSION = "2022-11-28"
    GITHUB_ACCEPT = "application/vnd.github+json"
    USER_AGENT = "releasesweep/2.0.0"
    REPO_API_PER_PAGE = 100
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_DELAY_SEC = 2
    RATE_LIMIT_MARKER = "rate limit"

    # Environment sources (GitHub Actions inputs use the INPUT_ prefix)
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    ENV_GITHUB_REPOSITORY = "GITHUB_REPOSITORY"
    ENV_GITHUB_API_URL = "GITHUB_API_URL"
    ENV_GITHUB_OUTPUT = "GITHUB_OUTPUT"
    ENV_INPUT_PREFIX = "INPUT_"

    # Defaults for retention settings
    DEFAULT_KEEP = 3
    DEFAULT_CLEAN_PRERELEASES = True
    DEFAULT_CLEAN_OLD_RELEASES = True
    DEFAULT_DRY_RUN = False
    DEFAULT_ORDERING = Ordering.SIMPLE.value

    SEMVER_PATTERN = (
        r"^[0-9]+\.[0-9]+\.[0-9]+(-[a-zA-Z0-9.\-]+)?(\+[a-zA-Z0-9.\-]+)?$"
    )
    REPO_PATTERN = r"^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$"
    BOOLEAN_VALUES = ("true", "false")
    ORDERINGS = [Ordering.SIMPLE.value, Ordering.SEMVER.value]
