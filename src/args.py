"""Argument parsing functionality for releasesweep."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Every setting defaults to None so that environment variables and the
    config file can fill in whatever was not given on the command line.
    """
    parser = argparse.ArgumentParser(
        prog=Constants.PROG_NAME,
        description=(
            "releasesweep - prune GitHub releases and tags by semantic version"
        ),
        add_help=True,
    )

    parser.add_argument("--repo",
                        dest="REPO",
                        help="Repository in owner/name form (default: $GITHUB_REPOSITORY)",
                        action="store", type=str)
    parser.add_argument("--token",
                        dest="TOKEN",
                        help="GitHub token (default: $GITHUB_TOKEN)",
                        action="store", type=str)
    parser.add_argument("-s", "--semver",
                        dest="SEMVER",
                        help="Target version; only releases at or below it are considered",
                        action="store", type=str)
    parser.add_argument("-k", "--keep",
                        dest="KEEP",
                        help=f"Number of newest stable releases to keep (default: {Constants.DEFAULT_KEEP})",
                        action="store", type=str)
    parser.add_argument("--clean-prereleases",
                        dest="CLEAN_PRERELEASES",
                        help="Delete prereleases at or below the target (true/false, default: true)",
                        action="store", type=str)
    parser.add_argument("--clean-old-releases",
                        dest="CLEAN_OLD_RELEASES",
                        help="Delete stable releases beyond --keep (true/false, default: true)",
                        action="store", type=str)
    parser.add_argument("--dry-run",
                        dest="DRY_RUN",
                        help="Only report what would be deleted (true/false, default: false)",
                        action="store", type=str, nargs="?", const="true")
    parser.add_argument("--ordering",
                        dest="ORDERING",
                        help="Version ordering rule (default: simple)",
                        action="store", type=str.lower,
                        choices=Constants.ORDERINGS)
    parser.add_argument("--api-url",
                        dest="API_URL",
                        help=f"GitHub API base URL (default: {Constants.GITHUB_API_BASE})",
                        action="store", type=str)
    parser.add_argument("--max-retries",
                        dest="MAX_RETRIES",
                        help=f"Attempts per API call (default: {Constants.HTTP_RETRY_MAX})",
                        action="store", type=int)
    parser.add_argument("--retry-delay",
                        dest="RETRY_DELAY",
                        help=f"Base delay in seconds between attempts (default: {Constants.HTTP_RETRY_DELAY_SEC})",
                        action="store", type=float)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or YML)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--version",
                        action="version",
                        version=f"%(prog)s {Constants.VERSION}")

    return parser.parse_args(argv)
