"""Version parsing, ordering and release classification."""

from .models import Classification, ParsedVersion, ReleaseKind, ReleaseRecord
from .ordering import compare_versions, is_prerelease, parse_version, version_key
from .classifier import classify

__all__ = [
    "Classification",
    "ParsedVersion",
    "ReleaseKind",
    "ReleaseRecord",
    "compare_versions",
    "is_prerelease",
    "parse_version",
    "version_key",
    "classify",
]
