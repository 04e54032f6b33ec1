"""Data models for releases, parsed versions and classification results."""

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class ReleaseKind(Enum):
    """What a deletion candidate is being removed as."""
    PRERELEASE = "prerelease"
    OLD_RELEASE = "old release"


@dataclass(frozen=True)
class ReleaseRecord:
    """One published release as returned by the hosting API."""
    tag: str
    release_id: int
    is_prerelease: bool  # the API's own flag; classification uses the tag
    raw_version: str  # tag with one leading "v" removed

    @classmethod
    def from_api(cls, tag: str, release_id: int, is_prerelease: bool = False) -> "ReleaseRecord":
        """Build a record from API fields, deriving ``raw_version``."""
        return cls(
            tag=tag,
            release_id=int(release_id),
            is_prerelease=bool(is_prerelease),
            raw_version=strip_v_prefix(tag),
        )


@dataclass(frozen=True)
class ParsedVersion:
    """A tag broken into release core, prerelease and build parts."""
    text: str
    core: Tuple[str, ...]
    prerelease: Optional[str] = None
    build: Optional[str] = None

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None


@dataclass
class Classification:
    """Releases at or below the target version, split by stability.

    Both mappings are keyed by tag and keep API enumeration order.
    """
    prereleases: Dict[str, ReleaseRecord] = field(default_factory=OrderedDict)
    stables: Dict[str, ReleaseRecord] = field(default_factory=OrderedDict)
    skipped: int = 0


def strip_v_prefix(tag: str) -> str:
    """Remove a single leading ``v`` (e.g. ``v1.2.3`` -> ``1.2.3``)."""
    if tag.startswith("v"):
        return tag[1:]
    return tag
