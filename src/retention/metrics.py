"""Run-scoped counters shared by every stage."""

from dataclasses import dataclass
from typing import Dict


@dataclass
class RunMetrics:
    """Counters accumulated over one cleanup run.

    Counters only move upward; stages call the ``record_*`` methods instead
    of assigning fields.
    """
    prereleases_deleted: int = 0
    old_releases_deleted: int = 0
    tags_deleted: int = 0
    api_calls: int = 0
    errors: int = 0

    @property
    def total_deleted(self) -> int:
        return self.prereleases_deleted + self.old_releases_deleted

    def record_api_call(self) -> None:
        self.api_calls += 1

    def record_error(self) -> None:
        self.errors += 1

    def record_tag_deleted(self) -> None:
        self.tags_deleted += 1

    def record_prerelease_deleted(self) -> None:
        self.prereleases_deleted += 1

    def record_old_release_deleted(self) -> None:
        self.old_releases_deleted += 1

    def as_outputs(self) -> Dict[str, int]:
        """The six named metrics, keyed by their output names."""
        return {
            "prereleases-deleted": self.prereleases_deleted,
            "old-releases-deleted": self.old_releases_deleted,
            "tags-deleted": self.tags_deleted,
            "total-deleted": self.total_deleted,
            "api-calls": self.api_calls,
            "errors": self.errors,
        }
