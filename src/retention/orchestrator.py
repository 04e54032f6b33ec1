"""Execute or simulate release and tag deletions one record at a time.

A failed release deletion counts as an error and skips the tag. A failed
tag deletion after a successful release deletion is only a warning: the tag
may already be gone, and the release still counts as deleted.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

from common.http_client import ApiError
from repository.github import GitHubReleasesClient
from versioning.models import Classification, ReleaseKind, ReleaseRecord
from .metrics import RunMetrics
from .selector import RetentionDecision

logger = logging.getLogger(__name__)


class ExecutionMode(Enum):
    """Whether deletions hit the API or are only logged."""
    LIVE = "live"
    SIMULATE = "simulate"

    @classmethod
    def from_dry_run(cls, dry_run: bool) -> "ExecutionMode":
        return cls.SIMULATE if dry_run else cls.LIVE


@dataclass(frozen=True)
class OperationOutcome:
    """Result of one deletion attempt."""
    release_deleted: bool
    tag_deleted: bool = False
    error: Optional[str] = None


class DeletionOrchestrator:
    """Deletes candidate releases and their tags, recording every outcome."""

    def __init__(
        self,
        client: GitHubReleasesClient,
        metrics: RunMetrics,
        mode: ExecutionMode = ExecutionMode.LIVE,
    ):
        self.client = client
        self.metrics = metrics
        self.mode = mode

    @property
    def dry_run(self) -> bool:
        return self.mode is ExecutionMode.SIMULATE

    def process(self, record: ReleaseRecord, kind: ReleaseKind) -> OperationOutcome:
        """Delete (or pretend to delete) one release and then its tag."""
        if self.dry_run:
            logger.warning(
                "[DRY-RUN] Would delete %s: %s (ID: %s)", kind.value, record.tag, record.release_id
            )
            return OperationOutcome(release_deleted=True)

        logger.info("Deleting %s: %s (ID: %s)", kind.value, record.tag, record.release_id)
        try:
            self.client.delete_release(record.release_id)
        except ApiError as exc:
            self.metrics.record_error()
            logger.error(
                "Failed to delete release: %s (ID: %s, HTTP %s): %s",
                record.tag,
                record.release_id,
                exc.status_code,
                exc,
            )
            return OperationOutcome(release_deleted=False, error=type(exc).__name__)
        logger.info("Deleted release: %s", record.tag)

        try:
            self.client.delete_tag(record.tag)
        except ApiError as exc:
            logger.warning(
                "Failed to delete tag: %s (HTTP %s, may not exist)", record.tag, exc.status_code
            )
            return OperationOutcome(release_deleted=True, tag_deleted=False)
        self.metrics.record_tag_deleted()
        logger.info("Deleted tag: %s", record.tag)
        return OperationOutcome(release_deleted=True, tag_deleted=True)

    def _process_batch(
        self,
        records: Iterable[ReleaseRecord],
        kind: ReleaseKind,
        on_deleted: Callable[[], None],
    ) -> List[OperationOutcome]:
        outcomes = []
        for record in records:
            outcome = self.process(record, kind)
            if outcome.release_deleted:
                on_deleted()
            outcomes.append(outcome)
        return outcomes

    def clean_prereleases(
        self, classification: Classification, enabled: bool
    ) -> List[OperationOutcome]:
        """Delete every classified prerelease when prerelease cleanup is on."""
        if not enabled:
            logger.info("Prerelease cleanup is disabled")
            return []

        logger.info("=== Cleaning Prereleases ===")
        candidates = list(classification.prereleases.values())
        if not candidates:
            logger.info("No prereleases to clean")
            return []

        logger.info("Processing %d prerelease(s)...", len(candidates))
        outcomes = self._process_batch(
            candidates, ReleaseKind.PRERELEASE, self.metrics.record_prerelease_deleted
        )
        deleted = sum(1 for o in outcomes if o.release_deleted)
        if self.dry_run:
            logger.warning("[DRY-RUN] Would have deleted %d prerelease(s)", deleted)
        else:
            logger.info("Deleted %d prerelease(s)", deleted)
        return outcomes

    def clean_old_releases(
        self, decision: RetentionDecision, enabled: bool
    ) -> List[OperationOutcome]:
        """Delete stable releases beyond the retention count when enabled."""
        if not enabled:
            logger.info("Old release cleanup is disabled")
            return []

        logger.info("=== Cleaning Old Releases ===")
        if not decision.ordered:
            logger.info("No stable releases to process")
            return []

        candidates = decision.candidates
        if not candidates:
            logger.info(
                "No old releases to clean (%d <= %d)", len(decision.ordered), decision.keep
            )
            return []

        logger.info("Processing %d old release(s)...", len(candidates))
        outcomes = self._process_batch(
            candidates, ReleaseKind.OLD_RELEASE, self.metrics.record_old_release_deleted
        )
        deleted = sum(1 for o in outcomes if o.release_deleted)
        if self.dry_run:
            logger.warning("[DRY-RUN] Would have deleted %d old release(s)", deleted)
        else:
            logger.info("Deleted %d old release(s)", deleted)
        return outcomes
