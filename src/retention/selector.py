"""Keep the newest stable releases and mark the rest for deletion."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping

from constants import Ordering
from versioning.models import ReleaseRecord
from versioning.ordering import version_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetentionDecision:
    """Stable releases ordered newest first, split at ``keep``."""
    ordered: List[ReleaseRecord]
    keep: int

    @property
    def kept(self) -> List[ReleaseRecord]:
        return self.ordered[:self.keep]

    @property
    def candidates(self) -> List[ReleaseRecord]:
        if len(self.ordered) <= self.keep:
            return []
        return self.ordered[self.keep:]


def select(
    stables: Mapping[str, ReleaseRecord],
    keep: int,
    ordering: str = Ordering.SIMPLE.value,
) -> RetentionDecision:
    """Order ``stables`` newest first and keep the first ``keep`` of them.

    Equal versions keep their enumeration order.

    Raises:
        ValueError: if ``keep`` is negative.
    """
    if keep < 0:
        raise ValueError(f"keep must be a non-negative integer, got {keep}")

    key = version_key(ordering)
    ordered = sorted(stables.values(), key=lambda r: key(r.raw_version), reverse=True)
    decision = RetentionDecision(ordered=ordered, keep=keep)
    logger.info(
        "Found %d stable release(s), keeping %d (%d candidate(s) for deletion)",
        len(ordered),
        keep,
        len(decision.candidates),
    )
    return decision
