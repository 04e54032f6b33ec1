"""Split fetched releases into prerelease and stable sets below a target."""
from __future__ import annotations

import logging
from typing import Iterable

from constants import Ordering
from common.logging_utils import extra_context, is_debug_enabled
from .models import Classification, ReleaseRecord
from .ordering import compare_versions, is_prerelease, parse_version

logger = logging.getLogger(__name__)


def classify(
    releases: Iterable[ReleaseRecord],
    target_version: str,
    ordering: str = Ordering.SIMPLE.value,
) -> Classification:
    """Route each release at or below ``target_version`` into one of two sets.

    Releases above the target and releases whose tag is not a version are
    left out of both sets. A tag seen twice keeps its first record.

    Raises:
        ValueError: if ``target_version`` itself is not a version.
    """
    if parse_version(target_version) is None:
        raise ValueError(f"Invalid target version: {target_version}")

    result = Classification()
    for record in releases:
        if record.tag in result.prereleases or record.tag in result.stables:
            logger.warning("Duplicate tag %s (ID: %s) ignored", record.tag, record.release_id)
            continue
        if parse_version(record.tag) is None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Skipping unversioned tag",
                    extra=extra_context(
                        event="decision",
                        component="classifier",
                        action="skip",
                        target=record.tag,
                        outcome="unparseable",
                    ),
                )
            result.skipped += 1
            continue
        try:
            above_target = compare_versions(record.raw_version, target_version, ordering) > 0
        except ValueError:
            logger.debug("Skipping tag %s: not comparable under %s ordering", record.tag, ordering)
            result.skipped += 1
            continue
        if above_target:
            result.skipped += 1
            continue

        if is_prerelease(record.tag):
            result.prereleases[record.tag] = record
            logger.info("Prerelease: %s", record.tag)
        else:
            result.stables[record.tag] = record
            logger.info("Stable release: %s", record.tag)

    logger.info("Found %d prerelease(s)", len(result.prereleases))
    logger.info("Found %d stable release(s)", len(result.stables))
    return result
