"""Version parsing and the ordering rules used for filtering and retention.

Two rules are available:

``simple`` (default)
    Dot-delimited release-core segments are compared pairwise, numerically
    when both segments are digits and lexically otherwise. When the shared
    segments are equal the version with more segments is greater. A
    prerelease is not ranked below its release, so ``2.0.0-rc.1`` compares
    equal to ``2.0.0``; two prereleases of the same core compare their
    prerelease identifiers by the same segment rule (``rc.2`` < ``rc.10``).
    Build metadata is ignored.

``semver``
    Full semantic-version precedence via ``semantic_version``; prereleases
    rank below their release.
"""
from __future__ import annotations

import functools
import re
from typing import Callable, Optional

import semantic_version

from constants import Ordering
from .models import ParsedVersion, strip_v_prefix

_CORE_RE = re.compile(r"^[0-9]+(\.[0-9A-Za-z_]+)*$")

Comparator = Callable[[str, str], int]


def parse_version(tag: str) -> Optional[ParsedVersion]:
    """Parse a tag (with or without a leading ``v``) into a ParsedVersion.

    Returns None for tags that are not versions (e.g. ``latest``).
    """
    if not tag:
        return None
    text = strip_v_prefix(tag.strip())
    main, plus, build = text.partition("+")
    core, dash, prerelease = main.partition("-")
    if not _CORE_RE.match(core):
        return None
    if dash and not prerelease:
        return None
    if plus and not build:
        return None
    return ParsedVersion(
        text=text,
        core=tuple(core.split(".")),
        prerelease=prerelease if dash else None,
        build=build if plus else None,
    )


def is_prerelease(tag: str) -> bool:
    """True when the stripped tag contains a prerelease ``-`` before any ``+``."""
    return "-" in strip_v_prefix(tag).partition("+")[0]


def _compare_segment(left: str, right: str) -> int:
    if left.isdigit() and right.isdigit():
        a, b = int(left), int(right)
    else:
        a, b = left, right  # type: ignore[assignment]
    return (a > b) - (a < b)


def _compare_segments(left, right) -> int:
    for a, b in zip(left, right):
        result = _compare_segment(a, b)
        if result:
            return result
    return (len(left) > len(right)) - (len(left) < len(right))


def _compare_simple(left: ParsedVersion, right: ParsedVersion) -> int:
    result = _compare_segments(left.core, right.core)
    if result or not (left.is_prerelease and right.is_prerelease):
        return result
    return _compare_segments(left.prerelease.split("."), right.prerelease.split("."))


def _to_semver(parsed: ParsedVersion) -> semantic_version.Version:
    return semantic_version.Version.coerce(parsed.text)


def _compare_semver(left: ParsedVersion, right: ParsedVersion) -> int:
    a, b = _to_semver(left), _to_semver(right)
    return (a > b) - (a < b)


def compare_versions(left: str, right: str, ordering: str = Ordering.SIMPLE.value) -> int:
    """Compare two version strings; returns -1, 0 or 1.

    Raises:
        ValueError: if either side is not a parseable version.
    """
    parsed_left = parse_version(left)
    parsed_right = parse_version(right)
    if parsed_left is None or parsed_right is None:
        raise ValueError(f"Cannot compare non-version tags: {left!r}, {right!r}")
    if Ordering(ordering) is Ordering.SEMVER:
        return _compare_semver(parsed_left, parsed_right)
    return _compare_simple(parsed_left, parsed_right)


def version_key(ordering: str = Ordering.SIMPLE.value):
    """Return a ``sorted`` key function over version strings."""
    return functools.cmp_to_key(functools.partial(compare_versions, ordering=ordering))
