"""Tests for retention selection."""

from collections import OrderedDict

import pytest

from retention.selector import select
from versioning.models import ReleaseRecord


def _stables(*tags):
    return OrderedDict((tag, ReleaseRecord.from_api(tag, i + 1)) for i, tag in enumerate(tags))


def test_keeps_newest_and_marks_rest():
    stables = _stables("v1.6.0", "v2.0.0", "v1.8.0", "v1.7.0", "v1.9.0")

    decision = select(stables, 3)

    assert [r.tag for r in decision.kept] == ["v2.0.0", "v1.9.0", "v1.8.0"]
    assert [r.tag for r in decision.candidates] == ["v1.7.0", "v1.6.0"]


def test_keep_zero_marks_everything():
    stables = _stables("1.0.0", "1.1.0", "1.2.0")

    decision = select(stables, 0)

    assert [r.tag for r in decision.candidates] == ["1.2.0", "1.1.0", "1.0.0"]
    assert decision.kept == []


@pytest.mark.parametrize("keep", [3, 4, 100])
def test_keep_at_or_above_count_marks_nothing(keep):
    decision = select(_stables("1.0.0", "1.1.0", "1.2.0"), keep)

    assert decision.candidates == []
    assert len(decision.kept) == 3


def test_numeric_ordering_not_lexical():
    decision = select(_stables("1.9.0", "1.10.0", "1.2.0"), 1)

    assert [r.tag for r in decision.candidates] == ["1.9.0", "1.2.0"]


def test_equal_versions_keep_enumeration_order():
    stables = _stables("v1.0.0", "1.0.0", "0.9.0")

    decision = select(stables, 0)

    assert [r.tag for r in decision.ordered] == ["v1.0.0", "1.0.0", "0.9.0"]


def test_empty_set():
    assert select({}, 2).candidates == []


def test_negative_keep_rejected():
    with pytest.raises(ValueError):
        select(_stables("1.0.0"), -1)
