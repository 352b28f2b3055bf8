"""Ticker lane distribution tests."""

from __future__ import annotations

import random
from collections import Counter

import pytest
from pydantic import ValidationError

from kuba.services.ticker import TickerDistributor, unique_entries


def _keep_order(entries) -> None:
    """Shuffle strategy that leaves the sequence untouched."""


def test_duplicate_terms_keep_first_category() -> None:
    entries = unique_entries(
        {"movies": ["A", "B"], "anime": ["B", "C"], "games": ["A", "D"]}
    )

    assert [(entry.term, entry.category) for entry in entries] == [
        ("A", "movies"),
        ("B", "movies"),
        ("C", "anime"),
        ("D", "games"),
    ]


def test_lanes_carry_fixed_timings() -> None:
    lanes = TickerDistributor(shuffle=_keep_order).distribute({"movies": ["A"]})

    assert [(lane.index, lane.delay, lane.duration) for lane in lanes] == [
        (0, "0s", "35s"),
        (1, "-5s", "28s"),
    ]


def test_small_term_set_wraps_and_emits_successors() -> None:
    lanes = TickerDistributor(shuffle=_keep_order).distribute(
        {"movies": ["A", "B"], "anime": ["C"]}
    )

    # 16 slots alternate between lanes; slots 0-2 also emit their successor.
    assert lanes[0].terms() == ["A", "B", "C", "A", "B", "A", "C", "B", "A", "C"]
    assert lanes[1].terms() == ["B", "C", "A", "C", "B", "A", "C", "B", "A"]
    assert len(lanes[0].entries) + len(lanes[1].entries) == 16 + 3


def test_repeated_entries_cannot_be_mutated() -> None:
    lanes = TickerDistributor(shuffle=_keep_order).distribute({"movies": ["A"]})
    entry = lanes[0].entries[0]

    with pytest.raises(ValidationError):
        entry.term = "changed"

    assert all(e.term == "A" for lane in lanes for e in lane.entries)


def test_large_term_set_uses_half_per_lane() -> None:
    terms = [f"t{index}" for index in range(20)]
    distributor = TickerDistributor(shuffle=_keep_order)

    lanes = distributor.distribute({"games": terms})

    assert distributor.words_per_lane(20) == 10
    # 20 slots, every one of them inside the unique sequence.
    assert len(lanes[0].entries) == 20
    assert len(lanes[1].entries) == 20
    assert lanes[0].terms()[:4] == ["t0", "t1", "t2", "t3"]


def test_every_entry_keeps_its_canonical_category() -> None:
    ranked = {"movies": ["A", "B"], "anime": ["B", "C"], "study": ["C", "E"]}
    lanes = TickerDistributor(shuffle=random.Random(3).shuffle).distribute(ranked)

    sources: dict[str, set[str]] = {}
    for lane in lanes:
        for entry in lane.entries:
            sources.setdefault(entry.term, set()).add(entry.category)

    assert sources == {
        "A": {"movies"},
        "B": {"movies"},
        "C": {"anime"},
        "E": {"study"},
    }


def test_seeded_shuffle_is_reproducible() -> None:
    ranked = {"movies": ["A", "B", "C"], "games": ["D", "E", "F", "G"]}

    first = TickerDistributor(shuffle=random.Random(42).shuffle).distribute(ranked)
    second = TickerDistributor(shuffle=random.Random(42).shuffle).distribute(ranked)

    assert [lane.terms() for lane in first] == [lane.terms() for lane in second]
    counts = Counter(term for lane in first for term in lane.terms())
    assert set(counts) == set("ABCDEFG")


def test_no_terms_yields_empty_lanes() -> None:
    lanes = TickerDistributor().distribute({"movies": [], "anime": []})

    assert len(lanes) == 2
    assert all(lane.entries == [] for lane in lanes)


def test_distribution_is_repeatable_without_side_effects() -> None:
    ranked = {"movies": ["A", "B"]}
    distributor = TickerDistributor(shuffle=_keep_order)

    first = distributor.distribute(ranked)
    second = distributor.distribute(ranked)

    assert [lane.terms() for lane in first] == [lane.terms() for lane in second]
    assert ranked == {"movies": ["A", "B"]}


def test_lane_count_is_bounded() -> None:
    with pytest.raises(ValueError):
        TickerDistributor(lane_count=3)

    lanes = TickerDistributor(lane_count=1, shuffle=_keep_order).distribute({"m": ["A"]})
    assert len(lanes) == 1
    assert lanes[0].terms() == ["A", "A"] + ["A"] * 7
