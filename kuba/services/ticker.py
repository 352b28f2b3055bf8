"""Distribution of hot terms across the scrolling ticker lanes."""

from __future__ import annotations

import math
import random
from typing import Callable, Mapping, MutableSequence, Sequence

from ..models import Lane, LaneEntry

# (delay, duration) per lane; fixed rather than derived from content length.
LANE_TIMINGS: tuple[tuple[str, str], ...] = (("0s", "35s"), ("-5s", "28s"))

ShuffleStrategy = Callable[[MutableSequence[LaneEntry]], None]


def unique_entries(ranked: Mapping[str, Sequence[str]]) -> list[LaneEntry]:
    """Flatten ranked terms in category order, keeping each term's first source."""

    seen: set[str] = set()
    entries: list[LaneEntry] = []
    for category, terms in ranked.items():
        for term in terms:
            if term in seen:
                continue
            seen.add(term)
            entries.append(LaneEntry(term=term, category=category))
    return entries


class TickerDistributor:
    """Assign deduplicated hot terms to a fixed set of parallel lanes."""

    def __init__(
        self,
        *,
        lane_count: int = len(LANE_TIMINGS),
        min_words_per_lane: int = 8,
        shuffle: ShuffleStrategy | None = None,
    ) -> None:
        if not 1 <= lane_count <= len(LANE_TIMINGS):
            raise ValueError(f"lane_count must be between 1 and {len(LANE_TIMINGS)}")
        self._lane_count = lane_count
        self._min_words_per_lane = min_words_per_lane
        self._shuffle: ShuffleStrategy = shuffle or random.shuffle

    def words_per_lane(self, unique_count: int) -> int:
        return max(self._min_words_per_lane, math.ceil(unique_count / self._lane_count))

    def distribute(self, ranked: Mapping[str, Sequence[str]]) -> list[Lane]:
        """Return the lane assignment for ``ranked`` terms keyed by category.

        Slots are filled round-robin over the shuffled unique terms, wrapping
        around as needed. While the slot index is still inside the unique
        sequence, the following term is also emitted into the same lane.
        """

        unique = unique_entries(ranked)
        self._shuffle(unique)

        lanes = [
            Lane(index=index, delay=delay, duration=duration)
            for index, (delay, duration) in enumerate(
                LANE_TIMINGS[: self._lane_count]
            )
        ]
        count = len(unique)
        if not count:
            return lanes

        for slot in range(self.words_per_lane(count) * self._lane_count):
            lane = lanes[slot % self._lane_count]
            lane.entries.append(unique[slot % count])
            if slot < count:
                lane.entries.append(unique[(slot + 1) % count])
        return lanes
