"""
Line-density and adjacency rules for gap candidates.

At most ``max_per_line`` gaps start on one source line, two gaps on the same
line keep at least ``min_spacing`` characters between them, and no two gaps
overlap anywhere. Candidates are admitted greedily in source order.

Required categories (explicitly requested by the caller) are force-inserted
when the greedy pass dropped every instance. The instance needing the fewest
evictions wins (ties: earliest start). All spacing conflicts are evicted; if
the line is still full, the kept gap with the least-preferred category goes
(ties: later start). The sole representative of another required category is
never evicted.
"""

from __future__ import annotations

import bisect
from typing import Iterable

from loguru import logger

from .types import Candidate, GapCategory, category_rank


class LineIndex:
    """Maps string offsets to zero-based line numbers."""

    def __init__(self, source: str):
        self._starts = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._starts.append(index + 1)

    def line_of(self, position: int) -> int:
        return bisect.bisect_right(self._starts, position) - 1


class SpacingArranger:
    def __init__(self, source: str, max_per_line: int = 2, min_spacing: int = 2):
        self.lines = LineIndex(source)
        self.max_per_line = max_per_line
        self.min_spacing = min_spacing

    def _same_line(self, a: Candidate, b: Candidate) -> bool:
        return self.lines.line_of(a.start) == self.lines.line_of(b.start)

    def _conflicts(self, candidate: Candidate, kept: Iterable[Candidate]) -> list[Candidate]:
        conflicts = []
        for other in kept:
            if candidate.span.overlaps(other.span):
                conflicts.append(other)
            elif self._same_line(candidate, other) and (
                candidate.span.distance_to(other.span) < self.min_spacing
            ):
                conflicts.append(other)
        return conflicts

    def _on_line(self, candidate: Candidate, kept: Iterable[Candidate]) -> list[Candidate]:
        return [other for other in kept if self._same_line(candidate, other)]

    def _fits(self, candidate: Candidate, kept: list[Candidate]) -> bool:
        if self._conflicts(candidate, kept):
            return False
        return len(self._on_line(candidate, kept)) < self.max_per_line

    def arrange(
        self,
        candidates: list[Candidate],
        required: Iterable[GapCategory] = (),
    ) -> list[Candidate]:
        ordered = sorted(
            candidates,
            key=lambda c: (c.start, category_rank(c.category), c.end),
        )

        kept: list[Candidate] = []
        for candidate in ordered:
            if self._fits(candidate, kept):
                kept.append(candidate)

        required = sorted(set(required), key=category_rank)
        for category in required:
            self._force_insert(category, ordered, kept, required)

        kept.sort(key=lambda c: c.start)
        if len(kept) < len(candidates):
            logger.debug(f"Spacing kept {len(kept)} of {len(candidates)} candidates")
        return kept

    def _force_insert(
        self,
        category: GapCategory,
        ordered: list[Candidate],
        kept: list[Candidate],
        required: list[GapCategory],
    ) -> None:
        if any(c.category is category for c in kept):
            return
        instances = [c for c in ordered if c.category is category]
        if not instances:
            return

        protected = set()
        for other in required:
            if other is category:
                continue
            representatives = [c for c in kept if c.category is other]
            if len(representatives) == 1:
                protected.add(representatives[0])

        best: tuple[Candidate, list[Candidate]] | None = None
        for candidate in instances:
            evictions = self._conflicts(candidate, kept)
            remaining = [c for c in self._on_line(candidate, kept) if c not in evictions]
            if len(remaining) >= self.max_per_line:
                removable = [c for c in remaining if c not in protected]
                if not removable:
                    continue
                evictions.append(
                    max(removable, key=lambda c: (category_rank(c.category), c.start))
                )
            if any(c in protected for c in evictions):
                continue
            if best is None or len(evictions) < len(best[1]):
                best = (candidate, evictions)

        if best is None:
            logger.warning(f"Could not place a required {category.value} gap")
            return

        candidate, evictions = best
        for evicted in evictions:
            kept.remove(evicted)
        kept.append(candidate)
        logger.debug(
            f"Force-inserted {category.value} gap {candidate.answer!r}, "
            f"evicted {[c.answer for c in evictions]}"
        )


def arrange_spacing(
    candidates: list[Candidate],
    source: str,
    required: Iterable[GapCategory] = (),
    max_per_line: int = 2,
    min_spacing: int = 2,
) -> list[Candidate]:
    """Filter candidates down to a conflict-free pool sorted by start."""
    return SpacingArranger(source, max_per_line, min_spacing).arrange(candidates, required)
