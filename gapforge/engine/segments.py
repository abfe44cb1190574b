"""
Segment building: slice the original text around chosen gaps.

Concatenating text values and gap answers in order reproduces the source
exactly.
"""

from __future__ import annotations

from typing import Sequence

from .errors import SegmentIntegrityError
from .types import FallbackReason, GapNode, GapResult, GapSegment, Segment, TextSegment


def build_segments(source: str, gaps: Sequence[GapNode]) -> GapResult:
    segments: list[Segment] = []
    answer_key: dict[int, str] = {}
    categories = {}
    cursor = 0

    for gap in sorted(gaps, key=lambda g: g.start):
        if gap.start < cursor or gap.end > len(source):
            raise SegmentIntegrityError(
                f"Gap {gap.id} [{gap.start}, {gap.end}) overlaps earlier text or exceeds source"
            )
        if gap.start > cursor:
            segments.append(TextSegment(source[cursor:gap.start]))
        answer = source[gap.start:gap.end]
        segments.append(GapSegment(id=gap.id, answer=answer))
        answer_key[gap.id] = answer
        categories[gap.id] = gap.category
        cursor = gap.end

    if cursor < len(source) or not segments:
        segments.append(TextSegment(source[cursor:]))

    return GapResult(segments=segments, answer_key=answer_key, categories=categories)


def fallback_result(source: str, reason: FallbackReason, message: str | None = None) -> GapResult:
    """Whole source as one text segment, empty answer key."""
    return GapResult(
        segments=[TextSegment(source)],
        answer_key={},
        fallback=reason,
        message=message,
    )
