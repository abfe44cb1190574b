"""
Core value types for gap generation.

Spans are half-open ``[start, end)`` string indices into the original source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Union

from .errors import SegmentIntegrityError


class GapCategory(str, Enum):
    """Syntactic category of a gap candidate."""

    PROPERTY = "property"
    FUNCTION = "function"
    OPERATOR = "operator"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULLISH = "nullish"
    VARIABLE = "variable"
    KEYWORD = "keyword"
    OBJECT_KEY = "object_key"
    ARRAY_ELEMENT = "array_element"


# Most valuable first. Eviction during spacing removes from the tail.
CATEGORY_PRIORITY: tuple[GapCategory, ...] = (
    GapCategory.FUNCTION,
    GapCategory.PROPERTY,
    GapCategory.KEYWORD,
    GapCategory.OPERATOR,
    GapCategory.VARIABLE,
    GapCategory.OBJECT_KEY,
    GapCategory.ARRAY_ELEMENT,
    GapCategory.STRING,
    GapCategory.NUMBER,
    GapCategory.BOOLEAN,
    GapCategory.NULLISH,
)


def category_rank(category: GapCategory) -> int:
    """Lower rank = more important."""
    return CATEGORY_PRIORITY.index(category)


class FallbackReason(str, Enum):
    """Why a generation produced no gaps."""

    PARSE_ERROR = "parse_error"
    NO_NODE_TYPES = "no_node_types"
    NO_CANDIDATES = "no_candidates"


@dataclass(frozen=True)
class SourceSpan:
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def overlaps(self, other: "SourceSpan") -> bool:
        return self.start < other.end and other.start < self.end

    def distance_to(self, other: "SourceSpan") -> int:
        """Characters between two spans; negative when they overlap."""
        if self.end <= other.start:
            return other.start - self.end
        if other.end <= self.start:
            return self.start - other.end
        return -1


@dataclass(frozen=True)
class Candidate:
    """A span eligible to become a gap."""

    span: SourceSpan
    category: GapCategory
    answer: str

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    @property
    def identity(self) -> str:
        """Stable key used by generation history."""
        return f"{self.start}-{self.end}:{self.category.value}"


@dataclass(frozen=True)
class GapNode:
    """A selected candidate with its gap id."""

    id: int
    candidate: Candidate

    @property
    def start(self) -> int:
        return self.candidate.start

    @property
    def end(self) -> int:
        return self.candidate.end

    @property
    def answer(self) -> str:
        return self.candidate.answer

    @property
    def category(self) -> GapCategory:
        return self.candidate.category


@dataclass(frozen=True)
class TextSegment:
    value: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class GapSegment:
    id: int
    answer: str
    kind: Literal["gap"] = "gap"


Segment = Union[TextSegment, GapSegment]


@dataclass
class GapResult:
    """Segments plus answer key handed back to the caller."""

    segments: list[Segment]
    answer_key: dict[int, str]
    categories: dict[int, GapCategory] = field(default_factory=dict)
    fallback: FallbackReason | None = None
    message: str | None = None

    @property
    def gap_count(self) -> int:
        return len(self.answer_key)

    @property
    def gap_ids(self) -> list[int]:
        return [seg.id for seg in self.segments if isinstance(seg, GapSegment)]

    def reconstruct(self) -> str:
        """Concatenate text values and expected answers in order."""
        return "".join(
            seg.value if isinstance(seg, TextSegment) else seg.answer
            for seg in self.segments
        )

    def verify(self, source: str | None = None) -> None:
        """Raise SegmentIntegrityError if ids, key or round trip disagree."""
        ids = self.gap_ids
        if len(ids) != len(set(ids)):
            raise SegmentIntegrityError(f"Duplicate gap ids in segments: {ids}")
        if set(ids) != set(self.answer_key):
            raise SegmentIntegrityError(
                f"Gap ids {sorted(ids)} do not match answer key {sorted(self.answer_key)}"
            )
        for seg in self.segments:
            if isinstance(seg, GapSegment) and self.answer_key[seg.id] != seg.answer:
                raise SegmentIntegrityError(f"Answer key disagrees with gap {seg.id}")
        if source is not None and self.reconstruct() != source:
            raise SegmentIntegrityError("Segments do not reproduce the source text")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        segments: list[dict[str, Any]] = []
        for seg in self.segments:
            if isinstance(seg, TextSegment):
                segments.append({"kind": "text", "value": seg.value})
            else:
                segments.append({"kind": "gap", "id": seg.id, "answer": seg.answer})
        return {
            "segments": segments,
            "answer_key": {str(gap_id): answer for gap_id, answer in self.answer_key.items()},
            "categories": {str(gap_id): cat.value for gap_id, cat in self.categories.items()},
            "fallback": self.fallback.value if self.fallback else None,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GapResult":
        """Create from dictionary. Gap ids stored as strings are coerced to int."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        segments: list[Segment] = []
        for seg in data.get("segments", []):
            if not isinstance(seg, dict):
                raise ValueError(f"Expected a segment object, got {seg!r}")
            if seg.get("kind") == "text":
                segments.append(TextSegment(value=str(seg.get("value", ""))))
            elif seg.get("kind") == "gap":
                segments.append(GapSegment(id=int(seg["id"]), answer=str(seg["answer"])))
            else:
                raise ValueError(f"Unknown segment kind: {seg.get('kind')!r}")

        fallback = data.get("fallback")
        return cls(
            segments=segments,
            answer_key={int(k): str(v) for k, v in data.get("answer_key", {}).items()},
            categories={
                int(k): GapCategory(v) for k, v in (data.get("categories") or {}).items()
            },
            fallback=FallbackReason(fallback) if fallback else None,
            message=data.get("message"),
        )
