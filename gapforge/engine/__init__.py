"""
Gap generation engine.

Parses a JavaScript snippet, picks spans to hide, and rebuilds the text as
literal and gap segments plus an answer key.
"""

from .errors import FunctionBodyOnlyError, GapEngineError, ParseError, SegmentIntegrityError
from .generator import GapEngine, generate_gaps
from .history import HistoryStore
from .settings import (
    DEFAULT_GAP_SETTINGS,
    CountMode,
    Difficulty,
    Exclusions,
    GapSettings,
    LiteralSwitches,
    NodeTypeSwitches,
    apply_difficulty_preset,
)
from .types import (
    Candidate,
    FallbackReason,
    GapCategory,
    GapNode,
    GapResult,
    GapSegment,
    Segment,
    SourceSpan,
    TextSegment,
)
from .validator import HintKind, ValidationResult, validate_answers

__all__ = [
    "Candidate",
    "CountMode",
    "DEFAULT_GAP_SETTINGS",
    "Difficulty",
    "Exclusions",
    "FallbackReason",
    "FunctionBodyOnlyError",
    "GapCategory",
    "GapEngine",
    "GapEngineError",
    "GapNode",
    "GapResult",
    "GapSegment",
    "GapSettings",
    "HintKind",
    "HistoryStore",
    "LiteralSwitches",
    "NodeTypeSwitches",
    "ParseError",
    "Segment",
    "SegmentIntegrityError",
    "SourceSpan",
    "TextSegment",
    "ValidationResult",
    "apply_difficulty_preset",
    "generate_gaps",
    "validate_answers",
]
