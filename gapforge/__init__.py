"""
gapforge - fill-in-the-blank exercises from JavaScript snippets.
"""

from .engine import (
    Difficulty,
    GapEngine,
    GapResult,
    GapSettings,
    HistoryStore,
    apply_difficulty_preset,
    generate_gaps,
    validate_answers,
)

__version__ = "1.0.0"

__all__ = [
    "Difficulty",
    "GapEngine",
    "GapResult",
    "GapSettings",
    "HistoryStore",
    "apply_difficulty_preset",
    "generate_gaps",
    "validate_answers",
]
