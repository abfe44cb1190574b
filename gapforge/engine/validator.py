"""
Answer validation against an answer key.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class HintKind(str, Enum):
    PERFECT = "perfect"
    TRY_AGAIN = "try_again"
    ALMOST_THERE = "almost_there"
    FILL_REMAINING = "fill_remaining"


HINTS = {
    HintKind.PERFECT: "Perfect! All answers are correct.",
    HintKind.TRY_AGAIN: "Try again! Review the code structure.",
    HintKind.ALMOST_THERE: "Almost there! Review your last answer.",
    HintKind.FILL_REMAINING: "Fill in all the gaps to continue.",
}


@dataclass
class ValidationResult:
    """Result of checking a set of answers."""
    correct_count: int
    total_count: int
    correct_gaps: list[int]
    incorrect_gaps: list[int]
    hint_kind: HintKind

    @property
    def hint(self) -> str:
        return HINTS[self.hint_kind]

    @property
    def unanswered_count(self) -> int:
        return self.total_count - self.correct_count - len(self.incorrect_gaps)


def _lookup(answers: Mapping, gap_id: int) -> str:
    value = answers.get(gap_id)
    if value is None:
        value = answers.get(str(gap_id))
    return "" if value is None else str(value)


def validate_answers(answer_key: Mapping[int, str], user_answers: Mapping) -> ValidationResult:
    """
    Compare trimmed answers gap by gap.

    Empty or missing answers are neither correct nor incorrect but still count
    toward the total.
    """
    correct_gaps: list[int] = []
    incorrect_gaps: list[int] = []

    for gap_id in sorted(answer_key):
        expected = (answer_key[gap_id] or "").strip()
        submitted = _lookup(user_answers, gap_id).strip()

        if expected and submitted == expected:
            correct_gaps.append(gap_id)
        elif submitted:
            incorrect_gaps.append(gap_id)

    total_count = len(answer_key)
    correct_count = len(correct_gaps)

    if correct_count == total_count:
        hint_kind = HintKind.PERFECT
    elif correct_count == 0:
        hint_kind = HintKind.TRY_AGAIN
    elif incorrect_gaps:
        hint_kind = HintKind.ALMOST_THERE
    else:
        hint_kind = HintKind.FILL_REMAINING

    return ValidationResult(
        correct_count=correct_count,
        total_count=total_count,
        correct_gaps=correct_gaps,
        incorrect_gaps=incorrect_gaps,
        hint_kind=hint_kind,
    )
