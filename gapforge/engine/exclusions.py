"""
Exclusion filter applied to every extracted candidate.
"""

from __future__ import annotations

from .settings import GapSettings

# Names that are rarely worth quizzing
COMMON_NAMES = frozenset({
    "length",
    "value",
    "index",
    "key",
    "item",
    "element",
    "data",
    "result",
    "response",
    "error",
    "name",
    "id",
    "type",
    "status",
    "count",
    "size",
})

# Built-in JavaScript identifiers
BUILT_INS = frozenset({
    "Promise",
    "Array",
    "Object",
    "String",
    "Number",
    "Boolean",
    "Date",
    "RegExp",
    "Math",
    "JSON",
    "console",
    "window",
    "document",
    "global",
    "globalThis",
    "setTimeout",
    "setInterval",
    "clearTimeout",
    "clearInterval",
    "fetch",
    "parseInt",
    "parseFloat",
    "isNaN",
    "isFinite",
    "encodeURI",
    "decodeURI",
    "encodeURIComponent",
    "decodeURIComponent",
})


def is_single_letter_identifier(answer: str) -> bool:
    return len(answer) == 1 and (answer.isidentifier() or answer == "$")


def should_exclude(answer: str, settings: GapSettings) -> bool:
    """Check if an answer is excluded by the active settings."""
    exclusions = settings.exclusions

    if exclusions.common_names and answer in COMMON_NAMES:
        return True

    if exclusions.built_ins and answer in BUILT_INS:
        return True

    if exclusions.single_letter_vars and is_single_letter_identifier(answer):
        return True

    # Custom list applies regardless of the other switches
    if exclusions.custom_list:
        lowered = answer.lower()
        if any(excluded.lower() == lowered for excluded in exclusions.custom_list):
            return True

    return False
