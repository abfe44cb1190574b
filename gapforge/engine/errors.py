"""
Exception types raised by the gap engine.
"""

from __future__ import annotations


class GapEngineError(Exception):
    """Base class for gap engine failures."""


class ParseError(GapEngineError):
    """Source text is not syntactically valid JavaScript."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.message = message
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class FunctionBodyOnlyError(ParseError):
    """A statement that is only legal inside a function appeared at top level."""


class SegmentIntegrityError(GapEngineError):
    """Segments and answer key disagree, or segments lost source text."""
