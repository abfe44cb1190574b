"""
JavaScript source parser.

Wraps tree-sitter and converts its concrete syntax tree into a small, closed
``SyntaxNode`` tree whose offsets are string indices into the original source.

Recovery: a ``return`` outside any function is an early error in ECMAScript.
When that is the only problem, the source is parsed again inside a function
envelope and every recovered position is shifted back by the envelope prefix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Iterator

from loguru import logger
from tree_sitter_language_pack import get_parser

from .errors import FunctionBodyOnlyError, ParseError

ENVELOPE_PREFIX = "(function() {\n"
ENVELOPE_SUFFIX = "\n})();"


class NodeKind(str, Enum):
    """Closed set of node kinds the collector understands."""

    PROGRAM = "program"
    IDENTIFIER = "identifier"
    MEMBER_ACCESS = "member_access"
    CALL = "call"
    BINARY = "binary"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULLISH = "nullish"
    VARIABLE_DECLARATOR = "variable_declarator"
    FUNCTION = "function"
    KEYWORD_STATEMENT = "keyword_statement"
    AWAIT = "await"
    OBJECT = "object"
    PAIR = "pair"
    ARRAY = "array"
    OTHER = "other"


_FUNCTION_TYPES = {
    "function_declaration",
    "function_expression",
    "function",
    "generator_function_declaration",
    "generator_function",
    "arrow_function",
    "method_definition",
}

_STATEMENT_KEYWORDS = {
    "if_statement": "if",
    "for_statement": "for",
    "for_in_statement": "for",
    "while_statement": "while",
    "do_statement": "do",
    "switch_statement": "switch",
    "try_statement": "try",
    "throw_statement": "throw",
    "break_statement": "break",
    "continue_statement": "continue",
    "return_statement": "return",
}

_KIND_BY_TYPE: dict[str, NodeKind] = {
    "program": NodeKind.PROGRAM,
    "identifier": NodeKind.IDENTIFIER,
    "property_identifier": NodeKind.IDENTIFIER,
    "shorthand_property_identifier": NodeKind.IDENTIFIER,
    "private_property_identifier": NodeKind.IDENTIFIER,
    "member_expression": NodeKind.MEMBER_ACCESS,
    "call_expression": NodeKind.CALL,
    "binary_expression": NodeKind.BINARY,
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "true": NodeKind.BOOLEAN,
    "false": NodeKind.BOOLEAN,
    "null": NodeKind.NULLISH,
    "undefined": NodeKind.NULLISH,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    "await_expression": NodeKind.AWAIT,
    "object": NodeKind.OBJECT,
    "pair": NodeKind.PAIR,
    "array": NodeKind.ARRAY,
    **{name: NodeKind.FUNCTION for name in _FUNCTION_TYPES},
    **{name: NodeKind.KEYWORD_STATEMENT for name in _STATEMENT_KEYWORDS},
}

_FIELDS_BY_KIND: dict[NodeKind, tuple[str, ...]] = {
    NodeKind.MEMBER_ACCESS: ("object", "property"),
    NodeKind.CALL: ("function", "arguments"),
    NodeKind.BINARY: ("left", "right"),
    NodeKind.VARIABLE_DECLARATOR: ("name", "value"),
    NodeKind.FUNCTION: ("name", "parameters", "parameter", "body"),
    NodeKind.PAIR: ("key", "value"),
}


@dataclass
class SyntaxNode:
    """Position-annotated syntax tree node."""

    kind: NodeKind
    type: str
    start: int
    end: int
    children: list["SyntaxNode"] = field(default_factory=list)
    fields: dict[str, "SyntaxNode"] = field(default_factory=dict)
    operator: str | None = None
    keyword: str | None = None
    is_async: bool = False

    def child(self, name: str) -> "SyntaxNode | None":
        """Named field child (e.g. ``left``, ``property``)."""
        return self.fields.get(name)

    def walk(self) -> Iterator["SyntaxNode"]:
        """Pre-order traversal."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class _OffsetMap:
    """Maps UTF-8 byte offsets reported by tree-sitter to string indices."""

    def __init__(self, text: str, encoded: bytes):
        self._chars: list[int] | None = None
        if len(encoded) != len(text):
            chars: list[int] = []
            for index, char in enumerate(text):
                chars.extend([index] * len(char.encode("utf-8")))
            chars.append(len(text))
            self._chars = chars

    def __call__(self, byte_offset: int) -> int:
        if self._chars is None:
            return byte_offset
        return self._chars[byte_offset]


@lru_cache(maxsize=None)
def _ts_parser(language: str) -> Any:
    return get_parser(language)


def _first_error(ts_node: Any) -> Any | None:
    stack = [ts_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _raise_syntax_error(root: Any) -> None:
    bad = _first_error(root)
    if bad is None:
        raise ParseError("Invalid syntax")
    row, column = bad.start_point[0], bad.start_point[1]
    if bad.is_missing:
        raise ParseError(f"Missing '{bad.type}'", row + 1, column + 1)
    raise ParseError("Unexpected token", row + 1, column + 1)


def _make_node(ts_node: Any, to_index: _OffsetMap, shift: int) -> SyntaxNode:
    kind = _KIND_BY_TYPE.get(ts_node.type, NodeKind.OTHER)
    node = SyntaxNode(
        kind=kind,
        type=ts_node.type,
        start=to_index(ts_node.start_byte) - shift,
        end=to_index(ts_node.end_byte) - shift,
    )

    if kind is NodeKind.BINARY:
        operator = ts_node.child_by_field_name("operator")
        if operator is not None:
            node.operator = operator.type
    elif kind is NodeKind.KEYWORD_STATEMENT:
        node.keyword = _STATEMENT_KEYWORDS[ts_node.type]
    elif kind is NodeKind.AWAIT:
        node.keyword = "await"
    elif kind is NodeKind.FUNCTION:
        node.is_async = any(
            not child.is_named and child.type == "async" for child in ts_node.children
        )
        if node.is_async:
            node.keyword = "async"

    return node


def _link_fields(ts_node: Any, node: SyntaxNode, ts_children: list) -> None:
    for name in _FIELDS_BY_KIND.get(node.kind, ()):
        target = ts_node.child_by_field_name(name)
        if target is None:
            continue
        for ts_child, converted in zip(ts_children, node.children):
            if (
                ts_child.start_byte == target.start_byte
                and ts_child.end_byte == target.end_byte
                and ts_child.type == target.type
            ):
                node.fields[name] = converted
                break


def _convert(ts_root: Any, to_index: _OffsetMap, shift: int) -> SyntaxNode:
    """Convert with an explicit stack; expression chains can nest thousands deep."""
    root = _make_node(ts_root, to_index, shift)
    stack = [(ts_root, root)]
    while stack:
        ts_node, node = stack.pop()
        ts_children = ts_node.named_children
        node.children = [_make_node(child, to_index, shift) for child in ts_children]
        _link_fields(ts_node, node, ts_children)
        stack.extend(zip(ts_children, node.children))
    return root


def _find_top_level_return(root: SyntaxNode) -> SyntaxNode | None:
    stack: list[tuple[SyntaxNode, bool]] = [(root, False)]
    while stack:
        node, in_function = stack.pop()
        if node.kind is NodeKind.KEYWORD_STATEMENT and node.keyword == "return" and not in_function:
            return node
        nested = in_function or node.kind is NodeKind.FUNCTION
        stack.extend((child, nested) for child in reversed(node.children))
    return None


def _parse_text(text: str, language: str, shift: int = 0) -> SyntaxNode:
    encoded = text.encode("utf-8")
    tree = _ts_parser(language).parse(encoded)
    root = tree.root_node
    if root.has_error:
        _raise_syntax_error(root)
    return _convert(root, _OffsetMap(text, encoded), shift)


def _line_column(source: str, index: int) -> tuple[int, int]:
    line = source.count("\n", 0, index) + 1
    column = index - (source.rfind("\n", 0, index) + 1) + 1
    return line, column


def _parse_strict(source: str, language: str) -> SyntaxNode:
    tree = _parse_text(source, language)
    stray = _find_top_level_return(tree)
    if stray is not None:
        line, column = _line_column(source, stray.start)
        raise FunctionBodyOnlyError("'return' outside of function", line, column)
    return tree


def _parse_in_envelope(source: str, language: str) -> SyntaxNode:
    wrapped = f"{ENVELOPE_PREFIX}{source}{ENVELOPE_SUFFIX}"
    try:
        tree = _parse_text(wrapped, language, shift=len(ENVELOPE_PREFIX))
    except ParseError as exc:
        raise ParseError(f"Failed to parse code even after wrapping: {exc.message}") from exc

    envelope = next(node for node in tree.walk() if node.kind is NodeKind.FUNCTION)
    body = envelope.child("body")
    statements = body.children if body is not None else []
    return SyntaxNode(
        kind=NodeKind.PROGRAM,
        type="program",
        start=0,
        end=len(source),
        children=statements,
    )


def parse_source(source: str, language: str = "javascript") -> SyntaxNode:
    """
    Parse source text into a ``SyntaxNode`` tree.

    Raises:
        ParseError: source is not valid, even inside a function envelope.
    """
    try:
        return _parse_strict(source, language)
    except FunctionBodyOnlyError as exc:
        logger.debug(f"{exc}; retrying inside a function envelope")
        return _parse_in_envelope(source, language)
