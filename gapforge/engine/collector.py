"""
Eligibility collection: one pass over the syntax tree emitting every span
that may become a gap under the active settings.

Candidates carry positions in the ORIGINAL source and have no ids yet; ids
are assigned after selection.
"""

from __future__ import annotations

from loguru import logger

from .exclusions import should_exclude
from .parser import NodeKind, SyntaxNode
from .settings import GapSettings
from .types import Candidate, GapCategory, SourceSpan

# Visitor method per node kind. Every NodeKind must appear here.
VISITORS: dict[NodeKind, str] = {
    NodeKind.PROGRAM: "_skip",
    NodeKind.IDENTIFIER: "_skip",
    NodeKind.OTHER: "_skip",
    NodeKind.MEMBER_ACCESS: "_visit_member_access",
    NodeKind.CALL: "_visit_call",
    NodeKind.BINARY: "_visit_binary",
    NodeKind.STRING: "_visit_literal",
    NodeKind.NUMBER: "_visit_literal",
    NodeKind.BOOLEAN: "_visit_literal",
    NodeKind.NULLISH: "_visit_literal",
    NodeKind.VARIABLE_DECLARATOR: "_visit_declarator",
    NodeKind.FUNCTION: "_visit_function",
    NodeKind.KEYWORD_STATEMENT: "_visit_keyword",
    NodeKind.AWAIT: "_visit_keyword",
    NodeKind.OBJECT: "_visit_object",
    NodeKind.PAIR: "_visit_pair",
    NodeKind.ARRAY: "_visit_array",
}

_LITERAL_CATEGORY = {
    NodeKind.STRING: GapCategory.STRING,
    NodeKind.NUMBER: GapCategory.NUMBER,
    NodeKind.BOOLEAN: GapCategory.BOOLEAN,
    NodeKind.NULLISH: GapCategory.NULLISH,
}

_ARRAY_ELEMENT_KINDS = {
    NodeKind.IDENTIFIER,
    NodeKind.STRING,
    NodeKind.NUMBER,
    NodeKind.BOOLEAN,
    NodeKind.NULLISH,
}


class EligibilityCollector:
    """Walks a ``SyntaxNode`` tree and gathers gap candidates."""

    def __init__(self, source: str, settings: GapSettings, keyword_window: int = 10):
        self.source = source
        self.settings = settings
        self.keyword_window = keyword_window
        self.enabled = settings.node_types.enabled_categories()
        self.candidates: list[Candidate] = []
        self.comments: list[tuple[int, int]] = []
        self.excluded = 0

    def collect(self, tree: SyntaxNode) -> list[Candidate]:
        if not self.enabled:
            return []

        self.comments = [(node.start, node.end) for node in tree.walk() if node.type == "comment"]
        for node in tree.walk():
            getattr(self, VISITORS[node.kind])(node)

        logger.debug(
            f"Collected {len(self.candidates)} candidates "
            f"({self.excluded} excluded) from {len(self.source)} chars"
        )
        return self.candidates

    # ------------------------------------------------------------------
    # Visitors
    # ------------------------------------------------------------------

    def _skip(self, node: SyntaxNode) -> None:
        return None

    def _visit_member_access(self, node: SyntaxNode) -> None:
        """``user.isAdmin`` -> ``isAdmin``; the receiver is never part of the span."""
        if GapCategory.PROPERTY not in self.enabled:
            return
        prop = node.child("property")
        if prop is not None and prop.kind is NodeKind.IDENTIFIER:
            self._emit(GapCategory.PROPERTY, prop.start, prop.end)

    def _visit_call(self, node: SyntaxNode) -> None:
        if GapCategory.FUNCTION not in self.enabled:
            return
        callee = node.child("function")
        if callee is not None and callee.type == "identifier":
            self._emit(GapCategory.FUNCTION, callee.start, callee.end)

    def _visit_binary(self, node: SyntaxNode) -> None:
        """
        Operators are tokens, not nodes with their own positions, so the
        operator is located in the text between the two operands, with
        comments blanked out.
        """
        if GapCategory.OPERATOR not in self.enabled or not node.operator:
            return
        left, right = node.child("left"), node.child("right")
        if left is None or right is None:
            return

        between = self._without_comments(left.end, right.start)
        index = between.find(node.operator)
        if index == -1:
            logger.warning(
                f"Operator {node.operator!r} not found between operands: {between!r}"
            )
            return

        start = left.end + index
        self._emit(GapCategory.OPERATOR, start, start + len(node.operator))

    def _visit_literal(self, node: SyntaxNode) -> None:
        category = _LITERAL_CATEGORY[node.kind]
        if category in self.enabled:
            self._emit(category, node.start, node.end)

    def _visit_declarator(self, node: SyntaxNode) -> None:
        if GapCategory.VARIABLE not in self.enabled:
            return
        name = node.child("name")
        if name is not None and name.kind is NodeKind.IDENTIFIER:
            self._emit(GapCategory.VARIABLE, name.start, name.end)

    def _visit_function(self, node: SyntaxNode) -> None:
        if GapCategory.VARIABLE in self.enabled:
            # Destructured and defaulted parameters are skipped
            params = node.child("parameters")
            if params is not None:
                for param in params.children:
                    if param.kind is NodeKind.IDENTIFIER:
                        self._emit(GapCategory.VARIABLE, param.start, param.end)
            single = node.child("parameter")
            if single is not None and single.kind is NodeKind.IDENTIFIER:
                self._emit(GapCategory.VARIABLE, single.start, single.end)

        if node.is_async:
            self._visit_keyword(node)

    def _visit_keyword(self, node: SyntaxNode) -> None:
        """
        Keywords are not nodes either; find the keyword text within a short
        window at the start of the owning node.
        """
        if GapCategory.KEYWORD not in self.enabled or not node.keyword:
            return
        window_end = min(node.start + self.keyword_window, node.end)
        start = self.source.find(node.keyword, node.start, window_end)
        if start != -1:
            self._emit(GapCategory.KEYWORD, start, start + len(node.keyword))

    def _visit_object(self, node: SyntaxNode) -> None:
        if GapCategory.OBJECT_KEY not in self.enabled:
            return
        for child in node.children:
            if child.type == "shorthand_property_identifier":
                self._emit(GapCategory.OBJECT_KEY, child.start, child.end)

    def _visit_pair(self, node: SyntaxNode) -> None:
        if GapCategory.OBJECT_KEY not in self.enabled:
            return
        key = node.child("key")
        if key is not None and key.kind is NodeKind.IDENTIFIER:
            self._emit(GapCategory.OBJECT_KEY, key.start, key.end)

    def _visit_array(self, node: SyntaxNode) -> None:
        if GapCategory.ARRAY_ELEMENT not in self.enabled:
            return
        for element in node.children:
            if element.kind in _ARRAY_ELEMENT_KINDS:
                self._emit(GapCategory.ARRAY_ELEMENT, element.start, element.end)

    def _without_comments(self, start: int, end: int) -> str:
        text = list(self.source[start:end])
        for comment_start, comment_end in self.comments:
            if comment_end <= start or comment_start >= end:
                continue
            for index in range(max(comment_start, start), min(comment_end, end)):
                text[index - start] = " "
        return "".join(text)

    # ------------------------------------------------------------------

    def _emit(self, category: GapCategory, start: int, end: int) -> None:
        if start >= end:
            return
        answer = self.source[start:end]
        if should_exclude(answer, self.settings):
            self.excluded += 1
            return
        self.candidates.append(Candidate(SourceSpan(start, end), category, answer))


def collect_candidates(
    tree: SyntaxNode,
    source: str,
    settings: GapSettings,
    keyword_window: int = 10,
) -> list[Candidate]:
    """Collect all eligible candidates (unsorted, no ids)."""
    return EligibilityCollector(source, settings, keyword_window).collect(tree)
