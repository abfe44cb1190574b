"""
Unit tests for line density and adjacency rules.
"""

from gapforge.engine.spacing import LineIndex, arrange_spacing
from gapforge.engine.types import Candidate, GapCategory, SourceSpan


def cand(source, start, end, category=GapCategory.PROPERTY):
    return Candidate(SourceSpan(start, end), category, source[start:end])


def spans(candidates):
    return [(c.start, c.end) for c in candidates]


class TestLineIndex:
    def test_line_of(self):
        index = LineIndex("ab\ncd\n\nef")
        assert index.line_of(0) == 0
        assert index.line_of(2) == 0
        assert index.line_of(3) == 1
        assert index.line_of(6) == 2
        assert index.line_of(7) == 3


class TestArrangeSpacing:
    """Test the greedy spacing pass."""

    def test_at_most_two_per_line(self):
        source = "aa   bb   cc\ndd"
        candidates = [cand(source, 0, 2), cand(source, 5, 7), cand(source, 10, 12), cand(source, 13, 15)]

        kept = arrange_spacing(candidates, source)
        assert spans(kept) == [(0, 2), (5, 7), (13, 15)]

    def test_min_distance_on_line(self):
        """Gaps closer than two characters on one line are dropped."""
        source = "a.b"
        candidates = [cand(source, 0, 1), cand(source, 2, 3)]
        assert spans(arrange_spacing(candidates, source)) == [(0, 1)]

    def test_distance_ignored_across_lines(self):
        source = "a\nb"
        candidates = [cand(source, 0, 1), cand(source, 2, 3)]
        assert spans(arrange_spacing(candidates, source)) == [(0, 1), (2, 3)]

    def test_overlap_prefers_category(self):
        """Same span in two categories keeps the higher-priority one."""
        source = '["x"]'
        candidates = [
            cand(source, 1, 4, GapCategory.STRING),
            cand(source, 1, 4, GapCategory.ARRAY_ELEMENT),
        ]
        kept = arrange_spacing(candidates, source)
        assert [c.category for c in kept] == [GapCategory.ARRAY_ELEMENT]

    def test_output_sorted(self):
        source = "aa\nbb\ncc"
        candidates = [cand(source, 6, 8), cand(source, 0, 2), cand(source, 3, 5)]
        assert spans(arrange_spacing(candidates, source)) == [(0, 2), (3, 5), (6, 8)]


class TestRequiredCategories:
    """Test force insertion of required categories."""

    def test_force_insert_evicts_least_preferred(self):
        source = "aa   bb   cc"
        candidates = [
            cand(source, 0, 2),
            cand(source, 5, 7),
            cand(source, 10, 12, GapCategory.STRING),
        ]
        kept = arrange_spacing(candidates, source, required={GapCategory.STRING})

        assert spans(kept) == [(0, 2), (10, 12)]
        assert GapCategory.STRING in {c.category for c in kept}

    def test_sole_required_representative_protected(self):
        source = "aa   bb   cc"
        candidates = [
            cand(source, 0, 2, GapCategory.NUMBER),
            cand(source, 5, 7, GapCategory.STRING),
            cand(source, 10, 12, GapCategory.PROPERTY),
        ]
        kept = arrange_spacing(
            candidates, source, required={GapCategory.STRING, GapCategory.PROPERTY}
        )
        assert [c.category for c in kept] == [GapCategory.STRING, GapCategory.PROPERTY]

    def test_conflicting_neighbour_evicted(self):
        source = "ab"
        candidates = [cand(source, 0, 1), cand(source, 1, 2, GapCategory.OPERATOR)]
        kept = arrange_spacing(candidates, source, required={GapCategory.OPERATOR})
        assert [c.category for c in kept] == [GapCategory.OPERATOR]

    def test_absent_category_ignored(self):
        source = "aa"
        candidates = [cand(source, 0, 2)]
        assert spans(arrange_spacing(candidates, source, required={GapCategory.KEYWORD})) == [(0, 2)]
