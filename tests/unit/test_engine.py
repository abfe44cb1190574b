"""
Unit tests for the full generation pipeline.
"""

import random

import pytest

from gapforge.engine import (
    CountMode,
    Difficulty,
    Exclusions,
    FallbackReason,
    GapCategory,
    GapSegment,
    GapSettings,
    HistoryStore,
    LiteralSwitches,
    NodeTypeSwitches,
    TextSegment,
    apply_difficulty_preset,
    generate_gaps,
)
from gapforge.engine.history import source_hash


def line_of(source, index):
    return source.count("\n", 0, index)


def preset(difficulty):
    return apply_difficulty_preset(difficulty, GapSettings())


def gap_spans(result):
    """Source spans of the gaps, recovered from the segment order."""
    spans = []
    cursor = 0
    for seg in result.segments:
        text = seg.value if isinstance(seg, TextSegment) else seg.answer
        if isinstance(seg, GapSegment):
            spans.append((cursor, cursor + len(text)))
        cursor += len(text)
    return frozenset(spans)


class TestGapEngine:
    """Test generation end to end."""

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_round_trip(self, engine, sample_source, rng, difficulty):
        """Segments always reproduce the source exactly."""
        result = engine.generate(sample_source, preset(difficulty), rng)
        assert result.reconstruct() == sample_source

    def test_ids_and_answer_key(self, engine, sample_source, rng):
        result = engine.generate(sample_source, preset(Difficulty.HARD), rng)

        assert result.gap_count > 0
        assert result.gap_ids == list(range(1, result.gap_count + 1))
        for seg in result.segments:
            if isinstance(seg, GapSegment):
                assert result.answer_key[seg.id] == seg.answer
                assert seg.id in result.categories

    def test_no_empty_text_segments(self, engine, sample_source, rng):
        result = engine.generate(sample_source, preset(Difficulty.HARD), rng)
        assert all(seg.value for seg in result.segments if isinstance(seg, TextSegment))

    def test_spacing_rules(self, engine, sample_source, rng):
        """At most two gaps per line, two characters apart."""
        settings = preset(Difficulty.HARD)
        for _ in range(10):
            result = engine.generate(sample_source, settings, rng)

            by_line = {}
            for start, end in gap_spans(result):
                by_line.setdefault(line_of(sample_source, start), []).append((start, end))
            for spans in by_line.values():
                assert len(spans) <= 2
                if len(spans) == 2:
                    (_, first_end), (second_start, _) = sorted(spans)
                    assert second_start - first_end >= 2

    def test_easy_gaps_only_properties(self, engine, sample_source, rng):
        result = engine.generate(sample_source, preset(Difficulty.EASY), rng)

        assert 1 <= result.gap_count <= 4
        assert set(result.categories.values()) == {GapCategory.PROPERTY}

    def test_no_node_types(self, engine, custom_settings, rng):
        """Disabling everything returns the source untouched."""
        source = "user.isAdmin"
        result = engine.generate(source, custom_settings(), rng)

        assert result.segments == [TextSegment(source)]
        assert result.answer_key == {}
        assert result.fallback is FallbackReason.NO_NODE_TYPES

    def test_switches_used_as_given(self, engine, rng):
        """The difficulty tag does not override switches the caller built."""
        source = "user.isAdmin(); grant(user);"
        settings = GapSettings(node_types=NodeTypeSwitches(properties=False, functions=False))
        result = engine.generate(source, settings, rng)

        assert settings.difficulty is Difficulty.MEDIUM
        assert result.segments == [TextSegment(source)]
        assert result.fallback is FallbackReason.NO_NODE_TYPES

    def test_caller_switches_not_replaced_by_preset(self, engine, rng):
        settings = GapSettings(
            node_types=NodeTypeSwitches(properties=False, functions=False, operators=True)
        )
        result = engine.generate("user.isAdmin(a + b);", settings, rng)
        assert result.answer_key == {1: "+"}

    def test_long_operator_chain(self, engine, custom_settings, rng):
        """Deeply nested expressions are handled without falling back."""
        source = "const total = " + " + ".join(f"v{i}" for i in range(700)) + ";"
        result = engine.generate(source, custom_settings(operators=True), rng)

        assert result.fallback is None
        assert result.gap_count > 0
        assert result.reconstruct() == source

    def test_deeply_nested_arrays(self, engine, custom_settings, rng):
        source = "const x = " + "[" * 600 + "1" + "]" * 600 + ";"
        result = engine.generate(
            source, custom_settings(literals=LiteralSwitches(numbers=True)), rng
        )
        assert result.answer_key == {1: "1"}

    def test_parse_error_fallback(self, engine, rng):
        source = "function (x { return"
        result = engine.generate(source, None, rng)

        assert result.segments == [TextSegment(source)]
        assert result.fallback is FallbackReason.PARSE_ERROR
        assert result.message

    def test_no_candidates(self, engine, rng):
        result = engine.generate("1 + 2;", None, rng)
        assert result.fallback is FallbackReason.NO_CANDIDATES
        assert result.reconstruct() == "1 + 2;"

    def test_empty_source(self, engine, rng):
        result = engine.generate("", None, rng)
        assert result.segments == [TextSegment("")]
        assert result.answer_key == {}

    def test_top_level_return(self, engine, rng):
        """Function-body snippets are gapped at their original positions."""
        source = "return user.isAdmin;"
        result = engine.generate(source, None, rng)

        assert result.answer_key == {1: "isAdmin"}
        assert result.segments == [
            TextSegment("return user."),
            GapSegment(1, "isAdmin"),
            TextSegment(";"),
        ]

    def test_custom_denylist(self, engine, custom_settings, rng):
        settings = custom_settings(
            properties=True,
            exclusions=Exclusions(custom_list=("ISADMIN",)),
        )
        result = engine.generate("user.isAdmin; user.role;", settings, rng)

        assert "isAdmin" not in result.answer_key.values()
        assert list(result.answer_key.values()) == ["role"]

    def test_fixed_count(self, engine, sample_source, custom_settings, rng):
        settings = custom_settings(
            properties=True,
            functions=True,
            count_mode=CountMode.FIXED,
            fixed_count=2,
        )
        assert engine.generate(sample_source, settings, rng).gap_count == 2

    def test_required_category_kept(self, engine, rng):
        """A required category survives spacing and selection."""
        source = "const a = b.c + d.e;\nconst f = g.h;\n"
        settings = GapSettings(
            difficulty=Difficulty.CUSTOM,
            count_mode=CountMode.FIXED,
            fixed_count=2,
            node_types={"properties": True, "functions": False, "operators": True},
            required_categories=frozenset({GapCategory.OPERATOR}),
        )
        for _ in range(10):
            result = engine.generate(source, settings, rng)
            assert GapCategory.OPERATOR in set(result.categories.values())

    def test_repeat_calls_vary(self, engine, sample_source):
        """Ten generations on one source are not all identical."""
        rng = random.Random(99)
        settings = preset(Difficulty.HARD)
        keys = {
            tuple(sorted(engine.generate(sample_source, settings, rng).answer_key.items()))
            for _ in range(10)
        }
        assert len(keys) > 1

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_no_repeat_without_reset(self, engine, sample_source, custom_settings, seed):
        """Within ten calls a gap set only comes back after a history reset."""
        rng = random.Random(seed)
        settings = custom_settings(properties=True, keywords=True)
        seen = {}
        for _ in range(10):
            spans = gap_spans(engine.generate(sample_source, settings, rng))
            seen[spans] = seen.get(spans, 0) + 1

        resets = engine.history.get(source_hash(sample_source)).resets
        assert resets > 0 or max(seen.values()) == 1

    def test_literal_gaps(self, engine, custom_settings, rng):
        settings = custom_settings(literals=LiteralSwitches(strings=True))
        result = engine.generate('log("hello");', settings, rng)
        assert result.answer_key == {1: '"hello"'}


class TestGenerateGaps:
    def test_shared_history(self, sample_source):
        history = HistoryStore()
        generate_gaps(sample_source, rng=random.Random(1), history=history)
        generate_gaps(sample_source, rng=random.Random(2), history=history)
        assert len(history) == 1

    def test_defaults(self):
        result = generate_gaps("user.isAdmin")
        assert result.answer_key == {1: "isAdmin"}
