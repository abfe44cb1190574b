"""
Gap generation pipeline: Parse -> Collect -> Space -> Count -> Select -> Build.

``GapEngine`` owns the generation history, so repeated calls on the same
source avoid repeating the same exercise. Settings are used exactly as
given; pick a difficulty with ``apply_difficulty_preset`` first. Generation
never raises for string input: parse failures, disabled node types and
empty candidate lists all degrade to a single text segment with ``fallback`` set.
"""

from __future__ import annotations

import random

from loguru import logger

from ..config import EngineConfig, get_config
from .collector import collect_candidates
from .counting import resolve_count
from .errors import ParseError
from .history import HistoryStore, source_hash
from .parser import parse_source
from .segments import build_segments, fallback_result
from .selector import DiverseSelector
from .settings import DEFAULT_GAP_SETTINGS, GapSettings
from .spacing import arrange_spacing
from .types import FallbackReason, GapResult


class GapEngine:
    """Turns source snippets into fill-in-the-blank exercises."""

    def __init__(self, config: EngineConfig | None = None, history: HistoryStore | None = None):
        self.config = config or get_config()
        self.history = history if history is not None else HistoryStore(self.config.history_size)
        self.selector = DiverseSelector(self.history, self.config.retry_budget)

    def generate(
        self,
        source: str,
        settings: GapSettings | None = None,
        rng: random.Random | None = None,
    ) -> GapResult:
        rng = rng or random.Random()
        settings = settings or DEFAULT_GAP_SETTINGS

        if not settings.node_types.any_enabled():
            logger.debug("All node types disabled - nothing to gap")
            return fallback_result(
                source, FallbackReason.NO_NODE_TYPES, "No node types are enabled."
            )

        try:
            tree = parse_source(source, self.config.language)
        except ParseError as exc:
            logger.warning(f"Parse failed, returning source without gaps: {exc}")
            return fallback_result(source, FallbackReason.PARSE_ERROR, str(exc))

        candidates = collect_candidates(tree, source, settings, self.config.keyword_window)
        if not candidates:
            return fallback_result(
                source, FallbackReason.NO_CANDIDATES, "No eligible nodes found."
            )

        pool = arrange_spacing(
            candidates,
            source,
            required=settings.required_categories & settings.node_types.enabled_categories(),
            max_per_line=self.config.max_gaps_per_line,
            min_spacing=self.config.min_gap_spacing,
        )
        target = resolve_count(len(pool), settings, rng)
        gaps = self.selector.select(pool, target, rng, scope=source_hash(source))

        result = build_segments(source, gaps)
        result.verify(source)

        logger.debug(
            f"Generated {result.gap_count} gaps from {len(pool)} spaced candidates "
            f"(target {target}, {len(candidates)} eligible)"
        )
        return result


def generate_gaps(
    source: str,
    settings: GapSettings | None = None,
    rng: random.Random | None = None,
    history: HistoryStore | None = None,
) -> GapResult:
    """One-shot generation. Pass ``history`` to keep anti-repetition across calls."""
    return GapEngine(history=history).generate(source, settings, rng)
