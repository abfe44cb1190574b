"""
Diverse random selection of gap candidates.

Selection spreads gaps across categories first, then fills the remaining
slots uniformly. When a history scope is given, attempts that repeat both a
recent gap combination and a recent category fingerprint are retried; once
the retry budget is spent the scope's history is reset and the last attempt
is accepted.
"""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

from loguru import logger

from .history import HistoryStore, combination_key, fingerprint_key
from .types import Candidate, GapCategory, GapNode

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Fisher-Yates shuffle into a new list."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def pick_diverse(candidates: Sequence[Candidate], count: int, rng: random.Random) -> list[Candidate]:
    """One random candidate per category first, then uniform fill, then shuffle."""
    by_category: dict[GapCategory, list[Candidate]] = {}
    for candidate in candidates:
        by_category.setdefault(candidate.category, []).append(candidate)

    selected: list[Candidate] = []
    remaining = list(candidates)

    for category in shuffled(list(by_category), rng):
        if len(selected) >= count:
            break
        pick = rng.choice(by_category[category])
        selected.append(pick)
        remaining.remove(pick)

    while len(selected) < count and remaining:
        selected.append(remaining.pop(rng.randrange(len(remaining))))

    return shuffled(selected, rng)


def assign_ids(chosen: Sequence[Candidate]) -> list[GapNode]:
    """Sort by start and number gaps from 1."""
    ordered = sorted(chosen, key=lambda c: c.start)
    return [GapNode(id=index, candidate=c) for index, c in enumerate(ordered, start=1)]


class DiverseSelector:
    """Chooses gaps with category diversity and per-source anti-repetition."""

    def __init__(self, history: HistoryStore | None = None, retry_budget: int = 10):
        self.history = history if history is not None else HistoryStore()
        self.retry_budget = retry_budget

    def select(
        self,
        candidates: Sequence[Candidate],
        target_count: int,
        rng: random.Random,
        scope: str | None = None,
    ) -> list[GapNode]:
        if target_count <= 0 or not candidates:
            return []

        if len(candidates) <= target_count:
            # Nothing to choose between; history is left alone
            return assign_ids(shuffled(candidates, rng))

        if scope is None:
            return assign_ids(pick_diverse(candidates, target_count, rng))

        return assign_ids(self._select_novel(candidates, target_count, rng, scope))

    def _select_novel(
        self,
        candidates: Sequence[Candidate],
        target_count: int,
        rng: random.Random,
        scope: str,
    ) -> list[Candidate]:
        entry = self.history.get(scope)
        with entry.lock:
            picked: list[Candidate] = []
            combination = fingerprint = ""
            for attempt in range(1, self.retry_budget + 1):
                picked = pick_diverse(candidates, target_count, rng)
                combination = combination_key(picked)
                fingerprint = fingerprint_key(picked)
                new_combination, new_fingerprint = entry.is_novel(combination, fingerprint)

                logger.debug(
                    f"Selection attempt {attempt}: {fingerprint} "
                    f"(new combination={new_combination}, new pattern={new_fingerprint})"
                )

                if new_combination or new_fingerprint:
                    entry.record(
                        combination if new_combination else None,
                        fingerprint if new_fingerprint else None,
                    )
                    return picked

            logger.warning(
                f"All gap sets exhausted after {self.retry_budget} attempts, "
                f"resetting history for source {scope[:12]}"
            )
            entry.reset()
            entry.record(combination, fingerprint)
            return picked
