"""
Unit tests for generation history.
"""

from gapforge.engine.history import (
    HistoryStore,
    _BoundedSet,
    combination_key,
    fingerprint_key,
    source_hash,
)
from gapforge.engine.types import Candidate, GapCategory, SourceSpan


def cand(start, end, category=GapCategory.PROPERTY):
    return Candidate(SourceSpan(start, end), category, "x" * (end - start))


class TestKeys:
    def test_source_hash_stable(self):
        assert source_hash("a.b") == source_hash("a.b")
        assert source_hash("a.b") != source_hash("a.c")
        assert len(source_hash("")) == 64

    def test_combination_order_independent(self):
        a, b = cand(0, 1), cand(4, 6, GapCategory.FUNCTION)
        assert combination_key([a, b]) == combination_key([b, a])
        assert combination_key([a]) != combination_key([b])

    def test_fingerprint(self):
        picked = [cand(0, 1), cand(2, 3), cand(4, 5, GapCategory.FUNCTION)]
        assert fingerprint_key(picked) == "function:1,property:2"


class TestBoundedSet:
    def test_drops_oldest(self):
        bounded = _BoundedSet(2)
        for key in ("a", "b", "c"):
            bounded.add(key)

        assert "a" not in bounded
        assert bounded.items() == ["b", "c"]

    def test_readd_refreshes(self):
        bounded = _BoundedSet(2)
        for key in ("a", "b", "a", "c"):
            bounded.add(key)
        assert bounded.items() == ["a", "c"]


class TestHistoryStore:
    """Test per-source history entries."""

    def test_lazy_entries(self):
        store = HistoryStore()
        assert "k" not in store

        entry = store.get("k")
        assert store.get("k") is entry
        assert len(store) == 1

    def test_record_and_novelty(self):
        entry = HistoryStore(limit=3).get("k")
        assert entry.is_novel("c1", "f1") == (True, True)

        entry.record("c1", None)
        assert entry.is_novel("c1", "f1") == (False, True)

    def test_reset(self):
        entry = HistoryStore().get("k")
        entry.record("c1", "f1")
        entry.reset()

        assert entry.is_novel("c1", "f1") == (True, True)
        assert entry.resets == 1

    def test_forget_and_clear(self):
        store = HistoryStore()
        store.get("a")
        store.get("b")

        store.forget("a")
        assert "a" not in store
        store.clear()
        assert len(store) == 0
