"""
Per-source generation history.

Remembers recently produced gap combinations and category fingerprints so
repeated generations on the same code avoid repeating an exercise. Scoped by
a SHA-256 digest of the source text.
"""

from __future__ import annotations

import hashlib
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Iterable

from .types import Candidate


def source_hash(source: str) -> str:
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def combination_key(candidates: Iterable[Candidate]) -> str:
    """Order-independent key for a set of chosen candidates."""
    return ",".join(sorted(c.identity for c in candidates))


def fingerprint_key(candidates: Iterable[Candidate]) -> str:
    """Category distribution, e.g. ``function:1,property:2``."""
    counts: dict[str, int] = {}
    for candidate in candidates:
        name = candidate.category.value
        counts[name] = counts.get(name, 0) + 1
    return ",".join(f"{name}:{count}" for name, count in sorted(counts.items()))


class _BoundedSet:
    """Insertion-ordered set that drops its oldest entries past ``limit``."""

    def __init__(self, limit: int):
        self.limit = limit
        self._items: OrderedDict[str, None] = OrderedDict()

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def add(self, key: str) -> None:
        self._items[key] = None
        self._items.move_to_end(key)
        while len(self._items) > self.limit:
            self._items.popitem(last=False)

    def clear(self) -> None:
        self._items.clear()

    def items(self) -> list[str]:
        return list(self._items)


@dataclass
class SourceHistory:
    combinations: _BoundedSet
    fingerprints: _BoundedSet
    resets: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_novel(self, combination: str, fingerprint: str) -> tuple[bool, bool]:
        return combination not in self.combinations, fingerprint not in self.fingerprints

    def record(self, combination: str | None, fingerprint: str | None) -> None:
        if combination is not None:
            self.combinations.add(combination)
        if fingerprint is not None:
            self.fingerprints.add(fingerprint)

    def reset(self) -> None:
        self.combinations.clear()
        self.fingerprints.clear()
        self.resets += 1


class HistoryStore:
    """
    Generation history for every source seen by an engine.

    Entries are created lazily and only bounded by size; callers running for a
    long time may ``forget`` sources they no longer use.
    """

    def __init__(self, limit: int = 10):
        self.limit = limit
        self._entries: dict[str, SourceHistory] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> SourceHistory:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = SourceHistory(_BoundedSet(self.limit), _BoundedSet(self.limit))
                self._entries[key] = entry
            return entry

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def forget(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
