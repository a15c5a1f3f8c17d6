"""Process-lifetime cache of engine evaluations keyed by FEN."""

from __future__ import annotations

from collections import OrderedDict

from openingtrainer.config import EngineSettings
from openingtrainer.engine.models import EvaluatedPosition


class EvaluationCache:
    """FEN → deepest known evaluation.

    A stored entry is only replaced by a strictly deeper evaluation. With a
    *capacity*, the least recently used entry is evicted once the cache is
    full.
    """

    __slots__ = ("_entries", "_capacity")

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._entries: OrderedDict[str, EvaluatedPosition] = OrderedDict()
        self._capacity = capacity

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> EvaluationCache:
        return cls(settings.cache_capacity)

    @property
    def capacity(self) -> int | None:
        return self._capacity

    def get(self, fen: str) -> EvaluatedPosition | None:
        entry = self._entries.get(fen)
        if entry is not None:
            self._entries.move_to_end(fen)
        return entry

    def put(self, evaluated: EvaluatedPosition) -> bool:
        """Store *evaluated* unless an entry at least as deep exists.

        Returns whether it was stored.
        """
        fen = evaluated.fen
        existing = self._entries.get(fen)
        if existing is not None and existing.depth >= evaluated.depth:
            return False
        self._entries[fen] = evaluated
        self._entries.move_to_end(fen)
        if self._capacity is not None and len(self._entries) > self._capacity:
            self._entries.popitem(last=False)
        return True

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fen: object) -> bool:
        return fen in self._entries
