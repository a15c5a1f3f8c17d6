"""Evaluator protocol and the caching wrapper around it."""

from __future__ import annotations

import logging
from typing import Protocol

from openingtrainer.engine.cache import EvaluationCache
from openingtrainer.engine.models import EvaluatedPosition

_LOGGER = logging.getLogger(__name__)


class Evaluator(Protocol):
    """Anything that can evaluate a FEN to a given depth."""

    def evaluate(self, fen: str, depth: int) -> EvaluatedPosition: ...


class CachedEvaluator:
    """Serves evaluations from a cache, asking *evaluator* only on a miss.

    A cached entry satisfies a request when it is at least as deep as the
    requested depth.
    """

    __slots__ = ("_evaluator", "_cache")

    def __init__(
        self, evaluator: Evaluator, cache: EvaluationCache | None = None
    ) -> None:
        self._evaluator = evaluator
        self._cache = cache if cache is not None else EvaluationCache()

    @property
    def cache(self) -> EvaluationCache:
        return self._cache

    def evaluate(self, fen: str, depth: int) -> EvaluatedPosition:
        cached = self._cache.get(fen)
        if cached is not None and cached.depth >= depth:
            return cached

        _LOGGER.debug("Cache miss for %s at depth %d", fen, depth)
        result = self._evaluator.evaluate(fen, depth)
        self._cache.put(result)
        # A deeper entry may already be stored; prefer it.
        stored = self._cache.get(result.fen)
        return stored if stored is not None else result
