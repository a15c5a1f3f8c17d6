"""Evaluator backed by an external UCI engine process (e.g. Stockfish)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any

import chess
import chess.engine

from openingtrainer.config import EngineSettings
from openingtrainer.engine.models import EvaluatedPosition, Score

_LOGGER = logging.getLogger(__name__)

EngineFactory = Callable[[str], Any]


def score_from_pov(score: chess.engine.PovScore, turn: chess.Color) -> Score:
    """Convert a python-chess score to *turn*'s point of view."""
    relative = score.pov(turn)
    mate = relative.mate()
    if mate is not None:
        return Score(mate=mate)
    cp = relative.score()
    assert cp is not None
    return Score(cp=cp)


def evaluated_from_info(
    fen: str, info: chess.engine.InfoDict, requested_depth: int
) -> EvaluatedPosition:
    """Build an :class:`EvaluatedPosition` from a python-chess analysis result."""
    score = info.get("score")
    if score is None:
        raise ValueError(f"Engine returned no score for {fen}")
    pv = tuple(move.uci() for move in info.get("pv", ()))
    return EvaluatedPosition(
        fen=fen,
        score=score_from_pov(score, chess.Board(fen).turn),
        best_move=pv[0] if pv else None,
        depth=int(info.get("depth", requested_depth)),
        pv=pv,
    )


class UciEvaluator:
    """Evaluates positions with a UCI engine started from *engine_path*.

    Use as a context manager or call :meth:`close` to stop the engine
    process.
    """

    __slots__ = ("_engine", "_settings")

    def __init__(
        self,
        engine_path: str,
        settings: EngineSettings | None = None,
        *,
        popen: EngineFactory = chess.engine.SimpleEngine.popen_uci,
    ) -> None:
        self._settings = settings or EngineSettings()
        _LOGGER.info("Starting UCI engine %s", engine_path)
        self._engine = popen(engine_path)

    def evaluate(self, fen: str, depth: int | None = None) -> EvaluatedPosition:
        if depth is None:
            depth = self._settings.depth
        time_limit_ms = self._settings.time_limit_ms
        limit = chess.engine.Limit(
            depth=depth,
            time=time_limit_ms / 1000 if time_limit_ms is not None else None,
        )
        board = chess.Board(fen)
        info = self._engine.analyse(board, limit)
        result = evaluated_from_info(fen, info, depth)
        _LOGGER.debug("Evaluated %s: %s at depth %d", fen, result.score, result.depth)
        return result

    def close(self) -> None:
        self._engine.quit()

    def __enter__(self) -> UciEvaluator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
