"""Stateful practice attempt over one line."""

from __future__ import annotations

from typing import TYPE_CHECKING

from openingtrainer.core import rules
from openingtrainer.core.enums import AttemptOutcome, LineStatus
from openingtrainer.core.models import Line, Move, Position
from openingtrainer.core.rules import MoveApplier
from openingtrainer.practice.status import expected_move, line_status, moves_match

if TYPE_CHECKING:
    from openingtrainer.review.history import AttemptHistory
    from openingtrainer.review.models import Attempt


class PracticeAttempt:
    """Tracks one learner attempt at a line, half-move by half-move.

    The learner's moves are compared with ``line.moves[line_index]``. A wrong
    move records the deviation index once; the attempt then stays
    ``INCORRECT`` but the learner may keep playing the correct moves to reach
    the end of the line.
    """

    __slots__ = ("_line", "_apply", "_line_index", "_deviation_index")

    def __init__(self, line: Line, *, apply_move: MoveApplier | None = None) -> None:
        self._line = line
        self._apply = apply_move or rules.apply_move
        self._line_index = 0
        self._deviation_index: int | None = None

    # ── State ────────────────────────────────────────────────────────────

    @property
    def line(self) -> Line:
        return self._line

    @property
    def line_index(self) -> int:
        return self._line_index

    @property
    def deviation_index(self) -> int | None:
        return self._deviation_index

    @property
    def deviated(self) -> bool:
        return self._deviation_index is not None

    @property
    def status(self) -> LineStatus:
        return line_status(self._line, self._line_index, self.deviated)

    @property
    def is_finished(self) -> bool:
        return self._line_index == len(self._line)

    @property
    def current_position(self) -> Position:
        return self._line.positions[self._line_index]

    @property
    def next_move(self) -> Move | None:
        return expected_move(self._line, self._line_index)

    @property
    def is_player_turn(self) -> bool:
        """Whether the next move belongs to the side the chapter is studied for."""
        move = self.next_move
        return move is not None and move.color == self._line.chapter.orientation

    @property
    def outcome(self) -> AttemptOutcome:
        if self.deviated:
            return AttemptOutcome.FAILURE
        if self.is_finished:
            return AttemptOutcome.SUCCESS
        return AttemptOutcome.ABANDONED

    # ── Moves ────────────────────────────────────────────────────────────

    def play(self, move: Move | str) -> LineStatus:
        """Submit the learner's next half-move and classify it.

        Returns ``CORRECT`` for a matching move, ``COMPLETE`` when it finishes
        a clean attempt and ``INCORRECT`` once the attempt has deviated.

        Raises:
            ValueError: The line has already been played to the end.
            IllegalMoveError: *move* is text that is not legal in the current
                position.
        """
        expected = self.next_move
        if expected is None:
            raise ValueError(f"Line {self._line.line_id!r} is already complete")

        played = move
        if isinstance(move, str):
            played_position = self._apply(self.current_position, move)
            assert played_position.last_move is not None
            played = played_position.last_move

        if moves_match(played, expected):
            self._line_index += 1
            if self.deviated:
                return LineStatus.INCORRECT
            return self.status if self.is_finished else LineStatus.CORRECT

        if self._deviation_index is None:
            self._deviation_index = self._line_index
        return LineStatus.INCORRECT

    def advance_opponent(self) -> Move | None:
        """Play the next move automatically when it is the opponent's."""
        move = self.next_move
        if move is None or self.is_player_turn:
            return None
        self._line_index += 1
        return move

    def reveal(self) -> Move | None:
        """Show the expected move; counts as a deviation at the current index."""
        move = self.next_move
        if move is not None and self._deviation_index is None:
            self._deviation_index = self._line_index
        return move

    def record(self, history: AttemptHistory) -> Attempt:
        """Append this attempt's outcome to *history*."""
        return history.record_attempt(
            self._line, self.outcome, self._deviation_index
        )
