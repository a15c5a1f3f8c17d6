"""Tests for line status evaluation and practice attempts."""

from __future__ import annotations

import pytest

from openingtrainer.core import AttemptOutcome, IllegalMoveError, LineStatus
from openingtrainer.core.models import Line
from openingtrainer.practice import PracticeAttempt, expected_move, line_status, moves_match
from openingtrainer.review import AttemptHistory


class TestLineStatus:
    def test_progression(self, sicilian_lines: list[Line]) -> None:
        line = sicilian_lines[1]
        assert line_status(line, 0, False) is LineStatus.NOT_STARTED
        assert line_status(line, 2, False) is LineStatus.IN_PROGRESS
        assert line_status(line, len(line), False) is LineStatus.COMPLETE

    def test_deviation_wins(self, sicilian_lines: list[Line]) -> None:
        line = sicilian_lines[1]
        for index in range(len(line) + 1):
            assert line_status(line, index, True) is LineStatus.INCORRECT

    @pytest.mark.parametrize("index", [-1, 5])
    def test_out_of_range(self, sicilian_lines: list[Line], index: int) -> None:
        with pytest.raises(ValueError, match="outside"):
            line_status(sicilian_lines[1], index, False)

    def test_expected_move(self, sicilian_lines: list[Line]) -> None:
        line = sicilian_lines[1]
        move = expected_move(line, 2)
        assert move is not None
        assert move.san == "c3"
        assert expected_move(line, len(line)) is None

    def test_moves_match_by_san_or_uci(self, sicilian_lines: list[Line]) -> None:
        move = sicilian_lines[1].moves[0]
        assert moves_match("e4", move)
        assert moves_match("e2e4", move)
        assert not moves_match("d4", move)
        assert moves_match(move, move)


class TestPracticeAttempt:
    def test_clean_run(self, sicilian_lines: list[Line]) -> None:
        attempt = PracticeAttempt(sicilian_lines[1])
        assert attempt.status is LineStatus.NOT_STARTED
        assert attempt.play("e4") is LineStatus.CORRECT
        assert attempt.status is LineStatus.IN_PROGRESS
        assert attempt.play("c7c5") is LineStatus.CORRECT
        assert attempt.play("c3") is LineStatus.CORRECT
        assert attempt.play("d5") is LineStatus.COMPLETE
        assert attempt.is_finished
        assert attempt.outcome is AttemptOutcome.SUCCESS

    def test_deviation_is_sticky(self, sicilian_lines: list[Line]) -> None:
        attempt = PracticeAttempt(sicilian_lines[1])
        attempt.play("e4")
        assert attempt.play("e5") is LineStatus.INCORRECT
        assert attempt.deviation_index == 1
        assert attempt.line_index == 1
        # Correct moves after a mistake still advance but never clear it.
        assert attempt.play("c5") is LineStatus.INCORRECT
        assert attempt.play("Nf3") is LineStatus.INCORRECT
        assert attempt.deviation_index == 1
        assert attempt.status is LineStatus.INCORRECT
        assert attempt.outcome is AttemptOutcome.FAILURE

    def test_status_never_leaves_incorrect(self, sicilian_lines: list[Line]) -> None:
        line = sicilian_lines[1]
        attempt = PracticeAttempt(line)
        attempt.play("d4")
        statuses = [attempt.play(move.san) for move in line.moves]
        assert set(statuses) == {LineStatus.INCORRECT}
        assert attempt.is_finished
        assert attempt.status is LineStatus.INCORRECT

    def test_illegal_text_raises(self, sicilian_lines: list[Line]) -> None:
        attempt = PracticeAttempt(sicilian_lines[1])
        with pytest.raises(IllegalMoveError):
            attempt.play("Qh5")
        assert not attempt.deviated

    def test_play_after_end_raises(self, sicilian_lines: list[Line]) -> None:
        line = sicilian_lines[1]
        attempt = PracticeAttempt(line)
        for move in line.moves:
            attempt.play(move)
        with pytest.raises(ValueError, match="already complete"):
            attempt.play("Nf3")

    def test_opponent_moves_advance_automatically(self, sicilian_lines: list[Line]) -> None:
        # The Sicilian chapter is studied from Black's side.
        attempt = PracticeAttempt(sicilian_lines[1])
        assert not attempt.is_player_turn
        auto = attempt.advance_opponent()
        assert auto is not None and auto.san == "e4"
        assert attempt.is_player_turn
        assert attempt.advance_opponent() is None
        assert attempt.play("c5") is LineStatus.CORRECT

    def test_reveal_counts_as_deviation(self, sicilian_lines: list[Line]) -> None:
        attempt = PracticeAttempt(sicilian_lines[1])
        shown = attempt.reveal()
        assert shown is not None and shown.san == "e4"
        assert attempt.deviation_index == 0
        assert attempt.status is LineStatus.INCORRECT

    def test_abandoned(self, sicilian_lines: list[Line]) -> None:
        attempt = PracticeAttempt(sicilian_lines[1])
        attempt.play("e4")
        assert attempt.outcome is AttemptOutcome.ABANDONED

    def test_record(self, sicilian_lines: list[Line]) -> None:
        line = sicilian_lines[1]
        history = AttemptHistory()
        attempt = PracticeAttempt(line)
        attempt.play("e4")
        attempt.play("e5")
        recorded = attempt.record(history)
        assert recorded.line_id == line.line_id
        assert recorded.outcome is AttemptOutcome.FAILURE
        assert recorded.deviation_index == 1
        assert history.latest(line.line_id) is recorded
