"""Practice loop: line status evaluation and per-attempt tracking."""

from openingtrainer.practice.session import PracticeAttempt
from openingtrainer.practice.status import expected_move, line_status, moves_match

__all__ = [
    "PracticeAttempt",
    "expected_move",
    "line_status",
    "moves_match",
]
