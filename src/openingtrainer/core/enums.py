"""Core enumerations for the repertoire trainer domain."""

from __future__ import annotations

from enum import StrEnum


class Color(StrEnum):
    """Side color, valued with the FEN/PGN side letter."""

    WHITE = "w"
    BLACK = "b"

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @classmethod
    def parse(cls, text: str) -> Color | None:
        """Parse ``w``/``b``/``white``/``black`` (any case); ``None`` otherwise."""
        value = text.strip().lower()
        if value in ("w", "white"):
            return cls.WHITE
        if value in ("b", "black"):
            return cls.BLACK
        return None


class LineStatus(StrEnum):
    """Progress of a learner through one line during an attempt."""

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    CORRECT = "Correct"
    INCORRECT = "Incorrect"
    COMPLETE = "Complete"


class AttemptOutcome(StrEnum):
    """Result recorded for one practice attempt."""

    SUCCESS = "success"
    FAILURE = "failure"
    ABANDONED = "abandoned"
