"""Data models for practice history and review statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from openingtrainer.core.enums import AttemptOutcome


def as_utc(moment: datetime) -> datetime:
    """*moment* as an aware UTC datetime. Naive values are taken as local time."""
    return moment.astimezone(UTC)


@dataclass(slots=True, frozen=True)
class Attempt:
    """Outcome of one practice session on a line. Never mutated."""

    line_id: str
    study_name: str
    chapter_name: str
    outcome: AttemptOutcome
    timestamp: datetime
    deviation_index: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))

    @property
    def correct(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS


@dataclass(slots=True, frozen=True)
class LineStats:
    """Aggregated attempt statistics for one line."""

    line_id: str
    study_name: str
    chapter_name: str
    num_attempts: int
    num_correct: int
    num_wrong: int
    latest_attempt: datetime
    latest_success: datetime | None
    # Historical accuracy: num_correct / num_attempts.
    raw_success_rate: float
    # Time-decayed estimate of current knowledge.
    estimated_success_rate: float
    days_since_last_attempt: float
