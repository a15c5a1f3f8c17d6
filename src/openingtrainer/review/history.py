"""Append-only attempt history."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from openingtrainer.core.enums import AttemptOutcome
from openingtrainer.core.models import Line
from openingtrainer.review.models import Attempt

_LOGGER = logging.getLogger(__name__)

AttemptListener = Callable[[Attempt], None]


class AttemptHistory:
    """Records practice attempts keyed by line identity.

    Attempts are only ever appended. ``on_record`` is called with every newly
    recorded attempt, e.g. to persist it.
    """

    __slots__ = ("_attempts", "_by_line", "_on_record")

    def __init__(
        self,
        attempts: Iterable[Attempt] = (),
        *,
        on_record: AttemptListener | None = None,
    ) -> None:
        self._attempts: list[Attempt] = []
        self._by_line: dict[str, list[Attempt]] = {}
        self._on_record = on_record
        self.extend(attempts)

    def record_attempt(
        self,
        line: Line,
        outcome: AttemptOutcome,
        deviation_index: int | None = None,
        *,
        timestamp: datetime | None = None,
    ) -> Attempt:
        """Append a new attempt for *line* and return it."""
        if deviation_index is not None and not 0 <= deviation_index <= len(line):
            raise ValueError(
                f"Deviation index {deviation_index} outside 0..{len(line)}"
            )
        attempt = Attempt(
            line_id=line.line_id,
            study_name=line.study_name,
            chapter_name=line.chapter_name,
            outcome=outcome,
            timestamp=timestamp or datetime.now(UTC),
            deviation_index=deviation_index,
        )
        self._append(attempt)
        _LOGGER.debug("Recorded %s attempt for %s", outcome, attempt.line_id)
        if self._on_record is not None:
            self._on_record(attempt)
        return attempt

    def extend(self, attempts: Iterable[Attempt]) -> None:
        """Load previously recorded attempts without notifying ``on_record``."""
        for attempt in attempts:
            self._append(attempt)

    def _append(self, attempt: Attempt) -> None:
        self._attempts.append(attempt)
        self._by_line.setdefault(attempt.line_id, []).append(attempt)

    @property
    def attempts(self) -> tuple[Attempt, ...]:
        return tuple(self._attempts)

    def for_line(self, line_id: str) -> tuple[Attempt, ...]:
        return tuple(self._by_line.get(line_id, ()))

    def latest(self, line_id: str) -> Attempt | None:
        """Most recent attempt for *line_id* by timestamp, ``None`` if unseen."""
        attempts = self._by_line.get(line_id)
        if not attempts:
            return None
        # max() keeps the first of equal timestamps; later appends win ties.
        return max(reversed(attempts), key=lambda a: a.timestamp)

    def __len__(self) -> int:
        return len(self._attempts)

    def __contains__(self, line_id: object) -> bool:
        return line_id in self._by_line
