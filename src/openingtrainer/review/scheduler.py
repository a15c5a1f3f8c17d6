"""Choose which line the learner reviews next."""

from __future__ import annotations

import logging
import random
from collections.abc import Collection, Iterable, Sequence
from datetime import UTC, datetime
from enum import StrEnum

from openingtrainer.config import ReviewSettings
from openingtrainer.core.enums import AttemptOutcome
from openingtrainer.core.errors import NoLinesAvailable
from openingtrainer.core.models import Chapter, Line
from openingtrainer.review.history import AttemptHistory
from openingtrainer.review.models import LineStats
from openingtrainer.review.stats import line_stats, review_priority

_LOGGER = logging.getLogger(__name__)


class SelectionStrategy(StrEnum):
    DETERMINISTIC = "deterministic"
    RANDOM = "random"
    SPACED_REPETITION = "spaced_repetition"


def needs_practice(history: AttemptHistory, line: Line) -> bool:
    """A line needs practice until its latest attempt was a success."""
    latest = history.latest(line.line_id)
    return latest is None or latest.outcome is not AttemptOutcome.SUCCESS


def line_weight(
    line: Line,
    history: AttemptHistory,
    stats: LineStats | None,
    settings: ReviewSettings,
) -> float:
    weight = review_priority(stats, settings.halflife_days, settings.staleness_weight)
    if needs_practice(history, line):
        weight *= settings.needs_practice_multiplier
    return max(weight, settings.min_weight)


def _candidates(
    available_lines: Iterable[Line], selected_chapter_names: Collection[str]
) -> list[Line]:
    lines = list(available_lines)
    if selected_chapter_names:
        lines = [line for line in lines if line.chapter_name in selected_chapter_names]
    return lines


def next_line(
    available_lines: Iterable[Line],
    history: AttemptHistory,
    selected_chapter_names: Collection[str] = (),
    *,
    rng: random.Random | None = None,
    strategy: SelectionStrategy = SelectionStrategy.SPACED_REPETITION,
    settings: ReviewSettings | None = None,
    now: datetime | None = None,
) -> Line:
    """Pick the next line to present.

    An empty *selected_chapter_names* means every chapter is selected.
    Lines that were never attempted, or whose latest attempt failed, weigh
    more than lines recently answered correctly, but no candidate is ever
    excluded.

    Raises:
        NoLinesAvailable: No line survives the chapter filter.
    """
    candidates = _candidates(available_lines, selected_chapter_names)
    if not candidates:
        raise NoLinesAvailable(
            "No lines available for the selected chapters"
            if selected_chapter_names
            else "No lines available"
        )
    rng = rng or random.Random()

    if strategy is SelectionStrategy.RANDOM:
        return rng.choice(candidates)

    settings = settings or ReviewSettings()
    now = now or datetime.now(UTC)
    stats = line_stats(
        (a for line in candidates for a in history.for_line(line.line_id)),
        now,
        default_probability=settings.default_probability,
        halflife_days=settings.halflife_days,
    )
    weights = [
        line_weight(line, history, stats.get(line.line_id), settings)
        for line in candidates
    ]

    if strategy is SelectionStrategy.DETERMINISTIC:
        # max() returns the first of equal weights.
        best = max(range(len(candidates)), key=weights.__getitem__)
        return candidates[best]

    chosen = rng.choices(candidates, weights=weights, k=1)[0]
    _LOGGER.debug(
        "Picked %s out of %d candidate lines", chosen.line_id, len(candidates)
    )
    return chosen


def reconcile_selected_chapters(
    old_chapters: Sequence[Chapter],
    new_chapters: Sequence[Chapter],
    previously_selected_names: Collection[str],
) -> list[str]:
    """Carry a chapter selection over to a freshly parsed study.

    Chapters known before keep their selection state; chapters that are new
    are selected. Chapters that disappeared drop out. The result follows the
    order of *new_chapters*.
    """
    known = {chapter.name for chapter in old_chapters}
    selected: list[str] = []
    for chapter in new_chapters:
        if chapter.name in selected:
            continue
        if chapter.name not in known or chapter.name in previously_selected_names:
            selected.append(chapter.name)
    return selected


class ReviewScheduler:
    """Per-session line picker with a reproducible random source."""

    __slots__ = ("_history", "_rng", "_settings", "_strategy")

    def __init__(
        self,
        history: AttemptHistory,
        *,
        seed: int | None = None,
        settings: ReviewSettings | None = None,
        strategy: SelectionStrategy = SelectionStrategy.SPACED_REPETITION,
    ) -> None:
        self._history = history
        self._rng = random.Random(seed)
        self._settings = settings or ReviewSettings()
        self._strategy = strategy

    @property
    def history(self) -> AttemptHistory:
        return self._history

    @property
    def settings(self) -> ReviewSettings:
        return self._settings

    @property
    def strategy(self) -> SelectionStrategy:
        return self._strategy

    def next_line(
        self,
        available_lines: Iterable[Line],
        selected_chapter_names: Collection[str] = (),
        *,
        now: datetime | None = None,
    ) -> Line:
        return next_line(
            available_lines,
            self._history,
            selected_chapter_names,
            rng=self._rng,
            strategy=self._strategy,
            settings=self._settings,
            now=now,
        )
