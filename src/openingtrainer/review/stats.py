"""Per-line attempt statistics and review priority."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from openingtrainer.review.models import Attempt, LineStats, as_utc

DEFAULT_HALFLIFE_DAYS = 28.0
DEFAULT_STALENESS_WEIGHT = 0.3

# Loose prior of 50% accuracy: one success in two attempts.
_PRIOR_SUCCESSES = 1.0
_PRIOR_ATTEMPTS = 2.0
# Staleness stops growing after three half-lives.
_MAX_STALENESS = 3.0

_SECONDS_PER_DAY = 24 * 60 * 60


def days_between(earlier: datetime, later: datetime) -> float:
    return abs((as_utc(later) - as_utc(earlier)).total_seconds()) / _SECONDS_PER_DAY


def calculate_probability(
    attempts: Sequence[Attempt],
    default: float = 0.5,
    now: datetime | None = None,
    halflife_days: float = DEFAULT_HALFLIFE_DAYS,
) -> float:
    """Time-weighted estimate of the chance the next attempt succeeds.

    Each attempt is weighted by ``exp(-age_days / halflife_days)`` so recent
    results dominate. The weighted success rate is smoothed with a prior of
    one success in two attempts. Returns *default* when there are no
    attempts.
    """
    if not attempts:
        return default
    if halflife_days <= 0:
        raise ValueError("halflife_days must be > 0")
    now = as_utc(now) if now is not None else datetime.now(UTC)

    total_weight = 0.0
    weighted_successes = 0.0
    for attempt in attempts:
        # Future timestamps (clock skew) count as fresh.
        age = max((now - attempt.timestamp).total_seconds(), 0.0) / _SECONDS_PER_DAY
        weight = math.exp(-age / halflife_days)
        total_weight += weight
        if attempt.correct:
            weighted_successes += weight

    return (weighted_successes + _PRIOR_SUCCESSES) / (total_weight + _PRIOR_ATTEMPTS)


def line_stats(
    attempts: Iterable[Attempt],
    now: datetime | None = None,
    *,
    default_probability: float = 0.5,
    halflife_days: float = DEFAULT_HALFLIFE_DAYS,
) -> dict[str, LineStats]:
    """Group *attempts* by line id and summarise each group."""
    now = as_utc(now) if now is not None else datetime.now(UTC)
    grouped: dict[str, list[Attempt]] = {}
    for attempt in attempts:
        grouped.setdefault(attempt.line_id, []).append(attempt)

    result: dict[str, LineStats] = {}
    for line_id, group in grouped.items():
        num_correct = sum(1 for a in group if a.correct)
        latest = max(a.timestamp for a in group)
        successes = [a.timestamp for a in group if a.correct]
        result[line_id] = LineStats(
            line_id=line_id,
            study_name=group[0].study_name,
            chapter_name=group[0].chapter_name,
            num_attempts=len(group),
            num_correct=num_correct,
            num_wrong=len(group) - num_correct,
            latest_attempt=latest,
            latest_success=max(successes) if successes else None,
            raw_success_rate=num_correct / len(group),
            estimated_success_rate=calculate_probability(
                group, default_probability, now, halflife_days
            ),
            days_since_last_attempt=days_between(latest, now),
        )
    return result


def review_priority(
    stats: LineStats | None,
    halflife_days: float = DEFAULT_HALFLIFE_DAYS,
    staleness_weight: float = DEFAULT_STALENESS_WEIGHT,
) -> float:
    """How urgently a line needs review; higher is more urgent.

    Never-practiced lines score 1.0. Otherwise the score is the estimated
    weakness ``1 - estimated_success_rate`` plus a staleness term that grows
    with days since the last attempt, capped at three half-lives.
    """
    if stats is None or stats.num_attempts == 0:
        return 1.0
    staleness = min(stats.days_since_last_attempt / halflife_days, _MAX_STALENESS)
    return (1.0 - stats.estimated_success_rate) + staleness * staleness_weight
