"""Attempt history, line statistics and review scheduling."""

from openingtrainer.review.history import AttemptHistory
from openingtrainer.review.models import Attempt, LineStats, as_utc
from openingtrainer.review.scheduler import (
    ReviewScheduler,
    SelectionStrategy,
    line_weight,
    needs_practice,
    next_line,
    reconcile_selected_chapters,
)
from openingtrainer.review.stats import (
    calculate_probability,
    days_between,
    line_stats,
    review_priority,
)

__all__ = [
    # History
    "Attempt",
    "AttemptHistory",
    # Statistics
    "LineStats",
    "as_utc",
    "calculate_probability",
    "days_between",
    "line_stats",
    "review_priority",
    # Scheduling
    "ReviewScheduler",
    "SelectionStrategy",
    "line_weight",
    "needs_practice",
    "next_line",
    "reconcile_selected_chapters",
]
