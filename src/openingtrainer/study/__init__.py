"""Study-level state shared across refreshes."""

from openingtrainer.study.refresh import RefreshTracker

__all__ = ["RefreshTracker"]
