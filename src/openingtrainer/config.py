"""Tunable settings for review scheduling and engine evaluation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any


def _coerce(cls: type[Any], values: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only known fields and convert them to the default value's type."""
    known = {f.name: f for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, raw in values.items():
        known_field = known.get(key)
        if known_field is None:
            continue
        if raw is None:
            kwargs[key] = None
        elif known_field.default is None:
            # Optional fields are all integer limits.
            kwargs[key] = int(raw)
        else:
            kwargs[key] = type(known_field.default)(raw)
    return kwargs


@dataclass(slots=True, frozen=True)
class ReviewSettings:
    """Weights used to pick the next line to review.

    Args:
        halflife_days: Age at which an attempt counts half as much.
        staleness_weight: Contribution of time since last attempt to priority.
        default_probability: Success estimate for a line with no attempts.
        needs_practice_multiplier: Weight factor for unpracticed or failed lines.
        min_weight: Floor so mastered lines keep being reviewed occasionally.
    """

    halflife_days: float = 28.0
    staleness_weight: float = 0.3
    default_probability: float = 0.5
    needs_practice_multiplier: float = 3.0
    min_weight: float = 0.05

    def __post_init__(self) -> None:
        if self.halflife_days <= 0:
            raise ValueError("halflife_days must be > 0")
        if self.staleness_weight < 0:
            raise ValueError("staleness_weight must be >= 0")
        if not 0.0 <= self.default_probability <= 1.0:
            raise ValueError("default_probability must be within [0, 1]")
        if self.needs_practice_multiplier < 1.0:
            raise ValueError("needs_practice_multiplier must be >= 1")
        if self.min_weight <= 0:
            raise ValueError("min_weight must be > 0")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> ReviewSettings:
        return cls(**_coerce(cls, values))


@dataclass(slots=True, frozen=True)
class EngineSettings:
    """Engine evaluation limits and evaluation cache sizing."""

    depth: int = 20
    time_limit_ms: int | None = None
    cache_capacity: int | None = None

    def __post_init__(self) -> None:
        if self.depth <= 0:
            raise ValueError("Engine depth must be >= 1")
        if self.time_limit_ms is not None and self.time_limit_ms <= 0:
            raise ValueError("time_limit_ms must be > 0")
        if self.cache_capacity is not None and self.cache_capacity <= 0:
            raise ValueError("cache_capacity must be > 0")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> EngineSettings:
        return cls(**_coerce(cls, values))
