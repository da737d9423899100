"""Interval strategies selectable by name.

SM-2 is the default policy. The doubling schedule reproduces the legacy
heuristic that derived intervals from a plain study counter; both share the
same ease-factor update so every strategy keeps the ease floor.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from .models.common import MIN_EASE_FACTOR, PASS_THRESHOLD, ReviewItemState, round_half_up

FIRST_INTERVAL = 1
SECOND_INTERVAL = 6
FAILED_INTERVAL = 1


def update_ease(ease_factor: float, quality: int) -> float:
    """EF' = max(1.3, EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))"""

    miss = 5 - quality
    adjusted = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return max(MIN_EASE_FACTOR, adjusted)


class IntervalStrategy:
    """Base class: map (state, quality) to the next (interval, repetitions)."""

    name: str = ""

    def next_interval(self, state: ReviewItemState, quality: int) -> Tuple[int, int]:
        raise NotImplementedError

    def next_ease(self, state: ReviewItemState, quality: int) -> float:
        return update_ease(state.ease_factor, quality)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class SM2Strategy(IntervalStrategy):
    """SuperMemo-2 intervals: 1 day, 6 days, then previous interval x ease."""

    name = "sm2"

    def next_interval(self, state: ReviewItemState, quality: int) -> Tuple[int, int]:
        if quality < PASS_THRESHOLD:
            return FAILED_INTERVAL, 0

        # interval=0 on a fresh item counts as "not yet scheduled"
        if state.repetitions == 0:
            interval = FIRST_INTERVAL
        elif state.repetitions == 1:
            interval = SECOND_INTERVAL
        else:
            interval = int(round_half_up(state.interval * state.ease_factor))
        return interval, state.repetitions + 1


class DoublingStrategy(IntervalStrategy):
    """Legacy schedule: two days per consecutive pass (2, 4, 6, ...)."""

    name = "doubling"

    def next_interval(self, state: ReviewItemState, quality: int) -> Tuple[int, int]:
        if quality < PASS_THRESHOLD:
            return FAILED_INTERVAL, 0
        repetitions = state.repetitions + 1
        return max(1, repetitions * 2), repetitions


STRATEGIES: Mapping[str, IntervalStrategy] = MappingProxyType(
    {strategy.name: strategy for strategy in (SM2Strategy(), DoublingStrategy())}
)


def available_strategies() -> tuple[str, ...]:
    return tuple(STRATEGIES)


def get_strategy(name: str) -> IntervalStrategy:
    key = (name or "").strip().lower()
    try:
        return STRATEGIES[key]
    except KeyError:
        raise KeyError(
            f"unknown interval strategy {name!r}; available: {', '.join(STRATEGIES)}"
        ) from None


__all__ = [
    "DoublingStrategy",
    "IntervalStrategy",
    "SM2Strategy",
    "STRATEGIES",
    "available_strategies",
    "get_strategy",
    "update_ease",
]
