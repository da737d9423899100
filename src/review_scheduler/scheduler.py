"""Per-review state transition.

``compute_next_review`` never reads the system clock, never mutates its input
and performs no I/O. With an explicit ``strategy`` and ``maximum_interval`` it
is a pure function of (state, quality, now); when they are omitted the
defaults come from ``settings`` (process configuration).
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from .config import settings
from .errors import InvalidQuality, InvalidState
from .models.common import MIN_EASE_FACTOR, ReviewItemState, ReviewOutcome
from .strategies import IntervalStrategy, get_strategy

StrategyLike = Union[IntervalStrategy, str, None]


def validate_quality(quality: Any) -> int:
    # bool is an int subclass; True/False are not grades
    if isinstance(quality, bool) or not isinstance(quality, int) or not 0 <= quality <= 5:
        raise InvalidQuality(quality)
    return quality


def validate_state(state: ReviewItemState) -> ReviewItemState:
    """Reject states that break the scheduling invariants instead of repairing them."""

    ease = state.ease_factor
    if not math.isfinite(ease):
        raise InvalidState("ease_factor", ease, "must be a finite number")
    if ease < 0:
        raise InvalidState("ease_factor", ease, "must not be negative")
    if ease < MIN_EASE_FACTOR:
        raise InvalidState("ease_factor", ease, f"must be at least {MIN_EASE_FACTOR}")
    if state.interval < 0:
        raise InvalidState("interval", state.interval, "must not be negative")
    if state.repetitions < 0:
        raise InvalidState("repetitions", state.repetitions, "must not be negative")
    if state.repetitions >= 1 and state.interval < 1:
        raise InvalidState(
            "interval",
            state.interval,
            "must be positive once repetitions >= 1",
        )
    return state


def resolve_strategy(strategy: StrategyLike = None) -> IntervalStrategy:
    if strategy is None:
        return get_strategy(settings.default_strategy)
    if isinstance(strategy, IntervalStrategy):
        return strategy
    return get_strategy(strategy)


def compute_next_review(
    state: ReviewItemState,
    quality: int,
    now: datetime,
    *,
    strategy: StrategyLike = None,
    maximum_interval: Optional[int] = None,
) -> ReviewOutcome:
    """Grade ``state`` with ``quality`` at ``now`` and return the outcome.

    Args:
        state: Current scheduling state of the item.
        quality: Recall quality 0..5 (0 = blackout, 3 = pass with difficulty,
            5 = effortless recall).
        now: Review time supplied by the caller.
        strategy: Strategy instance or registered name; defaults to
            ``settings.default_strategy``, i.e. process configuration. Pass it
            explicitly when the result must not depend on the environment.
        maximum_interval: Optional cap in days; defaults to
            ``settings.maximum_interval_days`` (no cap when unset).

    Raises:
        InvalidQuality: ``quality`` is not an integer in 0..5.
        InvalidState: ``state`` violates an invariant, or the next review
            date would fall outside the supported datetime range.
        KeyError: ``strategy`` names no registered strategy.
    """

    validate_quality(quality)
    validate_state(state)
    policy = resolve_strategy(strategy)

    interval, repetitions = policy.next_interval(state, quality)
    cap = maximum_interval if maximum_interval is not None else settings.maximum_interval_days
    if cap is not None:
        interval = min(interval, max(1, cap))
    ease_factor = policy.next_ease(state, quality)
    try:
        next_review_date = now + timedelta(days=interval)
    except OverflowError:
        raise InvalidState(
            "interval", interval, "next review date out of range"
        ) from None

    return ReviewOutcome(
        item_id=state.id,
        quality=quality,
        ease_factor=ease_factor,
        interval=interval,
        repetitions=repetitions,
        reviewed_at=now,
        next_review_date=next_review_date,
        strategy=policy.name,
    )


__all__ = [
    "compute_next_review",
    "resolve_strategy",
    "validate_quality",
    "validate_state",
]
