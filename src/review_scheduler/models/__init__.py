"""Pydantic models shared by the engine and the HTTP layer."""

from .common import (
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    PASS_THRESHOLD,
    CollectionStats,
    MasteryLevel,
    ReviewItemState,
    ReviewOutcome,
    SessionStats,
    round_half_up,
)

__all__ = [
    "DEFAULT_EASE_FACTOR",
    "MIN_EASE_FACTOR",
    "PASS_THRESHOLD",
    "CollectionStats",
    "MasteryLevel",
    "ReviewItemState",
    "ReviewOutcome",
    "SessionStats",
    "round_half_up",
]
