"""SM-2 spaced-repetition scheduling engine.

間隔反復（SM-2）による復習スケジューリング。状態はすべて引数と戻り値で
受け渡し、現在時刻も呼び出し側が渡す。
"""

from .due import count_due, is_due, select_due_items
from .errors import InvalidQuality, InvalidState, ReviewSchedulerError
from .models.common import (
    CollectionStats,
    MasteryLevel,
    ReviewItemState,
    ReviewOutcome,
    SessionStats,
)
from .policy import AccuracyAdjustment, recent_accuracy
from .scheduler import compute_next_review
from .session import (
    describe_next_review,
    mastery_level,
    summarize_collection,
    summarize_session,
)
from .strategies import (
    DoublingStrategy,
    IntervalStrategy,
    SM2Strategy,
    available_strategies,
    get_strategy,
)

__version__ = "0.1.0"

__all__ = [
    "AccuracyAdjustment",
    "CollectionStats",
    "DoublingStrategy",
    "IntervalStrategy",
    "InvalidQuality",
    "InvalidState",
    "MasteryLevel",
    "ReviewItemState",
    "ReviewOutcome",
    "ReviewSchedulerError",
    "SM2Strategy",
    "SessionStats",
    "available_strategies",
    "compute_next_review",
    "count_due",
    "describe_next_review",
    "get_strategy",
    "is_due",
    "mastery_level",
    "recent_accuracy",
    "select_due_items",
    "summarize_collection",
    "summarize_session",
]
