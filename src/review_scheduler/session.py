"""Session and collection statistics.

セッション単位の集計（正解率・平均品質）と、学習項目全体のスナップショット
統計、表示用ラベル（習熟度・次回復習の説明）をまとめる。
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .due import is_due
from .models.common import (
    CollectionStats,
    MasteryLevel,
    ReviewItemState,
    ReviewOutcome,
    SessionStats,
    round_half_up,
)

MASTERED_MIN_EASE = 2.2
MASTERED_MIN_INTERVAL = 21
MASTERED_MIN_REPETITIONS = 3

OVERDUE_GRACE = timedelta(days=1)


def summarize_session(outcomes: Iterable[ReviewOutcome]) -> SessionStats:
    """Aggregate the outcomes of one session; an empty session yields zeros."""

    graded: List[ReviewOutcome] = list(outcomes)
    total = len(graded)
    if total == 0:
        return SessionStats()

    correct = sum(1 for outcome in graded if outcome.passed)
    quality_sum = sum(outcome.quality for outcome in graded)
    return SessionStats(
        total_cards=total,
        correct=correct,
        incorrect=total - correct,
        accuracy=correct / total * 100,
        average_quality=round_half_up(quality_sum / total, 2),
    )


def is_mastered(state: ReviewItemState) -> bool:
    return (
        state.ease_factor >= MASTERED_MIN_EASE
        and state.interval >= MASTERED_MIN_INTERVAL
        and state.repetitions >= MASTERED_MIN_REPETITIONS
    )


def summarize_collection(states: Iterable[ReviewItemState], now: datetime) -> CollectionStats:
    items = list(states)
    total = len(items)
    if total == 0:
        return CollectionStats()

    # 期限を 1 日以上過ぎたものを「延滞」とみなす
    overdue_before = now - OVERDUE_GRACE
    overdue = sum(
        1
        for state in items
        if state.next_review_date is not None and state.next_review_date < overdue_before
    )
    mastered = sum(1 for state in items if is_mastered(state))
    return CollectionStats(
        total_cards=total,
        due_now=sum(1 for state in items if is_due(state, now)),
        overdue=overdue,
        mastered=mastered,
        learning=total - mastered,
        average_ease=round_half_up(sum(s.ease_factor for s in items) / total, 2),
        average_interval=round_half_up(sum(s.interval for s in items) / total, 2),
    )


def mastery_level(state: ReviewItemState) -> MasteryLevel:
    if state.repetitions >= 10:
        return MasteryLevel.master
    if state.repetitions >= 5:
        return MasteryLevel.advanced
    if state.repetitions >= 2:
        return MasteryLevel.intermediate
    return MasteryLevel.beginner


def describe_next_review(next_review_date: Optional[datetime], now: datetime) -> str:
    """Human-readable label for the next review time.

    未スケジュールは "Soon"、期限到来済みは "Due now"。それ以外は残り日数を
    切り上げて表示する。
    """

    if next_review_date is None:
        return "Soon"
    remaining = next_review_date - now
    if remaining <= timedelta(0):
        return "Due now"
    days = math.ceil(remaining / timedelta(days=1))
    if days == 1:
        return "Tomorrow"
    return f"In {days} days"


__all__ = [
    "describe_next_review",
    "is_mastered",
    "mastery_level",
    "summarize_collection",
    "summarize_session",
]
