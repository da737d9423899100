from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Tuple

from .models.common import ReviewItemState
from .policy import AccuracyAdjustment


def is_due(state: ReviewItemState, now: datetime) -> bool:
    """An item is due when it has no next review date or the date has passed."""

    return state.next_review_date is None or state.next_review_date <= now


def _due_date(
    state: ReviewItemState,
    adjustment: Optional[AccuracyAdjustment],
    accuracy_by_item: Mapping[str, float],
) -> Optional[datetime]:
    if adjustment is None:
        return state.next_review_date
    return adjustment.effective_due_date(state, accuracy_by_item.get(state.id))


def count_due(
    states: Iterable[ReviewItemState],
    now: datetime,
    *,
    adjustment: Optional[AccuracyAdjustment] = None,
    accuracy_by_item: Optional[Mapping[str, float]] = None,
) -> int:
    """Number of due items, using the same due check as ``select_due_items``."""

    accuracies = accuracy_by_item or {}
    count = 0
    for state in states:
        due_at = _due_date(state, adjustment, accuracies)
        if due_at is None or due_at <= now:
            count += 1
    return count


def select_due_items(
    states: Iterable[ReviewItemState],
    now: datetime,
    *,
    limit: Optional[int] = None,
    adjustment: Optional[AccuracyAdjustment] = None,
    accuracy_by_item: Optional[Mapping[str, float]] = None,
) -> List[ReviewItemState]:
    """Return the due subset ordered most-overdue first.

    - Items without a due date come first.
    - Ties keep their input order so repeated calls build the same queue.
    - With ``adjustment``, each item's interval is scaled by its recent
      accuracy (``accuracy_by_item``, percent) before the due check.
    """

    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit!r}")
    accuracies = accuracy_by_item or {}

    due: List[Tuple[Optional[datetime], ReviewItemState]] = []
    for state in states:
        due_at = _due_date(state, adjustment, accuracies)
        if due_at is None or due_at <= now:
            due.append((due_at, state))

    # list.sort is stable: equal keys stay in input order
    due.sort(key=lambda entry: (entry[0] is not None, entry[0] or now))
    ordered = [state for _, state in due]
    if limit is not None:
        ordered = ordered[:limit]
    return ordered


__all__ = ["count_due", "is_due", "select_due_items"]
