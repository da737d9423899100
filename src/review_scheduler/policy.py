"""Accuracy-based adjustment of due times.

The adjustment scales the interval the scheduler already produced; it never
computes an interval itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .config import Settings, settings
from .models.common import PASS_THRESHOLD, ReviewItemState


def recent_accuracy(qualities: Iterable[int], window: Optional[int] = None) -> float:
    """Percentage of passing grades among the last ``window`` qualities (0 when empty)."""

    size = window if window is not None else settings.accuracy_window
    if size < 1:
        raise ValueError("window must be >= 1")
    recent = list(qualities)[-size:]
    if not recent:
        return 0.0
    passed = sum(1 for q in recent if q >= PASS_THRESHOLD)
    return passed / len(recent) * 100


@dataclass(frozen=True)
class AccuracyAdjustment:
    """Scale nominal intervals by recent accuracy before the due check.

    - accuracy < low_threshold  -> interval x shorten_factor
    - accuracy > high_threshold -> interval x lengthen_factor
    - otherwise unchanged
    """

    low_threshold: float = 60.0
    high_threshold: float = 80.0
    shorten_factor: float = 0.8
    lengthen_factor: float = 1.2

    def __post_init__(self) -> None:
        for name in ("low_threshold", "high_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"{name} must be within 0..100, got {value!r}")
        if self.low_threshold > self.high_threshold:
            raise ValueError("low_threshold must not exceed high_threshold")
        if not 0.0 < self.shorten_factor <= 1.0:
            raise ValueError(f"shorten_factor must be within (0, 1], got {self.shorten_factor!r}")
        if self.lengthen_factor < 1.0:
            raise ValueError(f"lengthen_factor must be >= 1, got {self.lengthen_factor!r}")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "AccuracyAdjustment":
        cfg = config or settings
        return cls(
            low_threshold=cfg.accuracy_low_threshold,
            high_threshold=cfg.accuracy_high_threshold,
            shorten_factor=cfg.accuracy_shorten_factor,
            lengthen_factor=cfg.accuracy_lengthen_factor,
        )

    def factor_for(self, accuracy: float) -> float:
        if accuracy < self.low_threshold:
            return self.shorten_factor
        if accuracy > self.high_threshold:
            return self.lengthen_factor
        return 1.0

    def effective_due_date(
        self, state: ReviewItemState, accuracy: Optional[float]
    ) -> Optional[datetime]:
        """Due date after scaling; falls back to the nominal date when no history applies."""

        if accuracy is None or state.last_review_date is None:
            return state.next_review_date
        days = state.interval * self.factor_for(accuracy)
        try:
            return state.last_review_date + timedelta(days=days)
        except OverflowError:
            # 範囲外の期限は「いつまでも期限が来ない」として扱う
            return datetime.max.replace(tzinfo=state.last_review_date.tzinfo)


__all__ = ["AccuracyAdjustment", "recent_accuracy"]
