from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt


DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
PASS_THRESHOLD = 3


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` half away from zero (``2.5 -> 3``, ``2.675 -> 2.68``).

    組み込みの round() は偶数丸めのため、日数と表示用の値はこちらで丸める。
    """

    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class MasteryLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    master = "master"


class ReviewItemState(BaseModel):
    """Scheduling parameters of one learnable item.

    1 件の学習項目（フレーズ）のスケジューリング状態。値の範囲チェックは
    エンジン側（``compute_next_review``）で行い、ここでは型のみを検証する。
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1, description="Opaque item identifier / 項目ID")
    ease_factor: float = Field(
        default=DEFAULT_EASE_FACTOR,
        description="Interval growth multiplier / 間隔の伸び率",
    )
    interval: int = Field(default=0, description="Current interval in days / 現在の間隔（日）")
    repetitions: int = Field(
        default=0,
        description="Consecutive passing reviews / 連続正解回数",
    )
    last_review_date: Optional[datetime] = None
    next_review_date: Optional[datetime] = None

    @classmethod
    def new(cls, item_id: str, now: datetime) -> "ReviewItemState":
        """Initial state for an item entering the active pool (due immediately)."""

        return cls(
            id=item_id,
            ease_factor=DEFAULT_EASE_FACTOR,
            interval=0,
            repetitions=0,
            last_review_date=None,
            next_review_date=now,
        )


class ReviewOutcome(BaseModel):
    """Result of grading one item: the new scheduling values plus the grade."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    quality: StrictInt = Field(ge=0, le=5)
    ease_factor: float
    interval: int
    repetitions: int
    reviewed_at: datetime
    next_review_date: datetime
    strategy: str = "sm2"

    @property
    def passed(self) -> bool:
        return self.quality >= PASS_THRESHOLD

    @property
    def display_ease(self) -> float:
        return round_half_up(self.ease_factor, 2)

    @property
    def state(self) -> ReviewItemState:
        return ReviewItemState(
            id=self.item_id,
            ease_factor=self.ease_factor,
            interval=self.interval,
            repetitions=self.repetitions,
            last_review_date=self.reviewed_at,
            next_review_date=self.next_review_date,
        )


class SessionStats(BaseModel):
    """Summary of one review session.

    - accuracy: 正解率（0〜100 のパーセント）
    - average_quality: 品質スコアの平均（小数第2位で四捨五入）
    """

    total_cards: int = 0
    correct: int = 0
    incorrect: int = 0
    accuracy: float = 0.0
    average_quality: float = 0.0


class CollectionStats(BaseModel):
    """Snapshot statistics over a learner's whole item collection."""

    total_cards: int = 0
    due_now: int = 0
    overdue: int = 0
    mastered: int = 0
    learning: int = 0
    average_ease: float = 0.0
    average_interval: float = 0.0
