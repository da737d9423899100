from datetime import datetime
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from .common import ReviewItemState, ReviewOutcome


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def _check_same_awareness(now: datetime, states: Iterable[ReviewItemState]) -> None:
    """タイムゾーン付き／なしの日時が混在すると比較できないため 422 で拒否する。"""

    aware = _is_aware(now)
    for state in states:
        for name in ("last_review_date", "next_review_date"):
            value = getattr(state, name)
            if value is not None and _is_aware(value) != aware:
                raise ValueError(
                    f"{name} of item {state.id!r} and now must both be "
                    "timezone-aware or both be naive"
                )


class NextReviewRequest(BaseModel):
    """Request model for grading one item.

    1 件の項目を採点し、次回の復習時刻を計算するためのリクエスト。
    quality は型変換せずエンジンへ渡す（"3" や 3.0 も InvalidQuality として
    422 + error 名で返す）。
    """

    state: ReviewItemState
    quality: Any = Field(description="Recall quality 0..5 (int) / 品質スコア")
    now: datetime
    strategy: Optional[str] = Field(
        default=None,
        description="Interval strategy name (default: settings) / 間隔戦略名",
    )


class NextReviewResponse(BaseModel):
    outcome: ReviewOutcome
    state: ReviewItemState
    display_ease: float
    next_review: str = Field(description="Human-readable label / 次回復習の表示用ラベル")


class DueItemsRequest(BaseModel):
    """出題対象抽出のリクエストモデル。

    - limit: 返す最大件数（未指定時は設定値 MAX_DUE_ITEMS）
    - accuracy_by_item: 項目ID → 直近正解率（%）
    - adjust_for_accuracy: 正解率に応じて間隔を伸縮してから判定する
    """

    states: list[ReviewItemState]
    now: datetime
    limit: Optional[int] = Field(default=None, ge=0)
    accuracy_by_item: dict[str, float] = {}
    adjust_for_accuracy: bool = False

    @model_validator(mode="after")
    def _check_datetimes(self) -> "DueItemsRequest":
        _check_same_awareness(self.now, self.states)
        return self


class DueItemsResponse(BaseModel):
    items: list[ReviewItemState]
    due_count: int


class SessionSummaryRequest(BaseModel):
    outcomes: list[ReviewOutcome] = []


class CollectionStatsRequest(BaseModel):
    states: list[ReviewItemState] = []
    now: datetime

    @model_validator(mode="after")
    def _check_datetimes(self) -> "CollectionStatsRequest":
        _check_same_awareness(self.now, self.states)
        return self
