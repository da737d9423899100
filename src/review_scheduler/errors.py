"""Error types raised by the scheduling engine.

エンジンは入力を修復しない。不正な品質スコアや破損した状態はそのまま呼び出し元へ返す。
"""

from __future__ import annotations

from typing import Any


class ReviewSchedulerError(ValueError):
    """Base class for every rejection produced by the engine."""


class InvalidQuality(ReviewSchedulerError):
    """Quality score is not an integer in 0..5."""

    def __init__(self, quality: Any) -> None:
        self.quality = quality
        super().__init__(f"quality must be an integer in 0..5, got {quality!r}")


class InvalidState(ReviewSchedulerError):
    """A ReviewItemState violates the scheduling invariants."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"invalid {field}={value!r}: {reason}")


__all__ = ["ReviewSchedulerError", "InvalidQuality", "InvalidState"]
