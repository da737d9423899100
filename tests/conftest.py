"""Pytest configuration: import the package from src/ and provide a fixed clock."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

_SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(_SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(_SRC_ROOT))

from review_scheduler.models.common import ReviewItemState  # noqa: E402  # isort:skip


@pytest.fixture
def fixed_now() -> datetime:
    """テスト全体で共有する固定時刻（システム時計は参照しない）。"""

    return datetime(2024, 1, 1, 9, 0, 0)


@pytest.fixture
def fresh_state(fixed_now: datetime) -> ReviewItemState:
    return ReviewItemState.new("w:apple", fixed_now)
