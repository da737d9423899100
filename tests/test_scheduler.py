import math
from datetime import datetime, timedelta

import pytest

from review_scheduler.errors import InvalidQuality, InvalidState, ReviewSchedulerError
from review_scheduler.models.common import ReviewItemState
from review_scheduler.scheduler import compute_next_review, resolve_strategy
from review_scheduler.strategies import DoublingStrategy, SM2Strategy


def _state(**overrides) -> ReviewItemState:
    base = {"id": "w:apple", "ease_factor": 2.5, "interval": 0, "repetitions": 0}
    base.update(overrides)
    return ReviewItemState(**base)


def test_first_pass_schedules_one_day(fresh_state: ReviewItemState, fixed_now: datetime) -> None:
    """新規項目を quality=4 で採点すると 1 日後・連続正解 1 回になる。"""

    outcome = compute_next_review(fresh_state, 4, fixed_now)

    assert outcome.interval == 1
    assert outcome.repetitions == 1
    assert outcome.ease_factor == pytest.approx(2.5)
    assert outcome.next_review_date == fixed_now + timedelta(days=1)
    assert outcome.reviewed_at == fixed_now
    assert outcome.strategy == "sm2"


def test_second_pass_schedules_six_days(fresh_state: ReviewItemState, fixed_now: datetime) -> None:
    first = compute_next_review(fresh_state, 4, fixed_now)
    later = fixed_now + timedelta(days=1)

    second = compute_next_review(first.state, 4, later)

    assert second.interval == 6
    assert second.repetitions == 2
    assert second.next_review_date == later + timedelta(days=6)


def test_failure_resets_progress_and_lowers_ease(fixed_now: datetime) -> None:
    state = _state(repetitions=2, interval=6)

    outcome = compute_next_review(state, 2, fixed_now)

    assert outcome.repetitions == 0
    assert outcome.interval == 1
    assert outcome.ease_factor == pytest.approx(2.18)
    assert outcome.display_ease == 2.18
    assert not outcome.passed


def test_third_pass_multiplies_interval_by_ease(fixed_now: datetime) -> None:
    state = _state(repetitions=2, interval=6)

    outcome = compute_next_review(state, 5, fixed_now)

    assert outcome.interval == 15
    assert outcome.repetitions == 3
    assert outcome.ease_factor == pytest.approx(2.6)


@pytest.mark.parametrize(
    ("interval", "ease", "expected"),
    [(5, 2.5, 13), (5, 1.3, 7), (3, 2.5, 8)],
)
def test_interval_product_rounds_half_up(
    fixed_now: datetime, interval: int, ease: float, expected: int
) -> None:
    """interval × ease の端数 .5 は切り上げる（偶数丸めではない）。"""

    state = _state(repetitions=3, interval=interval, ease_factor=ease)

    outcome = compute_next_review(state, 4, fixed_now)

    assert outcome.interval == expected


def test_quality_three_passes_without_reset(fixed_now: datetime) -> None:
    state = _state(repetitions=1, interval=1)

    outcome = compute_next_review(state, 3, fixed_now)

    assert outcome.passed
    assert outcome.repetitions == 2
    assert outcome.interval == 6
    assert outcome.ease_factor == pytest.approx(2.36)


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_any_failing_grade_resets(fixed_now: datetime, quality: int) -> None:
    state = _state(repetitions=7, interval=120, ease_factor=2.8)

    outcome = compute_next_review(state, quality, fixed_now)

    assert outcome.repetitions == 0
    assert outcome.interval == 1


def test_ease_never_drops_below_floor(fixed_now: datetime) -> None:
    state = _state(ease_factor=1.3, repetitions=3, interval=10)

    for _ in range(5):
        outcome = compute_next_review(state, 0, fixed_now)
        assert outcome.ease_factor >= 1.3
        state = outcome.state

    assert state.ease_factor == pytest.approx(1.3)


def test_higher_quality_never_schedules_sooner(fixed_now: datetime) -> None:
    state = _state(repetitions=4, interval=20, ease_factor=2.1)

    outcomes = [compute_next_review(state, q, fixed_now) for q in range(6)]

    eases = [o.ease_factor for o in outcomes]
    intervals = [o.interval for o in outcomes]
    assert eases == sorted(eases)
    assert intervals == sorted(intervals)


def test_same_inputs_give_same_outcome_and_input_is_untouched(fixed_now: datetime) -> None:
    state = _state(repetitions=2, interval=6, last_review_date=fixed_now - timedelta(days=6))
    before = state.model_dump()

    first = compute_next_review(state, 4, fixed_now, strategy="sm2")
    second = compute_next_review(state, 4, fixed_now, strategy="sm2")

    assert first == second
    assert state.model_dump() == before


def test_outcome_state_links_review_dates(fixed_now: datetime) -> None:
    outcome = compute_next_review(_state(repetitions=1, interval=1), 5, fixed_now)

    new_state = outcome.state

    assert new_state.id == "w:apple"
    assert new_state.last_review_date == fixed_now
    assert new_state.next_review_date == new_state.last_review_date + timedelta(days=new_state.interval)


@pytest.mark.parametrize("quality", [-1, 6, 3.0, "3", True, None])
def test_invalid_quality_is_rejected(fresh_state: ReviewItemState, fixed_now: datetime, quality) -> None:
    with pytest.raises(InvalidQuality) as excinfo:
        compute_next_review(fresh_state, quality, fixed_now)

    assert excinfo.value.quality == quality


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"ease_factor": 1.2}, "ease_factor"),
        ({"ease_factor": -0.5}, "ease_factor"),
        ({"ease_factor": math.nan}, "ease_factor"),
        ({"ease_factor": math.inf}, "ease_factor"),
        ({"interval": -1}, "interval"),
        ({"repetitions": -1}, "repetitions"),
        ({"repetitions": 2, "interval": 0}, "interval"),
    ],
)
def test_invalid_state_is_rejected(fixed_now: datetime, overrides: dict, field: str) -> None:
    """破損した状態は修復せずに InvalidState で拒否する。"""

    with pytest.raises(InvalidState) as excinfo:
        compute_next_review(_state(**overrides), 4, fixed_now)

    assert excinfo.value.field == field


def test_errors_share_value_error_base(fresh_state: ReviewItemState, fixed_now: datetime) -> None:
    with pytest.raises(ReviewSchedulerError):
        compute_next_review(fresh_state, 9, fixed_now)
    with pytest.raises(ValueError):
        compute_next_review(fresh_state, 9, fixed_now)


def test_maximum_interval_caps_growth(fixed_now: datetime) -> None:
    state = _state(repetitions=5, interval=200, ease_factor=2.5)

    outcome = compute_next_review(state, 5, fixed_now, maximum_interval=365)

    assert outcome.interval == 365
    assert outcome.next_review_date == fixed_now + timedelta(days=365)


def test_date_overflow_is_rejected_without_partial_result(fixed_now: datetime) -> None:
    """次回復習日が datetime の範囲を超える場合は InvalidState で拒否する。"""

    state = _state(repetitions=12, interval=2_000_000, ease_factor=2.5)

    with pytest.raises(InvalidState, match="out of range") as excinfo:
        compute_next_review(state, 5, fixed_now, strategy="sm2")

    assert excinfo.value.field == "interval"
    assert excinfo.value.value == 5_000_000


def test_long_pass_streak_ends_in_invalid_state_not_overflow(
    fresh_state: ReviewItemState, fixed_now: datetime
) -> None:
    state = fresh_state
    with pytest.raises(InvalidState):
        for _ in range(40):
            state = compute_next_review(state, 5, fixed_now, strategy="sm2").state


def test_maximum_interval_from_settings(monkeypatch: pytest.MonkeyPatch, fixed_now: datetime) -> None:
    from review_scheduler import scheduler

    monkeypatch.setattr(scheduler.settings, "maximum_interval_days", 10)

    outcome = compute_next_review(_state(repetitions=2, interval=6), 5, fixed_now)

    assert outcome.interval == 10


def test_doubling_strategy_by_name(fresh_state: ReviewItemState, fixed_now: datetime) -> None:
    """旧来の倍増スケジュールは名前で選択でき、2, 4, 6 日と伸びる。"""

    state = fresh_state
    intervals = []
    for day in range(3):
        outcome = compute_next_review(state, 4, fixed_now + timedelta(days=day), strategy="doubling")
        intervals.append(outcome.interval)
        state = outcome.state

    assert intervals == [2, 4, 6]
    assert outcome.strategy == "doubling"

    failed = compute_next_review(state, 1, fixed_now, strategy="doubling")
    assert (failed.interval, failed.repetitions) == (1, 0)
    assert failed.ease_factor >= 1.3


def test_unknown_strategy_raises_key_error(fresh_state: ReviewItemState, fixed_now: datetime) -> None:
    with pytest.raises(KeyError, match="sm2"):
        compute_next_review(fresh_state, 4, fixed_now, strategy="leitner")


def test_resolve_strategy_accepts_instances_and_default(monkeypatch: pytest.MonkeyPatch) -> None:
    from review_scheduler import scheduler

    custom = DoublingStrategy()
    assert resolve_strategy(custom) is custom
    assert isinstance(resolve_strategy(None), SM2Strategy)

    monkeypatch.setattr(scheduler.settings, "default_strategy", "doubling")
    assert isinstance(resolve_strategy(None), DoublingStrategy)
