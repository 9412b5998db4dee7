from datetime import date, datetime, timezone

import pytest

from scheduler.domain.errors import InvalidQuality
from scheduler.domain.logic import (
    next_ease_factor,
    round_half_up,
    schedule_next,
    to_result,
    validate_quality,
)
from scheduler.domain.state import UNREVIEWED, Reviewed

TODAY = date(2024, 3, 10)
NOW = datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)


def reviewed(interval, ease, reps, due=TODAY):
    return Reviewed(interval_days=interval, ease_factor=ease, repetitions=reps,
                    due_date=due, last_reviewed_at=NOW)


def test_new_card_perfect_recall():
    state = schedule_next(UNREVIEWED, 5, TODAY, NOW)
    assert state.interval_days == 1
    assert state.ease_factor == pytest.approx(2.6)
    assert state.repetitions == 1
    assert state.due_date == date(2024, 3, 11)
    assert state.last_reviewed_at == NOW


def test_perfect_run_then_lapse():
    first = schedule_next(UNREVIEWED, 5, TODAY, NOW)
    second = schedule_next(first, 5, date(2024, 3, 11), NOW)
    assert second.interval_days == 6
    assert second.ease_factor == pytest.approx(2.7)
    assert second.repetitions == 2

    third = schedule_next(second, 5, date(2024, 3, 17), NOW)
    # round(6 * 2.7) with the ease factor held before this rating
    assert third.interval_days == 16
    assert third.repetitions == 3

    lapse = schedule_next(third, 1, date(2024, 4, 2), NOW)
    assert lapse.interval_days == 1
    assert lapse.repetitions == 0
    assert lapse.ease_factor < third.ease_factor
    assert lapse.ease_factor == pytest.approx(2.26)
    assert to_result(lapse, 1).lapsed is True


@pytest.mark.parametrize("start_ease", [1.3, 1.8, 2.5, 3.2])
def test_first_two_successes_are_fixed(start_ease):
    state = reviewed(1, start_ease, 0)
    first = schedule_next(state, 4, TODAY, NOW)
    second = schedule_next(first, 4, TODAY, NOW)
    assert (first.interval_days, second.interval_days) == (1, 6)


def test_two_fours_from_unreviewed():
    first = schedule_next(UNREVIEWED, 4, TODAY, NOW)
    second = schedule_next(first, 4, TODAY, NOW)
    assert [first.interval_days, second.interval_days] == [1, 6]


def test_ease_factor_floor_under_repeated_blackouts():
    state = UNREVIEWED
    eases = []
    for _ in range(10):
        state = schedule_next(state, 0, TODAY, NOW)
        eases.append(state.ease_factor)
    assert eases[0] == pytest.approx(1.7)
    assert min(eases) >= 1.3
    assert eases[-1] == 1.3


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_lapse_resets_streak(quality):
    state = reviewed(40, 2.3, 7)
    after = schedule_next(state, quality, TODAY, NOW)
    assert after.repetitions == 0
    assert after.interval_days == 1
    assert after.due_date == date(2024, 3, 11)


def test_success_after_lapse_restarts_at_one_day():
    lapsed = schedule_next(reviewed(40, 2.3, 7), 2, TODAY, NOW)
    again = schedule_next(lapsed, 3, TODAY, NOW)
    assert again.interval_days == 1
    assert again.repetitions == 1


@pytest.mark.parametrize("quality,delta", [(5, 0.1), (4, 0.0), (3, -0.14), (2, -0.32), (1, -0.54), (0, -0.8)])
def test_ease_factor_formula(quality, delta):
    assert next_ease_factor(2.5, quality) == pytest.approx(2.5 + delta)


def test_interval_uses_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(16.2) == 16
    assert round_half_up(16.5) == 17
    after = schedule_next(reviewed(5, 2.5, 2), 4, TODAY, NOW)
    assert after.interval_days == 13


def test_due_date_crosses_year_boundary():
    after = schedule_next(reviewed(6, 2.5, 2), 5, date(2023, 12, 31), NOW)
    assert after.interval_days == 15
    assert after.due_date == date(2024, 1, 15)


def test_due_date_lands_on_leap_day():
    after = schedule_next(UNREVIEWED, 3, date(2024, 2, 28), NOW)
    assert after.due_date == date(2024, 2, 29)


@pytest.mark.parametrize("quality", range(6))
def test_due_date_strictly_after_today(quality):
    for state in (UNREVIEWED, reviewed(1, 1.3, 0), reviewed(30, 2.9, 5)):
        assert schedule_next(state, quality, TODAY, NOW).due_date > TODAY


def test_rating_is_deterministic():
    state = reviewed(16, 2.36, 3)
    assert to_result(schedule_next(state, 4, TODAY, NOW), 4) == to_result(schedule_next(state, 4, TODAY, NOW), 4)


@pytest.mark.parametrize("quality", [-1, 6, 7, 2.5, "3", None, True])
def test_invalid_quality_rejected(quality):
    with pytest.raises(InvalidQuality):
        validate_quality(quality)
    with pytest.raises(InvalidQuality):
        schedule_next(UNREVIEWED, quality, TODAY, NOW)
