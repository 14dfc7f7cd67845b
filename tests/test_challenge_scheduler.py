import time
from datetime import date, datetime

import pytest

from challenge_scheduler import ChallengeScheduler, sunday_weekday, week_id, week_number
from clock import FixedClock
from game_types import ChallengeType


@pytest.fixture
def scheduler():
    # Monday, January 15th 2024 at noon (local time)
    return ChallengeScheduler(FixedClock(datetime(2024, 1, 15, 12, 0, 0)))


def test_sunday_weekday_sunday_is_zero():
    assert sunday_weekday(date(2024, 1, 14)) == 0  # Sunday
    assert sunday_weekday(date(2024, 1, 15)) == 1  # Monday
    assert sunday_weekday(date(2024, 1, 20)) == 6  # Saturday


def test_week_number_counts_fractional_days():
    assert week_number(datetime(2024, 1, 1)) == 1
    assert week_number(datetime(2024, 1, 6)) == 1
    # half a day later the fractional day tips it into week 2
    assert week_number(datetime(2024, 1, 6, 12)) == 2
    assert week_number(datetime(2024, 1, 15, 12)) == 3


@pytest.fixture
def new_york(monkeypatch):
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def utc(monkeypatch):
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
def test_week_number_counts_daylight_saving_hour(new_york):
    # June 1st 00:30 EDT is one hour short of 152 full days after January 1st EST
    assert week_number(datetime(2024, 6, 1, 0, 30)) == 22
    assert week_id(datetime(2024, 6, 1, 0, 30)) == "2024_W22"


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
def test_week_number_without_daylight_saving(utc):
    assert week_number(datetime(2024, 6, 1, 0, 30)) == 23


def test_week_id_format():
    assert week_id(datetime(2024, 1, 15, 12)) == "2024_W3"


def test_daily_challenge(scheduler):
    daily = scheduler.daily_challenge()
    assert daily.id == "daily_2024-01-15"
    assert daily.seed == 703937942
    assert daily.type == ChallengeType.COIN_RUSH
    assert daily.name == "Coin Dash"
    assert not daily.is_weekly
    assert daily.start_time == datetime(2024, 1, 15)
    assert daily.end_time == datetime(2024, 1, 15, 23, 59, 59, 999000)


def test_weekly_challenge(scheduler):
    weekly = scheduler.weekly_challenge()
    assert weekly.id == "weekly_2024_W3"
    assert weekly.seed == 1746201244
    assert weekly.type == ChallengeType.ENDURANCE
    assert weekly.is_weekly
    assert weekly.start_time == datetime(2024, 1, 15)
    assert weekly.end_time == datetime(2024, 1, 21, 23, 59, 59, 999000)


def test_weekly_window_starts_monday_even_on_sunday():
    sunday = ChallengeScheduler(FixedClock(datetime(2024, 1, 21, 8, 30)))
    weekly = sunday.weekly_challenge()
    assert weekly.start_time == datetime(2024, 1, 15)
    assert weekly.end_time.date() == date(2024, 1, 21)


def test_same_day_same_challenge():
    clock = FixedClock(datetime(2024, 3, 2, 0, 0, 1))
    scheduler = ChallengeScheduler(clock)
    morning = scheduler.daily_challenge()
    clock.moment = datetime(2024, 3, 2, 23, 59, 59)
    assert scheduler.daily_challenge() == morning


def test_current_challenges_daily_then_weekly(scheduler):
    daily, weekly = scheduler.current_challenges()
    assert not daily.is_weekly
    assert weekly.is_weekly


def test_time_remaining(scheduler):
    daily = scheduler.daily_challenge()
    assert scheduler.time_remaining(daily) == (11, 59, 59)
    assert scheduler.format_time_remaining(daily) == "11h 59m"

    weekly = scheduler.weekly_challenge()
    assert scheduler.format_time_remaining(weekly) == "6d 11h"


def test_time_remaining_never_negative():
    clock = FixedClock(datetime(2024, 1, 15, 12))
    scheduler = ChallengeScheduler(clock)
    daily = scheduler.daily_challenge()
    clock.moment = datetime(2024, 1, 16, 1)
    assert scheduler.time_remaining(daily) == (0, 0, 0)
    assert scheduler.format_time_remaining(daily) == "0m 0s"


def test_challenge_to_dict(scheduler):
    data = scheduler.daily_challenge().to_dict()
    assert data["type"] == "dailyCoinRush"
    assert data["startTime"] == "2024-01-15T00:00:00.000"
    assert data["endTime"] == "2024-01-15T23:59:59.999"
