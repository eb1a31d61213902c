"""Tests for the completed-training streak."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.executions.models import ExecutionStatus, TrainingExecution
from app.executions.streak import calculate_completed_streak_days, count_streak_days

UTC = ZoneInfo("UTC")
TODAY = date(2026, 6, 10)


def _at(day: date, hour: int = 12) -> datetime:
    return datetime(day.year, day.month, day.day, hour, 0, tzinfo=timezone.utc)


def test_no_completions_means_no_streak():
    assert count_streak_days([], TODAY, UTC) == 0


def test_today_and_yesterday_count_once_per_day():
    completions = [
        _at(TODAY),
        _at(TODAY - timedelta(days=1), 8),
        _at(TODAY - timedelta(days=1), 19),
        _at(TODAY - timedelta(days=3)),
    ]

    assert count_streak_days(completions, TODAY, UTC) == 2


def test_streak_ending_yesterday_is_still_current():
    completions = [_at(TODAY - timedelta(days=offset)) for offset in (1, 2, 3)]

    assert count_streak_days(completions, TODAY, UTC) == 3


def test_streak_lapses_when_last_completion_is_two_days_ago():
    assert count_streak_days([_at(TODAY - timedelta(days=2))], TODAY, UTC) == 0


def test_order_of_completions_does_not_matter():
    completions = [_at(TODAY - timedelta(days=2)), _at(TODAY), _at(TODAY - timedelta(days=1))]

    assert count_streak_days(completions, TODAY, UTC) == 3


def test_naive_timestamps_are_treated_as_utc():
    naive = datetime(TODAY.year, TODAY.month, TODAY.day, 23, 30)

    assert count_streak_days([naive], TODAY, UTC) == 1


def test_calendar_day_follows_configured_timezone():
    # 23:30 UTC on June 9th is already June 10th in Berlin
    late_evening_utc = datetime(2026, 6, 9, 23, 30, tzinfo=timezone.utc)
    berlin = ZoneInfo("Europe/Berlin")

    assert count_streak_days([late_evening_utc], TODAY + timedelta(days=2), berlin) == 0
    assert count_streak_days([late_evening_utc], TODAY + timedelta(days=1), berlin) == 1
    assert count_streak_days([late_evening_utc], TODAY + timedelta(days=1), UTC) == 0


@pytest.fixture
def add_execution(db_session, push_day):
    def _add(user, status, completed_at):
        execution = TrainingExecution(
            user_id=user.id,
            session_id=push_day.id,
            session_id_snapshot=push_day.id,
            status=status,
            started_at=completed_at or _at(TODAY),
            completed_at=completed_at,
        )
        db_session.add(execution)
        db_session.flush()
        return execution

    return _add


def test_calculate_streak_uses_only_completed_trainings_of_principal(db_session, alice, bob, add_execution):
    add_execution(alice, ExecutionStatus.COMPLETED, _at(TODAY))
    add_execution(alice, ExecutionStatus.COMPLETED, _at(TODAY - timedelta(days=1)))
    add_execution(alice, ExecutionStatus.IN_PROGRESS, None)
    add_execution(bob, ExecutionStatus.COMPLETED, _at(TODAY - timedelta(days=2)))

    assert calculate_completed_streak_days(db_session, alice.id, today=TODAY) == 2
    assert calculate_completed_streak_days(db_session, bob.id, today=TODAY) == 0


def test_calculate_streak_without_completions_is_zero(db_session, alice):
    assert calculate_completed_streak_days(db_session, alice.id, today=TODAY) == 0
