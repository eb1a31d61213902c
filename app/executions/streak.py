"""Completed-training streak.

A streak is the number of consecutive calendar days, ending today or
yesterday, with at least one completed training. A user who trained
yesterday but not yet today still has a current streak; once a full day
is skipped the streak lapses to 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from loguru import logger
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.executions.ownership import require_principal
from app.executions.repository import TrainingExecutionRepository


def _streak_zone() -> ZoneInfo:
    return ZoneInfo(settings.streak_timezone)


def _calendar_day(moment: datetime, zone: ZoneInfo) -> date:
    # SQLite drops tzinfo on the way back; stored values are UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(zone).date()


def today_in_streak_zone() -> date:
    return datetime.now(_streak_zone()).date()


def count_streak_days(completion_times: Iterable[datetime], today: date, zone: ZoneInfo | None = None) -> int:
    """Count consecutive completion days ending at the most recent one.

    Args:
        completion_times: Completion timestamps (any order, duplicates allowed)
        today: Reference date for lapse detection
        zone: Timezone defining calendar days (defaults to STREAK_TIMEZONE)

    Returns:
        Streak length in days, 0 if there are no completions or the most
        recent one is older than yesterday
    """
    zone = zone or _streak_zone()
    days = {_calendar_day(moment, zone) for moment in completion_times}
    if not days:
        return 0

    last_day = max(days)
    if last_day < today - timedelta(days=1):
        return 0

    streak = 0
    cursor = last_day
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def calculate_completed_streak_days(session: Session, principal: str | None, today: date | None = None) -> int:
    """Streak of the principal over their completed trainings.

    "Today" is the wall-clock date in STREAK_TIMEZONE unless given.
    """
    user_id = require_principal(principal)
    executions = TrainingExecutionRepository.find_completed_by_owner(session, user_id)
    reference_day = today if today is not None else today_in_streak_zone()

    streak = count_streak_days(
        (execution.completed_at for execution in executions if execution.completed_at is not None),
        reference_day,
    )
    logger.debug("Streak calculated", user_id=user_id, streak_days=streak, completed=len(executions))
    return streak
