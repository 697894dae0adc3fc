"""
Feedback period lifecycle.

Status is always derived from the stored date range and the current time;
it is never written back to the database.
"""

from datetime import datetime, timezone
from typing import Optional

from facultyfeedback.models.period import FeedbackPeriod, PeriodStatus


def as_utc(value: datetime) -> datetime:
    """Mongo hands back naive datetimes; they are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage(value: datetime) -> datetime:
    """Naive UTC at millisecond precision, the way BSON keeps dates."""
    value = as_utc(value)
    return value.replace(tzinfo=None, microsecond=value.microsecond // 1000 * 1000)


def status_of(period: FeedbackPeriod, now: datetime) -> PeriodStatus:
    """Both bounds are inclusive of `active`."""
    now = as_utc(now)
    if now < as_utc(period.start_date):
        return PeriodStatus.UPCOMING
    if now <= as_utc(period.end_date):
        return PeriodStatus.ACTIVE
    return PeriodStatus.CLOSED


def is_submission_window_open(period: FeedbackPeriod, now: datetime) -> bool:
    """Dates and the admin flag must agree."""
    return status_of(period, now) == PeriodStatus.ACTIVE and period.is_active


def with_status(period: FeedbackPeriod, now: datetime) -> dict:
    """Period as a response dict with its derived status."""
    data = period.model_dump()
    data["status"] = status_of(period, now).value
    return data


async def find_current_period(db, now: datetime) -> Optional[FeedbackPeriod]:
    """The period whose submission window is open at `now`, if any."""
    now = to_storage(now)
    doc = await db.feedback_periods.find_one(
        {
            "start_date": {"$lte": now},
            "end_date": {"$gte": now},
            "is_active": True,
        },
        {"_id": 0},
        sort=[("start_date", 1)],
    )
    return FeedbackPeriod(**doc) if doc else None


async def find_reporting_period(db, now: datetime) -> Optional[FeedbackPeriod]:
    """Current period for read paths, falling back to the most recently ended one."""
    current = await find_current_period(db, now)
    if current:
        return current
    doc = await db.feedback_periods.find_one({}, {"_id": 0}, sort=[("end_date", -1)])
    return FeedbackPeriod(**doc) if doc else None
