"""Admin feedback period routes - create, list, inspect, update."""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from facultyfeedback.config import logger
from facultyfeedback.deps import get_admin_user, get_db
from facultyfeedback.errors import NotFoundError
from facultyfeedback.models.user import User
from facultyfeedback.models.period import FeedbackPeriod, FeedbackPeriodCreate, FeedbackPeriodUpdate
from facultyfeedback.services.period_clock import to_storage, with_status

router = APIRouter(tags=["feedback_periods"])


@router.post("/admin/feedback-periods", status_code=201)
async def create_feedback_period(
    period: FeedbackPeriodCreate,
    user: User = Depends(get_admin_user),
    db=Depends(get_db),
):
    """Create a feedback period. Status is derived from its dates on every read."""
    now = datetime.now(timezone.utc)
    period_id = f"period_{uuid.uuid4().hex[:8]}"
    doc = {
        "period_id": period_id,
        "name": period.name,
        "semester": period.semester,
        "year": period.year,
        "start_date": to_storage(period.start_date),
        "end_date": to_storage(period.end_date),
        "is_active": period.is_active,
        "created_at": to_storage(now),
        "updated_at": to_storage(now),
    }
    await db.feedback_periods.insert_one(doc)
    logger.info(f"Feedback period {period_id} created by {user.user_id}")

    return {
        "message": "Feedback period created successfully",
        "feedback_period": with_status(FeedbackPeriod(**doc), now),
    }


@router.get("/admin/feedback-periods")
async def list_feedback_periods(user: User = Depends(get_admin_user), db=Depends(get_db)):
    """All feedback periods, newest first"""
    now = datetime.now(timezone.utc)
    docs = await db.feedback_periods.find({}, {"_id": 0}).sort("start_date", -1).to_list(None)
    return {
        "message": "Feedback periods retrieved successfully",
        "feedback_periods": [with_status(FeedbackPeriod(**d), now) for d in docs],
    }


@router.get("/admin/feedback-periods/{period_id}")
async def get_feedback_period(period_id: str, user: User = Depends(get_admin_user), db=Depends(get_db)):
    doc = await db.feedback_periods.find_one({"period_id": period_id}, {"_id": 0})
    if not doc:
        raise NotFoundError("feedback_period", period_id)
    return {
        "message": "Feedback period retrieved successfully",
        "feedback_period": with_status(FeedbackPeriod(**doc), datetime.now(timezone.utc)),
    }


@router.put("/admin/feedback-periods/{period_id}")
async def update_feedback_period(
    period_id: str,
    updates: FeedbackPeriodUpdate,
    user: User = Depends(get_admin_user),
    db=Depends(get_db),
):
    """Update a period, e.g. toggle is_active to open or shut it early"""
    doc = await db.feedback_periods.find_one({"period_id": period_id}, {"_id": 0})
    if not doc:
        raise NotFoundError("feedback_period", period_id)
    current = FeedbackPeriod(**doc)

    changes = updates.model_dump(exclude_none=True)
    start_date = changes.get("start_date", current.start_date)
    end_date = changes.get("end_date", current.end_date)
    if end_date <= start_date:
        raise HTTPException(status_code=400, detail="End date must be after start date")

    for field in ("start_date", "end_date"):
        if field in changes:
            changes[field] = to_storage(changes[field])

    now = datetime.now(timezone.utc)
    changes["updated_at"] = to_storage(now)
    await db.feedback_periods.update_one({"period_id": period_id}, {"$set": changes})
    logger.info(f"Feedback period {period_id} updated by {user.user_id}: {sorted(changes)}")

    updated = await db.feedback_periods.find_one({"period_id": period_id}, {"_id": 0})
    return {
        "message": "Feedback period updated successfully",
        "feedback_period": with_status(FeedbackPeriod(**updated), now),
    }
