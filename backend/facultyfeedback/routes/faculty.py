"""Faculty routes - own aggregated ratings."""

from typing import Optional

from fastapi import APIRouter, Depends

from facultyfeedback.deps import get_faculty_user, get_orchestrator
from facultyfeedback.models.user import User
from facultyfeedback.services.orchestrator import FeedbackOrchestrator

router = APIRouter(tags=["faculty"])


@router.get("/faculty/ratings")
async def get_my_ratings(
    feedback_period: Optional[str] = None,
    user: User = Depends(get_faculty_user),
    orchestrator: FeedbackOrchestrator = Depends(get_orchestrator),
):
    """Aggregated, anonymous ratings for the calling faculty member"""
    result = await orchestrator.faculty_ratings(user.user_id, feedback_period)
    return {"message": "Aggregated ratings retrieved successfully", **result}
