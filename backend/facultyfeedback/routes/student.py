"""Student routes - pending assignments, feedback submission, status, faculty ratings."""

from typing import Optional

from fastapi import APIRouter, Depends

from facultyfeedback.deps import get_student_user, get_orchestrator, get_db
from facultyfeedback.errors import NotFoundError
from facultyfeedback.models.user import User
from facultyfeedback.models.rating import FeedbackSubmit
from facultyfeedback.services import registry
from facultyfeedback.services.orchestrator import FeedbackOrchestrator

router = APIRouter(tags=["student"])


@router.get("/student/assignments")
async def get_pending_assignments(
    user: User = Depends(get_student_user),
    orchestrator: FeedbackOrchestrator = Depends(get_orchestrator),
):
    """Teaching assignments the student can still give feedback on"""
    result = await orchestrator.pending_assignments(user.user_id)
    return {"message": "Pending teaching assignments retrieved successfully", **result}


@router.post("/student/feedback", status_code=201)
async def submit_feedback(
    feedback: FeedbackSubmit,
    user: User = Depends(get_student_user),
    orchestrator: FeedbackOrchestrator = Depends(get_orchestrator),
):
    """Submit all five ratings for one teaching assignment"""
    return await orchestrator.submit_feedback(user.user_id, feedback.assignment_id, feedback.ratings)


@router.get("/student/submission-status")
async def get_submission_status(
    feedback_period: Optional[str] = None,
    user: User = Depends(get_student_user),
    orchestrator: FeedbackOrchestrator = Depends(get_orchestrator),
):
    """How many of this period's assignments the student has submitted"""
    result = await orchestrator.submission_status(user.user_id, feedback_period)
    return {"message": "Submission status retrieved successfully", **result}


@router.get("/student/faculty-ratings/{faculty_id}")
async def get_faculty_ratings_for_student(
    faculty_id: str,
    feedback_period: Optional[str] = None,
    user: User = Depends(get_student_user),
    orchestrator: FeedbackOrchestrator = Depends(get_orchestrator),
    db=Depends(get_db),
):
    """Aggregated ratings of any faculty member"""
    faculty = await registry.get_faculty(db, faculty_id)
    if not faculty:
        raise NotFoundError("faculty", faculty_id, "Faculty member not found")

    result = await orchestrator.faculty_ratings(faculty_id, feedback_period)
    return {
        "message": "Faculty ratings retrieved successfully",
        "faculty": {"id": faculty["user_id"], "name": faculty.get("name")},
        **result,
    }
