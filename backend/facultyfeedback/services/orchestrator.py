"""
Feedback orchestration - the submit and query use cases.

A submission moves Received -> Validated -> Claimed -> Aggregated ->
Acknowledged, or stops at Rejected before the claim. The ledger claim
happens before any fold, so a submission that fails partway through folding
can never be folded a second time. Nothing is retried here; a rejected
submission is resent in full by the caller.
"""

from enum import Enum
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from facultyfeedback.config import logger
from facultyfeedback.errors import (
    AssignmentMismatchError, DuplicateSubmissionError, FeedbackError, NotFoundError, PeriodClosedError,
)
from facultyfeedback.models.period import FeedbackPeriod
from facultyfeedback.models.rating import RatingInput
from facultyfeedback.services import registry
from facultyfeedback.services.aggregator import RatingAggregator
from facultyfeedback.services.catalog import RatingCatalog
from facultyfeedback.services.ledger import ClaimResult, SubmissionLedger
from facultyfeedback.services.period_clock import (
    find_current_period, find_reporting_period, is_submission_window_open, status_of, with_status,
)


class SubmissionState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    CLAIMED = "claimed"
    AGGREGATED = "aggregated"
    ACKNOWLEDGED = "acknowledged"
    REJECTED = "rejected"


def format_mean(value: Optional[float]):
    """Means are shown to two places; an empty cell is "N/A", never 0."""
    return "N/A" if value is None else f"{value:.2f}"


class FeedbackOrchestrator:
    def __init__(self, db, catalog: Optional[RatingCatalog] = None):
        self.db = db
        self.catalog = catalog or RatingCatalog(db)
        self.ledger = SubmissionLedger(db)
        self.aggregator = RatingAggregator(db)

    # ============== SUBMIT ==============

    async def submit_feedback(
        self,
        student_id: str,
        assignment_id: str,
        ratings: Sequence[RatingInput],
        now: Optional[datetime] = None,
    ) -> dict:
        now = now or datetime.now(timezone.utc)
        state = SubmissionState.RECEIVED
        try:
            values = await self._validate(student_id, assignment_id, ratings, now)
            state = SubmissionState.VALIDATED

            if await self.ledger.try_claim(student_id, assignment_id) == ClaimResult.ALREADY_CLAIMED:
                raise DuplicateSubmissionError(assignment_id)
            state = SubmissionState.CLAIMED
        except FeedbackError as e:
            logger.info(
                f"Feedback for assignment {assignment_id} {SubmissionState.REJECTED.value} "
                f"from {state.value}: {e.detail}"
            )
            raise

        await self.aggregator.submit_all(assignment_id, values)
        state = SubmissionState.AGGREGATED

        logger.info(f"Feedback recorded for assignment {assignment_id}")
        state = SubmissionState.ACKNOWLEDGED
        return {
            "success": True,
            "message": "Feedback submitted successfully",
            "assignment_id": assignment_id,
            "state": state.value,
        }

    async def _validate(self, student_id, assignment_id, ratings, now):
        link = await registry.resolve_student_class(self.db, student_id)
        if link is None:
            raise NotFoundError("student_profile", student_id, "Student profile not found")

        assignment = await registry.resolve_assignment(self.db, assignment_id)
        if assignment is None:
            raise NotFoundError("teaching_assignment", assignment_id, "Teaching assignment not found")

        if not link.is_resolved:
            raise AssignmentMismatchError(
                assignment_id, "Student has not been mapped to a class yet"
            )
        if assignment.class_id != link.class_id:
            raise AssignmentMismatchError(assignment_id)

        period = await registry.get_period(self.db, assignment.feedback_period_id)
        if period is None:
            raise NotFoundError("feedback_period", assignment.feedback_period_id, "Feedback period not found")
        if not is_submission_window_open(period, now):
            raise PeriodClosedError(period.period_id, status_of(period, now).value, period.is_active)

        return await self.catalog.validate_ratings(ratings)

    # ============== QUERIES ==============

    async def _criteria_payload(self) -> List[dict]:
        return [
            {"id": c.criterion_id, "question_text": c.question_text}
            for c in await self.catalog.list_active_criteria()
        ]

    async def pending_assignments(self, student_id: str, now: Optional[datetime] = None) -> dict:
        """Open-period assignments of the student's class not yet submitted."""
        now = now or datetime.now(timezone.utc)
        link = await registry.resolve_student_class(self.db, student_id)
        if link is None:
            raise NotFoundError("student_profile", student_id, "Student profile not found")

        period = await find_current_period(self.db, now)
        if period is None:
            raise NotFoundError("feedback_period", None, "No active feedback period found")

        rating_criteria = await self._criteria_payload()

        if not link.is_resolved:
            return {
                "feedback_period": with_status(period, now),
                "teaching_assignments": [],
                "rating_criteria": rating_criteria,
                "pending_mapping": True,
            }

        assignments = await registry.list_assignments_for_class_and_period(
            self.db, link.class_id, period.period_id
        )
        claimed = await self.ledger.claimed_assignment_ids(
            student_id, [a.assignment_id for a in assignments]
        )
        pending = [a for a in assignments if a.assignment_id not in claimed]
        described = await registry.describe_assignments(self.db, pending)

        return {
            "feedback_period": with_status(period, now),
            "teaching_assignments": [
                {"assignment_id": a.assignment_id, **described[a.assignment_id]}
                for a in pending
            ],
            "rating_criteria": rating_criteria,
            "pending_mapping": False,
        }

    async def submission_status(
        self, student_id: str, period_id: Optional[str] = None, now: Optional[datetime] = None
    ) -> dict:
        now = now or datetime.now(timezone.utc)
        period = await self._target_period(period_id, now, fallback_to_latest=False)

        link = await registry.resolve_student_class(self.db, student_id)
        if link is None:
            raise NotFoundError("student_profile", student_id, "Student profile not found")

        assignments = []
        if link.is_resolved:
            assignments = await registry.list_assignments_for_class_and_period(
                self.db, link.class_id, period.period_id
            )
        claimed = await self.ledger.claimed_assignment_ids(
            student_id, [a.assignment_id for a in assignments]
        )

        return {
            "feedback_period": period.name,
            "total_assignments": len(assignments),
            "submitted_count": len(claimed),
            "pending_count": len(assignments) - len(claimed),
            "submitted": sorted(claimed),
        }

    async def faculty_ratings(
        self, faculty_id: str, period_id: Optional[str] = None, now: Optional[datetime] = None
    ) -> dict:
        """Aggregated, anonymous ratings per teaching assignment for one faculty member."""
        now = now or datetime.now(timezone.utc)
        period = await self._target_period(period_id, now, fallback_to_latest=True)

        assignments = await registry.list_assignments_for_faculty(self.db, faculty_id, period.period_id)
        if not assignments:
            raise NotFoundError(
                "teaching_assignment", None,
                "No teaching assignments found for this faculty in this period"
            )

        criteria = await self.catalog.list_active_criteria()
        cells = await self.aggregator.cells_for([a.assignment_id for a in assignments])
        described = await registry.describe_assignments(self.db, assignments)

        ratings_by_assignment = []
        for a in assignments:
            ratings = []
            for c in criteria:
                cell = cells.get((a.assignment_id, c.criterion_id))
                ratings.append({
                    "criterion_id": c.criterion_id,
                    "question_text": c.question_text,
                    "mean": format_mean(cell.mean if cell else None),
                    "response_count": cell.response_count if cell else 0,
                })
            ratings_by_assignment.append({
                "assignment_id": a.assignment_id,
                "subject": described[a.assignment_id]["subject"],
                "class": described[a.assignment_id]["class"],
                "ratings": ratings,
            })

        return {
            "feedback_period": with_status(period, now),
            "ratings": ratings_by_assignment,
        }

    async def _target_period(self, period_id, now, fallback_to_latest) -> FeedbackPeriod:
        if period_id:
            period = await registry.get_period(self.db, period_id)
        elif fallback_to_latest:
            period = await find_reporting_period(self.db, now)
        else:
            period = await find_current_period(self.db, now)
        if period is None:
            raise NotFoundError("feedback_period", period_id, "No active or specified feedback period found")
        return period
