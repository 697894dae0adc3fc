"""
Feedback core errors. Every rejection carries one human-readable reason.
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class FeedbackError(HTTPException):
    """Base error for the feedback core"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code
        self.extra = extra or {}


class ValidationError(FeedbackError):
    """Malformed or incomplete criterion set, or an out-of-range value"""

    def __init__(self, message: str, fields: List[str]):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=message,
            error_code="VALIDATION_FAILED",
            extra={"fields": fields}
        )
        self.fields = fields


class DuplicateSubmissionError(FeedbackError):
    """The ledger claim for this (student, assignment) was already taken"""

    def __init__(self, assignment_id: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Feedback already submitted for this assignment",
            error_code="DUPLICATE_SUBMISSION",
            extra={"assignment_id": assignment_id}
        )


class PeriodClosedError(FeedbackError):
    """The feedback period's submission window is not open"""

    def __init__(self, period_id: str, period_status: str, admin_active: bool):
        if period_status == "active" and not admin_active:
            message = "Feedback period has been closed by an administrator"
        else:
            message = f"Feedback period is not open for submissions ({period_status})"
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message,
            error_code="PERIOD_CLOSED",
            extra={"period_id": period_id, "status": period_status}
        )


class AssignmentMismatchError(FeedbackError):
    """The teaching assignment does not belong to the student's class"""

    def __init__(self, assignment_id: str, message: str = "Invalid teaching assignment for this student"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
            error_code="ASSIGNMENT_MISMATCH",
            extra={"assignment_id": assignment_id}
        )


class NotFoundError(FeedbackError):
    """Unknown assignment, period, student or faculty"""

    def __init__(self, resource: str, resource_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=message or f"{resource.replace('_', ' ').capitalize()} not found",
            error_code="NOT_FOUND",
            extra={"resource": resource, "id": resource_id}
        )


class CatalogMisconfiguredError(FeedbackError):
    """The active rating catalog does not hold exactly the expected criteria"""

    def __init__(self, count: int, expected: int):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error: Expected exactly {expected} rating criteria, found {count}",
            error_code="CATALOG_MISCONFIGURED",
            extra={"count": count}
        )
