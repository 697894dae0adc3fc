"""Teaching assignment and student-class link Pydantic models"""

from typing import Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class TeachingAssignment(BaseModel):
    """One (faculty, subject, class, period) tuple eligible for feedback"""
    model_config = ConfigDict(extra="ignore")
    assignment_id: str
    faculty_id: str
    subject_id: str
    class_id: str
    feedback_period_id: str


class StudentClassLink(BaseModel):
    """A student's cohort and, once mapped, their concrete class"""
    model_config = ConfigDict(extra="ignore")
    user_id: str
    branch: str
    semester: int
    section: str
    class_id: Optional[str] = None
    pending_mapping: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_resolved(self) -> bool:
        return not self.pending_mapping and self.class_id is not None
