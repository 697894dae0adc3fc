"""Rating catalog, submission and aggregate Pydantic models"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RatingCriterion(BaseModel):
    """One fixed evaluation question"""
    model_config = ConfigDict(extra="ignore", frozen=True)
    criterion_id: str  # e.g. "KNOWLEDGE"
    question_text: str
    order: int = 0
    is_active: bool = True


class RatingInput(BaseModel):
    """A single (criterion, value) pair as submitted.

    Range and coverage are checked by the catalog so that every offending
    field can be reported together.
    """
    criterion_id: str
    value: int


class FeedbackSubmit(BaseModel):
    """Body of POST /student/feedback"""
    assignment_id: str = Field(..., min_length=1)
    ratings: List[RatingInput]


class AggregateCell(BaseModel):
    """Running (count, sum) for one (assignment, criterion). Holds no student data."""
    model_config = ConfigDict(extra="ignore")
    assignment_id: str
    criterion_id: str
    response_count: int = Field(0, ge=0)
    value_sum: int = Field(0, ge=0)

    @property
    def mean(self) -> Optional[float]:
        if self.response_count == 0:
            return None
        return self.value_sum / self.response_count


class MeanResult(BaseModel):
    value: float
    response_count: int
