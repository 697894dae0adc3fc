"""Pydantic models for the faculty feedback service"""

from .user import User, LoginRequest
from .rating import RatingCriterion, RatingInput, FeedbackSubmit, AggregateCell, MeanResult
from .period import PeriodStatus, FeedbackPeriod, FeedbackPeriodCreate, FeedbackPeriodUpdate
from .assignment import TeachingAssignment, StudentClassLink
