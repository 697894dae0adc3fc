"""Feedback period Pydantic models"""

from enum import Enum
from typing import Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def assume_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Mongo returns naive UTC datetimes; clients may send naive ones too
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PeriodStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    CLOSED = "closed"


class FeedbackPeriod(BaseModel):
    """Stored period. Status is never stored; see services.period_clock."""
    model_config = ConfigDict(extra="ignore")
    period_id: str
    name: str
    semester: Optional[int] = None
    year: Optional[int] = None
    start_date: datetime
    end_date: datetime
    is_active: bool = False  # admin override, toggled independently of the dates

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value):
        return assume_utc(value)


class FeedbackPeriodCreate(BaseModel):
    name: str = Field(..., min_length=1)
    semester: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000)
    start_date: datetime
    end_date: datetime
    is_active: bool = False

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value):
        return assume_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class FeedbackPeriodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    semester: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value):
        return assume_utc(value)
