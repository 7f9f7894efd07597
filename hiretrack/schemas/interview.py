from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from hiretrack.models.interview import InterviewType
from hiretrack.utils.values import naive_utc


class InterviewCreate(BaseModel):
    job_application_id: str
    interviewer_id: str
    scheduled_at: datetime
    end_time: Optional[datetime] = None
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    type: InterviewType = InterviewType.VIDEO
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("scheduled_at", "end_time")
    @classmethod
    def normalize_times(cls, value):
        return naive_utc(value)


class InterviewUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    type: Optional[InterviewType] = None
    scheduled_at: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    interviewer_id: Optional[str] = None

    @field_validator("scheduled_at", "end_time")
    @classmethod
    def normalize_times(cls, value):
        return naive_utc(value)


class InterviewFeedback(BaseModel):
    rating: float = Field(..., ge=1, le=5)
    notes: Optional[str] = None
    recommendation: Optional[str] = None


class InterviewResponse(BaseModel):
    id: str
    job_application_id: str
    title: str
    description: Optional[str] = None
    type: str
    status: str
    scheduled_at: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    score: Optional[float] = None
    feedback: Optional[Dict[str, Any]] = None
    interviewer_id: str
    scheduled_by_id: str
    created_at: datetime

    class Config:
        from_attributes = True
