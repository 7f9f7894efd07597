# ========================================
# hiretrack/schemas/application.py
# ========================================

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from hiretrack.models.application import ApplicationStatus
from hiretrack.schemas.user import UserResponse


# 1. Input: Create Application
class ApplicationCreate(BaseModel):
    job_id: str
    cover_letter: Optional[str] = None
    resume: Optional[str] = None
    resume_url: Optional[str] = None
    additional_documents: Optional[List[str]] = None
    answers: Optional[Dict[str, Any]] = None


# 2. Input: Update Status
class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None


# 3. Input: Bulk Update
class ApplicationBulkUpdate(BaseModel):
    """Schema for updating multiple applications at once"""
    application_ids: List[str] = Field(..., min_length=1)
    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = None


class JobSummary(BaseModel):
    id: str
    title: str
    department: Optional[str] = None
    location: Optional[str] = None
    status: str

    class Config:
        from_attributes = True


# 4. Output
class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    status: str
    cover_letter: Optional[str] = None
    answers: Optional[Dict[str, Any]] = None
    resume: Optional[str] = None
    resume_url: Optional[str] = None
    additional_documents: Optional[List[str]] = None
    submitted_at: Optional[datetime] = None
    withdrawn_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by_id: Optional[str] = None
    score: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationDetailResponse(ApplicationResponse):
    job: Optional[JobSummary] = None
    applicant: Optional[UserResponse] = None


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    total: int
