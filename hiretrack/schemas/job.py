# ========================================
# hiretrack/schemas/job.py
# ========================================

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from hiretrack.models.job import ExperienceLevel, JobStatus, JobType


# 1. Input: What HR sends to open a draft
class JobCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    department: str = ""
    location: str = ""
    type: JobType = JobType.FULL_TIME
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    experience_level: Optional[ExperienceLevel] = None
    skills: List[str] = []
    application_deadline: Optional[date] = None

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min cannot be greater than salary_max")
        return self


# 2. Input: Update existing job (status is not accepted here)
class JobUpdate(BaseModel):
    """Schema for updating job details"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    type: Optional[JobType] = None
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    experience_level: Optional[ExperienceLevel] = None
    skills: Optional[List[str]] = None
    application_deadline: Optional[date] = None


# 3. Output
class JobResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    status: str
    type: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    experience_level: Optional[str] = None
    skills: Optional[List[str]] = None
    application_deadline: Optional[date] = None
    published_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_by_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# 4. Status change through the transition table
class JobStatusUpdate(BaseModel):
    status: JobStatus
