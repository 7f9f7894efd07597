from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from hiretrack.models.document import DocumentStatus, DocumentType


class DocumentCreate(BaseModel):
    """Metadata of a file already placed in object storage."""
    filename: str = Field(..., min_length=1, max_length=255)
    original_name: str = Field(..., min_length=1, max_length=255)
    mime_type: str = Field(..., min_length=1)
    size: int = Field(..., ge=0)
    url: str = Field(..., min_length=1)
    type: DocumentType = DocumentType.OTHER
    description: Optional[str] = None
    job_application_id: Optional[str] = None


class DocumentReview(BaseModel):
    status: DocumentStatus
    review_notes: Optional[str] = None


class DocumentResponse(BaseModel):
    id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    url: str
    type: str
    status: str
    description: Optional[str] = None
    review_notes: Optional[str] = None
    uploaded_by_id: str
    job_application_id: Optional[str] = None
    reviewed_by_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
