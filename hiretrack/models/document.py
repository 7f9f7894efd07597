# hiretrack/models/document.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from hiretrack.database import Base


class DocumentType(str, enum.Enum):
    RESUME = "resume"
    COVER_LETTER = "cover_letter"
    PORTFOLIO = "portfolio"
    CERTIFICATE = "certificate"
    ID_DOCUMENT = "id_document"
    OTHER = "other"


class DocumentStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REQUIRES_UPDATE = "requires_update"


REVIEWED_STATES = frozenset({
    DocumentStatus.APPROVED.value,
    DocumentStatus.REJECTED.value,
    DocumentStatus.REQUIRES_UPDATE.value,
})


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # File metadata; the bytes live in object storage
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(120), nullable=False)
    size = Column(BigInteger, nullable=False, default=0)
    url = Column(String(1024), nullable=False)

    type = Column(String(30), default=DocumentType.OTHER.value, nullable=False, index=True)
    status = Column(String(20), default=DocumentStatus.PENDING.value, nullable=False, index=True)
    description = Column(Text, nullable=True)
    review_notes = Column(Text, nullable=True)

    uploaded_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    uploaded_by = relationship("User", foreign_keys=[uploaded_by_id])

    job_application_id = Column(String(36), ForeignKey("job_applications.id"), nullable=True, index=True)
    job_application = relationship("JobApplication", back_populates="documents")

    reviewed_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
    reviewed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Document id={self.id} type={self.type} status={self.status}>"
