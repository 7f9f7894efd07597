import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from hiretrack.models.application import JobApplication
from hiretrack.models.document import Document, DocumentStatus, DocumentType
from hiretrack.models.user import HR_MANAGER_ROLES, HR_ROLES, User
from hiretrack.services.lifecycle import DOCUMENT_LIFECYCLE
from hiretrack.services.notification_service import NotificationService
from hiretrack.utils.errors import NotFoundError
from hiretrack.utils.values import enum_value

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def create_document(
        self,
        uploaded_by_id: str,
        filename: str,
        original_name: str,
        mime_type: str,
        size: int,
        url: str,
        type: Optional[str] = None,
        description: Optional[str] = None,
        job_application_id: Optional[str] = None,
    ) -> Document:
        if self.db.get(User, uploaded_by_id) is None:
            raise NotFoundError("Uploader not found")
        if job_application_id and self.db.get(JobApplication, job_application_id) is None:
            raise NotFoundError("Job application not found")

        document = Document(
            filename=filename,
            original_name=original_name,
            mime_type=mime_type,
            size=size,
            url=url,
            type=enum_value(type) or DocumentType.OTHER.value,
            description=description,
            uploaded_by_id=uploaded_by_id,
            job_application_id=job_application_id,
            status=DocumentStatus.PENDING.value,
        )
        self.db.add(document)
        self.db.commit()

        logger.info("Document %s uploaded by %s", document.id, uploaded_by_id)
        return document

    def get_document(self, document_id: str) -> Document:
        document = self.db.get(Document, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        return document

    def get_user_documents(self, user_id: str) -> List[Document]:
        return (
            self.db.query(Document)
            .filter(Document.uploaded_by_id == user_id)
            .order_by(Document.created_at.desc())
            .all()
        )

    def get_all_documents(
        self,
        status: Optional[str] = None,
        type: Optional[str] = None,
        uploaded_by_id: Optional[str] = None,
    ) -> List[Document]:
        query = self.db.query(Document)
        if status:
            query = query.filter(Document.status == enum_value(status))
        if type:
            query = query.filter(Document.type == enum_value(type))
        if uploaded_by_id:
            query = query.filter(Document.uploaded_by_id == uploaded_by_id)
        return query.order_by(Document.created_at.desc()).all()

    def get_application_documents(self, job_application_id: str) -> List[Document]:
        return (
            self.db.query(Document)
            .filter(Document.job_application_id == job_application_id)
            .order_by(Document.created_at.desc())
            .all()
        )

    def review_document(
        self,
        document_id: str,
        status: str,
        reviewer_id: str,
        review_notes: Optional[str] = None,
    ) -> Document:
        document = self.get_document(document_id)

        previous = document.status
        document.status = DOCUMENT_LIFECYCLE.ensure(document.status, status)
        document.reviewed_by_id = reviewer_id
        document.reviewed_at = datetime.utcnow()
        if review_notes is not None:
            document.review_notes = review_notes

        self.notifications.notify_document_reviewed(
            document.uploaded_by_id, document.original_name, document.status
        )
        self.db.commit()

        logger.info("Document %s moved %s -> %s by %s", document.id, previous, document.status, reviewer_id)
        return document

    def delete_document(self, document_id: str) -> None:
        document = self.get_document(document_id)
        self.db.delete(document)
        self.db.commit()
        logger.info("Document %s deleted", document_id)

    def get_document_statistics(self) -> Dict[str, Any]:
        by_status = dict(
            self.db.query(Document.status, func.count(Document.id)).group_by(Document.status).all()
        )
        by_type = dict(
            self.db.query(Document.type, func.count(Document.id)).group_by(Document.type).all()
        )

        stats: Dict[str, Any] = {status.value: by_status.get(status.value, 0) for status in DocumentStatus}
        stats["total"] = sum(by_status.values())
        stats["by_type"] = {doc_type.value: by_type.get(doc_type.value, 0) for doc_type in DocumentType}
        return stats

    # ===========================
    # ACCESS RULES
    # ===========================

    @staticmethod
    def can_view(document: Document, user: User) -> bool:
        return document.uploaded_by_id == user.id or user.role in HR_ROLES

    @staticmethod
    def can_delete(document: Document, user: User) -> bool:
        return document.uploaded_by_id == user.id or user.role in HR_MANAGER_ROLES
