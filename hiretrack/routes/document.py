# ========================================
# hiretrack/routes/document.py
# ========================================

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from hiretrack.database import get_db
from hiretrack.models.document import DocumentStatus, DocumentType
from hiretrack.models.user import HR_ROLES, User
from hiretrack.schemas.document import DocumentCreate, DocumentResponse, DocumentReview
from hiretrack.services.application_service import JobApplicationService
from hiretrack.services.document_service import DocumentService
from hiretrack.utils.auth import get_current_user, require_roles
from hiretrack.utils.errors import ForbiddenError

router = APIRouter(prefix="/api/documents", tags=["Documents"])

hr_required = require_roles(*HR_ROLES)


# ✅ 1. REGISTER AN UPLOADED DOCUMENT
@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def upload_document(
    document: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record metadata for a file already stored; it starts out pending review."""
    service = DocumentService(db)
    if document.job_application_id and current_user.role not in HR_ROLES:
        application = JobApplicationService(db).get_application(document.job_application_id)
        if application.applicant_id != current_user.id:
            raise ForbiddenError("You can only attach documents to your own applications")

    return service.create_document(uploaded_by_id=current_user.id, **document.model_dump())


# ✅ 2. MY DOCUMENTS
@router.get("/my-documents", response_model=List[DocumentResponse])
def my_documents(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return DocumentService(db).get_user_documents(current_user.id)


# ✅ 3. ALL DOCUMENTS (HR)
@router.get("/all", response_model=List[DocumentResponse])
def all_documents(
    status: Optional[DocumentStatus] = Query(None),
    type: Optional[DocumentType] = Query(None),
    uploaded_by: Optional[str] = Query(None, description="Uploader user id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    return DocumentService(db).get_all_documents(status=status, type=type, uploaded_by_id=uploaded_by)


# ✅ 4. DOCUMENTS OF AN APPLICATION (Applicant or HR)
@router.get("/application/{application_id}", response_model=List[DocumentResponse])
def application_documents(
    application_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = JobApplicationService(db).get_application(application_id)
    if application.applicant_id != current_user.id and current_user.role not in HR_ROLES:
        raise ForbiddenError("Not authorized to view these documents")
    return DocumentService(db).get_application_documents(application_id)


# ✅ 5. GET DOCUMENT (Uploader or HR)
@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(document_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    document = DocumentService(db).get_document(document_id)
    if not DocumentService.can_view(document, current_user):
        raise ForbiddenError("Not authorized to view this document")
    return document


# ✅ 6. REVIEW DOCUMENT (HR)
@router.put("/{document_id}/status", response_model=DocumentResponse)
def review_document(
    document_id: str,
    review: DocumentReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    """Approve, reject or ask for an update. The uploader is notified."""
    return DocumentService(db).review_document(
        document_id, review.status, reviewer_id=current_user.id, review_notes=review.review_notes
    )


# ✅ 7. DELETE DOCUMENT (Uploader or Manager)
@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(document_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    service = DocumentService(db)
    if not DocumentService.can_delete(service.get_document(document_id), current_user):
        raise ForbiddenError("Not authorized to delete this document")
    service.delete_document(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
