# ========================================
# hiretrack/routes/application.py
# ========================================

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hiretrack.database import get_db
from hiretrack.models.application import ApplicationStatus, JobApplication
from hiretrack.models.user import HR_MANAGER_ROLES, HR_ROLES, User
from hiretrack.schemas.application import (
    ApplicationBulkUpdate,
    ApplicationCreate,
    ApplicationDetailResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
)
from hiretrack.services.application_service import JobApplicationService
from hiretrack.utils.auth import ensure_can_manage, get_current_user, require_roles
from hiretrack.utils.errors import ForbiddenError

router = APIRouter(prefix="/api/applications", tags=["Applications"])

hr_required = require_roles(*HR_ROLES)


# ===========================
# APPLICANT ENDPOINTS
# ===========================

# ✅ 1. APPLY FOR A JOB
@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def apply_for_job(
    application: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Apply to an open job. One application per job and applicant."""
    return JobApplicationService(db).create_application(
        job_id=application.job_id,
        applicant_id=current_user.id,
        cover_letter=application.cover_letter,
        resume=application.resume,
        resume_url=application.resume_url,
        additional_documents=application.additional_documents,
        answers=application.answers,
    )


# ✅ 2. MY APPLICATIONS
@router.get("/my-applications", response_model=List[ApplicationDetailResponse])
def my_applications(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Applications of the current user, newest first."""
    return JobApplicationService(db).get_applications_by_applicant(current_user.id)


# ===========================
# HR ENDPOINTS
# ===========================

# ✅ 3. SEARCH APPLICATIONS (HR)
@router.get("", response_model=List[ApplicationDetailResponse])
def search_applications(
    search: Optional[str] = Query(None, description="Applicant name/email or job title"),
    status: Optional[ApplicationStatus] = Query(None),
    job_id: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    return JobApplicationService(db).search_applications(
        search=search, status=status, job_id=job_id, date_from=date_from, date_to=date_to
    )


# ✅ 4. APPLICATION STATISTICS (HR)
@router.get("/statistics")
def application_statistics(
    job_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    return JobApplicationService(db).get_application_statistics(job_id=job_id)


# ✅ 5. BULK UPDATE (HR)
@router.patch("/bulk-update", response_model=List[ApplicationResponse])
def bulk_update_applications(
    bulk_update: ApplicationBulkUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    """Update status and/or notes for many applications at once. All or nothing."""

    # Recruiters can only update applications for their own jobs
    if current_user.role not in HR_MANAGER_ROLES:
        applications = (
            db.query(JobApplication)
            .filter(JobApplication.id.in_(bulk_update.application_ids))
            .all()
        )
        for application in applications:
            ensure_can_manage(application.job, current_user)

    return JobApplicationService(db).bulk_update_applications(
        bulk_update.application_ids,
        status=bulk_update.status,
        notes=bulk_update.notes,
        reviewer_id=current_user.id,
    )


# ✅ 6. GET SINGLE APPLICATION (Owner or HR)
@router.get("/{application_id}", response_model=ApplicationDetailResponse)
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = JobApplicationService(db).get_application(application_id)
    if application.applicant_id != current_user.id and current_user.role not in HR_ROLES:
        raise ForbiddenError("Not authorized to view this application")
    return application


# ✅ 7. UPDATE STATUS (HR)
@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    status_update: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    """Move an application along its lifecycle. Withdrawal is the applicant's call."""
    service = JobApplicationService(db)
    ensure_can_manage(service.get_application(application_id).job, current_user)
    return service.update_application_status(
        application_id,
        status_update.status,
        notes=status_update.notes,
        reviewer_id=current_user.id,
    )


# ✅ 8. WITHDRAW (Owner)
@router.post("/{application_id}/withdraw", response_model=ApplicationResponse)
def withdraw_application(
    application_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return JobApplicationService(db).withdraw_application(application_id, current_user.id)
