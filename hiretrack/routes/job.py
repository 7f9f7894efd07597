# ========================================
# hiretrack/routes/job.py
# ========================================

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from hiretrack.database import get_db
from hiretrack.models.application import ApplicationStatus
from hiretrack.models.job import ExperienceLevel, JobStatus, JobType
from hiretrack.models.user import HR_ROLES, User
from hiretrack.schemas.application import ApplicationListResponse
from hiretrack.schemas.job import JobCreate, JobResponse, JobStatusUpdate, JobUpdate
from hiretrack.services.application_service import JobApplicationService
from hiretrack.services.job_service import JobService
from hiretrack.utils.auth import ensure_can_manage, require_roles

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])

hr_required = require_roles(*HR_ROLES)


# ===========================
# PUBLIC ENDPOINTS
# ===========================

# ✅ 1. LIST JOBS WITH FILTERS (Public)
@router.get("", response_model=List[JobResponse])
def list_jobs(
    status: Optional[JobStatus] = Query(None, description="Filter by status; open jobs only when omitted"),
    type: Optional[JobType] = Query(None, description="Filter by job type"),
    department: Optional[str] = Query(None),
    location: Optional[str] = Query(None, description="Substring match on location"),
    experience_level: Optional[ExperienceLevel] = Query(None),
    db: Session = Depends(get_db),
):
    """List jobs. Shows only published and active jobs unless a status is given."""
    return JobService(db).list_jobs(
        status=status,
        job_type=type,
        department=department,
        location=location,
        experience_level=experience_level,
        open_only=True,
    )


# ✅ 2. SEARCH PUBLISHED JOBS (Public)
@router.get("/search", response_model=List[JobResponse])
def search_jobs(
    q: str = Query(..., min_length=1, description="Search in title, description, department and location"),
    db: Session = Depends(get_db),
):
    return JobService(db).search_jobs(q)


# ===========================
# HR ENDPOINTS
# ===========================

# ✅ 3. JOB STATISTICS (HR)
@router.get("/statistics")
def job_statistics(db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    """Total plus count per job status."""
    return JobService(db).get_statistics()


# ✅ 4. CREATE JOB (HR)
@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(job: JobCreate, db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    """Create a job in draft. It is not visible publicly until published."""
    return JobService(db).create_job(job.model_dump(), current_user.id)


# ✅ 5. GET SINGLE JOB (Public)
@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    return JobService(db).get_job(job_id)


# ✅ 6. UPDATE JOB (Owner or Manager)
@router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str,
    job_update: JobUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    """Update job details. Status changes go through publish, close or /status."""
    service = JobService(db)
    ensure_can_manage(service.get_job(job_id), current_user)
    return service.update_job(job_id, job_update.model_dump(exclude_unset=True))


# ✅ 7. DELETE JOB (Owner or Manager)
@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(job_id: str, db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    """Delete a job and every application made to it."""
    service = JobService(db)
    ensure_can_manage(service.get_job(job_id), current_user)
    service.delete_job(job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ✅ 8. PUBLISH JOB (Owner or Manager)
@router.post("/{job_id}/publish", response_model=JobResponse)
def publish_job(job_id: str, db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    service = JobService(db)
    ensure_can_manage(service.get_job(job_id), current_user)
    return service.publish_job(job_id)


# ✅ 9. CLOSE JOB (Owner or Manager)
@router.post("/{job_id}/close", response_model=JobResponse)
def close_job(job_id: str, db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    service = JobService(db)
    ensure_can_manage(service.get_job(job_id), current_user)
    return service.close_job(job_id)


# ✅ 10. CHANGE JOB STATUS (Owner or Manager)
@router.put("/{job_id}/status", response_model=JobResponse)
def change_job_status(
    job_id: str,
    status_update: JobStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    """Move a job to any status its lifecycle allows from the current one."""
    service = JobService(db)
    ensure_can_manage(service.get_job(job_id), current_user)
    return service.change_status(job_id, status_update.status)


# ✅ 11. APPLICATIONS FOR A JOB (HR)
@router.get("/{job_id}/applications", response_model=ApplicationListResponse)
def job_applications(
    job_id: str,
    status: Optional[ApplicationStatus] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    JobService(db).get_job(job_id)
    applications, total = JobApplicationService(db).get_applications_by_job(
        job_id, status=status, limit=limit, offset=offset
    )
    return {"applications": applications, "total": total}


# ✅ 12. APPLICATION STATISTICS FOR A JOB (HR)
@router.get("/{job_id}/applications/statistics")
def job_application_statistics(
    job_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    JobService(db).get_job(job_id)
    return JobApplicationService(db).get_application_statistics(job_id=job_id)
