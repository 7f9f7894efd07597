import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from hiretrack.models.job import OPEN_STATES, Job, JobStatus
from hiretrack.models.user import User
from hiretrack.services.lifecycle import JOB_LIFECYCLE
from hiretrack.utils.errors import NotFoundError, ValidationError
from hiretrack.utils.values import enum_value

logger = logging.getLogger(__name__)

# Fields that must be non-blank before a job can be published
PUBLISH_REQUIRED_FIELDS = ("title", "description", "department", "location")

# Fields the generic update may touch; status only moves through transitions
UPDATABLE_FIELDS = frozenset({
    "title",
    "description",
    "requirements",
    "benefits",
    "department",
    "location",
    "type",
    "salary_min",
    "salary_max",
    "experience_level",
    "skills",
    "application_deadline",
})


class JobService:
    def __init__(self, db: Session):
        self.db = db

    def create_job(self, job_data: Dict[str, Any], created_by_id: str) -> Job:
        if self.db.get(User, created_by_id) is None:
            raise NotFoundError("Creator user not found")

        data = {k: enum_value(v) for k, v in job_data.items() if k in UPDATABLE_FIELDS}
        job = Job(**data, created_by_id=created_by_id, status=JobStatus.DRAFT.value)
        self.db.add(job)
        self.db.commit()

        logger.info("Job %s created in draft by %s", job.id, created_by_id)
        return job

    def get_job(self, job_id: str) -> Job:
        job = self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    def list_jobs(
        self,
        status: Optional[str] = None,
        job_type: Optional[str] = None,
        department: Optional[str] = None,
        location: Optional[str] = None,
        experience_level: Optional[str] = None,
        open_only: bool = False,
    ) -> List[Job]:
        query = self.db.query(Job)

        if status:
            query = query.filter(Job.status == enum_value(status))
        elif open_only:
            query = query.filter(Job.status.in_(OPEN_STATES))

        if job_type:
            query = query.filter(Job.type == enum_value(job_type))
        if department:
            query = query.filter(Job.department == department)
        if location:
            query = query.filter(Job.location.ilike(f"%{location}%"))
        if experience_level:
            query = query.filter(Job.experience_level == enum_value(experience_level))

        return query.order_by(Job.created_at.desc()).all()

    def search_jobs(self, term: str) -> List[Job]:
        """Search published jobs by title, description, department or location."""
        pattern = f"%{term}%"
        return (
            self.db.query(Job)
            .filter(Job.status == JobStatus.PUBLISHED.value)
            .filter(
                or_(
                    Job.title.ilike(pattern),
                    Job.description.ilike(pattern),
                    Job.department.ilike(pattern),
                    Job.location.ilike(pattern),
                )
            )
            .order_by(Job.published_at.desc())
            .all()
        )

    def update_job(self, job_id: str, updates: Dict[str, Any]) -> Job:
        job = self.get_job(job_id)

        if "status" in updates:
            raise ValidationError("Job status cannot be changed through update; use publish, close or the status endpoint")

        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown job fields: {', '.join(sorted(unknown))}")
        if not updates:
            raise ValidationError("No fields to update")

        for field, value in updates.items():
            setattr(job, field, enum_value(value))
        self.db.commit()
        return job

    def delete_job(self, job_id: str) -> None:
        job = self.get_job(job_id)
        self.db.delete(job)
        self.db.commit()
        logger.info("Job %s deleted", job_id)

    def publish_job(self, job_id: str) -> Job:
        job = self.get_job(job_id)

        missing = [field for field in PUBLISH_REQUIRED_FIELDS if not (getattr(job, field) or "").strip()]
        if missing:
            raise ValidationError(
                f"Job cannot be published without: {', '.join(missing)}",
                missing_fields=missing,
            )

        return self._transition(job, JobStatus.PUBLISHED)

    def close_job(self, job_id: str) -> Job:
        return self._transition(self.get_job(job_id), JobStatus.CLOSED)

    def change_status(self, job_id: str, status: str) -> Job:
        if enum_value(status) == JobStatus.PUBLISHED.value:
            return self.publish_job(job_id)
        return self._transition(self.get_job(job_id), status)

    def get_statistics(self) -> Dict[str, int]:
        counts = dict(
            self.db.query(Job.status, func.count(Job.id)).group_by(Job.status).all()
        )
        stats = {status.value: counts.get(status.value, 0) for status in JobStatus}
        stats["total"] = sum(counts.values())
        return stats

    def _transition(self, job: Job, target) -> Job:
        previous = job.status
        job.status = JOB_LIFECYCLE.ensure(job.status, target)
        now = datetime.utcnow()

        # published_at is set iff status in {published, active, closed}; closed_at iff closed
        if job.status == JobStatus.PUBLISHED.value:
            job.published_at = now
            job.closed_at = None
        elif job.status == JobStatus.CLOSED.value:
            job.closed_at = now
        elif job.status in (JobStatus.ARCHIVED.value, JobStatus.CANCELLED.value):
            job.published_at = None
            job.closed_at = None

        self.db.commit()
        logger.info("Job %s moved %s -> %s", job.id, previous, job.status)
        return job
