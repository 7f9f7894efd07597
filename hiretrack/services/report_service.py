"""
Read-only aggregates over jobs, applications, documents and interviews.

Nothing here is cached: every call recomputes from the current rows.
Date buckets are built in Python so the same code runs on SQLite and
PostgreSQL.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session, joinedload, selectinload

from hiretrack.models.application import ApplicationStatus, JobApplication
from hiretrack.models.document import Document, DocumentStatus
from hiretrack.models.interview import Interview
from hiretrack.models.job import OPEN_STATES, Job
from hiretrack.services.interview_service import InterviewService
from hiretrack.utils.errors import ValidationError
from hiretrack.utils.export import export_applications_to_csv, export_jobs_to_csv
from hiretrack.utils.values import naive_utc

logger = logging.getLogger(__name__)

EXPORT_KINDS = ("applications", "jobs")
TREND_PERIODS = ("daily", "weekly", "monthly")

# Six 30-day months
DASHBOARD_WINDOW = timedelta(days=6 * 30)


def bucket_key(moment: datetime, period: str) -> str:
    if period == "daily":
        return moment.strftime("%Y-%m-%d")
    if period == "weekly":
        iso_year, iso_week, _ = moment.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    return moment.strftime("%Y-%m")


def _bucketed(moments, period: str) -> List[Dict[str, Any]]:
    counts = defaultdict(int)
    for moment in moments:
        if moment:
            counts[bucket_key(moment, period)] += 1
    return [{"date": key, "count": value} for key, value in sorted(counts.items())]


class ReportService:
    def __init__(self, db: Session):
        self.db = db

    def _count(self, model, *criteria) -> int:
        return self.db.query(func.count(model.id)).filter(*criteria).scalar()

    def _applications_in_range(self, start: Optional[datetime], end: Optional[datetime]):
        start, end = naive_utc(start), naive_utc(end)
        query = self.db.query(JobApplication)
        if start:
            query = query.filter(JobApplication.created_at >= start)
        if end:
            query = query.filter(JobApplication.created_at <= end)
        return query

    def get_dashboard_analytics(self) -> Dict[str, Any]:
        since = datetime.utcnow() - DASHBOARD_WINDOW
        recent = self.db.query(JobApplication.created_at).filter(JobApplication.created_at >= since)
        monthly = [
            {"month": row["date"], "count": row["count"]}
            for row in _bucketed((created_at for (created_at,) in recent), "monthly")
        ]

        by_status = (
            self.db.query(JobApplication.status, func.count(JobApplication.id))
            .group_by(JobApplication.status)
            .all()
        )

        return {
            "total_jobs": self._count(Job),
            "active_jobs": self._count(Job, Job.status.in_(OPEN_STATES)),
            "total_applications": self._count(JobApplication),
            "pending_applications": self._count(
                JobApplication, JobApplication.status == ApplicationStatus.SUBMITTED.value
            ),
            "total_documents": self._count(Document),
            "pending_documents": self._count(Document, Document.status == DocumentStatus.PENDING.value),
            "total_interviews": self._count(Interview),
            "upcoming_interviews": InterviewService(self.db).count_upcoming(),
            "monthly_applications": monthly,
            "applications_by_status": [{"status": status, "count": count} for status, count in by_status],
        }

    def get_application_stats(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Dict[str, Any]:
        rows = self._applications_in_range(start, end).with_entities(
            JobApplication.status, JobApplication.created_at
        ).all()

        by_status = defaultdict(int)
        for status, _ in rows:
            by_status[status] += 1

        return {
            "total_applications": len(rows),
            "new_applications": by_status[ApplicationStatus.SUBMITTED.value],
            "applications_in_review": by_status[ApplicationStatus.UNDER_REVIEW.value],
            "accepted_applications": by_status[ApplicationStatus.ACCEPTED.value],
            "rejected_applications": by_status[ApplicationStatus.REJECTED.value],
            "daily_applications": _bucketed((created_at for _, created_at in rows), "daily"),
        }

    def get_application_trend(self, period: str = "monthly", months: int = 6) -> Dict[str, Any]:
        if period not in TREND_PERIODS:
            raise ValidationError(f"Invalid period '{period}'. Use one of: {', '.join(TREND_PERIODS)}")

        since = datetime.utcnow() - timedelta(days=max(months, 1) * 30)
        created = self.db.query(JobApplication.created_at).filter(JobApplication.created_at >= since)
        data = _bucketed((created_at for (created_at,) in created), period)

        return {"period": period, "data": data, "total": sum(item["count"] for item in data)}

    def get_hiring_pipeline(self) -> Dict[str, int]:
        counts = dict(
            self.db.query(JobApplication.status, func.count(JobApplication.id))
            .group_by(JobApplication.status)
            .all()
        )
        stages = (
            ApplicationStatus.SUBMITTED,
            ApplicationStatus.UNDER_REVIEW,
            ApplicationStatus.INTERVIEWING,
            ApplicationStatus.OFFERED,
            ApplicationStatus.ACCEPTED,
        )
        return {stage.value: counts.get(stage.value, 0) for stage in stages}

    def get_document_stats(self) -> Dict[str, Any]:
        by_status = dict(
            self.db.query(Document.status, func.count(Document.id)).group_by(Document.status).all()
        )
        by_type = self.db.query(Document.type, func.count(Document.id)).group_by(Document.type).all()

        return {
            "total": sum(by_status.values()),
            "pending": by_status.get(DocumentStatus.PENDING.value, 0),
            "approved": by_status.get(DocumentStatus.APPROVED.value, 0),
            "rejected": by_status.get(DocumentStatus.REJECTED.value, 0),
            "by_type": [{"type": doc_type, "count": count} for doc_type, count in by_type],
        }

    def get_department_stats(self) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(
                Job.department,
                func.count(distinct(Job.id)),
                func.count(distinct(JobApplication.id)),
            )
            .outerjoin(JobApplication, JobApplication.job_id == Job.id)
            .group_by(Job.department)
            .order_by(Job.department)
            .all()
        )
        return [
            {"department": department or "Unassigned", "jobs_count": jobs, "applications_count": applications}
            for department, jobs, applications in rows
        ]

    def export_data(
        self, kind: str, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> str:
        if kind == "applications":
            applications = (
                self._applications_in_range(start, end)
                .options(joinedload(JobApplication.applicant), joinedload(JobApplication.job))
                .order_by(JobApplication.created_at.asc())
                .all()
            )
            logger.info("Exporting %s applications", len(applications))
            return export_applications_to_csv(applications)

        if kind == "jobs":
            jobs = (
                self.db.query(Job)
                .options(joinedload(Job.created_by), selectinload(Job.applications))
                .order_by(Job.created_at.asc())
                .all()
            )
            logger.info("Exporting %s jobs", len(jobs))
            return export_jobs_to_csv(jobs)

        raise ValidationError(f"Invalid export type '{kind}'. Use one of: {', '.join(EXPORT_KINDS)}")
