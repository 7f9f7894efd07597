"""
Shared fixtures: in-memory SQLite, fresh schema per test, users and tokens.
"""

import os

# Must be set before hiretrack.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = ""
os.environ["APP_ENV"] = "testing"
os.environ["JWT_SECRET"] = "test-secret"

import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from hiretrack.database import Base, SessionLocal, engine
from hiretrack.main import app
from hiretrack.models import application, document, interview, job, notification  # noqa: F401
from hiretrack.models.user import User, UserRole
from hiretrack.services.application_service import JobApplicationService
from hiretrack.services.interview_service import InterviewService
from hiretrack.services.job_service import JobService
from hiretrack.utils.auth import create_access_token
from hiretrack.utils.security import get_password_hash

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.APPLICANT, email=None, full_name=None, password=PASSWORD):
        role = getattr(role, "value", role)
        user = User(
            email=email or f"{role}-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=get_password_hash(password),
            full_name=full_name or role.replace("_", " ").title(),
            role=role,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers


@pytest.fixture
def hr_manager(make_user):
    return make_user(UserRole.HR_MANAGER)


@pytest.fixture
def recruiter(make_user):
    return make_user(UserRole.RECRUITER)


@pytest.fixture
def applicant(make_user):
    return make_user(UserRole.APPLICANT)


@pytest.fixture
def interviewer(make_user):
    return make_user(UserRole.INTERVIEWER)


@pytest.fixture
def make_job(db):
    def _make(creator, publish=True, **fields):
        data = {
            "title": "Backend Engineer",
            "description": "Build and run the HR platform APIs.",
            "department": "Engineering",
            "location": "Remote",
        }
        data.update(fields)
        service = JobService(db)
        job = service.create_job(data, creator.id)
        if publish:
            job = service.publish_job(job.id)
        return job

    return _make


@pytest.fixture
def make_application(db):
    def _make(job, applicant, **fields):
        return JobApplicationService(db).create_application(job.id, applicant.id, **fields)

    return _make


@pytest.fixture
def make_interview(db):
    def _make(application, interviewer, scheduled_by, in_days=3, **fields):
        return InterviewService(db).schedule_interview(
            job_application_id=application.id,
            interviewer_id=interviewer.id,
            scheduled_by_id=scheduled_by.id,
            scheduled_at=datetime.utcnow() + timedelta(days=in_days),
            **fields,
        )

    return _make
