"""
Tests for JobApplicationService.
"""

from datetime import datetime, timedelta, timezone

import pytest

from hiretrack.models.application import JobApplication
from hiretrack.models.notification import Notification
from hiretrack.services.application_service import JobApplicationService
from hiretrack.services.job_service import JobService
from hiretrack.utils.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)


class TestCreateApplication:
    """Tests for submitting applications."""

    def test_apply_once(self, db, hr_manager, applicant, make_job):
        """Should create a submitted application with submitted_at stamped."""
        job = make_job(hr_manager)

        application = JobApplicationService(db).create_application(
            job.id, applicant.id, cover_letter="Hello", answers={"notice": "2 weeks"}
        )

        assert application.status == "submitted"
        assert application.submitted_at is not None
        assert application.answers == {"notice": "2 weeks"}

    def test_apply_twice_conflicts(self, db, hr_manager, applicant, make_job):
        """Should reject a second application for the same job and applicant."""
        job = make_job(hr_manager)
        service = JobApplicationService(db)
        service.create_application(job.id, applicant.id)

        with pytest.raises(ConflictError):
            service.create_application(job.id, applicant.id)

        assert db.query(JobApplication).count() == 1

    def test_unique_constraint_maps_to_conflict(self, db, hr_manager, applicant, make_job, monkeypatch):
        """Should turn a unique-constraint failure into a conflict when the pre-check misses it."""
        job = make_job(hr_manager)
        service = JobApplicationService(db)
        service.create_application(job.id, applicant.id)

        monkeypatch.setattr(service, "_find", lambda job_id, applicant_id: None)
        with pytest.raises(ConflictError):
            service.create_application(job.id, applicant.id)

        assert db.query(JobApplication).count() == 1

    def test_missing_job(self, db, applicant):
        """Should report an unknown job as not found."""
        with pytest.raises(NotFoundError):
            JobApplicationService(db).create_application("nope", applicant.id)

    def test_missing_applicant(self, db, hr_manager, make_job):
        """Should report an unknown applicant as not found."""
        job = make_job(hr_manager)
        with pytest.raises(NotFoundError):
            JobApplicationService(db).create_application(job.id, "nobody")

    def test_job_must_be_open(self, db, hr_manager, applicant, make_job):
        """Should refuse applications to draft or closed jobs."""
        draft = make_job(hr_manager, publish=False)
        closed = make_job(hr_manager)
        JobService(db).close_job(closed.id)

        service = JobApplicationService(db)
        for job in (draft, closed):
            with pytest.raises(ValidationError):
                service.create_application(job.id, applicant.id)

    def test_notifies_applicant_and_job_owner(self, db, hr_manager, applicant, make_job):
        """Should leave one notification for the applicant and one for the job's creator."""
        job = make_job(hr_manager)
        JobApplicationService(db).create_application(job.id, applicant.id)

        assert db.query(Notification).filter_by(user_id=applicant.id).count() == 1
        assert db.query(Notification).filter_by(user_id=hr_manager.id).count() == 1


class TestStatusUpdates:
    """Tests for moving applications through their lifecycle."""

    def test_reviewed_stamps_reviewer(self, db, hr_manager, applicant, make_job, make_application):
        """Should record reviewer and time when entering reviewed."""
        application = make_application(make_job(hr_manager), applicant)

        updated = JobApplicationService(db).update_application_status(
            application.id, "reviewed", reviewer_id=hr_manager.id
        )

        assert updated.status == "reviewed"
        assert updated.reviewed_by_id == hr_manager.id
        assert updated.reviewed_at is not None

    def test_illegal_transition(self, db, hr_manager, applicant, make_job, make_application):
        """Should refuse to jump from submitted to hired."""
        application = make_application(make_job(hr_manager), applicant)

        with pytest.raises(InvalidTransitionError):
            JobApplicationService(db).update_application_status(application.id, "hired")

    def test_same_status_keeps_notes(self, db, hr_manager, applicant, make_job, make_application):
        """Should store notes without a transition when the status is unchanged."""
        application = make_application(make_job(hr_manager), applicant)

        updated = JobApplicationService(db).update_application_status(
            application.id, "submitted", notes="Strong CV"
        )

        assert updated.status == "submitted"
        assert updated.notes == "Strong CV"

    def test_generic_update_cannot_withdraw(self, db, hr_manager, applicant, make_job, make_application):
        """Should keep withdrawal out of the generic status update."""
        application = make_application(make_job(hr_manager), applicant)

        with pytest.raises(ValidationError):
            JobApplicationService(db).update_application_status(application.id, "withdrawn")

    def test_status_change_notifies_applicant(self, db, hr_manager, applicant, make_job, make_application):
        """Should notify the applicant on every status change."""
        application = make_application(make_job(hr_manager), applicant)
        before = db.query(Notification).filter_by(user_id=applicant.id).count()

        JobApplicationService(db).update_application_status(application.id, "shortlisted")

        assert db.query(Notification).filter_by(user_id=applicant.id).count() == before + 1


class TestWithdraw:
    """Tests for applicant withdrawal."""

    def test_owner_can_withdraw(self, db, hr_manager, applicant, make_job, make_application):
        """Should move to withdrawn and stamp withdrawn_at."""
        application = make_application(make_job(hr_manager), applicant)

        withdrawn = JobApplicationService(db).withdraw_application(application.id, applicant.id)

        assert withdrawn.status == "withdrawn"
        assert withdrawn.withdrawn_at is not None

    def test_other_user_forbidden(self, db, hr_manager, applicant, make_user, make_job, make_application):
        """Should refuse withdrawal by anyone but the applicant."""
        application = make_application(make_job(hr_manager), applicant)
        stranger = make_user()

        with pytest.raises(ForbiddenError):
            JobApplicationService(db).withdraw_application(application.id, stranger.id)

        assert JobApplicationService(db).get_application(application.id).status == "submitted"

    def test_withdraw_twice(self, db, hr_manager, applicant, make_job, make_application):
        """Should not withdraw an already withdrawn application."""
        application = make_application(make_job(hr_manager), applicant)
        service = JobApplicationService(db)
        service.withdraw_application(application.id, applicant.id)

        with pytest.raises(InvalidTransitionError):
            service.withdraw_application(application.id, applicant.id)


class TestBulkUpdate:
    """Tests for all-or-nothing bulk updates."""

    def test_updates_all(self, db, hr_manager, make_user, make_job, make_application):
        """Should move every application and commit once."""
        job = make_job(hr_manager)
        ids = [make_application(job, make_user()).id for _ in range(3)]

        updated = JobApplicationService(db).bulk_update_applications(ids, status="under_review", notes="batch")

        assert {application.status for application in updated} == {"under_review"}
        assert {application.notes for application in updated} == {"batch"}

    def test_missing_id_writes_nothing(self, db, hr_manager, make_user, make_job, make_application):
        """Should fail without touching any row when an id is unknown."""
        job = make_job(hr_manager)
        application = make_application(job, make_user())

        with pytest.raises(NotFoundError) as exc_info:
            JobApplicationService(db).bulk_update_applications([application.id, "missing"], status="shortlisted")

        assert exc_info.value.extra["missing_ids"] == ["missing"]
        db.expire_all()
        assert db.get(JobApplication, application.id).status == "submitted"

    def test_illegal_transition_rolls_back(self, db, hr_manager, make_user, make_job, make_application):
        """Should roll back every row when one transition is illegal."""
        job = make_job(hr_manager)
        service = JobApplicationService(db)
        first = make_application(job, make_user())
        second = make_application(job, make_user())
        service.update_application_status(second.id, "rejected")

        with pytest.raises(InvalidTransitionError):
            service.bulk_update_applications([first.id, second.id], status="shortlisted")

        db.expire_all()
        assert db.get(JobApplication, first.id).status == "submitted"
        assert db.get(JobApplication, second.id).status == "rejected"

    def test_requires_something_to_do(self, db):
        """Should reject an empty id list or an empty change."""
        service = JobApplicationService(db)
        with pytest.raises(ValidationError):
            service.bulk_update_applications([], status="reviewed")
        with pytest.raises(ValidationError):
            service.bulk_update_applications(["x"])


class TestQueries:
    """Tests for listings, search and statistics."""

    def test_by_job_with_pagination(self, db, hr_manager, make_user, make_job, make_application):
        """Should return a page of applications with the full total."""
        job = make_job(hr_manager)
        for _ in range(5):
            make_application(job, make_user())

        page, total = JobApplicationService(db).get_applications_by_job(job.id, limit=2, offset=1)

        assert total == 5
        assert len(page) == 2

    def test_by_applicant_newest_first(self, db, hr_manager, applicant, make_job, make_application):
        """Should order the applicant's applications newest first."""
        older = make_application(make_job(hr_manager, title="First"), applicant)
        newer = make_application(make_job(hr_manager, title="Second"), applicant)
        older.submitted_at = datetime.utcnow() - timedelta(days=2)
        db.commit()

        results = JobApplicationService(db).get_applications_by_applicant(applicant.id)
        assert [application.id for application in results] == [newer.id, older.id]

    def test_search_by_applicant_and_title(self, db, hr_manager, make_user, make_job, make_application):
        """Should match applicant name or email and job title."""
        data_job = make_job(hr_manager, title="Data Analyst")
        web_job = make_job(hr_manager, title="Web Developer")
        ada = make_user(full_name="Ada Lovelace")
        make_application(data_job, ada)
        make_application(web_job, make_user(full_name="Grace Hopper"))

        service = JobApplicationService(db)
        assert [a.applicant_id for a in service.search_applications(search="lovelace")] == [ada.id]
        assert len(service.search_applications(search="developer")) == 1
        assert len(service.search_applications(status="submitted", job_id=data_job.id)) == 1

    def test_statistics(self, db, hr_manager, make_user, make_job, make_application):
        """Should count every status, optionally for one job."""
        job = make_job(hr_manager)
        other = make_job(hr_manager)
        service = JobApplicationService(db)
        first = make_application(job, make_user())
        make_application(job, make_user())
        make_application(other, make_user())
        service.update_application_status(first.id, "rejected")

        stats = service.get_application_statistics(job_id=job.id)
        assert stats["total"] == 2
        assert stats["submitted"] == 1
        assert stats["rejected"] == 1
        assert stats["hired"] == 0
        assert service.get_application_statistics()["total"] == 3

    def test_search_date_range_with_offset(self, db, hr_manager, applicant, make_job, make_application):
        """Should convert offset-bearing search bounds to UTC."""
        application = make_application(make_job(hr_manager), applicant)
        application.submitted_at = datetime(2030, 1, 1, 10, 0)
        db.commit()
        plus_five = timezone(timedelta(hours=5))
        service = JobApplicationService(db)

        assert len(service.search_applications(date_from=datetime(2030, 1, 1, 12, 0, tzinfo=plus_five))) == 1
        assert service.search_applications(date_to=datetime(2030, 1, 1, 12, 0, tzinfo=plus_five)) == []
