"""
Tests for InterviewService.
"""

from datetime import datetime, timedelta

import pytest

from hiretrack.models.notification import Notification
from hiretrack.services.interview_service import InterviewService
from hiretrack.utils.errors import ForbiddenError, InvalidTransitionError, NotFoundError, ValidationError


@pytest.fixture
def application(hr_manager, applicant, make_job, make_application):
    return make_application(make_job(hr_manager, title="QA Engineer"), applicant)


class TestSchedule:
    """Tests for scheduling."""

    def test_defaults(self, db, application, interviewer, hr_manager, applicant, make_interview):
        """Should default the title and type and notify the applicant."""
        interview = make_interview(application, interviewer, hr_manager)

        assert interview.status == "scheduled"
        assert interview.title == "Interview for QA Engineer"
        assert interview.type == "video"
        assert db.query(Notification).filter_by(user_id=applicant.id, type="interview_scheduled").count() == 1

    def test_missing_application(self, db, interviewer, hr_manager):
        """Should report an unknown application as not found."""
        with pytest.raises(NotFoundError):
            InterviewService(db).schedule_interview(
                "missing", interviewer.id, hr_manager.id, datetime.utcnow() + timedelta(days=1)
            )

    def test_missing_interviewer(self, db, application, hr_manager):
        """Should report an unknown interviewer as not found."""
        with pytest.raises(NotFoundError):
            InterviewService(db).schedule_interview(
                application.id, "missing", hr_manager.id, datetime.utcnow() + timedelta(days=1)
            )

    def test_end_before_start(self, db, application, interviewer, hr_manager):
        """Should refuse an end time before the start."""
        start = datetime.utcnow() + timedelta(days=1)
        with pytest.raises(ValidationError):
            InterviewService(db).schedule_interview(
                application.id, interviewer.id, hr_manager.id, start, end_time=start - timedelta(hours=1)
            )


class TestFeedback:
    """Tests for interviewer feedback."""

    def test_assigned_interviewer_completes(self, db, application, interviewer, hr_manager, make_interview):
        """Should store feedback, set the score and complete the interview."""
        interview = make_interview(application, interviewer, hr_manager)

        done = InterviewService(db).add_feedback(
            interview.id, interviewer.id, rating=4, notes="Solid", recommendation="hire"
        )

        assert done.status == "completed"
        assert done.score == 4
        assert done.feedback == {"notes": "Solid", "rating": 4, "recommendation": "hire"}

    def test_other_user_forbidden(self, db, application, interviewer, hr_manager, make_interview):
        """Should refuse feedback from anyone but the assigned interviewer."""
        interview = make_interview(application, interviewer, hr_manager)

        with pytest.raises(ForbiddenError):
            InterviewService(db).add_feedback(interview.id, hr_manager.id, rating=4)

        assert InterviewService(db).get_interview(interview.id).status == "scheduled"


class TestChanges:
    """Tests for updates, cancellation and no-shows."""

    def test_moving_time_reschedules(self, db, application, interviewer, hr_manager, make_interview):
        """Should mark a scheduled interview as rescheduled when its time moves."""
        interview = make_interview(application, interviewer, hr_manager)
        new_time = interview.scheduled_at + timedelta(days=1)

        updated = InterviewService(db).update_interview(interview.id, {"scheduled_at": new_time})

        assert updated.status == "rescheduled"
        assert updated.scheduled_at == new_time

    def test_other_fields_keep_status(self, db, application, interviewer, hr_manager, make_interview):
        """Should leave the status alone for non-time changes."""
        interview = make_interview(application, interviewer, hr_manager)

        updated = InterviewService(db).update_interview(interview.id, {"location": "Room 4"})

        assert updated.status == "scheduled"
        assert updated.location == "Room 4"

    def test_update_rejects_status(self, db, application, interviewer, hr_manager, make_interview):
        """Should not change status through a plain update."""
        interview = make_interview(application, interviewer, hr_manager)
        with pytest.raises(ValidationError):
            InterviewService(db).update_interview(interview.id, {"status": "completed"})

    def test_cancel_appends_reason(self, db, application, interviewer, hr_manager, make_interview):
        """Should cancel and append the reason to existing notes."""
        interview = make_interview(application, interviewer, hr_manager, notes="Bring laptop")

        cancelled = InterviewService(db).cancel_interview(interview.id, reason="Candidate unavailable")

        assert cancelled.status == "cancelled"
        assert cancelled.notes == "Bring laptop\nCancelled: Candidate unavailable"

    def test_cancel_without_reason(self, db, application, interviewer, hr_manager, make_interview):
        """Should write a bare marker when no reason is given."""
        interview = make_interview(application, interviewer, hr_manager)
        assert InterviewService(db).cancel_interview(interview.id).notes == "Cancelled"

    def test_no_show_is_final(self, db, application, interviewer, hr_manager, make_interview):
        """Should refuse feedback after a no-show."""
        interview = make_interview(application, interviewer, hr_manager)
        service = InterviewService(db)
        service.mark_no_show(interview.id)

        with pytest.raises(InvalidTransitionError):
            service.add_feedback(interview.id, interviewer.id, rating=3)


class TestUpcoming:
    """Tests for the upcoming filter."""

    def test_only_future_scheduled(self, db, application, interviewer, hr_manager, make_interview):
        """Should include future scheduled interviews and nothing else."""
        service = InterviewService(db)
        future = make_interview(application, interviewer, hr_manager, in_days=2)
        past = make_interview(application, interviewer, hr_manager, in_days=-2)
        moved = make_interview(application, interviewer, hr_manager, in_days=4)
        service.update_interview(moved.id, {"scheduled_at": moved.scheduled_at + timedelta(days=1)})
        done = make_interview(application, interviewer, hr_manager, in_days=5)
        service.add_feedback(done.id, interviewer.id, rating=5)

        upcoming_ids = [interview.id for interview in service.get_upcoming_interviews()]

        assert upcoming_ids == [future.id]
        assert past.id not in upcoming_ids
        assert service.count_upcoming() == 1

    def test_per_interviewer_and_applicant(
        self, db, application, interviewer, hr_manager, applicant, make_user, make_interview
    ):
        """Should scope upcoming interviews to the interviewer or the applicant."""
        other_interviewer = make_user("interviewer")
        mine = make_interview(application, interviewer, hr_manager)
        make_interview(application, other_interviewer, hr_manager)
        service = InterviewService(db)

        assert [i.id for i in service.get_upcoming_for_interviewer(interviewer.id)] == [mine.id]
        assert len(service.get_upcoming_for_applicant(applicant.id)) == 2
        assert service.get_upcoming_for_applicant(hr_manager.id) == []

    def test_statistics_and_access(
        self, db, application, interviewer, hr_manager, applicant, make_user, make_interview
    ):
        """Should count per status and let only involved users or HR view."""
        interview = make_interview(application, interviewer, hr_manager)
        service = InterviewService(db)
        service.cancel_interview(make_interview(application, interviewer, hr_manager).id)

        stats = service.get_interview_statistics()
        assert stats["total"] == 2
        assert stats["scheduled"] == 1
        assert stats["cancelled"] == 1
        assert stats["upcoming"] == 1

        assert InterviewService.can_view(interview, interviewer)
        assert InterviewService.can_view(interview, applicant)
        assert InterviewService.can_view(interview, hr_manager)
        assert not InterviewService.can_view(interview, make_user())
