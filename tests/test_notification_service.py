"""
Tests for NotificationService.
"""

import pytest

from hiretrack.services.notification_service import NotificationService
from hiretrack.utils.errors import NotFoundError


def _send(db, user, count=1, **fields):
    service = NotificationService(db)
    return [
        service.create_notification(user.id, f"Title {i}", f"Message {i}", **fields)
        for i in range(count)
    ]


class TestMailbox:
    """Tests for reading and paging a user's notifications."""

    def test_create_defaults(self, db, applicant):
        """Should default type and priority and start unread."""
        notification = _send(db, applicant, metadata={"job": "x"})[0]

        assert notification.type == "system_announcement"
        assert notification.priority == "medium"
        assert notification.is_read is False
        assert notification.extra == {"job": "x"}

    def test_unknown_user(self, db):
        """Should refuse to notify a user that does not exist."""
        with pytest.raises(NotFoundError):
            NotificationService(db).create_notification("missing", "Hi", "There")

    def test_pagination(self, db, applicant):
        """Should page results and report the page count."""
        _send(db, applicant, count=5)

        page = NotificationService(db).get_user_notifications(applicant.id, page=2, limit=2)

        assert page["total"] == 5
        assert page["page"] == 2
        assert page["total_pages"] == 3
        assert len(page["notifications"]) == 2

    def test_unread_only(self, db, applicant):
        """Should filter out read notifications on request."""
        first, _ = _send(db, applicant, count=2)
        service = NotificationService(db)
        service.mark_as_read(first.id, applicant.id)

        page = service.get_user_notifications(applicant.id, unread_only=True)
        assert page["total"] == 1
        assert service.get_unread_count(applicant.id) == 1


class TestOwnership:
    """Tests for per-user scoping."""

    def test_mark_all_read_is_scoped(self, db, applicant, make_user):
        """Should only mark the caller's notifications read."""
        other = make_user()
        _send(db, applicant, count=3)
        _send(db, other, count=2)
        service = NotificationService(db)

        assert service.mark_all_as_read(applicant.id) == 3
        assert service.get_unread_count(applicant.id) == 0
        assert service.get_unread_count(other.id) == 2

    def test_other_users_notification_is_not_found(self, db, applicant, make_user):
        """Should hide another user's notification behind not found."""
        other = make_user()
        notification = _send(db, other)[0]
        service = NotificationService(db)

        with pytest.raises(NotFoundError):
            service.mark_as_read(notification.id, applicant.id)
        with pytest.raises(NotFoundError):
            service.delete_notification(notification.id, applicant.id)

        assert service.get_unread_count(other.id) == 1

    def test_delete_own(self, db, applicant):
        """Should delete the caller's notification."""
        notification = _send(db, applicant)[0]
        service = NotificationService(db)
        service.delete_notification(notification.id, applicant.id)

        assert service.get_user_notifications(applicant.id)["total"] == 0
