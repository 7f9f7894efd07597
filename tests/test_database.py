"""
Tests for the request-scoped session and its commit deadline.
"""

import time
from types import SimpleNamespace

import pytest

from hiretrack.database import get_db
from hiretrack.models.user import User
from hiretrack.utils.errors import RequestTimeoutError
from hiretrack.utils.security import get_password_hash


def _request(**state):
    return SimpleNamespace(state=SimpleNamespace(**state))


def _user(email):
    return User(email=email, password_hash=get_password_hash("password123"), full_name="Late Writer", role="applicant")


class TestCommitDeadline:
    """Tests for sessions opened under a request deadline."""

    def test_expired_deadline_blocks_commit(self, db):
        """Should refuse to commit once the deadline has passed, leaving nothing stored."""
        sessions = get_db(_request(deadline=time.monotonic() - 1))
        session = next(sessions)
        session.add(_user("late@example.com"))

        with pytest.raises(RequestTimeoutError):
            session.commit()
        session.rollback()
        sessions.close()

        assert db.query(User).filter(User.email == "late@example.com").first() is None

    def test_future_deadline_commits(self, db):
        """Should commit normally before the deadline."""
        sessions = get_db(_request(deadline=time.monotonic() + 60))
        session = next(sessions)
        session.add(_user("early@example.com"))
        session.commit()
        sessions.close()

        assert db.query(User).filter(User.email == "early@example.com").first() is not None

    def test_no_deadline(self, db):
        """Should commit when the request carries no deadline."""
        sessions = get_db(_request())
        session = next(sessions)
        session.add(_user("plain@example.com"))
        session.commit()
        sessions.close()

        assert db.query(User).filter(User.email == "plain@example.com").first() is not None
