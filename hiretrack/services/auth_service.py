import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hiretrack.models.user import User, UserRole
from hiretrack.utils.auth import create_access_token
from hiretrack.utils.errors import AuthenticationError, ConflictError
from hiretrack.utils.security import get_password_hash, new_refresh_token, verify_password
from hiretrack.utils.values import enum_value

logger = logging.getLogger(__name__)


class AuthService:
    """Sign-up, login and refresh. Every successful call rotates the refresh token."""

    def __init__(self, db: Session):
        self.db = db

    def signup(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Tuple[User, str]:
        email = email.lower()
        if self.db.query(User).filter(User.email == email).first() is not None:
            raise ConflictError("User already exists")

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            full_name=full_name,
            role=enum_value(role) or UserRole.APPLICANT.value,
            refresh_token=new_refresh_token(),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("User already exists")

        logger.info("User %s signed up as %s", user.id, user.role)
        return user, create_access_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = self.db.query(User).filter(User.email == email.lower()).first()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Invalid credentials")

        user.refresh_token = new_refresh_token()
        self.db.commit()
        return user, create_access_token(user)

    def refresh(self, refresh_token: str) -> Tuple[User, str]:
        user = self.db.query(User).filter(User.refresh_token == refresh_token).first()
        if user is None:
            raise AuthenticationError("Invalid refresh token")

        user.refresh_token = new_refresh_token()
        self.db.commit()
        return user, create_access_token(user)
