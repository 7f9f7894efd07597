from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from hiretrack.config import settings
from hiretrack.database import get_db
from hiretrack.models.job import Job
from hiretrack.models.user import HR_MANAGER_ROLES, User
from hiretrack.utils.errors import AuthenticationError, ForbiddenError

# Missing credentials are reported as 401 by get_current_user
security = HTTPBearer(auto_error=False)


def create_access_token(user: User, expires_minutes: Optional[int] = None) -> str:
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode = {
        "sub": user.id,
        "role": user.role,
        "exp": datetime.utcnow() + timedelta(minutes=minutes),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

    if not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token")
    return payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    payload = decode_access_token(credentials.credentials)
    user = db.get(User, payload["sub"])
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user


def require_roles(*roles):
    """Dependency factory: the current user must hold one of the given roles."""
    allowed = frozenset(getattr(role, "value", role) for role in roles)

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return checker


def ensure_can_manage(job: Job, user: User) -> None:
    """Recruiters may only touch jobs they created; managers may touch any."""
    if user.role in HR_MANAGER_ROLES:
        return
    if job.created_by_id != user.id:
        raise ForbiddenError("You can only manage jobs you created")
