import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from hiretrack.database import Base


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    HR_ADMIN = "hr_admin"
    HR_MANAGER = "hr_manager"
    RECRUITER = "recruiter"
    INTERVIEWER = "interviewer"
    APPLICANT = "applicant"


# Roles allowed to run administrative HR operations
HR_ROLES = frozenset({
    UserRole.SUPER_ADMIN.value,
    UserRole.HR_ADMIN.value,
    UserRole.HR_MANAGER.value,
    UserRole.RECRUITER.value,
})

# HR roles that may act on records they do not own
HR_MANAGER_ROLES = frozenset({
    UserRole.SUPER_ADMIN.value,
    UserRole.HR_ADMIN.value,
    UserRole.HR_MANAGER.value,
})

INTERVIEW_SCHEDULER_ROLES = HR_ROLES | {UserRole.INTERVIEWER.value}


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)
    full_name = Column(String(200), nullable=True)
    role = Column(String(30), default=UserRole.APPLICANT.value, nullable=False, index=True)
    refresh_token = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_hr(self) -> bool:
        return self.role in HR_ROLES

    @property
    def is_hr_manager(self) -> bool:
        return self.role in HR_MANAGER_ROLES

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"
