from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from hiretrack.models.user import UserRole

# Roles an anonymous caller may pick at signup
SIGNUP_ROLES = frozenset({UserRole.APPLICANT, UserRole.HR_ADMIN})


# 1. For Signup (Input)
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: Optional[str] = Field(None, alias="fullName")
    role: UserRole = UserRole.APPLICANT

    class Config:
        populate_by_name = True

    @field_validator("role")
    @classmethod
    def check_signup_role(cls, value):
        if value not in SIGNUP_ROLES:
            allowed = ", ".join(sorted(role.value for role in SIGNUP_ROLES))
            raise ValueError(f"role must be one of: {allowed}")
        return value


# 2. For Login (Input)
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# 3. For Responses (Output)
class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# 4. Token exchange
class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken", min_length=1)

    class Config:
        populate_by_name = True


class TokenPair(BaseModel):
    token: str
    refresh_token: str = Field(..., alias="refreshToken")

    class Config:
        populate_by_name = True


class AuthResponse(TokenPair):
    user: UserResponse
