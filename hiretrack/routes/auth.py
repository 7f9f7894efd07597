# ========================================
# hiretrack/routes/auth.py
# ========================================

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hiretrack.database import get_db
from hiretrack.models.user import User
from hiretrack.schemas.user import AuthResponse, RefreshRequest, TokenPair, UserCreate, UserLogin, UserResponse
from hiretrack.services.auth_service import AuthService
from hiretrack.utils.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=token,
        refresh_token=user.refresh_token,
    )


# ===========================
# PUBLIC ENDPOINTS
# ===========================

# ✅ 1. SIGNUP
@router.post("/signup", response_model=AuthResponse)
def signup(payload: UserCreate, db: Session = Depends(get_db)):
    """Create an account and return tokens for it."""
    user, token = AuthService(db).signup(
        payload.email, payload.password, full_name=payload.full_name, role=payload.role
    )
    return _auth_response(user, token)


# ✅ 2. LOGIN
@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login and get a fresh access/refresh token pair."""
    user, token = AuthService(db).login(credentials.email, credentials.password)
    return _auth_response(user, token)


# ✅ 3. REFRESH
@router.post("/refresh", response_model=TokenPair)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new pair. The old refresh token stops working."""
    user, token = AuthService(db).refresh(payload.refresh_token)
    return TokenPair(token=token, refresh_token=user.refresh_token)


# ===========================
# AUTHENTICATED USER ENDPOINTS
# ===========================

# ✅ 4. WHO AM I
@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
