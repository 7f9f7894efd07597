import uuid

from passlib.context import CryptContext

# Password hashing (Argon2)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password, hashed_password):
    """Checks if the typed password matches the saved hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def new_refresh_token() -> str:
    """Opaque refresh token; only its equality with the stored value matters."""
    return str(uuid.uuid4())
