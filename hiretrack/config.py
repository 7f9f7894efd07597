# hiretrack/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(val: str | None, default=False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _as_list(val: str | None) -> list[str]:
    return [o.strip() for o in (val or "").split(",") if o.strip()]


class Settings:
    # --- Core ---
    APP_NAME = "HireTrack HR API"
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
    APP_ENV = os.getenv("APP_ENV", "development")

    # --- Database ---
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./hiretrack.db")
    DATABASE_ECHO = _as_bool(os.getenv("DATABASE_ECHO", "0"))

    # --- Tokens ---
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))

    # --- HTTP ---
    ALLOWED_ORIGINS = _as_list(os.getenv("ALLOWED_ORIGINS", ""))
    REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

    # --- Logging ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_FILENAME = os.getenv("LOG_FILENAME", "hiretrack.log")

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() == "development"


settings = Settings()
