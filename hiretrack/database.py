import logging
import time

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from hiretrack.config import settings
from hiretrack.utils.errors import RequestTimeoutError

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live only as long as their connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_options(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
Base = declarative_base()


def init_db():
    """Create all tables. Model modules must be imported so they register on Base."""
    from hiretrack.models import application, document, interview, job, notification, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database ready (%s)", engine.url.get_backend_name())


def close_db():
    engine.dispose()


def guard_deadline(db, deadline: float):
    """Refuse to commit once the monotonic deadline has passed."""

    @event.listens_for(db, "before_commit")
    def check_deadline(session):
        if time.monotonic() > deadline:
            raise RequestTimeoutError("Request timeout")


def get_db(request: Request):
    """Request-scoped session. Services receive this handle in their constructor."""
    db = SessionLocal()
    deadline = getattr(request.state, "deadline", None)
    if deadline is not None:
        guard_deadline(db, deadline)
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
