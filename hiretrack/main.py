# ========================================
# hiretrack/main.py
# ========================================

import asyncio
import logging
import time
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hiretrack.config import settings
from hiretrack.database import close_db, init_db
from hiretrack.utils.errors import HireTrackError
from hiretrack.utils.logger import setup_logging

# ===========================
# IMPORT ALL ROUTERS
# ===========================

from hiretrack.routes.auth import router as auth_router
from hiretrack.routes.job import router as job_router
from hiretrack.routes.application import router as application_router
from hiretrack.routes.document import router as document_router
from hiretrack.routes.interview import router as interview_router
from hiretrack.routes.notification import router as notification_router
from hiretrack.routes.report import router as report_router

setup_logging()
logger = logging.getLogger("hiretrack")

# ===========================
# CREATE FASTAPI APP
# ===========================

app = FastAPI(
    title=settings.APP_NAME,
    description="HR applicant tracking: jobs, applications, documents, interviews, notifications and reports",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ===========================
# CORS MIDDLEWARE
# ===========================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===========================
# REQUEST LOGGING / TIMEOUT
# ===========================

@app.middleware("http")
async def request_timeout(request: Request, call_next):
    # Sessions opened for this request refuse to commit past the deadline
    request.state.deadline = time.monotonic() + settings.REQUEST_TIMEOUT_SECONDS
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error("Request timed out: %s %s", request.method, request.url.path)
        return JSONResponse(status_code=504, content={"detail": "Request timeout"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000

    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    logger.log(
        level,
        "%s %s -> %s (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


# ===========================
# ERROR HANDLERS
# ===========================

@app.exception_handler(HireTrackError)
async def hiretrack_error_handler(request: Request, exc: HireTrackError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, **exc.extra})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Validation error", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if settings.is_development:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ===========================
# DATABASE EVENTS
# ===========================

@app.on_event("startup")
def start_db():
    """Create tables on startup"""
    init_db()


@app.on_event("shutdown")
def stop_db():
    close_db()


# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(auth_router)
app.include_router(job_router)
app.include_router(application_router)
app.include_router(document_router)
app.include_router(interview_router)
app.include_router(notification_router)
app.include_router(report_router)


# ===========================
# ROOT ENDPOINTS
# ===========================

@app.get("/")
def root():
    """API root endpoint with feature summary"""
    return {
        "status": "✅ HireTrack HR API Running",
        "version": settings.APP_VERSION,
        "documentation": "/docs",
        "features": {
            "applicant": [
                "✅ Apply to published jobs",
                "✅ Track and withdraw own applications",
                "✅ Upload documents for review",
                "✅ See upcoming interviews",
                "✅ Notification inbox",
            ],
            "hr": [
                "✅ Job lifecycle: draft, publish, close, archive",
                "✅ Application pipeline with bulk status updates",
                "✅ Document review",
                "✅ Interview scheduling and feedback",
                "✅ Dashboard analytics and CSV export",
            ],
        },
        "endpoints": {
            "authentication": ["/auth/signup", "/auth/login", "/auth/refresh", "/auth/me"],
            "jobs": "/api/jobs",
            "applications": "/api/applications",
            "documents": "/api/documents",
            "interviews": "/api/interviews",
            "notifications": "/api/notifications",
            "reports": "/api/reports",
        },
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"ok": True, "timestamp": datetime.utcnow().isoformat()}
