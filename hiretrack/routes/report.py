# ========================================
# hiretrack/routes/report.py
# ========================================

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from hiretrack.database import get_db
from hiretrack.models.user import HR_MANAGER_ROLES, HR_ROLES, User
from hiretrack.services.report_service import ReportService
from hiretrack.utils.auth import require_roles
from hiretrack.utils.export import create_csv_response_headers

router = APIRouter(prefix="/api/reports", tags=["Reports"])

# ===========================
# ROLE CHECKS
# ===========================

hr_required = require_roles(*HR_ROLES)
manager_required = require_roles(*HR_MANAGER_ROLES)


# ===========================
# ANALYTICS ENDPOINTS
# ===========================

# ✅ 1. DASHBOARD OVERVIEW
@router.get("/analytics")
def dashboard_analytics(db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    """Headline counts plus six months of applications."""
    return ReportService(db).get_dashboard_analytics()


# ✅ 2. APPLICATION STATISTICS
@router.get("/applications-stats")
def application_stats(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    return ReportService(db).get_application_stats(start_date, end_date)


# ✅ 3. APPLICATION TREND
@router.get("/applications-trend")
def application_trend(
    period: str = Query("monthly", description="Period: daily, weekly, monthly"),
    months: int = Query(6, ge=1, le=36, description="Number of months to analyze"),
    db: Session = Depends(get_db),
    current_user: User = Depends(hr_required),
):
    return ReportService(db).get_application_trend(period=period, months=months)


# ✅ 4. HIRING PIPELINE
@router.get("/hiring-pipeline")
def hiring_pipeline(db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    return ReportService(db).get_hiring_pipeline()


# ✅ 5. DOCUMENT STATISTICS
@router.get("/documents-stats")
def document_stats(db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    return ReportService(db).get_document_stats()


# ✅ 6. DEPARTMENT STATISTICS (Managers)
@router.get("/departments-stats")
def department_stats(db: Session = Depends(get_db), current_user: User = Depends(manager_required)):
    return ReportService(db).get_department_stats()


# ✅ 7. EXPORT CSV (Managers)
@router.get("/export/{kind}")
def export_report(
    kind: str,
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(manager_required),
):
    """Download applications or jobs as CSV."""
    csv_content = ReportService(db).export_data(kind, start_date, end_date)
    filename = f"{kind}_export_{datetime.utcnow().strftime('%Y%m%d')}"
    return Response(content=csv_content, media_type="text/csv", headers=create_csv_response_headers(filename))
