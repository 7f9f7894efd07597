# ========================================
# hiretrack/routes/interview.py
# ========================================

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hiretrack.database import get_db
from hiretrack.models.interview import Interview
from hiretrack.models.user import HR_ROLES, INTERVIEW_SCHEDULER_ROLES, User, UserRole
from hiretrack.schemas.interview import InterviewCreate, InterviewFeedback, InterviewResponse, InterviewUpdate
from hiretrack.services.interview_service import InterviewService
from hiretrack.utils.auth import get_current_user, require_roles
from hiretrack.utils.errors import ForbiddenError

router = APIRouter(prefix="/api/interviews", tags=["Interviews"])

hr_required = require_roles(*HR_ROLES)
scheduler_required = require_roles(*INTERVIEW_SCHEDULER_ROLES)


def _ensure_can_change(interview: Interview, user: User) -> None:
    if user.role not in HR_ROLES and interview.interviewer_id != user.id:
        raise ForbiddenError("Only HR or the assigned interviewer can change this interview")


# ✅ 1. SCHEDULE INTERVIEW (HR or Interviewer)
@router.post("/schedule", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
def schedule_interview(
    interview: InterviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(scheduler_required),
):
    """Schedule an interview for an application. The applicant is notified."""
    return InterviewService(db).schedule_interview(scheduled_by_id=current_user.id, **interview.model_dump())


# ✅ 2. MY INTERVIEWS
@router.get("/my-interviews", response_model=List[InterviewResponse])
def my_interviews(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """HR sees every interview, interviewers their own panel, applicants their own."""
    service = InterviewService(db)
    if current_user.role in HR_ROLES:
        return service.get_all_interviews()
    if current_user.role == UserRole.INTERVIEWER.value:
        return service.get_interviewer_interviews(current_user.id)
    return service.get_applicant_interviews(current_user.id)


# ✅ 3. UPCOMING INTERVIEWS
@router.get("/upcoming/list", response_model=List[InterviewResponse])
def upcoming_interviews(
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Future interviews still in the scheduled state."""
    service = InterviewService(db)
    if current_user.role in HR_ROLES:
        return service.get_upcoming_interviews(limit=limit)
    if current_user.role == UserRole.INTERVIEWER.value:
        return service.get_upcoming_for_interviewer(current_user.id)
    return service.get_upcoming_for_applicant(current_user.id)


# ✅ 4. INTERVIEW STATISTICS (HR)
@router.get("/statistics")
def interview_statistics(db: Session = Depends(get_db), current_user: User = Depends(hr_required)):
    return InterviewService(db).get_interview_statistics()


# ✅ 5. GET INTERVIEW
@router.get("/{interview_id}", response_model=InterviewResponse)
def get_interview(interview_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    interview = InterviewService(db).get_interview(interview_id)
    if not InterviewService.can_view(interview, current_user):
        raise ForbiddenError("Not authorized to view this interview")
    return interview


# ✅ 6. UPDATE INTERVIEW (HR or assigned Interviewer)
@router.put("/{interview_id}", response_model=InterviewResponse)
def update_interview(
    interview_id: str,
    interview_update: InterviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Moving the start time marks a scheduled interview as rescheduled."""
    service = InterviewService(db)
    _ensure_can_change(service.get_interview(interview_id), current_user)

    updates = interview_update.model_dump(exclude_unset=True)
    if "interviewer_id" in updates and current_user.role not in HR_ROLES:
        raise ForbiddenError("Only HR can reassign an interview")
    return service.update_interview(interview_id, updates)


# ✅ 7. CANCEL INTERVIEW (HR or assigned Interviewer)
@router.delete("/{interview_id}", response_model=InterviewResponse)
def cancel_interview(
    interview_id: str,
    reason: Optional[str] = Query(None, description="Appended to the interview notes"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = InterviewService(db)
    _ensure_can_change(service.get_interview(interview_id), current_user)
    return service.cancel_interview(interview_id, reason=reason)


# ✅ 8. SUBMIT FEEDBACK (assigned Interviewer)
@router.post("/{interview_id}/feedback", response_model=InterviewResponse)
def submit_feedback(
    interview_id: str,
    feedback: InterviewFeedback,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Store the interviewer's rating and notes and complete the interview."""
    return InterviewService(db).add_feedback(
        interview_id,
        current_user.id,
        rating=feedback.rating,
        notes=feedback.notes,
        recommendation=feedback.recommendation,
    )


# ✅ 9. MARK NO-SHOW (HR or assigned Interviewer)
@router.post("/{interview_id}/no-show", response_model=InterviewResponse)
def mark_no_show(interview_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    service = InterviewService(db)
    _ensure_can_change(service.get_interview(interview_id), current_user)
    return service.mark_no_show(interview_id)
