# ========================================
# hiretrack/routes/notification.py
# ========================================

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from hiretrack.database import get_db
from hiretrack.models.user import HR_ROLES, User
from hiretrack.schemas.notification import NotificationCreate, NotificationPage, NotificationResponse
from hiretrack.services.notification_service import NotificationService
from hiretrack.utils.auth import get_current_user, require_roles

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


# ✅ 1. MY NOTIFICATIONS (paginated)
@router.get("", response_model=NotificationPage)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return NotificationService(db).get_user_notifications(
        current_user.id, page=page, limit=limit, unread_only=unread_only
    )


# ✅ 2. SEND NOTIFICATION (HR)
@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*HR_ROLES)),
):
    return NotificationService(db).create_notification(
        notification.user_id,
        notification.title,
        notification.message,
        type=notification.type,
        priority=notification.priority,
        action_url=notification.action_url,
        metadata=notification.metadata,
        triggered_by_id=current_user.id,
    )


# ✅ 3. UNREAD COUNT
@router.get("/count")
def unread_count(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"count": NotificationService(db).get_unread_count(current_user.id)}


# ✅ 4. MARK ALL READ
@router.put("/mark-all-read")
def mark_all_read(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    updated = NotificationService(db).mark_all_as_read(current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}


# ✅ 5. MARK ONE READ
@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(notification_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Someone else's notification is reported as not found."""
    return NotificationService(db).mark_as_read(notification_id, current_user.id)


# ✅ 6. DELETE
@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    NotificationService(db).delete_notification(notification_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
