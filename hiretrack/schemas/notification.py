from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from hiretrack.models.notification import NotificationPriority, NotificationType


class NotificationCreate(BaseModel):
    user_id: str
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.SYSTEM_ANNOUNCEMENT
    priority: NotificationPriority = NotificationPriority.MEDIUM
    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: str
    priority: str
    is_read: bool
    action_url: Optional[str] = None
    # The ORM attribute is "extra"; the column and the API field are "metadata"
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="extra")
    triggered_by_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationPage(BaseModel):
    notifications: List[NotificationResponse]
    total: int
    page: int
    total_pages: int
