from datetime import datetime
from pydantic import BaseModel


class NotificationResponse(BaseModel):
    """Schema for notification response"""

    id: int
    user_id: int
    message: str
    type: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    """Schema for list of unread notifications"""

    notifications: list[NotificationResponse]
    total: int
