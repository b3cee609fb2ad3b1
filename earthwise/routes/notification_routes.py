from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from earthwise.database import get_db
from earthwise.dependencies import get_current_user
from earthwise.models.user import User
from earthwise.services.notification_service import NotificationService
from earthwise.schemas.notification_schemas import (
    NotificationResponse,
    NotificationListResponse,
)

router = APIRouter()


@router.get("/", response_model=NotificationListResponse)
async def list_unread(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get unread notifications for the authenticated user"""
    service = NotificationService(db)
    notifications = service.get_unread(user)
    return NotificationListResponse(notifications=notifications, total=len(notifications))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Mark a notification read (idempotent)"""
    service = NotificationService(db)
    return service.mark_as_read(notification_id, user)
