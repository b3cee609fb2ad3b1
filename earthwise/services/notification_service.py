from sqlalchemy.orm import Session

from earthwise.models.notification import Notification
from earthwise.models.user import User
from earthwise.repositories.notification_repository import NotificationRepository
from earthwise.core.exceptions import NotFoundException


class NotificationService:
    """Service for notification business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository(db)

    def get_unread(self, user: User) -> list[Notification]:
        """Get unread notifications for user"""
        return self.repo.get_unread_by_user(user.id)

    def mark_as_read(self, notification_id: int, user: User) -> Notification:
        """
        Mark one of the user's notifications read.

        Raises:
            NotFoundException: If notification not found or belongs to another user
        """
        notification = self.repo.get_by_id_and_user(notification_id, user.id)
        if not notification:
            raise NotFoundException("Notification not found")

        self.repo.mark_as_read(notification.id)
        self.db.refresh(notification)
        return notification
