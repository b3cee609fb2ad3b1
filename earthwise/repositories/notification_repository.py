from sqlalchemy.orm import Session
from earthwise.models.notification import Notification


class NotificationRepository:
    """Repository for Notification model operations"""

    def __init__(self, db: Session):
        self.db = db

    def create_no_commit(self, user_id: int, message: str, type: str) -> Notification:
        """Create notification without committing (for atomic ops)"""
        notification = Notification(user_id=user_id, message=message, type=type, is_read=False)
        self.db.add(notification)
        self.db.flush()
        return notification

    def get_unread_by_user(self, user_id: int) -> list[Notification]:
        """Get all unread notifications for a user, newest first"""
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    def get_by_id(self, notification_id: int) -> Notification | None:
        """Get notification by ID"""
        return self.db.query(Notification).filter(Notification.id == notification_id).first()

    def get_by_id_and_user(self, notification_id: int, user_id: int) -> Notification | None:
        """
        Get notification ensuring it belongs to user.

        Returns None if notification doesn't exist or belongs to another user.
        """
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    def mark_as_read(self, notification_id: int) -> bool:
        """
        Set is_read on one notification.

        Idempotent: marking an already-read notification is a no-op that
        still reports success. Returns False only when the row is missing.
        """
        notification = self.get_by_id(notification_id)
        if notification is None:
            return False
        if not notification.is_read:
            notification.is_read = True
            self.db.commit()
        return True
