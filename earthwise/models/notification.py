from sqlalchemy import String, Integer, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from earthwise.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from earthwise.models.user import User


class Notification(Base, CreatedAtMixin):
    """
    Message addressed to exactly one user.

    Only the read flag changes after creation; rows are never deleted by
    the header client.
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="notifications")

    # Unread lookups are polled every few seconds
    __table_args__ = (Index("ix_notifications_user_unread", "user_id", "is_read"),)
