from sqlalchemy import String, Integer, Text, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING, Any
from earthwise.models.base import Base, CreatedAtMixin

if TYPE_CHECKING:
    from earthwise.models.user import User


class Report(Base, CreatedAtMixin):
    """
    Waste report submitted by a user.

    Status starts as 'pending' and moves on once a collector picks it up.
    verification_result holds the image verification output as-is.
    """

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    location: Mapped[str] = mapped_column(Text, nullable=False)
    waste_type: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_result: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(255), nullable=False, default="pending")
    collector_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="reports", foreign_keys=[user_id])
