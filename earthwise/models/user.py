from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from earthwise.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from earthwise.models.notification import Notification
    from earthwise.models.report import Report
    from earthwise.models.transaction import Transaction


class User(Base, TimestampMixin):
    """
    Local record for a wallet-login identity.

    Keyed by email (the identity provider's claim); no credentials stored.
    Created on first login or on first API request with a valid ID token.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    notifications: Mapped[list["Notification"]] = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    reports: Mapped[list["Report"]] = relationship(
        "Report",
        back_populates="user",
        foreign_keys="Report.user_id",
        cascade="all, delete-orphan",
    )
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
