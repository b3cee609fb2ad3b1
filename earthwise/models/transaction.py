from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Integer, Text, ForeignKey, DateTime, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from earthwise.models.base import Base, utcnow

if TYPE_CHECKING:
    from earthwise.models.user import User


class TransactionType(str, PyEnum):
    """Reward ledger entry type"""

    EARNED_REPORT = "earned_report"
    EARNED_COLLECT = "earned_collect"
    REDEEMED = "redeemed"


class Transaction(Base):
    """
    Token ledger entry.

    Amount is always positive; the type decides the sign when computing a
    balance (earned_* add, redeemed subtracts).
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, native_enum=False), nullable=False
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="transactions")

    __table_args__ = (Index("ix_transactions_user_date", "user_id", "date"),)
