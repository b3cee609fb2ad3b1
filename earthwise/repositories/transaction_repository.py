from sqlalchemy import func, case
from sqlalchemy.orm import Session

from earthwise.models.transaction import Transaction, TransactionType


class TransactionRepository:
    """Repository for reward ledger access"""

    def __init__(self, db: Session):
        self.db = db

    def create_no_commit(self, transaction: Transaction) -> Transaction:
        """Create single transaction without committing (for atomic ops)"""
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def get_by_user(self, user_id: int, limit: int = 100, offset: int = 0) -> list[Transaction]:
        """Ledger entries for a user, newest first"""
        return (
            self.db.query(Transaction)
            .filter(Transaction.user_id == user_id)
            .order_by(Transaction.date.desc(), Transaction.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    def get_user_balance(self, user_id: int) -> float:
        """Earned minus redeemed, floored at zero"""
        signed_amount = case(
            (Transaction.type == TransactionType.REDEEMED, -Transaction.amount),
            else_=Transaction.amount,
        )
        result = (
            self.db.query(func.sum(signed_amount))
            .filter(Transaction.user_id == user_id)
            .scalar()
        )
        balance = float(result) if result is not None else 0.0
        return max(balance, 0.0)
