import logging
from sqlalchemy.orm import Session

from earthwise.core.exceptions import ValidationException
from earthwise.models.transaction import Transaction, TransactionType
from earthwise.models.user import User
from earthwise.repositories.notification_repository import NotificationRepository
from earthwise.repositories.transaction_repository import TransactionRepository
from earthwise.schemas.transaction_schemas import RedeemRequest

logger = logging.getLogger(__name__)


class RewardService:
    """Balance and redemption over the reward ledger"""

    def __init__(self, db: Session):
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.notification_repo = NotificationRepository(db)

    def get_balance(self, user: User) -> float:
        return self.transaction_repo.get_user_balance(user.id)

    def get_transactions(self, user: User, limit: int = 100, offset: int = 0) -> list[Transaction]:
        return self.transaction_repo.get_by_user(user.id, limit, offset)

    def redeem(self, data: RedeemRequest, user: User) -> Transaction:
        """
        Spend points from the user's balance.

        Raises:
            ValidationException: If the balance doesn't cover the amount
        """
        balance = self.get_balance(user)
        if data.amount > balance:
            raise ValidationException(
                f"Insufficient balance: requested {data.amount}, available {balance:g}"
            )

        transaction = Transaction(
            user_id=user.id,
            type=TransactionType.REDEEMED,
            amount=data.amount,
            description=data.description or f"Redeemed {data.amount} points",
        )
        try:
            self.transaction_repo.create_no_commit(transaction)
            self.notification_repo.create_no_commit(
                user.id, f"You have redeemed {data.amount} points!", "redemption"
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(transaction)
        logger.info("User %s redeemed %s points", user.id, data.amount)
        return transaction
