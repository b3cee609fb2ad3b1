import logging
from sqlalchemy.orm import Session

from earthwise.config import settings
from earthwise.models.report import Report
from earthwise.models.transaction import Transaction, TransactionType
from earthwise.models.user import User
from earthwise.repositories.notification_repository import NotificationRepository
from earthwise.repositories.report_repository import ReportRepository
from earthwise.repositories.transaction_repository import TransactionRepository
from earthwise.schemas.report_schemas import ReportCreate

logger = logging.getLogger(__name__)


class ReportService:
    """Service layer for waste reports and the rewards they earn"""

    def __init__(self, db: Session):
        self.db = db
        self.report_repo = ReportRepository(db)
        self.transaction_repo = TransactionRepository(db)
        self.notification_repo = NotificationRepository(db)

    def create_report(self, data: ReportCreate, user: User) -> Report:
        """
        Store a report, credit the reporter and notify them, in one commit.

        Args:
            data: Report submission
            user: Current user (the reporter)

        Returns:
            Created report with status 'pending'
        """
        points = settings.REPORT_REWARD_POINTS
        report = Report(
            user_id=user.id,
            location=data.location,
            waste_type=data.waste_type,
            amount=data.amount,
            image_url=data.image_url,
            verification_result=data.verification_result,
        )
        try:
            self.report_repo.create_no_commit(report)
            self.transaction_repo.create_no_commit(
                Transaction(
                    user_id=user.id,
                    type=TransactionType.EARNED_REPORT,
                    amount=points,
                    description="Points earned for reporting waste",
                )
            )
            self.notification_repo.create_no_commit(
                user.id,
                f"You've earned {points} points for reporting waste!",
                "reward",
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(report)
        logger.info("Report %s created by user %s (+%s points)", report.id, user.id, points)
        return report

    def get_recent_reports(self, limit: int = 10) -> list[Report]:
        return self.report_repo.get_recent(limit)

    def get_user_reports(self, user: User, limit: int = 100, offset: int = 0) -> list[Report]:
        return self.report_repo.get_by_user(user.id, limit, offset)
