from sqlalchemy.orm import Session
from earthwise.models.report import Report


class ReportRepository:
    """Repository for Report data access"""

    def __init__(self, db: Session):
        self.db = db

    def create_no_commit(self, report: Report) -> Report:
        """Create report without committing; reward and notification join the same commit"""
        self.db.add(report)
        self.db.flush()
        return report

    def get_recent(self, limit: int = 10) -> list[Report]:
        """Most recent reports across all users"""
        return (
            self.db.query(Report)
            .order_by(Report.created_at.desc(), Report.id.desc())
            .limit(limit)
            .all()
        )

    def get_by_user(self, user_id: int, limit: int = 100, offset: int = 0) -> list[Report]:
        """Reports submitted by one user, newest first"""
        return (
            self.db.query(Report)
            .filter(Report.user_id == user_id)
            .order_by(Report.created_at.desc(), Report.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
