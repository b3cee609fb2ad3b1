from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from earthwise.database import get_db
from earthwise.dependencies import get_current_user
from earthwise.models.user import User
from earthwise.services.report_service import ReportService
from earthwise.schemas.report_schemas import ReportCreate, ReportResponse, ReportListResponse

router = APIRouter()


@router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    data: ReportCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Submit a waste report; the reporter is credited and notified"""
    service = ReportService(db)
    return service.create_report(data, user)


@router.get("/", response_model=ReportListResponse)
async def list_recent_reports(
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Most recent reports across all users"""
    service = ReportService(db)
    reports = service.get_recent_reports(limit)
    return ReportListResponse(reports=reports, total=len(reports))


@router.get("/mine", response_model=ReportListResponse)
async def list_my_reports(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Reports submitted by the authenticated user"""
    service = ReportService(db)
    reports = service.get_user_reports(user, limit, offset)
    return ReportListResponse(reports=reports, total=len(reports))
