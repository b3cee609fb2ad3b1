from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field


class ReportCreate(BaseModel):
    """Schema for submitting a waste report"""

    location: str = Field(..., min_length=1)
    waste_type: str = Field(..., min_length=1, max_length=255)
    amount: str = Field(..., min_length=1, max_length=255)
    image_url: str | None = None
    verification_result: dict[str, Any] | None = None


class ReportResponse(BaseModel):
    """Schema for report response"""

    id: int
    user_id: int
    location: str
    waste_type: str
    amount: str
    image_url: str | None
    verification_result: dict[str, Any] | None
    status: str
    collector_id: int | None
    created_at: datetime

    class Config:
        from_attributes = True


class ReportListResponse(BaseModel):
    """Schema for list of reports"""

    reports: list[ReportResponse]
    total: int
