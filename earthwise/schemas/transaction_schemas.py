from datetime import datetime
from pydantic import BaseModel, Field
from earthwise.models.transaction import TransactionType


class RedeemRequest(BaseModel):
    """Schema for redeeming reward points"""

    amount: int = Field(..., gt=0)
    description: str | None = Field(None, max_length=500)


class TransactionResponse(BaseModel):
    """Schema for ledger entry response"""

    id: int
    user_id: int
    type: TransactionType
    amount: int
    description: str
    date: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    """Schema for list of ledger entries"""

    transactions: list[TransactionResponse]
    total: int
