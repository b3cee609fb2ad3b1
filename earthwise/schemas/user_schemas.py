from datetime import datetime
from pydantic import BaseModel


class UserResponse(BaseModel):
    """Schema for the authenticated user's record"""

    id: int
    email: str
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class BalanceResponse(BaseModel):
    """Schema for a user's token balance"""

    user_id: int
    balance: float
