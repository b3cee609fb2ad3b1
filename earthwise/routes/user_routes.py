from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from earthwise.database import get_db
from earthwise.dependencies import get_current_user
from earthwise.models.user import User
from earthwise.services.reward_service import RewardService
from earthwise.schemas.user_schemas import UserResponse, BalanceResponse
from earthwise.schemas.transaction_schemas import (
    RedeemRequest,
    TransactionResponse,
    TransactionListResponse,
)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get (and on first call create) the authenticated user's record"""
    return user


@router.get("/me/balance", response_model=BalanceResponse)
async def get_balance(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Current token balance"""
    service = RewardService(db)
    return BalanceResponse(user_id=user.id, balance=service.get_balance(user))


@router.get("/me/transactions", response_model=TransactionListResponse)
async def list_transactions(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Reward ledger for the authenticated user"""
    service = RewardService(db)
    transactions = service.get_transactions(user, limit, offset)
    return TransactionListResponse(transactions=transactions, total=len(transactions))


@router.post(
    "/me/redeem", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED
)
async def redeem(
    data: RedeemRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Redeem points from the balance"""
    service = RewardService(db)
    return service.redeem(data, user)
