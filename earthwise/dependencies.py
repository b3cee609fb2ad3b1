from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from earthwise.core.security import extract_email
from earthwise.core.exceptions import UnauthorizedException
from earthwise.database import get_db
from earthwise.repositories.user_repository import UserRepository
from earthwise.models.user import User

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency to validate the ID token and get/create the user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate it using the shared SECRET_KEY
    3. Read the 'email' and 'name' claims
    4. Get or auto-create the User record keyed by email
    5. Return User object for use in endpoints

    Raises:
        HTTPException 401: If token invalid, expired or without email
    """
    try:
        email, name = extract_email(credentials.credentials)

        user_repo = UserRepository(db)
        user = user_repo.get_or_create_by_email(email, name)

        return user

    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
