from sqlalchemy.orm import Session
from earthwise.models.user import User

DEFAULT_USER_NAME = "Anonymous User"


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, email: str, name: str) -> User:
        """
        Insert a new user.

        Plain insert: a duplicate email raises IntegrityError and the
        session is left for the caller to roll back.
        """
        user = User(email=email, name=name)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_or_create_by_email(self, email: str, name: str | None = None) -> User:
        """
        Get user by email or create if doesn't exist.

        Called when a user makes their first API request with a valid ID
        token from the wallet login provider.

        Args:
            email: 'email' claim from the ID token
            name: 'name' claim, falls back to a placeholder

        Returns:
            User object (either existing or newly created)
        """
        user = self.get_by_email(email)

        if not user:
            user = self.create(email, name or DEFAULT_USER_NAME)

        return user

    def get_by_email(self, email: str) -> User | None:
        """Get user by email"""
        return self.db.query(User).filter(User.email == email).first()
