"""Database actions consumed by the header client.

Each action opens its own session, runs the blocking SQLAlchemy work in a
worker thread and never raises to the caller: database errors are logged
and reported as ``None`` (``False`` for mark-as-read).
"""

import asyncio
import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from earthwise.database import SessionLocal
from earthwise.repositories.notification_repository import NotificationRepository
from earthwise.repositories.transaction_repository import TransactionRepository
from earthwise.repositories.user_repository import UserRepository
from earthwise.schemas.notification_schemas import NotificationResponse
from earthwise.schemas.user_schemas import UserResponse

logger = logging.getLogger(__name__)


class DatabaseActions:
    """Async persistence collaborator backed by a SQLAlchemy session factory"""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    async def create_user(self, email: str, name: str) -> UserResponse | None:
        """Insert a user; a duplicate email or connectivity error yields None"""
        try:
            return await asyncio.to_thread(self._create_user, email, name)
        except SQLAlchemyError:
            logger.exception("Error creating the user %s", email)
            return None

    async def get_user_by_email(self, email: str) -> UserResponse | None:
        try:
            return await asyncio.to_thread(self._get_user_by_email, email)
        except SQLAlchemyError:
            logger.exception("Error fetching user by email %s", email)
            return None

    async def get_unread_notifications(self, user_id: int) -> list[NotificationResponse] | None:
        try:
            return await asyncio.to_thread(self._get_unread_notifications, user_id)
        except SQLAlchemyError:
            logger.exception("Error fetching unread notifications for user %s", user_id)
            return None

    async def mark_notification_as_read(self, notification_id: int) -> bool:
        try:
            return await asyncio.to_thread(self._mark_notification_as_read, notification_id)
        except SQLAlchemyError:
            logger.exception("Error marking notification %s as read", notification_id)
            return False

    async def get_user_balance(self, user_id: int) -> float | None:
        try:
            return await asyncio.to_thread(self._get_user_balance, user_id)
        except SQLAlchemyError:
            logger.exception("Error fetching balance for user %s", user_id)
            return None

    # Blocking halves, one session per call

    def _create_user(self, email: str, name: str) -> UserResponse:
        with self.session_factory() as db:
            try:
                user = UserRepository(db).create(email, name)
            except SQLAlchemyError:
                db.rollback()
                raise
            return UserResponse.model_validate(user)

    def _get_user_by_email(self, email: str) -> UserResponse | None:
        with self.session_factory() as db:
            user = UserRepository(db).get_by_email(email)
            return UserResponse.model_validate(user) if user else None

    def _get_unread_notifications(self, user_id: int) -> list[NotificationResponse]:
        with self.session_factory() as db:
            notifications = NotificationRepository(db).get_unread_by_user(user_id)
            return [NotificationResponse.model_validate(n) for n in notifications]

    def _mark_notification_as_read(self, notification_id: int) -> bool:
        with self.session_factory() as db:
            marked = NotificationRepository(db).mark_as_read(notification_id)
            if not marked:
                logger.warning("Notification %s not found", notification_id)
            return marked

    def _get_user_balance(self, user_id: int) -> float:
        with self.session_factory() as db:
            return TransactionRepository(db).get_user_balance(user_id)
