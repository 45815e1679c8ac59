"""User service - registration and notification preference management"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import FRONTEND_URL
from ...models import User
from ...notifications.dispatcher import NotificationDispatcher
from ...notifications.events import EventKind
from ...shared.recipients import notify_user
from .repository import UserRepository
from .schemas import NotificationPreferencesUpdate, UserCreate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, dispatcher: NotificationDispatcher):
        self.db = db
        self.dispatcher = dispatcher
        self.repo = UserRepository()

    def create_user(self, data: UserCreate) -> User:
        """Register a user; everyone except admins gets a welcome email"""
        if self.repo.get_by_email(self.db, data.email):
            raise HTTPException(status_code=400, detail="Email already registered")

        logger.info(f"👤 Registering {data.role} user {data.email}")
        user = self.repo.create_user(
            self.db,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            phone=data.phone,
            role=data.role,
            specialization=data.specialization,
            store_name=data.storeName,
        )

        if user.role != "admin":
            notify_user(
                self.dispatcher,
                EventKind.USER_REGISTERED,
                user,
                first_name=user.first_name,
                role=user.role,
                app_link=FRONTEND_URL,
            )
        return user

    def get_preferences(self, user: User) -> dict:
        return {
            "email": user.notify_email,
            "sms": user.notify_sms,
            "push": user.notify_push,
            "phone": user.phone,
            "pushToken": user.push_token,
        }

    def update_preferences(self, data: NotificationPreferencesUpdate, user: User) -> dict:
        """Change which channels the user is notified on, plus the contact fields they depend on"""
        updates = {
            "notify_email": data.email,
            "notify_sms": data.sms,
            "notify_push": data.push,
            "phone": data.phone,
            "push_token": data.pushToken,
        }
        user = self.repo.update_user(self.db, user, **updates)
        logger.info(
            f"🔔 Notification preferences for user {user.id}: "
            f"email={user.notify_email}, sms={user.notify_sms}, push={user.notify_push}"
        )
        if user.notify_sms and not user.phone:
            logger.debug(f"⚠️ User {user.id} enabled SMS without a phone number; SMS will be skipped")
        return self.get_preferences(user)
