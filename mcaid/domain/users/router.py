"""User router - registration and notification preferences"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...notifications.dispatcher import NotificationDispatcher
from ...shared.recipients import get_dispatcher
from .schemas import (
    NotificationPreferencesResponse,
    NotificationPreferencesUpdate,
    UserCreate,
    UserResponse,
)
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db, dispatcher)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(data: UserCreate, service: UserService = Depends(get_user_service)):
    user = service.create_user(data)
    return UserResponse(
        id=user.id,
        firstName=user.first_name,
        lastName=user.last_name,
        email=user.email,
        phone=user.phone,
        role=user.role,
        created_at=user.created_at,
    )


@router.get("/me/notification-preferences", response_model=NotificationPreferencesResponse)
async def get_notification_preferences(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.get_preferences(current_user)


@router.put("/me/notification-preferences", response_model=NotificationPreferencesResponse)
async def update_notification_preferences(
    data: NotificationPreferencesUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Enable or disable email, SMS and push notifications for the current user"""
    return service.update_preferences(data, current_user)
