"""Chat router"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import ChatMessage, User
from ...notifications.dispatcher import NotificationDispatcher
from ...shared.recipients import get_dispatcher
from .schemas import ChatMessageCreate, ChatMessageResponse
from .service import ChatService

router = APIRouter(prefix="/chat", tags=["Chat"])


def get_chat_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ChatService:
    """Dependency injection for ChatService"""
    return ChatService(db, dispatcher)


def to_response(m: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=m.id,
        senderId=m.sender_id,
        receiverId=m.receiver_id,
        chatRoom=m.chat_room,
        message=m.content,
        isRead=m.is_read,
        created_at=m.created_at,
    )


@router.get("/rooms/{chat_room}/messages", response_model=list[ChatMessageResponse])
async def get_messages(
    chat_room: str,
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return [to_response(m) for m in service.get_messages(chat_room, current_user, limit)]


@router.post("/messages", response_model=ChatMessageResponse, status_code=201)
async def send_message(
    data: ChatMessageCreate,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Send a chat message; the receiver gets a push notification"""
    return to_response(service.send_message(data, current_user))
