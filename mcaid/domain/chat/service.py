"""Chat service - direct messages between mothers, medical personnel and stores"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ChatMessage, User
from ...notifications.dispatcher import NotificationDispatcher
from ...notifications.events import EventKind
from ...shared.recipients import notify_user
from .repository import ChatRepository
from .schemas import ChatMessageCreate

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def room_id_for(user_a: int, user_b: int) -> str:
    """Stable room id for a pair of users, independent of who writes first"""
    low, high = sorted((user_a, user_b))
    return f"{low}_{high}"


class ChatService:
    def __init__(self, db: Session, dispatcher: NotificationDispatcher):
        self.db = db
        self.dispatcher = dispatcher
        self.repo = ChatRepository()

    def get_messages(self, chat_room: str, user: User, limit: int = 50) -> list[ChatMessage]:
        return self.repo.get_room_messages(self.db, chat_room, user.id, limit)

    def send_message(self, data: ChatMessageCreate, user: User) -> ChatMessage:
        """Store the message and push a preview to the receiver"""
        if data.receiverId == user.id:
            raise HTTPException(status_code=400, detail="Cannot send a message to yourself")

        receiver = self.repo.get_user(self.db, data.receiverId)
        if not receiver:
            raise HTTPException(status_code=404, detail="Receiver not found")

        message = self.repo.create_message(
            self.db,
            sender_id=user.id,
            receiver_id=receiver.id,
            chat_room=data.chatRoom or room_id_for(user.id, receiver.id),
            content=data.message,
        )
        logger.debug(f"💬 Message {message.id} from {user.id} to {receiver.id} in room {message.chat_room}")

        notify_user(
            self.dispatcher,
            EventKind.CHAT_MESSAGE_RECEIVED,
            receiver,
            sender_name=user.full_name,
            preview=message.content[:PREVIEW_LENGTH],
            chat_room=message.chat_room,
        )
        return message
