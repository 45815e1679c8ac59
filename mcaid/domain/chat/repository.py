"""Chat repository - Database operations for chat messages"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import ChatMessage, User


class ChatRepository:
    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_room_messages(db: Session, chat_room: str, user_id: int, limit: int = 50) -> list[ChatMessage]:
        """Latest messages in a room that the user sent or received, oldest first"""
        messages = (
            db.query(ChatMessage)
            .filter(
                ChatMessage.chat_room == chat_room,
                or_(ChatMessage.sender_id == user_id, ChatMessage.receiver_id == user_id),
            )
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(messages))

    @staticmethod
    def create_message(db: Session, **message_data) -> ChatMessage:
        message = ChatMessage(**message_data)
        db.add(message)
        db.commit()
        db.refresh(message)
        return message
