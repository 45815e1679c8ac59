"""Chat domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ChatMessageCreate(BaseModel):
    receiverId: int
    message: str
    chatRoom: Optional[str] = None

    @field_validator("message")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Message cannot be empty")
        return v


class ChatMessageResponse(BaseModel):
    id: int
    senderId: int
    receiverId: int
    chatRoom: str
    message: str
    isRead: bool
    created_at: Optional[datetime] = None
