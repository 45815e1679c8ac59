"""Channel-specific message bodies produced by the mapper"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from .events import Channel


class EmailMessage(BaseModel):
    subject: str
    html: str
    text: Optional[str] = None


class SMSMessage(BaseModel):
    text: str


class PushMessage(BaseModel):
    title: str
    body: str
    data: dict[str, str] = Field(default_factory=dict)


ChannelMessage = Union[EmailMessage, SMSMessage, PushMessage]


class RenderedMessages(BaseModel):
    email: Optional[EmailMessage] = None
    sms: Optional[SMSMessage] = None
    push: Optional[PushMessage] = None

    def for_channel(self, channel: Channel) -> Optional[ChannelMessage]:
        return getattr(self, Channel(channel).value)
