"""Channel sender port - one delivery primitive per notification channel"""

from abc import ABC, abstractmethod

from ..events import Channel, DispatchOutcome, Recipient
from ..messages import ChannelMessage


class ChannelSender(ABC):
    """
    Abstract interface for channel delivery adapters.

    `send` returns a DispatchOutcome for sent or soft-skipped messages and
    raises TransportError when a configured transport fails. Implementations
    never retry.
    """

    channel: Channel

    def is_configured(self) -> bool:
        return True

    @abstractmethod
    async def send(self, recipient: Recipient, message: ChannelMessage) -> DispatchOutcome: ...
