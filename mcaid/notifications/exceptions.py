"""Notification error taxonomy"""

from typing import Optional


class NotificationError(Exception):
    """Base class for notification fan-out errors"""


class UnsupportedEventKind(NotificationError):
    """Raised when an event kind has no routing entry or template"""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported notification event kind: {kind!r}")


class TransportError(NotificationError):
    """Raised when a configured channel transport rejects a message or is unreachable"""

    def __init__(self, channel: str, detail: str, status_code: Optional[int] = None):
        self.channel = channel
        self.detail = detail
        self.status_code = status_code
        message = f"{channel} transport error"
        if status_code is not None:
            message += f" [{status_code}]"
        super().__init__(f"{message}: {detail}")
