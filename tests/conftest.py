"""Shared fixtures for mcaid tests."""

import asyncio
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mcaid.database import Base
from mcaid.models import User
from mcaid.notifications.channels.base import ChannelSender
from mcaid.notifications.dispatcher import NotificationDispatcher
from mcaid.notifications.events import Channel, DispatchOutcome, NotificationPreferences, Recipient
from mcaid.notifications.exceptions import TransportError


class RecordingSender(ChannelSender):
    """Channel sender that records messages in memory for test assertions."""

    def __init__(self, channel: Channel):
        self.channel = channel
        self.sent: list[tuple] = []
        self.calls = 0
        self.should_succeed = True
        self.failure_reason = f"{channel.value} delivery failed"
        self.delay = 0.0

    def configure(self, should_succeed: bool = True, failure_reason: str = None, delay: float = 0.0):
        """Configure the fake sender behavior for testing."""
        self.should_succeed = should_succeed
        if failure_reason:
            self.failure_reason = failure_reason
        self.delay = delay

    async def send(self, recipient, message):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.should_succeed:
            raise TransportError(self.channel.value, self.failure_reason)
        self.sent.append((recipient, message))
        return DispatchOutcome.sent(
            self.channel,
            recipient.contact_for(self.channel) or "",
            message_id=f"{self.channel.value}-{uuid4().hex[:12]}",
        )


@pytest.fixture
def senders():
    return {channel: RecordingSender(channel) for channel in Channel}


@pytest.fixture
def dispatcher(senders):
    return NotificationDispatcher(list(senders.values()))


@pytest.fixture
def recipient():
    return Recipient(
        user_id="42",
        name="Amina Otieno",
        email="amina@example.com",
        phone="+254712345678",
        push_id="player-42",
    )


@pytest.fixture
def make_recipient():
    def _make(**overrides):
        data = {
            "user_id": "7",
            "name": "Amina Otieno",
            "email": "amina@example.com",
            "phone": "+254712345678",
            "push_id": None,
            "preferences": NotificationPreferences(),
        }
        data.update(overrides)
        return Recipient(**data)

    return _make


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role="mother", **overrides):
        counter["n"] += 1
        data = {
            "first_name": "Test",
            "last_name": f"{role.title()}{counter['n']}",
            "email": f"{role}{counter['n']}@example.com",
            "phone": "+254712345678",
            "role": role,
        }
        data.update(overrides)
        user = User(**data)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make
