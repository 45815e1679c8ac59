from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

USER_ROLES = ("mother", "medical", "store", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)  # E.164, required for SMS
    role = Column(String(20), nullable=False, default="mother")  # mother, medical, store, admin
    push_token = Column(String(255), nullable=True)  # Device/player id; user id is used when empty
    specialization = Column(String(100), nullable=True)  # Medical personnel only
    store_name = Column(String(255), nullable=True)  # Stores only
    # Notification preferences
    notify_email = Column(Boolean, default=True, nullable=False)
    notify_sms = Column(Boolean, default=True, nullable=False)
    notify_push = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    mother_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    medical_personnel_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    time = Column(String(10), nullable=False)  # HH:MM as entered
    type = Column(String(20), nullable=False, default="virtual")  # virtual, in-person
    status = Column(
        String(20), nullable=False, default="scheduled"
    )  # scheduled, confirmed, completed, cancelled, rescheduled
    meeting_link = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    mother = relationship("User", foreign_keys=[mother_id])
    medical_personnel = relationship("User", foreign_keys=[medical_personnel_id])


class Medication(Base):
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    mother_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    prescribed_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)
    frequency = Column(String(100), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    instructions = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    mother = relationship("User", foreign_keys=[mother_id])
    prescribed_by = relationship("User", foreign_keys=[prescribed_by_id])


class HealthNote(Base):
    __tablename__ = "health_notes"

    id = Column(Integer, primary_key=True, index=True)
    mother_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    alert_type = Column(String(100), nullable=True)  # Set when the note should alert the mother
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    mother = relationship("User", foreign_keys=[mother_id])
    author = relationship("User", foreign_keys=[author_id])


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    mother_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tracking_number = Column(String(50), unique=True, nullable=True)
    status = Column(
        String(30), nullable=False, default="pending"
    )  # pending, confirmed, preparing, out-for-delivery, delivered, cancelled
    total_amount = Column(Float, nullable=False, default=0.0)
    delivery_address = Column(String(500), nullable=True)
    estimated_delivery_time = Column(DateTime(timezone=True), nullable=True)
    actual_delivery_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    mother = relationship("User", foreign_keys=[mother_id])
    store = relationship("User", foreign_keys=[store_id])


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    chat_room = Column(String(100), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
