# peerlearn/models/chat/chat_message.py
from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from ..base import Base, utcnow
import enum

class MessageType(str, enum.Enum):
    TEXT = "text"
    FILE = "file"
    SYSTEM = "system"


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    chat_room_id = Column(Uuid(as_uuid=True), ForeignKey("chat_rooms.id"), nullable=False, index=True)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    message_type = Column(
        Enum(
            MessageType,
            name="chat_message_type",
            values_callable=lambda types: [t.value for t in types],
        ),
        default=MessageType.TEXT,
        nullable=False,
    )

    # Relationships
    chat_room = relationship("ChatRoom", back_populates="messages")
    sender = relationship("User")
    read_receipts = relationship("MessageReadReceipt", back_populates="message", cascade="all, delete-orphan")

    # Index for efficient queries
    __table_args__ = (
        Index('idx_chat_message_room_time', 'chat_room_id', 'created_at'),
    )


class MessageReadReceipt(Base):
    __tablename__ = "message_read_receipts"

    message_id = Column(Uuid(as_uuid=True), ForeignKey("chat_messages.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    read_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    message = relationship("ChatMessage", back_populates="read_receipts")

    __table_args__ = (
        UniqueConstraint('message_id', 'user_id', name='uq_message_read_receipt'),
    )
