# peerlearn/models/chat/chat_room.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from ..base import Base, utcnow

class ChatRoom(Base):
    __tablename__ = "chat_rooms"

    # At most one room per tutoring request; NULLs (course rooms) are not constrained
    tutoring_request_id = Column(Uuid(as_uuid=True), ForeignKey("tutoring_requests.id"), nullable=True, unique=True)
    course_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_activity = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    tutoring_request = relationship("TutoringRequest")
    participants = relationship("ChatRoomParticipant", back_populates="chat_room", cascade="all, delete-orphan")
    messages = relationship("ChatMessage", back_populates="chat_room", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_chat_room_active_activity', 'is_active', 'last_activity'),
    )


class ChatRoomParticipant(Base):
    __tablename__ = "chat_room_participants"

    chat_room_id = Column(Uuid(as_uuid=True), ForeignKey("chat_rooms.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    chat_room = relationship("ChatRoom", back_populates="participants")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('chat_room_id', 'user_id', name='uq_chat_room_participant'),
    )
