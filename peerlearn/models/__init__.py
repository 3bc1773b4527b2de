# peerlearn/models/__init__.py
"""Import all models here, if needed for Alembic migration."""
from .base import Base

from .user import User
from .subject import Subject
from .tutoring_request import TutoringRequest, TutoringStatus
from .chat import ChatRoom, ChatRoomParticipant, ChatMessage, MessageReadReceipt, MessageType

# This ensures all models are loaded when importing models
