# peerlearn/services/chat/__init__.py
from .chat_service import ChatRoomService
from .message_service import MessageService

__all__ = ["ChatRoomService", "MessageService"]
