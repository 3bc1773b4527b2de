# peerlearn/models/chat/__init__.py
from .chat_room import ChatRoom, ChatRoomParticipant
from .chat_message import ChatMessage, MessageReadReceipt, MessageType

__all__ = ["ChatRoom", "ChatRoomParticipant", "ChatMessage", "MessageReadReceipt", "MessageType"]
