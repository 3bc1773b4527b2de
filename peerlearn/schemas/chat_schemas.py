# peerlearn/schemas/chat_schemas.py
"""Pydantic schemas for chat rooms and messages."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ..models.chat.chat_message import MessageType

class ChatRoomCreate(BaseModel):
    tutoring_request_id: Optional[UUID] = None
    course_id: Optional[UUID] = None
    title: Optional[str] = Field(default=None, max_length=200)

class MessageCreate(BaseModel):
    content: str = Field(default="", max_length=5000)
    message_type: MessageType = MessageType.TEXT
