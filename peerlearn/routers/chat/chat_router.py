# peerlearn/routers/chat/chat_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.config import settings
from ...core.database import get_db
from ...core.security import get_current_user_id
from ...schemas.chat_schemas import ChatRoomCreate, MessageCreate
from ...services.chat.chat_service import ChatRoomService
from ...services.chat.message_service import MessageService

router = APIRouter(prefix="/chat", tags=["Chat System"])

@router.post("/rooms", response_model=dict)
async def get_or_create_chat_room(
    room_data: ChatRoomCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get or create the chat room for a tutoring request"""
    return await ChatRoomService(db).get_or_create_for_request(
        tutoring_request_id=room_data.tutoring_request_id,
        caller_id=caller_id,
        course_id=room_data.course_id,
        title=room_data.title
    )

@router.get("/rooms", response_model=List[dict])
async def get_chat_rooms(
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Active chat rooms the caller belongs to"""
    return await ChatRoomService(db).list_rooms(caller_id)

@router.get("/rooms/{room_id}/messages", response_model=List[dict])
async def get_chat_messages(
    room_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.message_page_size, ge=1, le=settings.max_message_page_size),
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get one page of a room's messages in chronological order"""
    return await MessageService(db).page(room_id, caller_id, page=page, limit=limit)

@router.post("/rooms/{room_id}/messages", response_model=dict, status_code=201)
async def send_chat_message(
    room_id: UUID,
    message_data: MessageCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Send a message to a chat room"""
    return await MessageService(db).append(
        room_id,
        caller_id,
        message_data.content,
        message_type=message_data.message_type
    )

@router.patch("/rooms/{room_id}/read", response_model=dict)
async def mark_messages_as_read(
    room_id: UUID,
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Mark every message in the room as read by the caller"""
    await ChatRoomService(db).mark_read(room_id, caller_id)
    return {"success": True}
