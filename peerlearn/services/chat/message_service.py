# peerlearn/services/chat/message_service.py
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_
import logging

from ..base_service import BaseService
from ..user_service import UserService
from .chat_service import ChatRoomService
from ...core.config import settings
from ...core.exceptions import InvalidArgument
from ...models.base import utcnow
from ...models.chat.chat_room import ChatRoom
from ...models.chat.chat_message import ChatMessage, MessageType
from ...models.user import User
from ...utils.formatting import to_iso

logger = logging.getLogger(__name__)

class MessageService(BaseService[ChatMessage]):
    """Append-only message log per chat room."""
    resource_name = "Message"

    def __init__(self, db: AsyncSession):
        super().__init__(ChatMessage, db)
        self.rooms = ChatRoomService(db)

    @staticmethod
    def to_dict(message: ChatMessage, sender_name: Optional[str], viewer_id: UUID) -> Dict:
        return {
            "id": str(message.id),
            "content": message.content,
            "sender": {
                "id": str(message.sender_id),
                "full_name": sender_name,
            },
            "message_type": MessageType(message.message_type).value,
            "created_at": to_iso(message.created_at),
            "is_own": message.sender_id == viewer_id,
        }

    async def append(
        self,
        room_id: UUID,
        sender_id: UUID,
        content: str,
        message_type: MessageType = MessageType.TEXT
    ) -> Dict:
        """Post a message and advance the room's last activity in the same transaction"""
        await self.rooms.require_participant(room_id, sender_id)

        text = (content or "").strip()
        if not text:
            raise InvalidArgument("Message content is required")

        now = utcnow()
        message = ChatMessage(
            chat_room_id=room_id,
            sender_id=sender_id,
            content=text,
            message_type=message_type,
            created_at=now,
            updated_at=now,
        )
        self.db.add(message)
        await self.db.flush()

        # Never move last_activity backwards under concurrent sends
        await self.db.execute(
            update(ChatRoom)
            .where(
                ChatRoom.id == room_id,
                or_(ChatRoom.last_activity.is_(None), ChatRoom.last_activity < now)
            )
            .values(last_activity=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        await self.db.refresh(message)

        names = await UserService(self.db).get_display_names([sender_id])
        sender_name = names.get(sender_id)
        logger.info(f"Message {message.id} posted to room {room_id}")
        return self.to_dict(message, sender_name, viewer_id=sender_id)

    async def page(self, room_id: UUID, caller_id: UUID, page: int = 1, limit: Optional[int] = None) -> List[Dict]:
        """One page of messages, newest page first, returned in chronological order"""
        await self.rooms.require_participant(room_id, caller_id)

        limit = limit or settings.message_page_size
        if page < 1 or limit < 1:
            raise InvalidArgument("page and limit must be positive")
        limit = min(limit, settings.max_message_page_size)

        stmt = (
            select(ChatMessage, User.full_name)
            .outerjoin(User, User.id == ChatMessage.sender_id)
            .where(
                ChatMessage.chat_room_id == room_id,
                ChatMessage.is_deleted.is_(False)
            )
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        rows = list(reversed(result.all()))
        return [self.to_dict(message, sender_name, viewer_id=caller_id) for message, sender_name in rows]
