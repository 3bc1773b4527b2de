# peerlearn/services/chat/chat_service.py
from typing import Dict, Iterable, List, Optional
from uuid import UUID
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Boolean, DateTime, Uuid, select, and_, func, exists, literal
import logging

from ..base_service import BaseService
from ..tutoring_service import TutoringRequestService
from ...core.config import settings
from ...core.database import insert_for, new_uuid_for
from ...core.exceptions import Forbidden, InvalidArgument
from ...models.base import utcnow
from ...models.chat.chat_room import ChatRoom, ChatRoomParticipant
from ...models.chat.chat_message import ChatMessage, MessageReadReceipt
from ...models.subject import Subject
from ...models.tutoring_request import TutoringRequest
from ...models.user import User
from ...utils.formatting import to_iso

logger = logging.getLogger(__name__)

class ChatRoomService(BaseService[ChatRoom]):
    """Conversations derived from tutoring requests, and their membership."""
    resource_name = "Chat room"

    def __init__(self, db: AsyncSession):
        super().__init__(ChatRoom, db)

    async def get_or_create_for_request(
        self,
        tutoring_request_id: Optional[UUID],
        caller_id: UUID,
        course_id: Optional[UUID] = None,
        title: Optional[str] = None
    ) -> Dict:
        """Get the room bound to a tutoring request, creating it on first use"""
        if tutoring_request_id is None:
            raise InvalidArgument("tutoring_request_id is required")

        request = await TutoringRequestService(self.db).require(tutoring_request_id)
        participant_ids = [request.from_user_id, request.to_user_id]
        if caller_id not in participant_ids:
            logger.warning(f"User {caller_id} is not a participant of request {tutoring_request_id}")
            raise Forbidden("Access denied")

        now = utcnow()
        room_id = uuid.uuid4()
        stmt = insert_for(self.db, ChatRoom).values(
            id=room_id,
            tutoring_request_id=tutoring_request_id,
            course_id=course_id,
            title=(title or "").strip() or settings.default_room_title,
            is_active=True,
            last_activity=now,
            created_at=now,
            updated_at=now,
            is_deleted=False,
        ).on_conflict_do_nothing(index_elements=["tutoring_request_id"])
        result = await self.db.execute(stmt)

        if result.rowcount:
            participants_stmt = insert_for(self.db, ChatRoomParticipant).values([
                {
                    "id": uuid.uuid4(),
                    "chat_room_id": room_id,
                    "user_id": user_id,
                    "created_at": now,
                    "updated_at": now,
                    "is_deleted": False,
                }
                for user_id in participant_ids
            ]).on_conflict_do_nothing(index_elements=["chat_room_id", "user_id"])
            await self.db.execute(participants_stmt)
            logger.info(f"Chat room {room_id} created for tutoring request {tutoring_request_id}")
        await self.db.commit()

        found = await self.db.execute(
            select(ChatRoom).where(ChatRoom.tutoring_request_id == tutoring_request_id)
        )
        room = found.scalar_one()
        participants = await self._participants_by_room([room.id])
        return {
            "id": str(room.id),
            "title": room.title,
            "tutoring_request_id": str(room.tutoring_request_id),
            "course_id": str(room.course_id) if room.course_id else None,
            "participants": participants.get(room.id, []),
            "created_at": to_iso(room.created_at),
            "last_activity": to_iso(room.last_activity),
        }

    async def list_rooms(self, caller_id: UUID) -> List[Dict]:
        """Active rooms the caller belongs to, most recently active first"""
        stmt = (
            select(ChatRoom, Subject.name.label("subject_name"))
            .join(
                ChatRoomParticipant,
                and_(
                    ChatRoomParticipant.chat_room_id == ChatRoom.id,
                    ChatRoomParticipant.user_id == caller_id
                )
            )
            .outerjoin(TutoringRequest, TutoringRequest.id == ChatRoom.tutoring_request_id)
            .outerjoin(Subject, Subject.id == TutoringRequest.subject_id)
            .where(
                ChatRoom.is_active.is_(True),
                ChatRoom.is_deleted.is_(False)
            )
            .order_by(ChatRoom.last_activity.desc())
        )
        result = await self.db.execute(stmt)
        rows = result.all()
        if not rows:
            return []

        room_ids = [room.id for room, _ in rows]
        participants = await self._participants_by_room(room_ids)
        unread = await self._unread_counts(room_ids, caller_id)

        return [
            {
                "id": str(room.id),
                "title": room.title,
                "participants": participants.get(room.id, []),
                "subject": subject_name,
                "tutoring_request_id": str(room.tutoring_request_id) if room.tutoring_request_id else None,
                "course_id": str(room.course_id) if room.course_id else None,
                "unread_count": unread.get(room.id, 0),
                "last_activity": to_iso(room.last_activity),
                "created_at": to_iso(room.created_at),
            }
            for room, subject_name in rows
        ]

    async def require_participant(self, room_id: UUID, user_id: UUID) -> ChatRoom:
        """Load a room, failing unless the user is one of its participants"""
        room = await self.require(room_id)

        stmt = select(ChatRoomParticipant.id).where(
            ChatRoomParticipant.chat_room_id == room_id,
            ChatRoomParticipant.user_id == user_id
        )
        result = await self.db.execute(stmt)
        if result.first() is None:
            logger.warning(f"User {user_id} denied access to chat room {room_id}")
            raise Forbidden("Access denied")
        return room

    async def mark_read(self, room_id: UUID, caller_id: UUID) -> int:
        """Record a read receipt for every message in the room the caller has not read yet"""
        await self.require_participant(room_id, caller_id)

        now = utcnow()
        unread = select(
            new_uuid_for(self.db),
            ChatMessage.id,
            literal(caller_id, Uuid(as_uuid=True)),
            literal(now, DateTime(timezone=True)),
            literal(now, DateTime(timezone=True)),
            literal(now, DateTime(timezone=True)),
            literal(False, Boolean),
        ).where(
            ChatMessage.chat_room_id == room_id,
            ChatMessage.is_deleted.is_(False)
        )
        # One INSERT ... SELECT; the unique (message_id, user_id) key drops already-read messages
        stmt = insert_for(self.db, MessageReadReceipt).from_select(
            ["id", "message_id", "user_id", "read_at", "created_at", "updated_at", "is_deleted"],
            unread,
            include_defaults=False,
        ).on_conflict_do_nothing(index_elements=["message_id", "user_id"])
        result = await self.db.execute(stmt)
        await self.db.commit()

        logger.info(f"User {caller_id} read {result.rowcount} messages in room {room_id}")
        return result.rowcount

    async def _participants_by_room(self, room_ids: Iterable[UUID]) -> Dict[UUID, List[Dict]]:
        stmt = (
            select(ChatRoomParticipant.chat_room_id, User.id, User.full_name)
            .join(User, User.id == ChatRoomParticipant.user_id)
            .where(ChatRoomParticipant.chat_room_id.in_(list(room_ids)))
            .order_by(ChatRoomParticipant.created_at, User.full_name)
        )
        result = await self.db.execute(stmt)

        participants: Dict[UUID, List[Dict]] = {}
        for room_id, user_id, full_name in result.all():
            participants.setdefault(room_id, []).append({"id": str(user_id), "full_name": full_name})
        return participants

    async def _unread_counts(self, room_ids: Iterable[UUID], user_id: UUID) -> Dict[UUID, int]:
        stmt = (
            select(ChatMessage.chat_room_id, func.count(ChatMessage.id))
            .where(
                ChatMessage.chat_room_id.in_(list(room_ids)),
                ChatMessage.sender_id != user_id,
                ChatMessage.is_deleted.is_(False),
                ~exists().where(
                    MessageReadReceipt.message_id == ChatMessage.id,
                    MessageReadReceipt.user_id == user_id
                )
            )
            .group_by(ChatMessage.chat_room_id)
        )
        result = await self.db.execute(stmt)
        return {room_id: count for room_id, count in result.all()}
