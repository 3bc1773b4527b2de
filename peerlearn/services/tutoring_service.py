# peerlearn/services/tutoring_service.py
"""Lifecycle of tutoring requests between two users over a subject."""
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_
from sqlalchemy.orm import aliased
import logging

from .base_service import BaseService
from .user_service import UserService
from .subject_service import SubjectService
from ..core.exceptions import Forbidden, InvalidArgument, InvalidTransition
from ..models.base import utcnow
from ..models.subject import Subject
from ..models.tutoring_request import TutoringRequest, TutoringStatus
from ..models.user import User
from ..utils.formatting import to_iso

logger = logging.getLogger(__name__)

class TutoringRequestService(BaseService[TutoringRequest]):
    resource_name = "Tutoring request"

    def __init__(self, db: AsyncSession):
        super().__init__(TutoringRequest, db)

    @staticmethod
    def to_dict(request: TutoringRequest) -> Dict:
        return {
            "id": str(request.id),
            "from_user_id": str(request.from_user_id),
            "to_user_id": str(request.to_user_id),
            "subject_id": str(request.subject_id),
            "message": request.message,
            "status": TutoringStatus(request.status).value,
            "created_at": to_iso(request.created_at),
            "updated_at": to_iso(request.updated_at),
        }

    async def create_request(
        self,
        caller_id: UUID,
        from_user_id: UUID,
        to_user_id: UUID,
        subject_id: UUID,
        message: str = "",
        status: Optional[TutoringStatus] = None
    ) -> TutoringRequest:
        """Create a pending request sent by the caller"""
        if caller_id != from_user_id:
            logger.warning(f"User {caller_id} tried to send a request as {from_user_id}")
            raise Forbidden("Requests can only be sent on your own behalf")

        if status is not None and status != TutoringStatus.PENDING:
            raise InvalidArgument("New tutoring requests must be pending", detail={"status": status.value})

        if from_user_id == to_user_id:
            raise InvalidArgument("Cannot send a tutoring request to yourself")

        await UserService(self.db).require(to_user_id)
        await SubjectService(self.db).require(subject_id)

        request = await self.create({
            "from_user_id": from_user_id,
            "to_user_id": to_user_id,
            "subject_id": subject_id,
            "message": message or "",
            "status": TutoringStatus.PENDING,
        })
        logger.info(f"Tutoring request {request.id} created: {from_user_id} -> {to_user_id}")
        return request

    async def list_for_user(self, caller_id: UUID, user_id: UUID) -> List[Dict]:
        """All requests sent or received by the user, newest first, with names resolved"""
        if caller_id != user_id:
            raise Forbidden("Requests can only be listed for yourself")

        from_user = aliased(User)
        to_user = aliased(User)
        stmt = (
            select(
                TutoringRequest,
                from_user.full_name.label("from_user_name"),
                to_user.full_name.label("to_user_name"),
                Subject.name.label("subject_name"),
            )
            .outerjoin(from_user, from_user.id == TutoringRequest.from_user_id)
            .outerjoin(to_user, to_user.id == TutoringRequest.to_user_id)
            .outerjoin(Subject, Subject.id == TutoringRequest.subject_id)
            .where(
                or_(
                    TutoringRequest.from_user_id == user_id,
                    TutoringRequest.to_user_id == user_id
                ),
                TutoringRequest.is_deleted.is_(False)
            )
            .order_by(TutoringRequest.created_at.desc())
        )
        result = await self.db.execute(stmt)

        items = []
        for request, from_name, to_name, subject_name in result.all():
            is_from_current_user = request.from_user_id == user_id
            other_name = to_name if is_from_current_user else from_name
            current_name = from_name if is_from_current_user else to_name

            item = self.to_dict(request)
            item.update({
                "from_user_name": from_name or "Unknown User",
                "to_user_name": to_name or "Unknown User",
                "other_name": other_name or "Peer",
                "current_user_name": current_name or "You",
                "subject_name": subject_name or "General",
                "is_from_current_user": is_from_current_user,
            })
            items.append(item)
        return items

    async def update_status(self, request_id: UUID, caller_id: UUID, new_status: TutoringStatus) -> TutoringRequest:
        """Accept or reject a pending request; only the recipient may do so"""
        request = await self.require(request_id)

        if caller_id != request.to_user_id:
            logger.warning(f"User {caller_id} tried to change status of request {request_id}")
            raise Forbidden("Only the recipient can accept or reject a request")

        current = TutoringStatus(request.status)
        if current == new_status:
            return request
        if current.is_terminal:
            raise InvalidTransition(current.value, new_status.value)

        # Compare-and-swap: only a still-pending row is updated
        stmt = (
            update(TutoringRequest)
            .where(
                TutoringRequest.id == request_id,
                TutoringRequest.status == TutoringStatus.PENDING
            )
            .values(status=new_status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        await self.db.refresh(request)

        if result.rowcount == 0:
            current = TutoringStatus(request.status)
            if current != new_status:
                raise InvalidTransition(current.value, new_status.value)
            return request

        logger.info(f"Tutoring request {request_id} {current.value} -> {new_status.value}")
        return request
