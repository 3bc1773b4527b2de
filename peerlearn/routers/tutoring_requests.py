from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import get_current_user_id
from ..schemas.tutoring_schemas import TutoringRequestCreate, TutoringRequestStatusUpdate
from ..services.tutoring_service import TutoringRequestService

router = APIRouter(prefix="/tutoring-requests", tags=["Tutoring Requests"])

@router.post("", response_model=dict, status_code=201)
async def create_tutoring_request(
    request_data: TutoringRequestCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Send a tutoring request to another user"""
    service = TutoringRequestService(db)
    tutoring_request = await service.create_request(
        caller_id=caller_id,
        from_user_id=request_data.from_user_id,
        to_user_id=request_data.to_user_id,
        subject_id=request_data.subject_id,
        message=request_data.message,
        status=request_data.status
    )
    return service.to_dict(tutoring_request)

@router.get("/user/{user_id}", response_model=List[dict])
async def get_user_tutoring_requests(
    user_id: UUID,
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Requests sent or received by the caller, newest first"""
    return await TutoringRequestService(db).list_for_user(caller_id, user_id)

@router.patch("/{request_id}", response_model=dict)
async def update_tutoring_request_status(
    request_id: UUID,
    status_update: TutoringRequestStatusUpdate,
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Accept or reject a pending request"""
    service = TutoringRequestService(db)
    tutoring_request = await service.update_status(request_id, caller_id, status_update.status)
    return service.to_dict(tutoring_request)
