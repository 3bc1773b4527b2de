from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import get_current_user_id
from ..schemas.subject_schemas import SubjectCreate
from ..services.subject_service import SubjectService

router = APIRouter(prefix="/subjects", tags=["Subjects"])

@router.get("", response_model=List[dict])
async def list_subjects(db: AsyncSession = Depends(get_db)):
    """All subjects, sorted by name"""
    return await SubjectService(db).list_subjects()

@router.post("", response_model=dict)
async def find_or_create_subject(
    subject_data: SubjectCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Return the subject with this name, creating it if needed"""
    service = SubjectService(db)
    subject = await service.find_or_create_by_name(subject_data.name, subject_data.description or "")
    return service.to_dict(subject)
