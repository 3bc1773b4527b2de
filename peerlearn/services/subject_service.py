# peerlearn/services/subject_service.py
from typing import Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from .base_service import BaseService
from ..core.cache import cache_manager
from ..core.config import settings
from ..core.database import insert_for
from ..core.exceptions import InvalidArgument
from ..models.base import utcnow
from ..models.subject import Subject
import uuid

logger = logging.getLogger(__name__)

SUBJECTS_CACHE_KEY = "subjects:all"

class SubjectService(BaseService[Subject]):
    """Canonical set of named subjects."""
    resource_name = "Subject"

    def __init__(self, db: AsyncSession):
        super().__init__(Subject, db)

    @staticmethod
    def to_dict(subject: Subject) -> Dict:
        return {
            "id": str(subject.id),
            "name": subject.name,
            "description": subject.description or None,
        }

    async def list_subjects(self) -> List[Dict]:
        """All subjects sorted by name"""
        cached = await cache_manager.get(SUBJECTS_CACHE_KEY)
        if cached is not None:
            return cached

        stmt = select(Subject).where(Subject.is_deleted.is_(False)).order_by(Subject.name)
        result = await self.db.execute(stmt)
        subjects = [self.to_dict(s) for s in result.scalars().all()]

        await cache_manager.set(SUBJECTS_CACHE_KEY, subjects, expire=settings.subjects_cache_ttl)
        return subjects

    async def find_or_create_by_name(self, name: str, description: str = "") -> Subject:
        """Return the subject with this name, creating it if absent"""
        name = (name or "").strip()
        if not name:
            raise InvalidArgument("Subject name is required")

        now = utcnow()
        stmt = insert_for(self.db, Subject).values(
            id=uuid.uuid4(),
            name=name,
            description=description or "",
            created_at=now,
            updated_at=now,
            is_deleted=False,
        ).on_conflict_do_nothing(index_elements=["name"])
        result = await self.db.execute(stmt)
        await self.db.commit()

        if result.rowcount:
            logger.info(f"Subject created: {name}")
            await cache_manager.delete(SUBJECTS_CACHE_KEY)

        found = await self.db.execute(select(Subject).where(Subject.name == name))
        return found.scalar_one()
