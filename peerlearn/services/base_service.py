# peerlearn/services/base_service.py
"""Base service with common lookup operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Type, Any, Dict, Optional, TypeVar, Generic

from ..core.exceptions import NotFound

# Define generic type
T = TypeVar('T')

class BaseService(Generic[T]):
    resource_name: str = "Resource"

    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: Any) -> Optional[T]:
        stmt = select(self.model).where(
            self.model.id == id,
            self.model.is_deleted.is_(False)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def require(self, id: Any) -> T:
        """Like get(), but a dangling id raises NotFound"""
        obj = await self.get(id)
        if obj is None:
            raise NotFound(self.resource_name, id)
        return obj

    async def create(self, obj_in: Dict) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj
