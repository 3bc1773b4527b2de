# peerlearn/services/user_service.py
from typing import Dict, Iterable, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from .base_service import BaseService
from ..core.exceptions import Unauthorized
from ..core.security import hash_password, verify_password
from ..models.user import User

logger = logging.getLogger(__name__)

class UserService(BaseService[User]):
    """Lookup service over registered users (the identity directory)."""
    resource_name = "User"

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    @staticmethod
    def to_dict(user: User) -> Dict:
        return {
            "id": str(user.id),
            "email": user.email,
            "full_name": user.full_name,
        }

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(
            func.lower(User.email) == email.strip().lower(),
            User.is_deleted.is_(False)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_display_names(self, user_ids: Iterable[UUID]) -> Dict[UUID, str]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(User.id, User.full_name).where(User.id.in_(ids)))
        return {row.id: row.full_name for row in result}

    async def create_user(self, email: str, full_name: str, hashed_password: str) -> User:
        """Register a user; the credential is stored as already hashed by the caller"""
        user = await self.create({
            "email": email,
            "full_name": full_name,
            "hashed_password": hashed_password,
        })
        logger.info(f"User created: {user.id}")
        return user

    async def register(self, email: str, full_name: str, password: str) -> User:
        """Sign up; a taken email surfaces as an IntegrityError from the unique index"""
        return await self.create_user(email, full_name.strip(), hash_password(password))

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info(f"Failed sign-in for {email}")
            raise Unauthorized("invalid_credentials")
        return user
