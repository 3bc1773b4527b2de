# peerlearn/core/security.py
"""Bearer token handling and the authenticated-caller dependency."""
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID
import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .database import get_db
from .exceptions import Unauthorized

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id, expires_delta: Optional[timedelta] = None, **claims) -> str:
    to_encode = {"sub": str(user_id), **claims}
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID:
    """Return the user id carried by a token, or raise Unauthorized"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return UUID(str(payload["sub"]))
    except (JWTError, KeyError, ValueError):
        raise Unauthorized("Invalid or expired token")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> UUID:
    """Authenticate the caller and yield their user id"""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise Unauthorized("Missing bearer token")

    user_id = decode_access_token(credentials.credentials)

    from ..services.user_service import UserService
    if await UserService(db).get(user_id) is None:
        logger.warning(f"Token presented for unknown user {user_id}")
        raise Unauthorized("Unknown user")
    return user_id
