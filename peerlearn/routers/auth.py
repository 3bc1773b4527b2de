from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import create_access_token, get_current_user_id
from ..models.user import User
from ..schemas.auth_schemas import SigninRequest, SignupRequest
from ..services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_response(user: User) -> dict:
    return {
        "token": create_access_token(user.id, email=user.email),
        "token_type": "bearer",
        "user_id": str(user.id),
        "user": UserService.to_dict(user),
    }

@router.post("/signup", response_model=dict, status_code=201)
async def signup(signup_data: SignupRequest, db: AsyncSession = Depends(get_db)):
    """Create an account and return a bearer token for it"""
    user = await UserService(db).register(signup_data.email, signup_data.full_name, signup_data.password)
    return _token_response(user)

@router.post("/signin", response_model=dict)
async def signin(signin_data: SigninRequest, db: AsyncSession = Depends(get_db)):
    user = await UserService(db).authenticate(signin_data.email, signin_data.password)
    return _token_response(user)

@router.post("/signout", response_model=dict)
async def signout():
    """Tokens are stateless; the client discards its copy"""
    return {"ok": True}

@router.get("/me", response_model=dict)
async def me(
    caller_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """The authenticated caller's account"""
    user = await UserService(db).require(caller_id)
    return UserService.to_dict(user)
