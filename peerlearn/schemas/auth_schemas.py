# peerlearn/schemas/auth_schemas.py
"""Pydantic schemas for signup and signin."""
from pydantic import BaseModel, EmailStr, Field

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=100)

class SigninRequest(BaseModel):
    email: EmailStr
    password: str
