# peerlearn/schemas/tutoring_schemas.py
"""Pydantic schemas for tutoring requests."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ..models.tutoring_request import TutoringStatus

class TutoringRequestCreate(BaseModel):
    from_user_id: UUID = Field(..., description="Sender; must be the authenticated caller")
    to_user_id: UUID = Field(..., description="Recipient")
    subject_id: UUID = Field(..., description="Subject the tutoring is about")
    message: Optional[str] = Field(default="", max_length=2000, description="Free-text note to the recipient")
    status: Optional[TutoringStatus] = Field(default=None, description="Accepted for compatibility; must be pending")

class TutoringRequestStatusUpdate(BaseModel):
    status: TutoringStatus
