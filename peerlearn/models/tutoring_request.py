# peerlearn/models/tutoring_request.py
from sqlalchemy import Column, Enum, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import relationship
from .base import Base
import enum

class TutoringStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not TutoringStatus.PENDING


class TutoringRequest(Base):
    __tablename__ = "tutoring_requests"

    from_user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    to_user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    subject_id = Column(Uuid(as_uuid=True), ForeignKey("subjects.id"), nullable=False, index=True)
    message = Column(Text, default="", nullable=False)
    status = Column(
        Enum(
            TutoringStatus,
            name="tutoring_request_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=TutoringStatus.PENDING,
        nullable=False,
    )

    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])
    subject = relationship("Subject")

    __table_args__ = (
        Index('idx_tutoring_request_from_time', 'from_user_id', 'created_at'),
        Index('idx_tutoring_request_to_time', 'to_user_id', 'created_at'),
    )
