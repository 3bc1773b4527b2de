from sqlalchemy import Column, String
from sqlalchemy.orm import validates
from .base import Base

class User(Base):
    __tablename__ = "users"

    email = Column(String(254), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), index=True, nullable=False)

    @validates('email')
    def normalize_email(self, key, value):
        if not value or "@" not in value:
            raise ValueError("Invalid email address format")
        return value.strip().lower()
