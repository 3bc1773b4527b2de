from sqlalchemy import Column, String, Text
from .base import Base

class Subject(Base):
    __tablename__ = "subjects"

    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, default="", nullable=False)
