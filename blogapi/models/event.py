"""Event model."""
from sqlalchemy import Boolean, Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from blogapi.models.base import Base, JSONList


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    location = Column(String(256), nullable=False)
    # [{"url": ..., "public_id": ...}]
    images = Column(JSONList, nullable=False, default=list)
    videos = Column(JSONList, nullable=False, default=list)
    allows_attendance = Column(Boolean, nullable=False, default=False)
    attendees = Column(JSONList, nullable=False, default=list)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    creator = relationship("User")
