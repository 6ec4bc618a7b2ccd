"""Book model."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from blogapi.models.base import Base


class Book(Base):
    __tablename__ = "books"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(512), nullable=False)
    image_public_id = Column(String(256), nullable=True)
    link = Column(String(512), nullable=False)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    author = relationship("User")
