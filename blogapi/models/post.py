"""Post and Comment models."""
from sqlalchemy import Boolean, Column, String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from blogapi.models.base import Base, JSONList


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, index=True)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    title = Column(String(256), nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String(512), nullable=True)
    image_public_id = Column(String(256), nullable=True)
    likes = Column(JSONList, nullable=False, default=list)
    num_likes = Column(Integer, nullable=False, default=0)
    num_comments = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)
    is_pinned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    author = relationship("User")
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")


class Comment(Base):
    """A comment on a post; replies point at their parent through parent_id."""
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, index=True)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    parent_id = Column(String(36), ForeignKey("comments.id"), nullable=True)
    content = Column(Text, nullable=False)
    likes = Column(JSONList, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    post = relationship("Post", back_populates="comments")
    user = relationship("User")
    parent = relationship("Comment", remote_side=[id])
