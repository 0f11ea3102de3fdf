from datetime import datetime

from sqlalchemy import Column, String, DateTime, Text, Integer, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship

from app.db.session import Base

class Post(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    author_id = Column(String, ForeignKey("users.id"), nullable=False)
    # GeoJSON Point: {"type": "Point", "coordinates": [longitude, latitude]}
    location = Column(JSON, nullable=True)
    address = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    author = relationship("User")
    tags = relationship(
        "PostTag",
        order_by="PostTag.position",
        cascade="all, delete-orphan",
    )
    likes = relationship("PostLike", cascade="all, delete-orphan")
    comments = relationship(
        "Comment",
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
    )
    meeting_requests = relationship("MeetingRequest", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_posts_author_created", "author_id", "created_at"),
        Index("ix_posts_created_id", "created_at", "id"),
    )

    @property
    def tag_names(self):
        return [tag.name for tag in self.tags]

    @property
    def like_user_ids(self):
        return [like.user_id for like in self.likes]


class PostTag(Base):
    __tablename__ = "post_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    name = Column(String(20), nullable=False, index=True)
