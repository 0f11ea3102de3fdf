from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey

from app.db.session import Base

class PostLike(Base):
    __tablename__ = "post_likes"

    # The composite key is what keeps a user from liking a post twice
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)
