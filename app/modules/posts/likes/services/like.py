import logging
from sqlalchemy import delete, func, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.modules.posts.models.post import Post
from app.modules.posts.likes.models.like import PostLike
from app.modules.posts.schemas.post import LikeResult

logger = logging.getLogger(__name__)

def count_likes(db: Session, post_id: str) -> int:
    return db.query(func.count(PostLike.user_id)).filter(PostLike.post_id == post_id).scalar() or 0

def has_liked(db: Session, post_id: str, user_id: str) -> bool:
    return (
        db.query(PostLike.user_id)
        .filter(PostLike.post_id == post_id, PostLike.user_id == user_id)
        .first()
        is not None
    )

def toggle_like(db: Session, post_id: str, user_id: str) -> LikeResult:
    """
    Like the post if the user has not liked it yet, otherwise unlike it.

    Each branch is a single row statement so concurrent toggles never
    rewrite the whole like set.
    """
    if db.query(Post.id).filter(Post.id == post_id).first() is None:
        raise NotFoundError("Post not found")

    removed = db.execute(
        delete(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
    ).rowcount
    if removed:
        liked = False
        db.commit()
    else:
        try:
            db.execute(insert(PostLike).values(post_id=post_id, user_id=user_id))
            db.commit()
        except IntegrityError:
            # another request inserted the same like first
            db.rollback()
            logger.info(f"Concurrent like on post {post_id} by {user_id}")
        liked = True

    like_count = count_likes(db, post_id)
    logger.info(f"User {user_id} {'liked' if liked else 'unliked'} post {post_id}")
    return LikeResult(liked=liked, like_count=like_count)
