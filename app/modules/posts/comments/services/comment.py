from typing import Optional
import uuid
import logging
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.comments.schemas.comment import CommentCreate
from app.modules.posts.models.post import Post

logger = logging.getLogger(__name__)

def get_comment(db: Session, post_id: str, comment_id: str) -> Optional[Comment]:
    """Get a comment that belongs to the given post"""
    return (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.id == comment_id, Comment.post_id == post_id)
        .first()
    )

def _require_post(db: Session, post_id: str) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    return post

def create_comment(db: Session, post_id: str, comment_in: CommentCreate, author_id: str) -> Comment:
    """Append a comment to a post"""
    if not comment_in.content:
        raise ValidationError("Comment content is required")
    _require_post(db, post_id)

    comment = Comment(
        id=str(uuid.uuid4()),
        post_id=post_id,
        author_id=author_id,
        content=comment_in.content,
    )
    db.add(comment)
    db.commit()
    logger.info(f"User {author_id} commented on post {post_id}")

    # Return comment with author
    return get_comment(db, post_id, comment.id)

def delete_comment(db: Session, post_id: str, comment_id: str, requester_id: str) -> Comment:
    """Remove a comment; either the comment author or the post author may do so"""
    post = _require_post(db, post_id)
    comment = get_comment(db, post_id, comment_id)
    if not comment:
        raise NotFoundError("Comment not found")

    is_comment_author = comment.author_id == requester_id
    is_post_author = post.author_id == requester_id
    if not is_comment_author and not is_post_author:
        raise ForbiddenError("Not authorized to delete this comment")

    db.delete(comment)
    db.commit()
    logger.info(f"Comment {comment_id} removed from post {post_id} by {requester_id}")
    return comment
