from datetime import datetime
from typing import Optional
import uuid
import logging

from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import ForbiddenError, NotFoundError
from app.modules.posts.models.post import Post, PostTag
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.schemas.post import PostCreate, PostUpdate, PostOut, CommentOut, Location
from app.modules.posts.services.normalize import build_point, point_to_wire
from app.modules.user_management.schemas.user import author_summary

logger = logging.getLogger(__name__)

def post_load_options():
    """Eager loads needed to serialize a post without lazy queries"""
    return (
        selectinload(Post.author),
        selectinload(Post.tags),
        selectinload(Post.likes),
        selectinload(Post.comments).selectinload(Comment.author),
    )

def to_comment_out(comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        content=comment.content,
        author=author_summary(comment.author),
        created_at=comment.created_at,
    )

def to_post_out(post: Post) -> PostOut:
    """Transform a stored post into its wire shape"""
    location = point_to_wire(post.location, post.address)
    return PostOut(
        id=post.id,
        title=post.title,
        content=post.content,
        author=author_summary(post.author),
        image_url=post.image_url,
        location=Location(**location) if location else None,
        tags=post.tag_names,
        likes=post.like_user_ids,
        like_count=len(post.likes),
        comments=[to_comment_out(comment) for comment in post.comments],
        comment_count=len(post.comments),
        created_at=post.created_at,
        updated_at=post.updated_at,
    )

def get_post(db: Session, post_id: str) -> Optional[Post]:
    """Get post by ID"""
    logger.info(f"Getting post with ID: {post_id}")
    return db.query(Post).options(*post_load_options()).filter(Post.id == post_id).first()

def get_post_or_404(db: Session, post_id: str) -> Post:
    post = get_post(db, post_id)
    if not post:
        raise NotFoundError("Post not found")
    return post

def get_authored_post(db: Session, post_id: str, requester_id: str) -> Post:
    """Fetch a post the requester is allowed to change"""
    post = get_post_or_404(db, post_id)
    if post.author_id != requester_id:
        raise ForbiddenError("Not authorized to modify this post")
    return post

def _tag_rows(tags):
    return [PostTag(position=position, name=name) for position, name in enumerate(tags)]

def create_post(db: Session, post_in: PostCreate, author_id: str) -> Post:
    """Create new post"""
    logger.info(f"Creating post for author ID: {author_id}")
    point = build_point(post_in.latitude, post_in.longitude)
    if point is None and (post_in.latitude is not None or post_in.longitude is not None):
        logger.info("Discarding unusable coordinates on new post")

    post = Post(
        id=str(uuid.uuid4()),
        title=post_in.title,
        content=post_in.content,
        author_id=author_id,
        image_url=post_in.image_url,
        location=point,
        address=post_in.address if point else None,
        tags=_tag_rows(post_in.tags),
    )
    db.add(post)
    db.commit()

    # Population happens after the write; a failure here does not undo the post
    return get_post(db, post.id)

def update_post(db: Session, post: Post, post_in: PostUpdate) -> Post:
    """Apply the supplied fields of a partial update"""
    logger.info(f"Updating post with ID: {post.id}")
    supplied = post_in.model_fields_set

    if post_in.title is not None:
        post.title = post_in.title
    if post_in.content is not None:
        post.content = post_in.content
    if "tags" in supplied and post_in.tags is not None:
        post.tags = _tag_rows(post_in.tags)
    if post_in.image_url is not None:
        post.image_url = post_in.image_url

    if "latitude" in supplied or "longitude" in supplied:
        point = build_point(post_in.latitude, post_in.longitude)
        if point is not None:
            post.location = point
            if post_in.address is not None:
                post.address = post_in.address
        else:
            logger.info(f"Ignoring unusable coordinates in update of post {post.id}")
    elif post_in.address is not None and post.location:
        post.address = post_in.address

    post.updated_at = datetime.utcnow()
    db.commit()
    return get_post(db, post.id)

def delete_post(db: Session, post: Post) -> Post:
    """
    Delete post together with its comments, likes, tags and meeting requests
    """
    logger.info(f"Deleting post with ID: {post.id}")
    db.delete(post)
    db.commit()
    return post
