from typing import Any

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
import logging

from app.db.session import get_db
from app.deps import get_current_user
from app.core.responses import ApiResponse, MessageResponse
from app.modules.user_management.models.user import User
from app.modules.posts.schemas.post import CommentOut
from app.modules.posts.services.post import to_comment_out
from app.modules.posts.comments.schemas.comment import CommentCreate
from app.modules.posts.comments.services.comment import create_comment, delete_comment

router = APIRouter()
logger = logging.getLogger("app")

@router.post("", response_model=ApiResponse[CommentOut], status_code=status.HTTP_201_CREATED)
def create_new_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to comment on"),
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Add a comment to a post"""
    comment = create_comment(db, post_id, comment_in, current_user.id)
    return ApiResponse(data=to_comment_out(comment), message="Comment added successfully")

@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    comment_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete a comment; allowed for the comment author and the post author"""
    delete_comment(db, post_id, comment_id, current_user.id)
    return MessageResponse(message="Comment deleted successfully")
