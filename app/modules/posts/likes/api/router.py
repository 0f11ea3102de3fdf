from typing import Any

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.core.responses import ApiResponse
from app.modules.user_management.models.user import User
from app.modules.posts.schemas.post import LikeResult
from app.modules.posts.likes.services.like import toggle_like

router = APIRouter()

@router.post("", response_model=ApiResponse[LikeResult])
def toggle_post_like(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to like or unlike"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Like the post, or unlike it if the current user already liked it"""
    result = toggle_like(db, post_id, current_user.id)
    message = "Post liked successfully" if result.liked else "Post unliked successfully"
    return ApiResponse(data=result, message=message)
