from typing import Any, Dict, Optional, Tuple
import json
import logging

from fastapi import APIRouter, Depends, Query, Request, UploadFile, status
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

# Get the logger
logger = logging.getLogger(__name__)

from app.db.session import get_db
from app.deps import get_current_user
from app.core.exceptions import ValidationError
from app.core.responses import ApiResponse, MessageResponse
from app.core.storage import r2_storage
from app.modules.user_management.models.user import User
from app.modules.feed.schemas.feed import FeedResponse
from app.modules.feed.services.feed import build_filters, list_posts
from app.modules.posts.schemas.post import PostCreate, PostUpdate, PostOut
from app.modules.posts.services.post import (
    get_post_or_404, get_authored_post, create_post, update_post, delete_post, to_post_out
)

router = APIRouter(prefix="")

async def _read_post_payload(request: Request) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """Read a post body sent either as JSON or as multipart form data with one image"""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data") or content_type.startswith("application/x-www-form-urlencoded"):
        form = await request.form()
        data: Dict[str, Any] = {}
        image = None
        for key in set(form.keys()):
            values = form.getlist(key)
            if key == "image":
                files = [value for value in values if isinstance(value, StarletteUploadFile) and value.filename]
                image = files[0] if files else None
            elif key == "tags":
                data["tags"] = values if len(values) > 1 else values[0]
            else:
                data[key] = values[-1]
        return data, image

    raw = await request.body()
    if not raw:
        return {}, None
    try:
        data = json.loads(raw)
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data, None

@router.get("", response_model=FeedResponse)
def read_posts(
    db: Session = Depends(get_db),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Posts per page"),
    search: Optional[str] = Query(None, description="Substring of title, content or a tag"),
    tags: Optional[str] = Query(None, description="Comma separated tags"),
    category: Optional[str] = Query(None, description="A single tag"),
    author: Optional[str] = Query(None, description="Author user id"),
    location: Optional[str] = Query(None, description="Substring of the post address"),
) -> Any:
    """
    Retrieve one page of the feed.
    """
    filters = build_filters(search=search, tags=tags, category=category, author=author, location=location)
    return list_posts(db, filters, page=page, limit=limit)

@router.get("/user/{user_id}", response_model=FeedResponse)
def read_user_posts_by_id(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
) -> Any:
    """
    Get posts by user ID.
    """
    return list_posts(db, build_filters(author=user_id), page=page, limit=limit)

@router.post("", response_model=ApiResponse[PostOut], status_code=status.HTTP_201_CREATED)
async def create_new_post(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Create new post with an optional image file.
    """
    data, image = await _read_post_payload(request)
    post_in = PostCreate.model_validate(data)
    if image is not None:
        post_in.image_url = await r2_storage.upload_file(image, "post_images")
    post = create_post(db, post_in, current_user.id)
    return ApiResponse(data=to_post_out(post), message="Post created successfully")

@router.get("/{post_id}", response_model=ApiResponse[PostOut])
def read_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
) -> Any:
    """
    Get post by ID.
    """
    post = get_post_or_404(db, post_id)
    return ApiResponse(data=to_post_out(post))

@router.put("/{post_id}", response_model=ApiResponse[PostOut])
async def update_post_by_id(
    post_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Update a post. Only the author may do this.
    """
    post = get_authored_post(db, post_id, current_user.id)
    data, image = await _read_post_payload(request)
    post_in = PostUpdate.model_validate(data)
    if image is not None:
        post_in.image_url = await r2_storage.upload_file(image, "post_images")
    post = update_post(db, post, post_in)
    return ApiResponse(data=to_post_out(post), message="Post updated successfully")

@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Delete a post and all associated data. This is a cascading delete that removes:
    1. All likes on this post
    2. All comments on this post
    3. All meeting requests on this post
    4. The post itself
    """
    post = get_authored_post(db, post_id, current_user.id)
    image_url = post.image_url
    delete_post(db, post)
    if image_url and not r2_storage.delete_file(image_url):
        logger.warning(f"Stored image for deleted post {post_id} was not removed")
    return MessageResponse(message="Post deleted successfully")
