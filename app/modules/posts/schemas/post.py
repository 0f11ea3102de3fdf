from typing import Any, List, Optional
from datetime import datetime
from pydantic import Field, field_validator

from app.modules.user_management.schemas.user import AuthorSummary, CamelModel
from app.modules.posts.services.normalize import normalize_tags

TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 5000

def _clean_text(value: Any, field: str, max_length: int) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError(f"{field} is required")
    if len(text) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return text

class PostCreate(CamelModel):
    title: Optional[str] = Field(default=None, validate_default=True)
    content: Optional[str] = Field(default=None, validate_default=True)
    tags: List[str] = []
    # Raw values; anything that is not a finite in-range number drops the location
    latitude: Optional[Any] = None
    longitude: Optional[Any] = None
    address: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        return _clean_text(v, "Title", TITLE_MAX_LENGTH)

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v):
        return _clean_text(v, "Content", CONTENT_MAX_LENGTH)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        return normalize_tags(v)

    @field_validator("address", mode="before")
    @classmethod
    def strip_address(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

class PostUpdate(CamelModel):
    """Partial update; only fields present in the payload are applied"""
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    latitude: Optional[Any] = None
    longitude: Optional[Any] = None
    address: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        # A blank value means "leave unchanged"
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return _clean_text(v, "Title", TITLE_MAX_LENGTH)

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return _clean_text(v, "Content", CONTENT_MAX_LENGTH)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        if v is None:
            return None
        return normalize_tags(v)

    @field_validator("address", mode="before")
    @classmethod
    def strip_address(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

class Location(CamelModel):
    latitude: float
    longitude: float
    address: Optional[str] = None

class CommentOut(CamelModel):
    id: str
    content: str
    author: Optional[AuthorSummary] = None
    created_at: datetime

class PostOut(CamelModel):
    """Post model returned to client"""
    id: str
    title: str
    content: str
    author: Optional[AuthorSummary] = None
    image_url: Optional[str] = None
    location: Optional[Location] = None
    tags: List[str] = []
    likes: List[str] = []
    like_count: int = 0
    comments: List[CommentOut] = []
    comment_count: int = 0
    created_at: datetime
    updated_at: datetime

class LikeResult(CamelModel):
    liked: bool
    like_count: int
