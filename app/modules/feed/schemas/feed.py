from typing import List, Optional
from pydantic import BaseModel

from app.modules.posts.schemas.post import PostOut
from app.modules.user_management.schemas.user import CamelModel

class FeedFilters(BaseModel):
    """Filters accepted by the feed; every field is optional"""
    search: Optional[str] = None
    tags: List[str] = []
    author: Optional[str] = None
    location: Optional[str] = None

class Pagination(CamelModel):
    current: int
    limit: int
    count: int
    total: int  # number of pages
    total_items: int
    has_more: bool

class FeedResponse(BaseModel):
    """Feed response model returned to client"""
    success: bool = True
    posts: List[PostOut]
    pagination: Pagination
