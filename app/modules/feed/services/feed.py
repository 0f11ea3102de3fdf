"""
Feed query service.

Builds the post listing behind the explore page: conjunctive filters
(text search, tags, author, address substring), newest-first ordering with
an id tie-break, and offset pagination.
"""
import logging
import math
from typing import Any, Optional, Tuple

from sqlalchemy import and_, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import StoreUnavailableError
from app.modules.feed.schemas.feed import FeedFilters, FeedResponse, Pagination
from app.modules.posts.models.post import Post, PostTag
from app.modules.posts.services.post import post_load_options, to_post_out

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"
# keeps the offset inside a 64-bit integer for any allowed page size
MAX_PAGE = 2 ** 31 - 1


def _parse_positive_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


def clamp_pagination(page: Any, limit: Any) -> Tuple[int, int]:
    """Coerce raw page/limit values; malformed ones fall back to defaults"""
    page_number = min(_parse_positive_int(page) or 1, MAX_PAGE)
    page_size = _parse_positive_int(limit) or settings.FEED_PAGE_SIZE
    page_size = min(page_size, settings.FEED_MAX_PAGE_SIZE)
    return page_number, page_size


def build_filters(
    search: Optional[str] = None,
    tags: Optional[str] = None,
    category: Optional[str] = None,
    author: Optional[str] = None,
    location: Optional[str] = None,
) -> FeedFilters:
    """Turn raw query parameters into FeedFilters; category is one more tag"""
    # an over-long tag simply matches nothing here
    tag_set = [tag.strip() for tag in (tags or "").split(",") if tag.strip()]
    if category and category.strip() and category.strip() not in tag_set:
        tag_set.append(category.strip())
    return FeedFilters(
        search=(search or "").strip() or None,
        tags=tag_set,
        author=(author or "").strip() or None,
        location=(location or "").strip() or None,
    )


def contains_pattern(text: str) -> str:
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _filter_conditions(filters: FeedFilters) -> list:
    conditions = []

    if filters.search:
        pattern = contains_pattern(filters.search)
        conditions.append(
            or_(
                Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                Post.content.ilike(pattern, escape=LIKE_ESCAPE),
                Post.tags.any(PostTag.name.ilike(pattern, escape=LIKE_ESCAPE)),
            )
        )

    if filters.tags:
        conditions.append(Post.tags.any(PostTag.name.in_(filters.tags)))

    if filters.author:
        conditions.append(Post.author_id == filters.author)

    if filters.location:
        pattern = contains_pattern(filters.location)
        conditions.append(
            and_(Post.address.isnot(None), Post.address.ilike(pattern, escape=LIKE_ESCAPE))
        )

    return conditions


def list_posts(db: Session, filters: FeedFilters, page: Any = 1, limit: Any = None) -> FeedResponse:
    """Return one page of posts matching every supplied filter"""
    page, limit = clamp_pagination(page, limit)
    skip = (page - 1) * limit
    conditions = _filter_conditions(filters)
    logger.info(f"Listing posts page={page} limit={limit} filters={filters.model_dump(exclude_defaults=True)}")

    try:
        query = db.query(Post).filter(*conditions)
        total_items = query.order_by(None).count()
        # a page past the end is empty; its offset may not even fit the column type
        posts = []
        if skip < total_items:
            posts = (
                query.options(*post_load_options())
                .order_by(desc(Post.created_at), desc(Post.id))
                .offset(skip)
                .limit(limit)
                .all()
            )
    except SQLAlchemyError as e:
        logger.error(f"Feed query failed: {e}")
        raise StoreUnavailableError("Could not load posts right now") from e

    total_pages = math.ceil(total_items / limit) if total_items else 0
    items = [to_post_out(post) for post in posts]

    return FeedResponse(
        posts=items,
        pagination=Pagination(
            current=page,
            limit=limit,
            count=len(items),
            total=total_pages,
            total_items=total_items,
            has_more=page < total_pages,
        ),
    )
