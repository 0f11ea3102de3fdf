"""Display helpers that turn wire posts into card view models"""
from datetime import datetime, timezone
from html import escape
from typing import Any, Dict, Optional


def format_date(value: Optional[str], now: Optional[datetime] = None) -> str:
    """Relative age for recent timestamps, the calendar date for older ones"""
    if not value:
        return "Unknown date"
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return "Unknown date"
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    minutes = int((now - moment).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 24 * 60:
        return f"{minutes // 60}h ago"
    if minutes < 7 * 24 * 60:
        return f"{minutes // (24 * 60)}d ago"
    return moment.date().isoformat()


def format_location(location: Any) -> Optional[str]:
    if not location:
        return None
    if isinstance(location, str):
        return location
    if location.get("address"):
        return location["address"]
    latitude, longitude = location.get("latitude"), location.get("longitude")
    if latitude is not None and longitude is not None:
        return f"{latitude:.4f}, {longitude:.4f}"
    return "Location available"


def author_name(author: Optional[Dict[str, Any]]) -> str:
    if not author:
        return "Unknown User"
    return author.get("displayName") or author.get("username") or "Unknown User"


def post_card(post: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Escaped, display-ready fields of one feed card"""
    author = author_name(post.get("author"))
    location = format_location(post.get("location"))
    return {
        "id": post.get("id"),
        "title": escape(post.get("title") or "Untitled"),
        "content": escape(post.get("content") or ""),
        "image_url": post.get("imageUrl"),
        "tags": [f"#{escape(tag)}" for tag in post.get("tags") or []],
        "author": escape(author),
        "author_initial": escape(author[0].upper()) if author != "Unknown User" else "U",
        "date": format_date(post.get("createdAt"), now),
        "location": escape(location) if location else None,
        "like_count": post.get("likeCount", len(post.get("likes") or [])),
        "comment_count": post.get("commentCount", len(post.get("comments") or [])),
        "liked": bool(post.get("liked")),
    }
