"""
Unit tests for FeedClient state handling against a mocked transport.
"""

import asyncio
import json

import httpx
import pytest

from app.client.feed_client import FeedClient

BASE_URL = "http://api.test/api/v1"


def _post(post_id, like_count=0, comment_count=0):
    return {
        "id": post_id,
        "title": f"Post {post_id}",
        "content": "Body",
        "tags": [],
        "likes": [],
        "likeCount": like_count,
        "comments": [],
        "commentCount": comment_count,
    }


def _page(posts, page, total_pages):
    return {
        "success": True,
        "posts": posts,
        "pagination": {
            "current": page,
            "limit": 2,
            "count": len(posts),
            "total": total_pages,
            "totalItems": 3,
            "hasMore": page < total_pages,
        },
    }


def _client(handler, token="token"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FeedClient(BASE_URL, token=token, page_size=2, http=http)


class FeedServer:
    """Serves three posts in pages of two and records every request."""

    def __init__(self):
        self.requests = []
        self.fail_next = False

    def __call__(self, request):
        self.requests.append(request)
        if self.fail_next:
            self.fail_next = False
            return httpx.Response(503, json={"success": False, "message": "Service temporarily unavailable"})
        page = int(request.url.params.get("page", "1"))
        posts = [_post("a"), _post("b")] if page == 1 else [_post("c")] if page == 2 else []
        return httpx.Response(200, json=_page(posts, page, 2))


@pytest.mark.asyncio
async def test_load_more_appends_until_exhausted():
    server = FeedServer()
    client = _client(server)

    assert await client.load_posts() is True
    assert [post["id"] for post in client.posts] == ["a", "b"]
    assert client.has_more is True

    assert await client.load_more() is True
    assert [post["id"] for post in client.posts] == ["a", "b", "c"]
    assert client.current_page == 2
    assert client.has_more is False

    # nothing more to load, so no request is made
    assert await client.load_more() is False
    assert len(server.requests) == 2


@pytest.mark.asyncio
async def test_failed_load_more_keeps_state_and_page():
    server = FeedServer()
    client = _client(server)
    await client.load_posts()

    server.fail_next = True
    assert await client.load_more() is False
    assert client.current_page == 1
    assert [post["id"] for post in client.posts] == ["a", "b"]
    assert client.error == "Service temporarily unavailable"
    assert client.is_loading is False

    # a manual retry succeeds and clears the error
    assert await client.load_more() is True
    assert client.error is None


@pytest.mark.asyncio
async def test_apply_filters_sends_only_set_filters_and_resets_page():
    server = FeedServer()
    client = _client(server)
    await client.load_posts()
    await client.load_more()

    await client.apply_filters(search=" alpha ", tags="fintech", location="", author=None)

    params = server.requests[-1].url.params
    assert params["page"] == "1"
    assert params["limit"] == "2"
    assert params["search"] == "alpha"
    assert params["tags"] == "fintech"
    assert "location" not in params and "author" not in params
    assert client.current_page == 1
    assert [post["id"] for post in client.posts] == ["a", "b"]

    await client.clear_filters()
    assert client.filters == {}
    assert "search" not in server.requests[-1].url.params


@pytest.mark.asyncio
async def test_transport_error_is_reported():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    assert await client.load_posts() is False
    assert client.error == "Failed to load posts. Please try again."
    assert client.posts == []
    assert client.is_loading is False


@pytest.mark.asyncio
async def test_superseded_fetch_is_discarded():
    started = asyncio.Event()
    release = asyncio.Event()

    async def handler(request):
        if request.url.params.get("search") == "slow":
            started.set()
            await release.wait()
            return httpx.Response(200, json=_page([_post("stale")], 1, 1))
        return httpx.Response(200, json=_page([_post("fresh")], 1, 1))

    client = _client(handler)
    slow = asyncio.create_task(client.apply_filters(search="slow"))
    await started.wait()

    assert await client.apply_filters(search="fast") is True
    assert await slow is False
    assert [post["id"] for post in client.posts] == ["fresh"]
    assert client.filters == {"search": "fast"}
    assert client.is_loading is False


@pytest.mark.asyncio
async def test_like_updates_count_after_acknowledgement():
    def handler(request):
        if request.url.path.endswith("/like"):
            assert request.headers["Authorization"] == "Bearer token"
            return httpx.Response(200, json={"success": True, "data": {"liked": True, "likeCount": 4}})
        return httpx.Response(200, json=_page([_post("a", like_count=3)], 1, 1))

    client = _client(handler)
    await client.load_posts()

    result = await client.like("a")
    assert result == {"liked": True, "likeCount": 4}
    assert client.posts[0]["likeCount"] == 4
    assert client.posts[0]["liked"] is True


@pytest.mark.asyncio
async def test_rejected_like_leaves_count_alone():
    def handler(request):
        if request.url.path.endswith("/like"):
            return httpx.Response(404, json={"success": False, "message": "Post not found"})
        return httpx.Response(200, json=_page([_post("a", like_count=3)], 1, 1))

    client = _client(handler)
    await client.load_posts()

    assert await client.like("a") is None
    assert client.posts[0]["likeCount"] == 3
    assert client.error == "Post not found"


@pytest.mark.asyncio
async def test_writes_need_a_token():
    server = FeedServer()
    client = _client(server, token=None)

    assert await client.like("a") is None
    assert client.error == "Please login to like posts"
    assert await client.request_meeting("a", "2024-05-01", "10:00", "Hi") is None
    assert server.requests == []


@pytest.mark.asyncio
async def test_comment_flow_reconciles_counts():
    comment = {"id": "c1", "content": "Interested!", "author": None, "createdAt": "2024-06-01T10:00:00"}

    def handler(request):
        path = request.url.path
        if request.method == "GET" and path.endswith("/posts/a"):
            return httpx.Response(200, json={"success": True, "data": _post("a")})
        if request.method == "POST" and path.endswith("/posts/a/comments"):
            assert json.loads(request.content) == {"content": "Interested!"}
            return httpx.Response(201, json={"success": True, "data": comment})
        if request.method == "DELETE" and path.endswith("/posts/a/comments/c1"):
            return httpx.Response(200, json={"success": True, "message": "Comment deleted successfully"})
        return httpx.Response(200, json=_page([_post("a")], 1, 1))

    client = _client(handler)
    await client.load_posts()

    assert await client.show_comments("a") == []
    assert client.current_post_id == "a"

    assert await client.submit_comment("   ") is None
    assert client.error == "Comment cannot be empty"

    assert await client.submit_comment(" Interested! ") == comment
    assert client.comments == [comment]
    assert client.posts[0]["commentCount"] == 1

    assert await client.delete_comment("c1") is True
    assert client.comments == []
    assert client.posts[0]["commentCount"] == 0

    client.close_comments()
    assert client.current_post_id is None


@pytest.mark.asyncio
async def test_request_meeting_requires_every_field():
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(201, json={"success": True, "data": {"id": "m1", **body}})

    client = _client(handler)
    assert await client.request_meeting("a", "2024-05-01", "", "Hi") is None
    assert client.error == "Please fill in all fields"

    meeting = await client.request_meeting("a", "2024-05-01", "10:00", "Hi")
    assert meeting["id"] == "m1"
    assert client.current_post_id == "a"
    assert client.error is None
