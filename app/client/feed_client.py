"""
Async client that keeps the state behind the explore feed page.

The client holds the active filters, the current page, the accumulated list
of posts and the post whose comments or meeting form is open. Mutations are
reconciled into local state only after the server acknowledges them, and a
failed call leaves the state exactly as it was and records a message in
``error`` for the page to show.
"""
from typing import Any, Dict, List, Optional, Tuple
import asyncio
import logging

import httpx

from app.client.render import post_card

logger = logging.getLogger(__name__)

FILTER_KEYS = ("search", "tags", "category", "author", "location")


class FeedClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        page_size: int = 9,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.page_size = page_size
        self._http = http or httpx.AsyncClient(timeout=10.0)
        self._owns_http = http is None
        self._fetch_task: Optional[asyncio.Task] = None
        self._generation = 0

        self.filters: Dict[str, str] = {}
        self.current_page = 1
        self.posts: List[Dict[str, Any]] = []
        self.has_more = True
        self.is_loading = False
        self.current_post_id: Optional[str] = None
        self.comments: List[Dict[str, Any]] = []
        self.error: Optional[str] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        if self._fetch_task and not self._fetch_task.done():
            self._fetch_task.cancel()
        if self._owns_http:
            await self._http.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    @staticmethod
    def _failure_message(response: httpx.Response, fallback: str) -> str:
        try:
            message = response.json().get("message")
        except ValueError:
            message = None
        return message or f"{fallback} (HTTP {response.status_code})"

    def _require_login(self, action: str) -> bool:
        if self.token:
            return True
        self.error = f"Please login to {action}"
        return False

    def _find_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        return next((post for post in self.posts if post.get("id") == post_id), None)

    async def _send(self, method: str, path: str, fallback: str, **kwargs) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        """Send one request; returns (body, None) on success or (None, message) on failure"""
        try:
            response = await self._http.request(method, self._url(path), **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            return None, f"{fallback}. Please try again."

        if response.is_error:
            return None, self._failure_message(response, fallback)
        try:
            body = response.json()
        except ValueError:
            return None, f"{fallback}. Please try again."
        if not body.get("success", False):
            return None, body.get("message") or fallback
        return body, None

    async def _request(self, method: str, path: str, fallback: str, **kwargs) -> Optional[Dict[str, Any]]:
        body, self.error = await self._send(method, path, fallback, **kwargs)
        return body

    # Feed

    def _feed_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": self.current_page, "limit": self.page_size}
        for key in FILTER_KEYS:
            value = self.filters.get(key)
            if value:
                params[key] = value
        return params

    async def load_posts(self) -> bool:
        """Fetch the current page; page 1 replaces the list, later pages append"""
        if self.is_loading:
            return False

        self.is_loading = True
        page = self.current_page
        generation = self._generation
        task = asyncio.ensure_future(
            self._send("GET", "/posts", "Failed to load posts", params=self._feed_params())
        )
        self._fetch_task = task
        try:
            body, error = await task
        except asyncio.CancelledError:
            if generation == self._generation:
                raise
            # superseded by a filter change
            return False
        finally:
            if generation == self._generation:
                self._fetch_task = None
                self.is_loading = False

        if generation != self._generation:
            return False
        self.error = error
        if body is None:
            return False

        posts = body.get("posts") or []
        self.posts = posts if page == 1 else self.posts + posts
        pagination = body.get("pagination") or {}
        self.has_more = bool(pagination.get("hasMore", page < pagination.get("total", 0)))
        return True

    def _cancel_fetch(self):
        """Drop any in-flight feed fetch so its response is never applied"""
        self._generation += 1
        task, self._fetch_task = self._fetch_task, None
        if task and not task.done():
            task.cancel()
        self.is_loading = False

    async def apply_filters(self, **filters: Optional[str]) -> bool:
        """Replace the active filters and reload from the first page"""
        self._cancel_fetch()
        self.filters = {
            key: str(value).strip()
            for key, value in filters.items()
            if key in FILTER_KEYS and value is not None and str(value).strip()
        }
        self.current_page = 1
        self.has_more = True
        return await self.load_posts()

    async def clear_filters(self) -> bool:
        return await self.apply_filters()

    async def load_more(self) -> bool:
        if self.is_loading or not self.has_more:
            return False
        previous_page = self.current_page
        self.current_page += 1
        loaded = await self.load_posts()
        if not loaded and self.current_page == previous_page + 1:
            self.current_page = previous_page
        return loaded

    def render(self) -> List[Dict[str, Any]]:
        """View models for the accumulated posts"""
        return [post_card(post) for post in self.posts]

    # Post interactions

    async def like(self, post_id: str) -> Optional[Dict[str, Any]]:
        if not self._require_login("like posts"):
            return None
        body = await self._request(
            "POST", f"/posts/{post_id}/like", "Failed to like post", headers=self._auth_headers()
        )
        if body is None:
            return None

        result = body.get("data") or {}
        post = self._find_post(post_id)
        if post is not None:
            post["likeCount"] = result.get("likeCount", post.get("likeCount", 0))
            post["liked"] = bool(result.get("liked"))
        return result

    async def show_comments(self, post_id: str) -> Optional[List[Dict[str, Any]]]:
        """Open the comments of a post, refreshing it from the server"""
        body = await self._request("GET", f"/posts/{post_id}", "Failed to load comments")
        if body is None:
            return None

        fresh = body.get("data") or {}
        self.current_post_id = post_id
        self.comments = list(fresh.get("comments") or [])
        post = self._find_post(post_id)
        if post is not None:
            post.update(fresh)
        return self.comments

    def close_comments(self):
        self.current_post_id = None
        self.comments = []

    async def submit_comment(self, text: str) -> Optional[Dict[str, Any]]:
        """Add a comment to the post whose comments are open"""
        if not self._require_login("comment"):
            return None
        if not self.current_post_id:
            self.error = "No post selected"
            return None
        content = (text or "").strip()
        if not content:
            self.error = "Comment cannot be empty"
            return None

        post_id = self.current_post_id
        body = await self._request(
            "POST",
            f"/posts/{post_id}/comments",
            "Failed to add comment",
            json={"content": content},
            headers=self._auth_headers(),
        )
        if body is None:
            return None

        comment = body.get("data") or {}
        if self.current_post_id == post_id:
            self.comments.append(comment)
        post = self._find_post(post_id)
        if post is not None:
            post["commentCount"] = post.get("commentCount", 0) + 1
        return comment

    async def delete_comment(self, comment_id: str) -> bool:
        if not self._require_login("delete comments"):
            return False
        if not self.current_post_id:
            self.error = "No post selected"
            return False

        post_id = self.current_post_id
        body = await self._request(
            "DELETE",
            f"/posts/{post_id}/comments/{comment_id}",
            "Failed to delete comment",
            headers=self._auth_headers(),
        )
        if body is None:
            return False

        self.comments = [comment for comment in self.comments if comment.get("id") != comment_id]
        post = self._find_post(post_id)
        if post is not None:
            post["commentCount"] = max(post.get("commentCount", 0) - 1, 0)
        return True

    async def request_meeting(self, post_id: str, date: str, time: str, message: str) -> Optional[Dict[str, Any]]:
        if not self._require_login("request meetings"):
            return None
        if not all(value and str(value).strip() for value in (date, time, message)):
            self.error = "Please fill in all fields"
            return None

        self.current_post_id = post_id
        body = await self._request(
            "POST",
            f"/posts/{post_id}/meeting",
            "Failed to send meeting request",
            json={"date": date, "time": time, "message": message},
            headers=self._auth_headers(),
        )
        if body is None:
            return None
        return body.get("data")
