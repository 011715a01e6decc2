"""
HTTP client for the blog API.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from blog_shared.types import Post, PostFields

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"
REQUEST_TIMEOUT = 10


class ApiError(Exception):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Any = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API error {status_code}: {detail}")


class NotFoundError(ApiError):
    pass


class BlogApiClient:
    """Thin wrapper issuing one HTTP request per post operation."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, payload: dict | None = None):
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        response = self.session.request(
            method, url, json=payload, timeout=self.timeout
        )
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            if response.status_code == 404:
                raise NotFoundError(response.status_code, detail)
            raise ApiError(response.status_code, detail)
        return response.json()

    @staticmethod
    def _post_path(post_id: str) -> str:
        if not post_id or not post_id.strip():
            raise ValueError("post id must not be empty")
        return f"/posts/{quote(post_id, safe='')}"

    def list_posts(self) -> list[Post]:
        return [Post.from_dict(item) for item in self._request("GET", "/posts")]

    def get_post(self, post_id: str) -> Post:
        return Post.from_dict(self._request("GET", self._post_path(post_id)))

    def create_post(self, fields: PostFields) -> Post:
        return Post.from_dict(self._request("POST", "/posts", fields.supplied()))

    def update_post(self, post_id: str, changes: PostFields) -> Post:
        return Post.from_dict(
            self._request("PUT", self._post_path(post_id), changes.supplied())
        )

    def delete_post(self, post_id: str) -> bool:
        return bool(self._request("DELETE", self._post_path(post_id))["deleted"])
