import logging
from typing import List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from hashblog.schemas.blog import PostCreate, PostDetail, PostSummary, PostUpdate
from hashblog.security import API_KEY_NAME
from hashblog.settings import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ApiError):
    pass


class BlogApiClient:
    """
    Async client for the posts API. Every failure (transport error, non-2xx
    status, unsuccessful envelope, malformed payload) surfaces as ApiError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.BLOG_API_URL).rstrip("/")
        headers = {API_KEY_NAME: api_key} if api_key else {}
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout if timeout is not None else settings.BLOG_API_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "BlogApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_posts(self) -> List[PostSummary]:
        data = await self._request("GET", "/posts")
        return self._parse(lambda: [PostSummary(**p) for p in data.get("posts") or []])

    async def get_post(self, post_id: str) -> PostDetail:
        try:
            data = await self._request("GET", _post_path(post_id))
        except ApiError as e:
            # a 2xx with an unsuccessful envelope means the post is not there
            if e.status_code is not None and e.status_code < 400:
                raise NotFoundError("Post not found", e.status_code) from e
            raise
        if not data.get("post"):
            raise NotFoundError("Post not found", 404)
        return self._parse(lambda: PostDetail(**data["post"]))

    async def create_post(self, post: Union[PostCreate, dict]) -> PostDetail:
        body = PostCreate.model_validate(post).model_dump(exclude_none=True)
        data = await self._request("POST", "/posts", json=body)
        return self._parse(lambda: PostDetail(**data["post"]))

    async def update_post(self, post_id: str, changes: Union[PostUpdate, dict]) -> PostDetail:
        body = PostUpdate.model_validate(changes).model_dump(exclude_unset=True)
        data = await self._request("PUT", _post_path(post_id), json=body)
        return self._parse(lambda: PostDetail(**data["post"]))

    async def delete_post(self, post_id: str) -> None:
        await self._request("DELETE", _post_path(post_id))

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code == 404:
            raise NotFoundError(data.get("error") or "Post not found", 404)
        if response.is_error:
            message = data.get("error") or f"Request failed: {response.status_code}"
            raise ApiError(message, response.status_code)
        if not data.get("success"):
            raise ApiError(data.get("error") or "Request was not successful", response.status_code)
        return data

    @staticmethod
    def _parse(build):
        try:
            return build()
        except (ValidationError, KeyError, TypeError) as e:
            raise ApiError(f"Malformed response: {e}") from e


def _post_path(post_id: str) -> str:
    return f"/posts/{quote(post_id, safe='')}"
