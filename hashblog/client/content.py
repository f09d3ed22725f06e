"""
Content resolution for the blog views.

``PostListResolver`` owns the post collection: seeded with fallback posts,
replaced when a remote list comes back non-empty, and refreshed through a
single in-flight task. ``PostResolver`` fetches one full post per resolution
cycle and only applies the result of the most recently started cycle.

Both must be used from inside a running asyncio event loop.
"""

import asyncio
import logging
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from hashblog.client.api_client import ApiError, NotFoundError
from hashblog.client.fallback_posts import FALLBACK_POSTS
from hashblog.client.indexes import find_post
from hashblog.schemas.blog import PostDetail, PostSummary

logger = logging.getLogger(__name__)


class PostListState(BaseModel):
    model_config = ConfigDict(frozen=True)

    posts: List[PostSummary] = Field(default_factory=list)
    loading: bool = False


class PostState(BaseModel):
    model_config = ConfigDict(frozen=True)

    post: Optional[PostDetail] = None
    loading: bool = False
    error: Optional[str] = None


def unique_posts(posts) -> List[PostSummary]:
    """Keep the first post for each id."""
    seen = set()
    unique = []
    for post in posts:
        if post.id in seen:
            continue
        seen.add(post.id)
        unique.append(post)
    return unique


def has_content(post: Optional[PostSummary]) -> bool:
    return bool(getattr(post, "content", None))


def _spawn(coro, tasks: Set[asyncio.Task]) -> asyncio.Task:
    """Start a task and hold it until done; superseded fetches keep running."""
    task = asyncio.get_running_loop().create_task(coro)
    tasks.add(task)
    task.add_done_callback(tasks.discard)
    return task


class PostListResolver:
    def __init__(self, api, fallback: Optional[List[PostSummary]] = None):
        self.api = api
        self._fallback = unique_posts(FALLBACK_POSTS if fallback is None else fallback)
        self._state: Optional[PostListState] = None
        self._pending: Optional[asyncio.Task] = None
        self._started = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def posts(self) -> List[PostSummary]:
        return list(self._current().posts)

    @property
    def loading(self) -> bool:
        return self._current().loading

    def find(self, post_id: Optional[str]) -> Optional[PostSummary]:
        if not post_id:
            return None
        return find_post(self._current().posts, post_id)

    def list_posts(self) -> PostListState:
        """Current collection; the first call also starts the remote fetch."""
        self._current()
        if not self._started:
            self._start_fetch()
        return self._state

    async def refresh(self) -> PostListState:
        """Re-fetch the list. Concurrent callers share one request."""
        self._current()
        task = self._start_fetch()
        await asyncio.shield(task)
        return self._state

    def _current(self) -> PostListState:
        if self._state is None:
            self._state = PostListState(posts=self._fallback)
        return self._state

    def _start_fetch(self) -> asyncio.Task:
        self._started = True
        if self._pending is not None and not self._pending.done():
            return self._pending
        self._state = self._state.model_copy(update={"loading": True})
        self._pending = _spawn(self._fetch(), self._tasks)
        return self._pending

    async def _fetch(self) -> None:
        posts: List[PostSummary] = []
        try:
            posts = await self.api.list_posts()
        except Exception as e:
            logger.error(f"Error fetching posts, keeping current posts: {e}")
        finally:
            if posts:
                self._state = PostListState(posts=unique_posts(posts))
                logger.info(f"Loaded {len(self._state.posts)} posts")
            else:
                logger.warning("No posts fetched, keeping current posts")
                self._state = self._state.model_copy(update={"loading": False})
            self._pending = None


_UNSET = object()


class PostResolver:
    def __init__(self, api):
        self.api = api
        self._state = PostState()
        self._seq = 0
        self._key: object = _UNSET
        self._pending: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> PostState:
        return self._state

    def get_post(self, post_id: Optional[str], enabled: bool = True) -> PostState:
        """
        Resolve a full post. Repeating the same (post_id, enabled) keeps the
        current cycle; any change starts a new one. With no id or when
        disabled nothing is fetched.
        """
        key: Tuple[Optional[str], bool] = (post_id, bool(enabled))
        if key == self._key:
            return self._state
        self._key = key
        return self._start_cycle(post_id, enabled)

    def reload(self) -> PostState:
        """Start a fresh cycle for the current (post_id, enabled)."""
        if self._key is _UNSET:
            return self._state
        post_id, enabled = self._key
        return self._start_cycle(post_id, enabled)

    async def wait(self) -> PostState:
        """Wait for the latest cycle to settle."""
        if self._pending is not None and not self._pending.done():
            await asyncio.shield(self._pending)
        return self._state

    def _start_cycle(self, post_id: Optional[str], enabled: bool) -> PostState:
        self._seq += 1
        if not post_id or not enabled:
            self._pending = None
            self._state = PostState()
            return self._state

        self._state = PostState(loading=True)
        self._pending = _spawn(self._fetch(self._seq, post_id), self._tasks)
        return self._state

    async def _fetch(self, seq: int, post_id: str) -> None:
        try:
            outcome = PostState(post=await self.api.get_post(post_id))
        except NotFoundError:
            outcome = PostState(error="Post not found")
        except ApiError as e:
            logger.error(f"Error fetching post {post_id}: {e}")
            if e.status_code is not None and e.status_code >= 400:
                message = f"Failed to fetch post: {e.status_code}"
            else:
                message = str(e)
            outcome = PostState(error=message)
        except Exception as e:
            logger.error(f"Error fetching post {post_id}: {e}")
            outcome = PostState(error=str(e) or "An error occurred")

        if seq != self._seq:
            logger.debug(f"Dropping stale response for post {post_id}")
            return
        self._state = outcome
