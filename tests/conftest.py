import asyncio
import copy

import pycouchdb

from hashblog.client.api_client import NotFoundError
from hashblog.schemas.blog import PostDetail, PostSummary


class FakeCouchDB:
    """
    Minimal in-memory CouchDB stand-in.
    Set track_calls=True to record the order of calls.
    """

    def __init__(self, docs: dict | None = None, track_calls: bool = False):
        self.docs = docs or {}
        self.track_calls = track_calls
        self.calls = []
        self._rev = 0

    def get(self, doc_id: str) -> dict:
        if self.track_calls:
            self.calls.append(f"get({doc_id})")
        if doc_id not in self.docs:
            raise pycouchdb.exceptions.NotFound(doc_id)
        return copy.deepcopy(self.docs[doc_id])

    def save(self, doc: dict) -> dict:
        if self.track_calls:
            self.calls.append(f"save({doc['_id']})")
        current = self.docs.get(doc["_id"])
        if current and current.get("_rev") != doc.get("_rev"):
            raise pycouchdb.exceptions.Conflict(doc["_id"])
        self._rev += 1
        saved = {**doc, "_rev": f"{self._rev}-fake"}
        self.docs[doc["_id"]] = saved
        return copy.deepcopy(saved)

    def delete(self, doc) -> None:
        doc_id = doc["_id"] if isinstance(doc, dict) else doc
        if self.track_calls:
            self.calls.append(f"delete({doc_id})")
        if doc_id not in self.docs:
            raise pycouchdb.exceptions.NotFound(doc_id)
        del self.docs[doc_id]

    def all(self, include_docs: bool = True, **params):
        if self.track_calls:
            self.calls.append(f"all(include_docs={include_docs})")
        docs = [copy.deepcopy(doc) for _id, doc in sorted(self.docs.items())]
        if include_docs:
            return [{"id": doc["_id"], "doc": doc} for doc in docs]
        return docs


class FakeStore:
    """Dict-backed key-value store with the CouchKVStore interface."""

    def __init__(self, values: dict | None = None):
        self.values = dict(values or {})

    def get(self, key):
        value = self.values.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key, value):
        self.values[key] = copy.deepcopy(value)

    def delete(self, key):
        return self.values.pop(key, None) is not None

    def get_by_prefix(self, prefix):
        return [
            copy.deepcopy(value)
            for key, value in self.values.items()
            if key.startswith(prefix)
        ]


class FakeRepo:
    """
    Minimal repo stand-in used in service tests.
    """

    def __init__(self, posts=None):
        self.posts = {}
        self.listed = [dict(p) for p in (posts or [])]
        for post in self.listed:
            self.posts.setdefault(post["id"], dict(post))
        self.saved = []

    def list_posts(self):
        return [dict(p) for p in self.listed]

    def get_post(self, post_id):
        post = self.posts.get(post_id)
        return dict(post) if post else None

    def exists(self, post_id):
        return post_id in self.posts

    def save_post(self, post):
        self.saved.append(post)
        self.posts[post["id"]] = dict(post)
        return post

    def delete_post(self, post_id):
        return self.posts.pop(post_id, None) is not None


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(
        self,
        list_posts_return=None,
        get_post_return=None,
        update_post_return=None,
        delete_post_return=True,
    ):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._update_post_return = update_post_return
        self._delete_post_return = delete_post_return
        self.created = []
        self.updated = []
        self.deleted = []

    def list_posts(self):
        return self._list_posts_return

    def get_post(self, post_id: str):
        return self._get_post_return

    def create_post(self, data):
        self.created.append(data)
        return PostDetail(
            id="1700000000000",
            readTime=data.readTime or "5 min read",
            tags=data.tags or [],
            category=data.category or "Uncategorized",
            **data.model_dump(include={"title", "date", "author", "excerpt", "content"}),
        )

    def update_post(self, post_id, data):
        self.updated.append((post_id, data))
        return self._update_post_return

    def delete_post(self, post_id):
        self.deleted.append(post_id)
        return self._delete_post_return


def make_post(post_id: str, content: str | None = "body", **overrides):
    fields = {
        "id": post_id,
        "title": f"Post {post_id}",
        "date": "2025-01-01",
        "author": "Yuan Wang",
        "excerpt": f"Excerpt {post_id}",
        "readTime": "5 min read",
        "tags": [],
        "category": "Engineering",
        **overrides,
    }
    if content is None:
        return PostSummary(**fields)
    return PostDetail(content=content, **fields)


class FakeApi:
    """
    Async blog API stand-in for resolver tests.
    Set gate=True to hold calls until release(post_id) / release_list().
    """

    def __init__(self, posts=None, gate: bool = False, list_error=None):
        self.posts = {p.id: p for p in (posts or [])}
        self.gate = gate
        self.list_error = list_error
        self.list_calls = 0
        self.get_calls = []
        self._gates: dict = {}

    def _event(self, key):
        if key not in self._gates:
            self._gates[key] = asyncio.Event()
        return self._gates[key]

    def release(self, post_id):
        self._event(("post", post_id)).set()

    def release_list(self):
        self._event("list").set()

    async def list_posts(self):
        self.list_calls += 1
        if self.gate:
            await self._event("list").wait()
        await asyncio.sleep(0)
        if self.list_error:
            raise self.list_error
        return [
            PostSummary(**p.model_dump(exclude={"content"})) for p in self.posts.values()
        ]

    async def get_post(self, post_id):
        self.get_calls.append(post_id)
        if self.gate:
            await self._event(("post", post_id)).wait()
        await asyncio.sleep(0)
        if post_id not in self.posts:
            raise NotFoundError("Post not found", 404)
        return self.posts[post_id]

    async def delete_post(self, post_id):
        self.posts.pop(post_id, None)


async def settle(rounds: int = 10):
    """Let pending tasks on the loop run to completion."""
    for _ in range(rounds):
        await asyncio.sleep(0)
