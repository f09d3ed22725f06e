from typing import List, Optional

from hashblog.settings import settings


class PostsRepo:
    def __init__(self, store, prefix: Optional[str] = None):
        self.store = store
        self.prefix = prefix if prefix is not None else settings.POST_KEY_PREFIX

    def list_posts(self) -> List[dict]:
        return self.store.get_by_prefix(self.prefix)

    def get_post(self, post_id: str) -> Optional[dict]:
        return self.store.get(self._key(post_id))

    def exists(self, post_id: str) -> bool:
        return self.get_post(post_id) is not None

    def save_post(self, post: dict) -> dict:
        self.store.set(self._key(post["id"]), post)
        return post

    def delete_post(self, post_id: str) -> bool:
        return self.store.delete(self._key(post_id))

    def _key(self, post_id: str) -> str:
        return f"{self.prefix}{post_id}"
