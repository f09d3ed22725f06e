import logging
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from hashblog.schemas.blog import PostCreate, PostDetail, PostSummary, PostUpdate
from hashblog.settings import settings

logger = logging.getLogger(__name__)


class InvalidPostError(ValueError):
    """The merged record would not be a valid post."""


class PostsService:
    def __init__(self, repo, clock: Callable[[], float] = time.time):
        self.repo = repo
        self.clock = clock

    def list_posts(self) -> List[PostSummary]:
        """Summaries of every stored post, newest first, without content."""
        posts = _dedupe_by_id(self.repo.list_posts())
        posts.sort(key=lambda p: str(p.get("date") or "0000-01-01"), reverse=True)
        summaries = []
        for post in posts:
            summary = to_summary(post)
            if summary:
                summaries.append(summary)
        return summaries

    def get_post(self, post_id: str) -> Optional[PostDetail]:
        post = self.repo.get_post(post_id)
        if not post:
            return None
        return PostDetail(**post)

    def create_post(self, data: PostCreate) -> PostDetail:
        post = PostDetail(
            id=self._generate_id(),
            title=data.title,
            date=data.date,
            author=data.author,
            excerpt=data.excerpt,
            readTime=data.readTime or settings.DEFAULT_READ_TIME,
            tags=data.tags or [],
            category=data.category or settings.DEFAULT_CATEGORY,
            content=data.content,
        )
        self.repo.save_post(post.model_dump())
        logger.info(f"Created post {post.id}")
        return post

    def update_post(self, post_id: str, data: PostUpdate) -> Optional[PostDetail]:
        existing = self.repo.get_post(post_id)
        if not existing:
            return None
        changes = data.model_dump(exclude_unset=True)
        merged = {**existing, **changes, "id": post_id}
        try:
            post = PostDetail(**merged)
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise InvalidPostError(f"Invalid value for {', '.join(fields)}") from e
        self.repo.save_post(post.model_dump())
        logger.info(f"Updated post {post_id}: {sorted(changes)}")
        return post

    def delete_post(self, post_id: str) -> bool:
        deleted = self.repo.delete_post(post_id)
        if deleted:
            logger.info(f"Deleted post {post_id}")
        return deleted

    def _generate_id(self) -> str:
        candidate = int(self.clock() * 1000)
        while self.repo.exists(str(candidate)):
            candidate += 1
        return str(candidate)


def to_summary(post: dict) -> Optional[PostSummary]:
    """Strip content from a stored post; malformed records are skipped."""
    fields = {k: v for k, v in post.items() if k != "content"}
    try:
        return PostSummary(**fields)
    except Exception as e:
        logger.warning(f"Skipping malformed post {post.get('id')}: {e}")
        return None


def _dedupe_by_id(posts: List[dict]) -> List[dict]:
    seen = set()
    unique = []
    for post in posts:
        post_id = post.get("id")
        if post_id in seen:
            continue
        seen.add(post_id)
        unique.append(post)
    return unique
