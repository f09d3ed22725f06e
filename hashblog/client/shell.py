import logging
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from hashblog.client import indexes
from hashblog.client.content import (
    PostListResolver,
    PostListState,
    PostResolver,
    has_content,
)
from hashblog.client.routes import RouteResolver, RouteState, View
from hashblog.schemas.blog import PostSummary

logger = logging.getLogger(__name__)


class ViewSnapshot(BaseModel):
    """Everything a view needs to render, taken at one point in time."""

    model_config = ConfigDict(frozen=True)

    route: RouteState
    posts: List[PostSummary] = Field(default_factory=list)
    loading_posts: bool = False
    article: Optional[PostSummary] = None
    loading_article: bool = False
    article_error: Optional[str] = None
    archives: List[Tuple[int, List[PostSummary]]] = Field(default_factory=list)
    tags: List[Tuple[str, int]] = Field(default_factory=list)
    categories: List[Tuple[str, int]] = Field(default_factory=list)
    filtered: List[PostSummary] = Field(default_factory=list)


class BlogShell:
    """
    Wires the route resolver to the content resolvers. A post that already
    has its content locally (fallback data) is shown without a fetch.
    """

    def __init__(
        self,
        routes: RouteResolver,
        post_list: PostListResolver,
        post: PostResolver,
    ):
        self.routes = routes
        self.post_list = post_list
        self.post = post
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start(self) -> ViewSnapshot:
        self.post_list.list_posts()
        if self._unsubscribe is None:
            self._unsubscribe = self.routes.subscribe(self._on_route)
        self.routes.start()
        return self.snapshot()

    def stop(self) -> None:
        self.routes.stop()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def refresh_posts(self) -> PostListState:
        return await self.post_list.refresh()

    def snapshot(self) -> ViewSnapshot:
        route = self.routes.state
        local = self._resolve_article(route)
        listing = self.post_list.list_posts()
        posts = list(listing.posts)

        if route.view == View.ARTICLE and has_content(local):
            article, loading_article, article_error = local, False, None
        else:
            fetched = self.post.state
            article = fetched.post
            loading_article = fetched.loading
            article_error = fetched.error

        extra = {}
        if route.view == View.ARCHIVES:
            extra["archives"] = indexes.posts_by_year(posts)
        elif route.view == View.TAGS:
            extra["tags"] = indexes.tag_counts(posts)
        elif route.view == View.CATEGORIES:
            extra["categories"] = indexes.category_counts(posts)
        elif route.view == View.TAGGED:
            extra["filtered"] = indexes.posts_with_tag(posts, route.tag)
        elif route.view == View.CATEGORY:
            extra["filtered"] = indexes.posts_in_category(posts, route.category)

        return ViewSnapshot(
            route=route,
            posts=posts,
            loading_posts=listing.loading,
            article=article,
            loading_article=loading_article,
            article_error=article_error,
            **extra,
        )

    def _on_route(self, route: RouteState) -> None:
        logger.debug(f"Route changed to {route.view.value}")
        self._resolve_article(route)

    def _resolve_article(self, route: RouteState) -> Optional[PostSummary]:
        article_id = route.articleId if route.view == View.ARTICLE else None
        local = self.post_list.find(article_id)
        self.post.get_post(article_id, enabled=not has_content(local))
        return local
