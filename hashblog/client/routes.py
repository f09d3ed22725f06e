"""
Hash-fragment routing for the blog client.

The URL fragment is the only source of navigation state. ``parse_fragment``
and ``format_route`` are pure and inverse to each other; ``RouteResolver``
re-derives a ``RouteState`` every time the navigation adapter reports a
fragment change and never writes state of its own.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel, ConfigDict, model_validator

logger = logging.getLogger(__name__)


class View(str, Enum):
    HOME = "home"
    ARCHIVES = "archives"
    CATEGORIES = "categories"
    TAGS = "tags"
    ABOUT = "about"
    ARTICLE = "article"
    TAGGED = "tagged"
    CATEGORY = "category"
    ADMIN = "admin"


# Views carrying a parameter: view -> (fragment segment, RouteState field)
PARAM_VIEWS = {
    View.ARTICLE: ("article", "articleId"),
    View.TAGGED: ("tag", "tag"),
    View.CATEGORY: ("category", "category"),
}
SIMPLE_VIEWS = {
    "archives": View.ARCHIVES,
    "categories": View.CATEGORIES,
    "tags": View.TAGS,
    "about": View.ABOUT,
    "admin": View.ADMIN,
}
_PARAM_FIELDS = ("articleId", "tag", "category")

# Characters encodeURIComponent leaves alone, beyond quote()'s defaults
_COMPONENT_SAFE = "!*'()"


class RouteState(BaseModel):
    model_config = ConfigDict(frozen=True)

    view: View = View.HOME
    articleId: Optional[str] = None
    tag: Optional[str] = None
    category: Optional[str] = None

    @model_validator(mode="after")
    def _check_param(self):
        expected = PARAM_VIEWS.get(self.view, (None, None))[1]
        for field in _PARAM_FIELDS:
            value = getattr(self, field)
            if field == expected and not value:
                raise ValueError(f"{self.view.value} view requires {field}")
            if field != expected and value is not None:
                raise ValueError(f"{self.view.value} view does not take {field}")
        return self

    @property
    def param(self) -> Optional[str]:
        field = PARAM_VIEWS.get(self.view, (None, None))[1]
        return getattr(self, field) if field else None

    @classmethod
    def of(cls, view: View, param: Optional[str] = None) -> "RouteState":
        view = View(view)
        field = PARAM_VIEWS.get(view, (None, None))[1]
        if field:
            return cls(view=view, **{field: param})
        if param is not None:
            raise ValueError(f"{view.value} view does not take a parameter")
        return cls(view=view)


HOME = RouteState()


def parse_fragment(fragment: Optional[str]) -> RouteState:
    """
    Derive the route for a URL fragment. Unknown or incomplete routes
    fall back to home instead of raising.
    """
    path = (fragment or "").lstrip("#")
    if not path or path == "/":
        return HOME

    parts = [part for part in path.split("/") if part]
    if not parts:
        return HOME

    head = parts[0]
    if len(parts) > 1:
        if head == "article":
            return RouteState(view=View.ARTICLE, articleId=parts[1])
        if head == "tag":
            return _decoded(View.TAGGED, "tag", parts[1])
        if head == "category":
            return _decoded(View.CATEGORY, "category", parts[1])
    if head in SIMPLE_VIEWS:
        return RouteState(view=SIMPLE_VIEWS[head])

    logger.debug(f"Unrecognized fragment {fragment!r}, routing home")
    return HOME


def _decoded(view: View, field: str, raw: str) -> RouteState:
    return RouteState(view=view, **{field: unquote(raw)})


def format_route(view: View, param: Optional[str] = None) -> str:
    """Build the fragment for a view; tag and category are percent-encoded."""
    view = View(view)
    if view == View.HOME:
        return "#/"
    if view not in PARAM_VIEWS:
        if param is not None:
            raise ValueError(f"{view.value} view does not take a parameter")
        return f"#/{view.value}"

    segment, field = PARAM_VIEWS[view]
    if not param:
        raise ValueError(f"{view.value} view requires {field}")
    if view == View.ARTICLE:
        if "/" in param:
            raise ValueError(f"Article id cannot contain '/': {param!r}")
        return f"#/{segment}/{param}"
    return f"#/{segment}/{quote(param, safe=_COMPONENT_SAFE)}"


def format_state(state: RouteState) -> str:
    return format_route(state.view, state.param)


RouteListener = Callable[[RouteState], None]


class RouteResolver:
    """
    Turns fragment-change notifications from a navigation adapter into
    RouteState notifications. Navigating pushes a fragment onto the adapter;
    the resulting state arrives through the adapter's change notification.
    """

    def __init__(self, navigation):
        self.navigation = navigation
        self._listeners: List[RouteListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def state(self) -> RouteState:
        return parse_fragment(self.navigation.current_fragment())

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> RouteState:
        if self._unsubscribe is None:
            self._unsubscribe = self.navigation.subscribe(self._on_navigation)
        return self._emit()

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def subscribe(self, listener: RouteListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def navigate(self, view: View, param: Optional[str] = None) -> None:
        self.navigation.push(format_route(view, param))

    def go_home(self) -> None:
        self.navigate(View.HOME)

    def open_article(self, article_id: str) -> None:
        self.navigate(View.ARTICLE, article_id)

    def open_tag(self, tag: str) -> None:
        self.navigate(View.TAGGED, tag)

    def open_category(self, category: str) -> None:
        self.navigate(View.CATEGORY, category)

    def _on_navigation(self, _fragment: str) -> None:
        self._emit()

    def _emit(self) -> RouteState:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Route listener failed for {state.view.value}: {e}")
        return state
