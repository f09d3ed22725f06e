import pytest

from hashblog.client.content import PostListResolver, PostResolver
from hashblog.client.navigation import MemoryNavigation
from hashblog.client.routes import RouteResolver, View
from hashblog.client.shell import BlogShell
from tests.conftest import FakeApi, make_post, settle


def make_shell(api, fragment="", fallback=None):
    nav = MemoryNavigation(fragment)
    shell = BlogShell(
        RouteResolver(nav),
        PostListResolver(api, fallback=fallback),
        PostResolver(api),
    )
    return shell, nav


@pytest.mark.asyncio
async def test_start_shows_fallback_posts_while_loading():
    api = FakeApi([make_post("9")], gate=True)
    shell, _ = make_shell(api, fallback=[make_post("f1")])

    snap = shell.start()

    assert snap.route.view == View.HOME
    assert [p.id for p in snap.posts] == ["f1"]
    assert snap.loading_posts is True


@pytest.mark.asyncio
async def test_article_with_local_content_skips_fetch():
    api = FakeApi([make_post("f1", content="remote")], gate=True)
    shell, _ = make_shell(api, "#/article/f1", fallback=[make_post("f1", content="local")])

    snap = shell.start()
    await settle()

    assert snap.article.content == "local"
    assert snap.loading_article is False
    assert api.get_calls == []


@pytest.mark.asyncio
async def test_article_summary_only_fetches_full_post():
    api = FakeApi([make_post("7", content="full text")])
    shell, nav = make_shell(api, fallback=[make_post("f1")])
    shell.start()
    await shell.refresh_posts()

    nav.push("#/article/7")
    snap = shell.snapshot()
    assert snap.loading_article is True

    await shell.post.wait()
    snap = shell.snapshot()

    assert snap.article.content == "full text"
    assert snap.article_error is None
    assert api.get_calls == ["7"]


@pytest.mark.asyncio
async def test_unknown_article_reports_not_found():
    shell, _ = make_shell(FakeApi([]), "#/article/nope", fallback=[])

    shell.start()
    await shell.post.wait()
    snap = shell.snapshot()

    assert snap.article is None
    assert snap.article_error == "Post not found"


@pytest.mark.asyncio
async def test_leaving_article_view_clears_article():
    api = FakeApi([make_post("7")])
    shell, nav = make_shell(api, "#/article/7", fallback=[])
    shell.start()
    await shell.post.wait()

    nav.push("#/tags")
    snap = shell.snapshot()

    assert snap.article is None
    assert snap.loading_article is False


@pytest.mark.asyncio
async def test_index_views_get_projections():
    fallback = [
        make_post("1", tags=["systems"], category="Engineering", date="2025-12-10"),
        make_post("2", tags=["team"], category="Best Practices", date="2024-12-05"),
    ]
    shell, nav = make_shell(FakeApi([]), fallback=fallback)
    shell.start()

    nav.push("#/archives")
    assert [year for year, _ in shell.snapshot().archives] == [2025, 2024]

    nav.push("#/tags")
    assert shell.snapshot().tags == [("systems", 1), ("team", 1)]

    nav.push("#/categories")
    assert shell.snapshot().categories == [("Engineering", 1), ("Best Practices", 1)]

    nav.push("#/tag/team")
    assert [p.id for p in shell.snapshot().filtered] == ["2"]

    nav.push("#/category/Best%20Practices")
    assert [p.id for p in shell.snapshot().filtered] == ["2"]


@pytest.mark.asyncio
async def test_back_navigation_returns_to_previous_view():
    shell, nav = make_shell(FakeApi([]), fallback=[make_post("1")])
    shell.start()
    shell.routes.open_article("1")
    shell.routes.open_category("Engineering")

    nav.back()

    snap = shell.snapshot()
    assert snap.route.view == View.ARTICLE
    assert snap.article.id == "1"


@pytest.mark.asyncio
async def test_stop_detaches_from_navigation():
    api = FakeApi([make_post("7")], gate=True)
    shell, nav = make_shell(api, fallback=[])
    shell.start()
    shell.stop()

    nav.push("#/article/7")
    await settle()

    assert api.get_calls == []
