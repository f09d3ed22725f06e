"""Stateless projections over the post collection for the index views."""

import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from hashblog.schemas.blog import PostSummary


def post_year(post: PostSummary) -> int:
    """Year of an ISO date; 0 when the date cannot be parsed."""
    try:
        return datetime.date.fromisoformat((post.date or "")[:10]).year
    except ValueError:
        return 0


def posts_by_year(posts: Sequence[PostSummary]) -> List[Tuple[int, List[PostSummary]]]:
    grouped: Dict[int, List[PostSummary]] = {}
    for post in posts:
        grouped.setdefault(post_year(post), []).append(post)
    return sorted(grouped.items(), key=lambda item: item[0], reverse=True)


def tag_counts(posts: Sequence[PostSummary]) -> List[Tuple[str, int]]:
    counts: Dict[str, int] = {}
    for post in posts:
        for tag in post.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return sorted(counts.items(), key=lambda item: (item[0].casefold(), item[0]))


def category_counts(posts: Sequence[PostSummary]) -> List[Tuple[str, int]]:
    counts: Dict[str, int] = {}
    for post in posts:
        counts[post.category] = counts.get(post.category, 0) + 1
    return list(counts.items())


def posts_with_tag(posts: Sequence[PostSummary], tag: str) -> List[PostSummary]:
    return [post for post in posts if tag in post.tags]


def posts_in_category(posts: Sequence[PostSummary], category: str) -> List[PostSummary]:
    return [post for post in posts if post.category == category]


def find_post(posts: Sequence[PostSummary], post_id: Optional[str]) -> Optional[PostSummary]:
    return next((post for post in posts if post.id == post_id), None)
