import asyncio
import logging

from hashblog.client.api_client import ApiError, BlogApiClient
from hashblog.client.fallback_posts import FALLBACK_POSTS
from hashblog.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_posts(client: BlogApiClient) -> int:
    """Create every fallback post whose title is not stored yet."""
    existing = {post.title for post in await client.list_posts()}
    created = 0
    for post in FALLBACK_POSTS:
        if post.title in existing:
            logger.info(f"Skipping existing post: {post.title}")
            continue
        stored = await client.create_post(post.model_dump(exclude={"id"}))
        logger.info(f"Created post {stored.id}: {stored.title}")
        created += 1
    return created


async def main() -> None:
    async with BlogApiClient(api_key=settings.HASHBLOG_API_KEY) as client:
        created = await seed_posts(client)
    logger.info(f"Seeding completed, {created} posts created.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ApiError as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
