import logging

from fastapi import APIRouter, Depends, HTTPException

from hashblog import dependencies as deps
from hashblog.schemas.blog import (
    REQUIRED_POST_FIELDS,
    MessageResponse,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from hashblog.services.posts_service import InvalidPostError, PostsService

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


@router.get("/posts", response_model=PostListResponse)
def list_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Get all post summaries, newest first."""
    try:
        return PostListResponse(posts=service.list_posts())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching posts: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to retrieve posts: {e}")


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(
    post_id: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post with content."""
    try:
        post = service.get_post(post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return PostResponse(post=post)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching post {post_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to retrieve post: {e}")


@admin_router.post("/posts", response_model=PostResponse)
def create_post(
    body: PostCreate,
    service: PostsService = Depends(deps.get_posts_service),
):
    if body.missing_fields():
        raise HTTPException(
            status_code=400,
            detail=f"Missing required fields: {', '.join(REQUIRED_POST_FIELDS)}",
        )
    try:
        return PostResponse(post=service.create_post(body))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating post: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create post: {e}")


@admin_router.put("/posts/{post_id}", response_model=PostResponse)
def update_post(
    post_id: str,
    body: PostUpdate,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Merge the given fields onto an existing post. The id never changes."""
    try:
        post = service.update_post(post_id, body)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return PostResponse(post=post)
    except HTTPException:
        raise
    except InvalidPostError as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: {e}")
    except Exception as e:
        logger.error(f"Error updating post {post_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update post: {e}")


@admin_router.delete("/posts/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        if not service.delete_post(post_id):
            raise HTTPException(status_code=404, detail="Post not found")
        return MessageResponse(message="Post deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting post {post_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to delete post: {e}")
