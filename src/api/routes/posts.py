"""
Blog post API routes
All database operations go through the blog posts service layer.
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException

from models.blog_post import BlogPostCreateRequest, BlogPostUpdateRequest, BlogPostResponse
from services.blog_posts_service import get_blog_posts_service
from utils.error_handling import raise_for_service_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[BlogPostResponse])
async def list_posts():
    """List all blog posts in insertion order"""
    posts_service = get_blog_posts_service()

    try:
        result = await posts_service.list_posts()
        raise_for_service_error(result)

        return [BlogPostResponse.from_record(record) for record in result.data]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list posts: {e}")
        raise HTTPException(status_code=500, detail="Service error")


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_post(post_id: str):
    """Get a single blog post"""
    posts_service = get_blog_posts_service()

    try:
        result = await posts_service.get_post_by_id(post_id)
        if result.error_type == "NOT_FOUND":
            raise HTTPException(status_code=404, detail="Post not found")
        raise_for_service_error(result)

        return BlogPostResponse.from_record(result.data[0])

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get post: {e}")
        raise HTTPException(status_code=500, detail="Service error")


@router.post("", status_code=201, response_model=BlogPostResponse)
async def create_post(request: BlogPostCreateRequest):
    """Create a new blog post"""
    posts_service = get_blog_posts_service()

    try:
        result = await posts_service.create_post(
            title=request.title,
            content=request.content,
            author_first_name=request.author.first_name,
            author_last_name=request.author.last_name
        )
        raise_for_service_error(result)

        return BlogPostResponse.from_record(result.data[0])

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create post: {e}")
        raise HTTPException(status_code=500, detail="Service error")


@router.put("/{post_id}", response_model=BlogPostResponse)
async def update_post(post_id: str, request: BlogPostUpdateRequest):
    """Update the supplied fields of a blog post"""
    posts_service = get_blog_posts_service()

    if request.id is not None and request.id != post_id:
        raise HTTPException(
            status_code=400,
            detail=f"Request path id ({post_id}) and request body id ({request.id}) must match"
        )

    updates = request.to_updates()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    try:
        result = await posts_service.update_post(post_id, updates)
        if result.error_type == "NOT_FOUND":
            raise HTTPException(status_code=404, detail="Post not found")
        raise_for_service_error(result)

        return BlogPostResponse.from_record(result.data[0])

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update post: {e}")
        raise HTTPException(status_code=500, detail="Service error")
