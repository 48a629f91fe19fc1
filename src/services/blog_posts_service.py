"""
Blog posts service - business logic for blog post management
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from database.connection import BLOG_POSTS_TABLE
from services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)

BLOG_POST_FIELDS = ["id", "title", "content", "author_first_name", "author_last_name", "created"]
BLOG_POST_WRITABLE_FIELDS = ["title", "content", "author_first_name", "author_last_name"]


class BlogPostsService(BaseService):
    """Service for blog post operations"""

    def __init__(self):
        super().__init__(
            "blog_posts",
            BLOG_POSTS_TABLE,
            BLOG_POST_FIELDS,
            BLOG_POST_WRITABLE_FIELDS,
            default_order_by=[{"field": "created", "dir": "asc"}, {"field": "id", "dir": "asc"}]
        )

    async def create_post(
        self,
        title: str,
        content: str,
        author_first_name: str,
        author_last_name: str
    ) -> ServiceResult:
        """
        Create a new blog post with a server-assigned id and creation time

        Args:
            title: Post title
            content: Post body
            author_first_name: Author first name
            author_last_name: Author last name

        Returns:
            ServiceResult with created post data
        """
        post_data = {
            "id": uuid.uuid4(),
            "title": title,
            "content": content,
            "author_first_name": author_first_name,
            "author_last_name": author_last_name,
            "created": datetime.now(timezone.utc)
        }

        logger.info(f"Creating new blog post: {post_data['id']}")
        return await self.create(post_data)

    async def list_posts(self, limit: Optional[int] = None, offset: int = 0) -> ServiceResult:
        """List posts in insertion order"""
        return await self.read(limit=limit, offset=offset)

    async def get_post_by_id(self, post_id: str) -> ServiceResult:
        """Get a blog post by its id"""
        return await self.get_by_id(post_id)

    async def update_post(self, post_id: str, updates: Dict[str, Any]) -> ServiceResult:
        """
        Overwrite the supplied fields of an existing post

        id and created are never part of the update; omitted fields keep
        their stored values.
        """
        logger.info(f"Updating blog post {post_id}: {sorted(updates)}")
        return await self.update(post_id, updates)


# Global service instance
_blog_posts_service: Optional[BlogPostsService] = None


def get_blog_posts_service() -> BlogPostsService:
    """Get the global blog posts service instance"""
    global _blog_posts_service
    if _blog_posts_service is None:
        _blog_posts_service = BlogPostsService()
    return _blog_posts_service
