"""
Direct database validator
Reads blog posts straight from the store to cross-check API responses
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List

import asyncpg

from database.connection import BLOG_POSTS_TABLE
from models.blog_post import author_display


@dataclass
class ValidationResult:
    """Simple validation result container"""
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def fail(self, message: str):
        self.errors.append(message)
        self.valid = False


class DatabaseValidator:
    """Lightweight direct database validator"""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Initialize database connection pool"""
        if self.pool is None:
            self.pool = await asyncpg.create_pool(
                self.database_url,
                min_size=1,
                max_size=2,
                command_timeout=30,
                statement_cache_size=0
            )

    async def disconnect(self):
        """Close database connections"""
        if self.pool:
            try:
                await asyncio.wait_for(self.pool.close(), timeout=30.0)
            except asyncio.TimeoutError:
                print("Warning: Database pool close timed out, forcing close")
                self.pool.terminate()
            finally:
                self.pool = None

    async def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        """Get the stored record for a post, or None"""
        await self.connect()

        try:
            key = uuid.UUID(str(post_id))
        except ValueError:
            return None

        query = f"SELECT * FROM {BLOG_POSTS_TABLE} WHERE id = $1"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, key)
            if row:
                record = dict(row)
                record["id"] = str(record["id"])
                return record
            return None

    async def post_exists(self, post_id: str) -> bool:
        return await self.get_post(post_id) is not None

    async def count_posts(self) -> int:
        """Count stored posts"""
        await self.connect()

        async with self.pool.acquire() as conn:
            return await conn.fetchval(f"SELECT COUNT(*) FROM {BLOG_POSTS_TABLE}")

    async def validate_post_matches(self, post_id: str, expected: Dict[str, Any]) -> ValidationResult:
        """
        Compare the stored record against a request body

        Only fields present in `expected` are compared, so partial update
        bodies can be checked too.
        """
        validation = ValidationResult()
        record = await self.get_post(post_id)
        if record is None:
            validation.fail(f"Post {post_id} not found in {BLOG_POSTS_TABLE}")
            return validation

        for key in ("title", "content"):
            if key in expected and record[key] != expected[key]:
                validation.fail(f"{key} mismatch: stored {record[key]!r}, expected {expected[key]!r}")

        author = expected.get("author") or {}
        for api_key, column in (("firstName", "author_first_name"), ("lastName", "author_last_name")):
            if api_key in author and record[column] != author[api_key]:
                validation.fail(f"author.{api_key} mismatch: stored {record[column]!r}, expected {author[api_key]!r}")

        return validation

    async def validate_response_item(self, item: Dict[str, Any]) -> ValidationResult:
        """Compare a serialized API post against its stored record"""
        validation = ValidationResult()
        record = await self.get_post(item.get("id"))
        if record is None:
            validation.fail(f"Post {item.get('id')} not found in {BLOG_POSTS_TABLE}")
            return validation

        if item["title"] != record["title"]:
            validation.fail(f"title mismatch: response {item['title']!r}, stored {record['title']!r}")
        if item["content"] != record["content"]:
            validation.fail(f"content mismatch: response {item['content']!r}, stored {record['content']!r}")

        expected_author = author_display(record["author_first_name"], record["author_last_name"])
        if item["author"] != expected_author:
            validation.fail(f"author mismatch: response {item['author']!r}, stored {expected_author!r}")

        return validation
