"""
Database connection and pool management
"""

import asyncpg
import logging
from typing import Optional

from config.settings import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE, DB_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

BLOG_POSTS_TABLE = "blog_posts"

BLOG_POSTS_DDL = f"""
CREATE TABLE IF NOT EXISTS {BLOG_POSTS_TABLE} (
    id UUID PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    author_first_name TEXT NOT NULL,
    author_last_name TEXT NOT NULL,
    created TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


class DatabaseUnavailableError(RuntimeError):
    """Raised when the document store cannot be reached"""


# Global database pool
db_pool: Optional[asyncpg.Pool] = None


async def init_database(database_url: Optional[str] = None):
    """Initialize database connection pool and make sure the schema exists"""
    global db_pool
    url = database_url or DATABASE_URL

    try:
        db_pool = await asyncpg.create_pool(
            url,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
            command_timeout=DB_COMMAND_TIMEOUT,
            statement_cache_size=0  # Table is dropped and recreated between test runs
        )
    except (OSError, asyncpg.PostgresError) as e:
        logger.error(f"Failed to connect to database: {e}")
        raise DatabaseUnavailableError(f"Database unavailable: {e}") from e

    # Test connection
    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")
        await ensure_schema(conn)

    logger.info("Database initialized successfully")


async def ensure_schema(conn: asyncpg.Connection):
    """Create the blog posts table if it does not exist yet"""
    await conn.execute(BLOG_POSTS_DDL)


async def close_database():
    """Close database connection pool"""
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
    logger.info("Database connections closed")


def get_db_pool() -> Optional[asyncpg.Pool]:
    """Get the database pool instance"""
    return db_pool
