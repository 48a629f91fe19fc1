"""
Configuration settings for the Blog Posts API
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://localhost:5432/blog_app")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "postgresql://localhost:5432/test_blog_app")
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = int(os.getenv("DB_COMMAND_TIMEOUT", 60))

# Server configuration
PORT = int(os.getenv("PORT", 8080))

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]

# Validate pool sizing
if DB_POOL_MIN_SIZE > DB_POOL_MAX_SIZE:
    raise ValueError(
        f"DB_POOL_MIN_SIZE ({DB_POOL_MIN_SIZE}) cannot exceed DB_POOL_MAX_SIZE ({DB_POOL_MAX_SIZE})"
    )
