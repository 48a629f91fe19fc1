"""
Fixtures for the blog posts integration suite
Suite: start the server on the test database. Test: seed, then wipe.
"""

import pytest
import pytest_asyncio

from core.orchestrator import BlogPostTestHarness


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def harness():
    """Session-wide harness; skips the suite when the test database is unreachable"""
    test_harness = BlogPostTestHarness()

    try:
        await test_harness.db_manager.connect()
    except RuntimeError as e:
        pytest.skip(f"Test database not reachable at {test_harness.config.test_database_url}: {e}")

    await test_harness.init()
    yield test_harness
    await test_harness.dispose()


@pytest_asyncio.fixture(loop_scope="session")
async def seeded_harness(harness):
    """Harness with freshly seeded posts; wiped after the test"""
    await harness.seed()
    yield harness
    await harness.reset()
