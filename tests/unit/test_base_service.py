"""
Service layer tests that need no database
"""

import uuid

import pytest

from services.base_service import BaseService, DatabaseConnectionError
from services.blog_posts_service import BlogPostsService, get_blog_posts_service


@pytest.fixture
def posts_service():
    return BlogPostsService()


class TestQueryBuilding:

    def test_read_query_with_filters_order_and_limit(self, posts_service):
        post_id = uuid.uuid4()

        query, params = posts_service._build_read_query(
            {"id": post_id},
            [{"field": "created", "dir": "desc"}],
            1,
            0
        )

        assert query == (
            "SELECT id, title, content, author_first_name, author_last_name, created FROM blog_posts "
            "WHERE id = $1 ORDER BY created DESC LIMIT $2"
        )
        assert params == [post_id, 1]

    def test_read_query_rejects_unknown_order_field(self, posts_service):
        with pytest.raises(ValueError):
            posts_service._build_read_query({}, [{"field": "author"}], None, 0)

    def test_update_query_sets_only_supplied_columns(self, posts_service):
        post_id = uuid.uuid4()

        query, params = posts_service._build_update_query(post_id, {"title": "New"})

        assert query.startswith("UPDATE blog_posts SET title = $1 WHERE id = $2 RETURNING")
        assert params == ["New", post_id]

    def test_insert_query_returns_all_fields(self, posts_service):
        query, params = posts_service._build_insert_query({"title": "T", "content": "C"})

        assert query == (
            "INSERT INTO blog_posts (title, content) VALUES ($1, $2) "
            "RETURNING id, title, content, author_first_name, author_last_name, created"
        )
        assert params == ["T", "C"]


class TestServiceErrors:

    @pytest.mark.asyncio
    async def test_update_without_fields_is_validation_error(self, posts_service):
        result = await posts_service.update_post(str(uuid.uuid4()), {})

        assert not result.success
        assert result.error_type == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_update_of_immutable_field_is_validation_error(self, posts_service):
        result = await posts_service.update_post(str(uuid.uuid4()), {"created": "2024-01-01"})

        assert not result.success
        assert result.error_type == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, posts_service):
        result = await posts_service.get_post_by_id("not-a-uuid")

        assert result.error_type == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_missing_pool_is_unavailable(self, posts_service, monkeypatch):
        monkeypatch.setattr("services.base_service.get_db_pool", lambda: None)

        result = await posts_service.list_posts()

        assert not result.success
        assert result.error_type == "UNAVAILABLE"

    def test_error_result_maps_conflicts_and_connection_errors(self, posts_service):
        assert posts_service._error_result(DatabaseConnectionError("down")).error_type == "UNAVAILABLE"
        assert posts_service._error_result(ConnectionRefusedError()).error_type == "UNAVAILABLE"
        assert posts_service._error_result(RuntimeError("CONFLICT: Unique constraint violation")).error_type == "CONFLICT_ERROR"
        assert posts_service._error_result(RuntimeError("boom")).error_type == "DATABASE_ERROR"


def test_parse_id_accepts_uuid_strings():
    value = uuid.uuid4()

    assert BaseService._parse_id(str(value)) == value
    assert BaseService._parse_id(value) is value
    assert BaseService._parse_id("nope") is None


def test_service_is_a_singleton():
    assert get_blog_posts_service() is get_blog_posts_service()
