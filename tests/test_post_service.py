"""
Post Service: PostService Unit Tests
======================================

What:  Tests for slug derivation and the five PostService operations.
How:   Uses mock DB sessions (no real database).

What we test:
    ✅ Slug derivation rules
    ✅ Each operation issues exactly one statement
    ✅ Missing rows raise NotFoundError
    ✅ Driver and commit failures are wrapped in DatabaseError
    ✅ Writes commit before returning
"""

from datetime import datetime

import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from post_api.exceptions import DatabaseError, NotFoundError
from post_api.schemas.post import PostResponse, PostWrite
from post_api.services.post_service import PostService, slugify


class TestSlugify:
    """Tests for the slugify helper."""

    def test_spaces_become_hyphens(self):
        assert slugify("Hello World") == "hello-world"

    def test_digits_are_kept(self):
        assert slugify("Test 2") == "test-2"

    def test_runs_collapse_to_single_separator(self):
        assert slugify("a  --  b") == "a-b"

    def test_edges_are_stripped(self):
        assert slugify("  C++ & Rust!  ") == "c-rust"

    def test_already_a_slug(self):
        assert slugify("already-a-slug") == "already-a-slug"

    def test_no_alphanumerics_yields_empty(self):
        assert slugify("!!!") == ""

    def test_non_ascii_letters_act_as_separators(self):
        assert slugify("Café Déjà") == "caf-d-j"


class TestPostServiceRead:
    """Tests for list_posts and get_post."""

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_list_posts_empty(self, mock_db_session):
        """Empty table should return an empty list, not an error."""
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_posts(mock_db_session)

        assert result == []
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_posts_keeps_query_order(self, mock_db_session, make_post):
        """Rows are returned in the order the ordered query produced them."""
        posts = [make_post(post_id=str(uuid4()), title=f"Post {i}") for i in range(3)]
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = posts
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_posts(mock_db_session)

        assert [item.post_id for item in result] == [p.post_id for p in posts]

    @pytest.mark.asyncio
    async def test_list_posts_orders_by_update_at_desc(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        await self.service.list_posts(mock_db_session)

        statement = mock_db_session.execute.await_args.args[0]
        assert "ORDER BY" in str(statement)
        assert "update_at DESC" in str(statement)

    @pytest.mark.asyncio
    async def test_list_posts_database_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("connection reset"))

        with pytest.raises(DatabaseError):
            await self.service.list_posts(mock_db_session)

    @pytest.mark.asyncio
    async def test_get_post_found(self, mock_db_session, make_post, sample_post_data):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = make_post()
        mock_db_session.execute.return_value = mock_result

        result = await self.service.get_post(mock_db_session, sample_post_data["post_id"])

        assert result.post_id == sample_post_data["post_id"]
        assert result.slug == "hello-world"
        assert result.create_at == sample_post_data["create_at"]

    @pytest.mark.asyncio
    async def test_get_post_not_found(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_post(mock_db_session, "missing-id")

        assert exc_info.value.resource_id == "missing-id"


class TestPostServiceWrite:
    """Tests for create_post, update_post and delete_post."""

    def setup_method(self):
        self.service = PostService()
        self.body = PostWrite(title="Hello World", content="c", author="a")

    @pytest.mark.asyncio
    async def test_create_post_single_statement(self, mock_db_session, make_post):
        mock_result = MagicMock()
        mock_result.scalar_one.return_value = make_post(content="c", author="a")
        mock_db_session.execute.return_value = mock_result

        result = await self.service.create_post(mock_db_session, self.body)

        assert result.slug == "hello-world"
        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_post_mints_id_and_equal_timestamps(self, mock_db_session, make_post):
        mock_result = MagicMock()
        mock_result.scalar_one.return_value = make_post()
        mock_db_session.execute.return_value = mock_result

        await self.service.create_post(mock_db_session, self.body)

        params = mock_db_session.execute.await_args.args[0].compile().params
        assert params["slug"] == "hello-world"
        assert params["post_id"]
        assert params["create_at"] == params["update_at"]

    @pytest.mark.asyncio
    async def test_create_post_database_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("not null violation"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_post(mock_db_session, self.body)

        assert exc_info.value.context["operation"] == "create"

    @pytest.mark.asyncio
    async def test_update_post_recomputes_slug(self, mock_db_session, make_post, sample_post_data):
        body = PostWrite(title="Test 2", content="new", author="b")
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = make_post(title="Test 2", slug="test-2")
        mock_db_session.execute.return_value = mock_result

        result = await self.service.update_post(mock_db_session, sample_post_data["post_id"], body)

        params = mock_db_session.execute.await_args.args[0].compile().params
        assert params["slug"] == "test-2"
        assert "update_at" in params
        assert "create_at" not in params
        assert result.slug == "test-2"
        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_post_not_found(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await self.service.update_post(mock_db_session, "missing-id", self.body)

    @pytest.mark.asyncio
    async def test_delete_post_echoes_row(self, mock_db_session, make_post, sample_post_data):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = make_post()
        mock_db_session.execute.return_value = mock_result

        result = await self.service.delete_post(mock_db_session, sample_post_data["post_id"])

        assert result.post_id == sample_post_data["post_id"]
        assert result.title == sample_post_data["title"]
        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_post_not_found(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await self.service.delete_post(mock_db_session, "missing-id")

    @pytest.mark.asyncio
    async def test_delete_post_database_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("deadlock"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.delete_post(mock_db_session, "some-id")

        assert exc_info.value.context == {"operation": "delete", "post_id": "some-id"}

    @pytest.mark.asyncio
    async def test_create_post_commit_failure(self, mock_db_session, make_post):
        """A commit that fails must surface before any response is built."""
        mock_result = MagicMock()
        mock_result.scalar_one.return_value = make_post()
        mock_db_session.execute.return_value = mock_result
        mock_db_session.commit = AsyncMock(side_effect=RuntimeError("could not serialize access"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_post(mock_db_session, self.body)

        assert exc_info.value.context["operation"] == "create"

    @pytest.mark.asyncio
    async def test_update_post_commit_failure(self, mock_db_session, make_post):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = make_post()
        mock_db_session.execute.return_value = mock_result
        mock_db_session.commit = AsyncMock(side_effect=RuntimeError("connection lost"))

        with pytest.raises(DatabaseError):
            await self.service.update_post(mock_db_session, "some-id", self.body)

    @pytest.mark.asyncio
    async def test_delete_post_commit_failure(self, mock_db_session, make_post):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = make_post()
        mock_db_session.execute.return_value = mock_result
        mock_db_session.commit = AsyncMock(side_effect=RuntimeError("connection lost"))

        with pytest.raises(DatabaseError):
            await self.service.delete_post(mock_db_session, "some-id")


class TestPostResponseTimestamps:
    """Serialized timestamps always carry a UTC offset."""

    def test_naive_timestamps_serialize_as_utc(self, sample_post_data):
        aware = PostResponse(**sample_post_data)
        naive = PostResponse(**{
            **sample_post_data,
            "create_at": sample_post_data["create_at"].replace(tzinfo=None),
            "update_at": sample_post_data["update_at"].replace(tzinfo=None),
        })

        assert naive.model_dump(mode="json") == aware.model_dump(mode="json")

    def test_serialized_timestamp_has_offset(self, sample_post_data):
        sample_post_data["create_at"] = datetime(2026, 10, 19, 6, 2, 59)
        dumped = PostResponse(**sample_post_data).model_dump(mode="json")

        assert dumped["create_at"] in ("2026-10-19T06:02:59Z", "2026-10-19T06:02:59+00:00")
