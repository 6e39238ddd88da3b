from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from src.app.domain.errors import PersistenceError, PostNotFoundError
from src.app.domain.models import PostStatus
from src.app.infra.db.supabase_posts_repo import SupabasePostRepository, _row_to_post

ROW = {
    "id": "p1",
    "user_id": "u1",
    "author_username": "alice",
    "title": "Hello",
    "content": "World",
    "image_url": None,
    "status": "published",
    "created_at": "2024-05-01T12:00:00Z",
    "updated_at": None,
}


def _response(data: object) -> MagicMock:
    response = MagicMock()
    response.data = data
    return response


def _api_error(code: str, message: str) -> APIError:
    return APIError({"code": code, "message": message, "details": None, "hint": None})


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def table(client: MagicMock) -> MagicMock:
    return client.table.return_value


@pytest.fixture
def repo(client: MagicMock) -> SupabasePostRepository:
    return SupabasePostRepository(client, table_name="blogs")


class TestRowToPost:
    def test_maps_owner_column_and_timestamps(self) -> None:
        post = _row_to_post(ROW)

        assert post.owner_id == "u1"
        assert post.author_username == "alice"
        assert post.status == PostStatus.PUBLISHED
        assert post.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert post.updated_at is None
        assert post.image_url is None

    def test_missing_status_defaults_to_published(self) -> None:
        row = {**ROW, "status": None}
        assert _row_to_post(row).status == PostStatus.PUBLISHED

    def test_unknown_status_is_a_persistence_error(self) -> None:
        row = {**ROW, "status": "draft"}

        with pytest.raises(PersistenceError) as exc_info:
            _row_to_post(row)

        assert "draft" in str(exc_info.value)


class TestInsertPost:
    def test_insert_writes_owner_and_snapshot(
        self, repo: SupabasePostRepository, client: MagicMock, table: MagicMock
    ) -> None:
        table.insert.return_value.execute.return_value = _response([ROW])

        post = repo.insert_post("u1", "alice", "Hello", "World")

        client.table.assert_called_with("blogs")
        payload = table.insert.call_args.args[0]
        assert payload == {"title": "Hello", "content": "World", "user_id": "u1", "author_username": "alice"}
        assert post.id == "p1"

    def test_insert_includes_image_url(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        table.insert.return_value.execute.return_value = _response([{**ROW, "image_url": "https://x/y.png"}])

        post = repo.insert_post("u1", "alice", "Hello", "World", image_url="https://x/y.png")

        assert table.insert.call_args.args[0]["image_url"] == "https://x/y.png"
        assert post.image_url == "https://x/y.png"

    def test_insert_error_surfaces_platform_message(
        self, repo: SupabasePostRepository, table: MagicMock
    ) -> None:
        table.insert.return_value.execute.side_effect = _api_error("42501", "new row violates row-level security")

        with pytest.raises(PersistenceError, match="row-level security"):
            repo.insert_post("u1", "alice", "Hello", "World")

    def test_insert_without_returned_row(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        table.insert.return_value.execute.return_value = _response([])

        with pytest.raises(PersistenceError):
            repo.insert_post("u1", "alice", "Hello", "World")


class TestSelects:
    def test_list_filters_and_orders(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        query = table.select.return_value.eq.return_value.order.return_value
        query.execute.return_value = _response([ROW])

        posts = repo.list_posts_by_status(PostStatus.PUBLISHED)

        table.select.assert_called_once_with("*")
        table.select.return_value.eq.assert_called_once_with("status", "published")
        table.select.return_value.eq.return_value.order.assert_called_once_with("created_at", desc=True)
        assert [post.id for post in posts] == ["p1"]

    def test_list_handles_no_data(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        table.select.return_value.eq.return_value.order.return_value.execute.return_value = _response(None)

        assert repo.list_posts_by_status(PostStatus.PUBLISHED) == []

    def test_get_post(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        single = table.select.return_value.eq.return_value.single.return_value
        single.execute.return_value = _response(ROW)

        post = repo.get_post("p1")

        table.select.return_value.eq.assert_called_once_with("id", "p1")
        assert post.title == "Hello"

    def test_zero_rows_is_not_found(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        single = table.select.return_value.eq.return_value.single.return_value
        single.execute.side_effect = _api_error("PGRST116", "JSON object requested, multiple (or no) rows returned")

        with pytest.raises(PostNotFoundError) as excinfo:
            repo.get_post("p404")

        assert excinfo.value.post_id == "p404"

    def test_other_errors_are_persistence_errors(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        single = table.select.return_value.eq.return_value.single.return_value
        single.execute.side_effect = _api_error("22P02", "invalid input syntax for type uuid")

        with pytest.raises(PersistenceError):
            repo.get_post("not-a-uuid")

    def test_get_owner_id_selects_owner_column(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        single = table.select.return_value.eq.return_value.single.return_value
        single.execute.return_value = _response({"user_id": "u1"})

        assert repo.get_owner_id("p1") == "u1"
        table.select.assert_called_once_with("user_id")


class TestMutations:
    def test_update_sends_only_changes(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        table.update.return_value.eq.return_value.execute.return_value = _response([{**ROW, "title": "v2"}])

        posts = repo.update_post("p1", {"title": "v2"})

        table.update.assert_called_once_with({"title": "v2"})
        table.update.return_value.eq.assert_called_once_with("id", "p1")
        assert posts[0].title == "v2"

    def test_update_error(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        table.update.return_value.eq.return_value.execute.side_effect = _api_error("500", "boom")

        with pytest.raises(PersistenceError):
            repo.update_post("p1", {"title": "v2"})

    def test_delete(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        repo.delete_post("p1")

        table.delete.return_value.eq.assert_called_once_with("id", "p1")
        table.delete.return_value.eq.return_value.execute.assert_called_once()

    def test_delete_error(self, repo: SupabasePostRepository, table: MagicMock) -> None:
        table.delete.return_value.eq.return_value.execute.side_effect = _api_error("500", "boom")

        with pytest.raises(PersistenceError):
            repo.delete_post("p1")
