from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from postgrest.exceptions import APIError
from supabase import Client

from src.app.domain.errors import PersistenceError, PostNotFoundError
from src.app.domain.models import Post, PostStatus
from src.app.infra.db.base import PostRepository

logger = logging.getLogger(__name__)

# PostgREST answers .single() with this code when zero rows match
NO_ROWS_CODE = "PGRST116"
OWNER_COLUMN = "user_id"


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def _parse_status(value: object) -> PostStatus:
    raw = str(value or PostStatus.PUBLISHED.value)
    try:
        return PostStatus(raw)
    except ValueError as error:
        raise PersistenceError("read", f"unknown status {raw!r}") from error


def _row_to_post(row: dict[str, Any]) -> Post:
    return Post(
        id=str(row["id"]),
        owner_id=str(row[OWNER_COLUMN]),
        title=str(row.get("title") or ""),
        content=str(row.get("content") or ""),
        author_username=_safe_str(row.get("author_username")),
        image_url=_safe_str(row.get("image_url")),
        status=_parse_status(row.get("status")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _error_reason(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


class SupabasePostRepository(PostRepository):
    def __init__(self, client: Client, table_name: str = "blogs"):
        self._client = client
        self.table_name = table_name

    def _table(self):
        return self._client.table(self.table_name)

    def insert_post(
        self,
        owner_id: str,
        author_username: str | None,
        title: str,
        content: str,
        image_url: str | None = None,
    ) -> Post:
        row: dict[str, Any] = {
            "title": title,
            "content": content,
            OWNER_COLUMN: owner_id,
            "author_username": author_username,
        }
        if image_url:
            row["image_url"] = image_url

        try:
            result = self._table().insert(row).execute()
        except APIError as error:
            logger.error("Supabase error inserting post: %s", error)
            raise PersistenceError("insert", _error_reason(error)) from error

        if not result.data:
            raise PersistenceError("insert", "no row returned")

        post = _row_to_post(result.data[0])
        logger.info("Created post: id=%s, owner=%s", post.id, owner_id)
        return post

    def list_posts_by_status(self, status: PostStatus) -> list[Post]:
        try:
            result = (
                self._table()
                .select("*")
                .eq("status", status.value)
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as error:
            logger.error("Supabase error listing posts: %s", error)
            raise PersistenceError("list", _error_reason(error)) from error

        return [_row_to_post(row) for row in (result.data or [])]

    def _select_single(self, post_id: str, columns: str, operation: str) -> dict[str, Any]:
        try:
            result = self._table().select(columns).eq("id", post_id).single().execute()
        except APIError as error:
            if getattr(error, "code", None) == NO_ROWS_CODE:
                raise PostNotFoundError(post_id) from error
            logger.error("Supabase error during %s: id=%s, error=%s", operation, post_id, error)
            raise PersistenceError(operation, _error_reason(error)) from error

        if not result.data:
            raise PostNotFoundError(post_id)
        return result.data

    def get_post(self, post_id: str) -> Post:
        return _row_to_post(self._select_single(post_id, "*", "get"))

    def get_owner_id(self, post_id: str) -> str:
        row = self._select_single(post_id, OWNER_COLUMN, "ownership check")
        return str(row[OWNER_COLUMN])

    def update_post(self, post_id: str, changes: dict[str, Any]) -> list[Post]:
        try:
            result = self._table().update(changes).eq("id", post_id).execute()
        except APIError as error:
            logger.error("Supabase error updating post: id=%s, error=%s", post_id, error)
            raise PersistenceError("update", _error_reason(error)) from error

        posts = [_row_to_post(row) for row in (result.data or [])]
        logger.info("Updated post: id=%s, fields=%s", post_id, sorted(changes))
        return posts

    def delete_post(self, post_id: str) -> None:
        try:
            self._table().delete().eq("id", post_id).execute()
        except APIError as error:
            logger.error("Supabase error deleting post: id=%s, error=%s", post_id, error)
            raise PersistenceError("delete", _error_reason(error)) from error

        logger.info("Deleted post: id=%s", post_id)
