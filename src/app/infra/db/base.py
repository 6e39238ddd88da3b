# src/app/infra/db/base.py
"""
Abstract base class for the post repository.
This interface allows the blog service to run against any row store.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.app.domain.models import Post, PostStatus


class PostRepository(ABC):
    """
    Abstract interface for post persistence.

    Implementations:
    - SupabasePostRepository: PostgREST table behind Supabase
    """

    @abstractmethod
    def insert_post(
        self,
        owner_id: str,
        author_username: Optional[str],
        title: str,
        content: str,
        image_url: Optional[str] = None,
    ) -> Post:
        """
        Insert a new post with the default status.

        Returns:
            The stored Post, including the server-assigned id and created_at

        Raises:
            PersistenceError: The row could not be written
        """
        pass

    @abstractmethod
    def list_posts_by_status(self, status: PostStatus) -> list[Post]:
        """
        All posts with the given status, newest first.

        Raises:
            PersistenceError: The query failed
        """
        pass

    @abstractmethod
    def get_post(self, post_id: str) -> Post:
        """
        Fetch exactly one post.

        Raises:
            PostNotFoundError: No row has this id
            PersistenceError: The query failed for another reason
        """
        pass

    @abstractmethod
    def get_owner_id(self, post_id: str) -> str:
        """
        Fetch only the owner id of a post.

        Raises:
            PostNotFoundError: No row has this id
            PersistenceError: The query failed for another reason
        """
        pass

    @abstractmethod
    def update_post(self, post_id: str, changes: dict[str, Any]) -> list[Post]:
        """
        Apply a partial update. Columns missing from changes are untouched.

        Returns:
            The updated rows

        Raises:
            PersistenceError: The update failed
        """
        pass

    @abstractmethod
    def delete_post(self, post_id: str) -> None:
        """
        Delete a post row.

        Raises:
            PersistenceError: The delete failed
        """
        pass
