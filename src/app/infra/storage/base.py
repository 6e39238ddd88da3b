# src/app/infra/storage/base.py
"""
Abstract base class for image storage providers.
This interface allows swapping the object store behind the blog (Supabase Storage, R2).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


class StorageProvider(ABC):
    """
    Abstract interface for object storage operations.

    Implementations:
    - SupabaseStorageProvider: Supabase Storage bucket
    - R2StorageProvider: Cloudflare R2 (S3-compatible)
    """

    @abstractmethod
    def upload(
        self,
        object_key: str,
        content: bytes,
        content_type: Optional[str] = None,
        upsert: bool = False,
        cache_control: Optional[str] = None,
    ) -> None:
        """
        Upload bytes under the given key.

        Args:
            object_key: The key/path where the object will be stored
            content: Raw file content
            content_type: MIME type of the content (e.g., "image/png")
            upsert: Overwrite an existing object at the same key
            cache_control: max-age in seconds, as a string

        Raises:
            BucketNotFoundError: The destination bucket does not exist
            StorageError: Any other upload failure
        """
        pass

    @abstractmethod
    def get_public_url(self, object_key: str) -> str:
        """
        Build the publicly fetchable URL of an object.

        Args:
            object_key: The key/path of the object

        Returns:
            The public URL
        """
        pass

    def generate_object_key(self, extension: str, folder: str = "blogs") -> str:
        """
        Generate a collision-resistant key for a new image.

        Format: {folder}/{uuid}{extension}
        """
        return f"{folder}/{uuid4()}{extension}"

    def generate_versioned_key(
        self,
        post_id: str,
        extension: str,
        folder: str = "blogs",
        now: Optional[datetime] = None,
    ) -> str:
        """
        Generate a key for a replacement image of an existing post.

        Format: {folder}/{post_id}-{epoch_ms}{extension}
        """
        moment = now or datetime.now(timezone.utc)
        epoch_ms = int(moment.timestamp() * 1000)
        return f"{folder}/{post_id}-{epoch_ms}{extension}"
