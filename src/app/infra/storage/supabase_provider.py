from __future__ import annotations

import logging
from typing import Optional

from supabase import Client

from src.app.domain.errors import BucketNotFoundError, StorageError
from src.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)

BUCKET_NOT_FOUND_MARKER = "Bucket not found"


class SupabaseStorageProvider(StorageProvider):
    def __init__(self, client: Client, bucket_name: str = "blog-images"):
        self._client = client
        self.bucket_name = bucket_name

    def _bucket(self):
        return self._client.storage.from_(self.bucket_name)

    def upload(
        self,
        object_key: str,
        content: bytes,
        content_type: Optional[str] = None,
        upsert: bool = False,
        cache_control: Optional[str] = None,
    ) -> None:
        file_options: dict[str, str] = {"upsert": "true" if upsert else "false"}
        if content_type:
            file_options["content-type"] = content_type
        if cache_control:
            file_options["cache-control"] = cache_control

        try:
            self._bucket().upload(object_key, content, file_options=file_options)
        except Exception as error:
            message = str(error)
            logger.error("Storage upload error: bucket=%s, key=%s, error=%s", self.bucket_name, object_key, message)
            if BUCKET_NOT_FOUND_MARKER.lower() in message.lower():
                raise BucketNotFoundError(self.bucket_name) from error
            raise StorageError(f"Image upload failed: {message}") from error

        logger.info("Uploaded image: bucket=%s, key=%s, size=%d bytes", self.bucket_name, object_key, len(content))

    def get_public_url(self, object_key: str) -> str:
        url = self._bucket().get_public_url(object_key)
        # older storage3 releases append an empty query string
        return url.rstrip("?")
