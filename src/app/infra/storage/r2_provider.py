# src/app/infra/storage/r2_provider.py
"""
Cloudflare R2 storage provider implementation.
R2 is S3-compatible, so we use boto3 with custom endpoint.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from src.app.domain.errors import BucketNotFoundError, StorageError
from src.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class R2StorageProvider(StorageProvider):
    """
    Cloudflare R2 storage provider using boto3 (S3-compatible).

    Environment variables required:
    - R2_ACCOUNT_ID: Cloudflare account ID
    - R2_ACCESS_KEY_ID: R2 access key ID
    - R2_SECRET_ACCESS_KEY: R2 secret access key
    - R2_BUCKET_NAME: Name of the R2 bucket
    - R2_PUBLIC_URL: Public URL the bucket is served from
    """

    def __init__(
        self,
        account_id: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        bucket_name: Optional[str] = None,
        public_url: Optional[str] = None,
        client: Any = None,
    ):
        self.account_id = account_id or os.getenv("R2_ACCOUNT_ID")
        self.access_key_id = access_key_id or os.getenv("R2_ACCESS_KEY_ID")
        self.secret_access_key = secret_access_key or os.getenv("R2_SECRET_ACCESS_KEY")
        self.bucket_name = bucket_name or os.getenv("R2_BUCKET_NAME")
        self.public_url = public_url or os.getenv("R2_PUBLIC_URL")

        if not all([self.account_id, self.access_key_id, self.secret_access_key, self.bucket_name, self.public_url]):
            raise StorageError(
                "Missing R2 configuration. Required: R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, "
                "R2_SECRET_ACCESS_KEY, R2_BUCKET_NAME, R2_PUBLIC_URL"
            )

        self.endpoint_url = f"https://{self.account_id}.r2.cloudflarestorage.com"

        self._client = client or boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=Config(
                signature_version="s3v4",
                retries={"max_attempts": 1, "mode": "standard"},
            ),
            region_name="auto",  # R2 uses 'auto' as region
        )

        logger.info(
            "R2StorageProvider initialized: bucket=%s, endpoint=%s",
            self.bucket_name,
            self.endpoint_url,
        )

    def upload(
        self,
        object_key: str,
        content: bytes,
        content_type: Optional[str] = None,
        upsert: bool = False,
        cache_control: Optional[str] = None,
    ) -> None:
        """Put an object into R2. S3 semantics always overwrite, so upsert is implied."""
        params: dict[str, Any] = {
            "Bucket": self.bucket_name,
            "Key": object_key,
            "Body": content,
        }
        if content_type:
            params["ContentType"] = content_type
        if cache_control:
            params["CacheControl"] = f"max-age={cache_control}"

        try:
            self._client.put_object(**params)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error("Failed to upload to R2: key=%s, code=%s, error=%s", object_key, error_code, e)
            if error_code == "NoSuchBucket":
                raise BucketNotFoundError(self.bucket_name) from e
            raise StorageError(f"Image upload failed: {e}") from e

        logger.info("Uploaded to R2: key=%s, size=%d bytes", object_key, len(content))

    def get_public_url(self, object_key: str) -> str:
        return f"{self.public_url.rstrip('/')}/{object_key}"
