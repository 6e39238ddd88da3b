# src/app/services/blog_service.py
"""
Blog post service.
Create, read, update and delete posts, with image upload and an ownership
gate in front of every update and delete.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

from src.app.domain.errors import AuthRequiredError, ForbiddenError, PersistenceError
from src.app.domain.models import ActionResult, ImageFile, Identity, Post, PostDraft, PostPatch, PostStatus
from src.app.infra.db.base import PostRepository
from src.app.infra.storage.base import StorageProvider
from src.app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CACHE_CONTROL = "3600"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class BlogService:
    """
    Responsibilities:
    - Resolve the caller for every mutation (no session is kept here)
    - Upload images before the row that references them is written
    - Refuse updates and deletes from anyone but the owner

    A failed row write after a successful upload leaves the image in storage.
    Deleting a post does not delete its image either.
    """

    def __init__(
        self,
        auth: AuthService,
        repository: PostRepository,
        storage: StorageProvider,
        images_folder: str = "blogs",
        cache_control: str = DEFAULT_CACHE_CONTROL,
        clock: Callable[[], datetime] = _now_utc,
    ):
        self._auth = auth
        self._repo = repository
        self._storage = storage
        self.images_folder = images_folder
        self.cache_control = cache_control
        self._clock = clock

    def upload_image(self, image: ImageFile) -> str:
        """
        Store a new image under a random name and return its public URL.

        Raises:
            BucketNotFoundError: The images bucket has not been created
            StorageError: The upload failed
        """
        object_key = self._storage.generate_object_key(image.extension, folder=self.images_folder)
        self._storage.upload(object_key, image.content, content_type=image.content_type)
        return self._storage.get_public_url(object_key)

    def _replace_image(self, post_id: str, image: ImageFile) -> str:
        object_key = self._storage.generate_versioned_key(
            post_id,
            image.extension,
            folder=self.images_folder,
            now=self._clock(),
        )
        self._storage.upload(
            object_key,
            image.content,
            content_type=image.content_type,
            upsert=True,
            cache_control=self.cache_control,
        )
        return self._storage.get_public_url(object_key)

    def _require_identity(self, access_token: Optional[str], action: str) -> Identity:
        identity = self._auth.get_current_identity(access_token)
        if identity is None:
            raise AuthRequiredError(action)
        return identity

    def _run_owner_gated(
        self,
        access_token: Optional[str],
        post_id: str,
        action: str,
        mutate: Callable[[], T],
    ) -> T:
        """
        Fetch the owner, compare with the caller, and only then mutate.

        Nothing is written and nothing is uploaded unless the caller owns
        the post. The fetch and the mutation are never retried separately.
        """
        caller = self._require_identity(access_token, f"{action} a post")
        owner_id = self._repo.get_owner_id(post_id)
        if owner_id != caller.id:
            logger.warning(
                "Ownership check failed: action=%s, post=%s, owner=%s, caller=%s",
                action,
                post_id,
                owner_id,
                caller.id,
            )
            raise ForbiddenError(post_id, action)
        return mutate()

    def create_post(
        self,
        access_token: Optional[str],
        draft: PostDraft,
        image: Optional[ImageFile] = None,
    ) -> Post:
        identity = self._require_identity(access_token, "create a post")

        image_url: Optional[str] = None
        if image is not None:
            image_url = self.upload_image(image)

        try:
            return self._repo.insert_post(
                owner_id=identity.id,
                author_username=identity.username,
                title=draft.title,
                content=draft.content,
                image_url=image_url,
            )
        except PersistenceError:
            if image_url:
                logger.warning("Post insert failed after image upload, image left in storage: %s", image_url)
            raise

    def list_published(self) -> list[Post]:
        posts = self._repo.list_posts_by_status(PostStatus.PUBLISHED)
        return [post for post in posts if post.is_published]

    def get_post(self, post_id: str) -> Post:
        return self._repo.get_post(post_id)

    def update_post(
        self,
        access_token: Optional[str],
        post_id: str,
        patch: PostPatch,
        image: Optional[ImageFile] = None,
    ) -> Post:
        def apply() -> Post:
            changes = patch.changes()
            if image is not None:
                changes["image_url"] = self._replace_image(post_id, image)
            if not changes:
                return self._repo.get_post(post_id)

            changes["updated_at"] = self._clock().isoformat()
            rows = self._repo.update_post(post_id, changes)
            if not rows:
                raise PersistenceError("update", f"no row updated for post {post_id}")
            return rows[0]

        return self._run_owner_gated(access_token, post_id, "update", apply)

    def delete_post(self, access_token: Optional[str], post_id: str) -> ActionResult:
        def apply() -> ActionResult:
            self._repo.delete_post(post_id)
            return ActionResult(success=True)

        return self._run_owner_gated(access_token, post_id, "delete", apply)
