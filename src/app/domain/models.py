# src/app/domain/models.py
"""
Domain models for the blog.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class PostStatus(str, Enum):
    """Visibility status of a post. Only moderation moves a post to REPORTED."""
    PUBLISHED = "published"
    REPORTED = "reported"


@dataclass
class Identity:
    """The authenticated user as seen by the platform."""
    id: str
    email: Optional[str] = None
    username: Optional[str] = None


@dataclass
class AuthSession:
    """Tokens issued by the platform after a successful sign-in."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


@dataclass
class AuthResult:
    """Uniform result of sign-up and login. Never carries an exception."""
    ok: bool
    identity: Optional[Identity] = None
    session: Optional[AuthSession] = None
    error: Optional[str] = None


@dataclass
class ActionResult:
    success: bool
    error: Optional[str] = None


@dataclass
class Post:
    """
    A blog post row.

    owner_id never changes after creation and author_username is a snapshot
    of the owner's username taken when the post was created.
    """
    id: str
    owner_id: str
    title: str
    content: str
    author_username: Optional[str] = None
    image_url: Optional[str] = None
    status: PostStatus = PostStatus.PUBLISHED
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED


@dataclass
class PostDraft:
    title: str
    content: str


@dataclass
class PostPatch:
    """Partial update. Fields left as None are not touched."""
    title: Optional[str] = None
    content: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.title is not None:
            data["title"] = self.title
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class ImageFile:
    """An uploaded image held in memory until it is pushed to storage."""
    filename: str
    content: bytes = field(repr=False)
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        """Lower-cased extension including the dot, or "" when there is none."""
        ext = os.path.splitext(os.path.basename(self.filename))[1].lower()
        # "photo." has no usable extension
        return "" if ext == "." else ext

    @property
    def size_bytes(self) -> int:
        return len(self.content)
