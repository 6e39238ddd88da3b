# src/app/schemas/posts.py
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from src.app.domain.models import Post

PostStatusValue = Literal["published", "reported"]


class PostResponse(BaseModel):
    id: str
    user_id: str
    author_username: Optional[str] = None
    title: str
    content: str
    image_url: Optional[str] = None
    status: PostStatusValue = "published"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            user_id=post.owner_id,
            author_username=post.author_username,
            title=post.title,
            content=post.content,
            image_url=post.image_url,
            status=post.status.value,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )
