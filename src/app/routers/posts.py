# src/app/routers/posts.py
"""
Blog post routes. Create and update take multipart forms so an image can ride along.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from src.app.config import settings
from src.app.deps import get_access_token, get_blog_service
from src.app.domain.errors import (
    AuthRequiredError,
    BlogError,
    BucketNotFoundError,
    ForbiddenError,
    PostNotFoundError,
    StorageError,
)
from src.app.domain.models import ImageFile, PostDraft, PostPatch
from src.app.schemas.auth import ActionResponse
from src.app.schemas.posts import PostResponse
from src.app.services.blog_service import BlogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def _to_http_exception(exc: BlogError) -> HTTPException:
    if isinstance(exc, AuthRequiredError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
    if isinstance(exc, PostNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, BucketNotFoundError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, StorageError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


async def _read_image(upload: Optional[UploadFile]) -> Optional[ImageFile]:
    # browsers send an empty file part when no file was picked
    if upload is None or not upload.filename:
        return None

    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Content type '{content_type}' not allowed. Only images can be attached.",
        )

    image = ImageFile(filename=upload.filename, content=await upload.read(), content_type=content_type)
    if image.size_bytes > settings.MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size: {settings.MAX_IMAGE_SIZE_BYTES // (1024 * 1024)}MB",
        )
    return image


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    blog: BlogService = Depends(get_blog_service),
) -> list[PostResponse]:
    try:
        posts = await run_in_threadpool(blog.list_published)
    except BlogError as exc:
        raise _to_http_exception(exc)
    return [PostResponse.from_post(post) for post in posts]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    blog: BlogService = Depends(get_blog_service),
) -> PostResponse:
    try:
        post = await run_in_threadpool(blog.get_post, post_id)
    except BlogError as exc:
        raise _to_http_exception(exc)
    return PostResponse.from_post(post)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    title: str = Form(..., min_length=1, max_length=200),
    content: str = Form(..., min_length=1),
    image: Optional[UploadFile] = File(None),
    token: Optional[str] = Depends(get_access_token),
    blog: BlogService = Depends(get_blog_service),
) -> PostResponse:
    image_file = await _read_image(image)
    try:
        post = await run_in_threadpool(
            blog.create_post,
            token,
            PostDraft(title=title, content=content),
            image_file,
        )
    except BlogError as exc:
        logger.error("Post creation error: %s", exc)
        raise _to_http_exception(exc)
    return PostResponse.from_post(post)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    title: Optional[str] = Form(None, min_length=1, max_length=200),
    content: Optional[str] = Form(None, min_length=1),
    image: Optional[UploadFile] = File(None),
    token: Optional[str] = Depends(get_access_token),
    blog: BlogService = Depends(get_blog_service),
) -> PostResponse:
    image_file = await _read_image(image)
    try:
        post = await run_in_threadpool(
            blog.update_post,
            token,
            post_id,
            PostPatch(title=title, content=content),
            image_file,
        )
    except BlogError as exc:
        raise _to_http_exception(exc)
    return PostResponse.from_post(post)


@router.delete("/{post_id}", response_model=ActionResponse)
async def delete_post(
    post_id: str,
    token: Optional[str] = Depends(get_access_token),
    blog: BlogService = Depends(get_blog_service),
) -> ActionResponse:
    try:
        result = await run_in_threadpool(blog.delete_post, token, post_id)
    except BlogError as exc:
        raise _to_http_exception(exc)
    return ActionResponse(success=result.success, error=result.error)
