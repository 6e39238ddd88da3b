# src/app/deps.py (singletons exposed as dependencies)

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client, create_client

from src.app.config import settings
from src.app.domain.models import Identity
from src.app.infra.auth.supabase_provider import SupabaseIdentityProvider, make_ephemeral_client_factory
from src.app.infra.db.supabase_posts_repo import SupabasePostRepository
from src.app.infra.storage.base import StorageProvider
from src.app.infra.storage.r2_provider import R2StorageProvider
from src.app.infra.storage.supabase_provider import SupabaseStorageProvider
from src.app.services.auth_service import AuthService
from src.app.services.blog_service import BlogService

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def get_storage(supa: Client = Depends(get_supabase)) -> StorageProvider:
    if settings.STORAGE_BACKEND == "r2":
        return R2StorageProvider(
            account_id=settings.R2_ACCOUNT_ID,
            access_key_id=settings.R2_ACCESS_KEY_ID,
            secret_access_key=settings.R2_SECRET_ACCESS_KEY,
            bucket_name=settings.R2_BUCKET_NAME,
            public_url=settings.R2_PUBLIC_URL,
        )
    return SupabaseStorageProvider(supa, bucket_name=settings.BLOG_IMAGES_BUCKET)


def get_auth_service(supa: Client = Depends(get_supabase)) -> AuthService:
    factory = make_ephemeral_client_factory(str(settings.SUPABASE_URL), settings.SUPABASE_SERVICE_ROLE_KEY)
    return AuthService(SupabaseIdentityProvider(supa, factory))


def get_blog_service(
    supa: Client = Depends(get_supabase),
    auth: AuthService = Depends(get_auth_service),
    storage: StorageProvider = Depends(get_storage),
) -> BlogService:
    return BlogService(
        auth=auth,
        repository=SupabasePostRepository(supa, table_name=settings.BLOG_TABLE),
        storage=storage,
        images_folder=settings.BLOG_IMAGES_FOLDER,
        cache_control=settings.IMAGE_CACHE_CONTROL,
    )


auth_scheme = HTTPBearer(auto_error=False)


def get_access_token(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
) -> Optional[str]:
    """
    Raw Supabase access token from Authorization: Bearer <token>, if any.
    The services decide whether an anonymous caller is acceptable.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        return None
    return cred.credentials


def get_current_user(
    token: Optional[str] = Depends(get_access_token),
    auth: AuthService = Depends(get_auth_service),
) -> Identity:
    identity = auth.get_current_identity(token)
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid/expired token")
    return identity
