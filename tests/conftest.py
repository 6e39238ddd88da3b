from __future__ import annotations

import os

import pytest

os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from src.app.services.auth_service import AuthService  # noqa: E402
from src.app.services.blog_service import BlogService  # noqa: E402
from tests.stubs import (  # noqa: E402
    FIXED_NOW,
    IdentityProviderStub,
    InMemoryPostRepository,
    StorageProviderStub,
)


@pytest.fixture
def identity_provider() -> IdentityProviderStub:
    return IdentityProviderStub()


@pytest.fixture
def post_repository() -> InMemoryPostRepository:
    return InMemoryPostRepository()


@pytest.fixture
def storage() -> StorageProviderStub:
    return StorageProviderStub()


@pytest.fixture
def auth_service(identity_provider: IdentityProviderStub) -> AuthService:
    return AuthService(identity_provider)


@pytest.fixture
def blog_service(
    auth_service: AuthService,
    post_repository: InMemoryPostRepository,
    storage: StorageProviderStub,
) -> BlogService:
    return BlogService(
        auth=auth_service,
        repository=post_repository,
        storage=storage,
        images_folder="blogs",
        cache_control="3600",
        clock=lambda: FIXED_NOW,
    )
