from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from src.app.domain.errors import IdentityProviderError
from src.app.infra.auth.supabase_provider import SupabaseIdentityProvider, user_to_identity


def _user(user_id: str = "u1", email: str = "alice@example.com", username: str | None = "alice") -> SimpleNamespace:
    meta = {"username": username} if username else {}
    return SimpleNamespace(id=user_id, email=email, user_metadata=meta)


def _session(token: str = "access") -> SimpleNamespace:
    return SimpleNamespace(access_token=token, refresh_token="refresh", expires_at=1700000000)


@pytest.fixture
def shared_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def fresh_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def provider(shared_client: MagicMock, fresh_client: MagicMock) -> SupabaseIdentityProvider:
    return SupabaseIdentityProvider(shared_client, client_factory=lambda: fresh_client)


class TestUserToIdentity:
    def test_reads_username_from_metadata(self) -> None:
        identity = user_to_identity(_user())

        assert identity.id == "u1"
        assert identity.email == "alice@example.com"
        assert identity.username == "alice"

    def test_missing_metadata(self) -> None:
        identity = user_to_identity(SimpleNamespace(id="u1", email=None, user_metadata=None))

        assert identity.username is None

    def test_none(self) -> None:
        assert user_to_identity(None) is None


class TestGetUser:
    def test_resolves_token_on_shared_client(
        self, provider: SupabaseIdentityProvider, shared_client: MagicMock
    ) -> None:
        shared_client.auth.get_user.return_value = SimpleNamespace(user=_user())

        identity = provider.get_user("jwt")

        shared_client.auth.get_user.assert_called_once_with("jwt")
        assert identity.id == "u1"

    def test_no_user(self, provider: SupabaseIdentityProvider, shared_client: MagicMock) -> None:
        shared_client.auth.get_user.return_value = None

        assert provider.get_user("jwt") is None

    def test_platform_error_is_wrapped(self, provider: SupabaseIdentityProvider, shared_client: MagicMock) -> None:
        shared_client.auth.get_user.side_effect = RuntimeError("invalid JWT")

        with pytest.raises(IdentityProviderError, match="invalid JWT"):
            provider.get_user("jwt")


class TestCredentialExchange:
    def test_sign_up_stores_username_as_metadata(
        self, provider: SupabaseIdentityProvider, shared_client: MagicMock, fresh_client: MagicMock
    ) -> None:
        fresh_client.auth.sign_up.return_value = SimpleNamespace(user=_user(), session=None)

        identity, session = provider.sign_up("alice@example.com", "pw", "alice")

        fresh_client.auth.sign_up.assert_called_once_with(
            {
                "email": "alice@example.com",
                "password": "pw",
                "options": {"data": {"username": "alice"}},
            }
        )
        shared_client.auth.sign_up.assert_not_called()
        assert identity.username == "alice"
        assert session is None

    def test_sign_in_returns_session(self, provider: SupabaseIdentityProvider, fresh_client: MagicMock) -> None:
        fresh_client.auth.sign_in_with_password.return_value = SimpleNamespace(user=_user(), session=_session("abc"))

        identity, session = provider.sign_in("alice@example.com", "pw")

        assert identity.id == "u1"
        assert session.access_token == "abc"
        assert session.refresh_token == "refresh"

    def test_sign_in_error(self, provider: SupabaseIdentityProvider, fresh_client: MagicMock) -> None:
        fresh_client.auth.sign_in_with_password.side_effect = RuntimeError("Invalid login credentials")

        with pytest.raises(IdentityProviderError, match="Invalid login credentials"):
            provider.sign_in("alice@example.com", "bad")

    def test_sign_out_uses_admin_api(self, provider: SupabaseIdentityProvider, shared_client: MagicMock) -> None:
        provider.sign_out("jwt")

        shared_client.auth.admin.sign_out.assert_called_once_with("jwt")
