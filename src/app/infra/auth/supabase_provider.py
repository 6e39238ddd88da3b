from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from supabase import Client, ClientOptions, create_client

from src.app.domain.errors import IdentityProviderError
from src.app.domain.models import AuthSession, Identity
from src.app.infra.auth.base import IdentityProvider

logger = logging.getLogger(__name__)


def user_to_identity(user: Any) -> Optional[Identity]:
    if user is None:
        return None
    meta = getattr(user, "user_metadata", None) or {}
    username = meta.get("username") if isinstance(meta, dict) else None
    return Identity(
        id=str(user.id),
        email=getattr(user, "email", None),
        username=str(username) if username else None,
    )


def session_to_auth_session(session: Any) -> Optional[AuthSession]:
    if session is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_at=getattr(session, "expires_at", None),
    )


def make_ephemeral_client_factory(url: str, key: str) -> Callable[[], Client]:
    """Clients that keep no session in memory, one per credential exchange."""

    def factory() -> Client:
        options = ClientOptions(persist_session=False, auto_refresh_token=False)
        return create_client(url, key, options=options)

    return factory


class SupabaseIdentityProvider(IdentityProvider):
    def __init__(self, client: Client, client_factory: Callable[[], Client]):
        # the shared client only runs stateless calls; sign-up and sign-in
        # store a session on the client they run on
        self._client = client
        self._client_factory = client_factory

    def get_user(self, access_token: str) -> Optional[Identity]:
        try:
            response = self._client.auth.get_user(access_token)
        except Exception as error:
            raise IdentityProviderError(str(error)) from error
        return user_to_identity(getattr(response, "user", None) if response else None)

    def sign_up(
        self,
        email: str,
        password: str,
        username: str,
    ) -> tuple[Optional[Identity], Optional[AuthSession]]:
        try:
            response = self._client_factory().auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"username": username}},
                }
            )
        except Exception as error:
            raise IdentityProviderError(str(error)) from error
        return user_to_identity(response.user), session_to_auth_session(response.session)

    def sign_in(self, email: str, password: str) -> tuple[Optional[Identity], Optional[AuthSession]]:
        try:
            response = self._client_factory().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as error:
            raise IdentityProviderError(str(error)) from error
        return user_to_identity(response.user), session_to_auth_session(response.session)

    def sign_out(self, access_token: str) -> None:
        try:
            self._client.auth.admin.sign_out(access_token)
        except Exception as error:
            raise IdentityProviderError(str(error)) from error
