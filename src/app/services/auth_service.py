# src/app/services/auth_service.py
"""
Identity accessor.
Resolves the caller from an access token and wraps sign-up, login and logout.
"""
from __future__ import annotations

import logging
from typing import Optional

from src.app.domain.errors import IdentityProviderError
from src.app.domain.models import ActionResult, AuthResult, Identity
from src.app.infra.auth.base import IdentityProvider

logger = logging.getLogger(__name__)


class AuthService:
    """
    Nothing is cached: every read asks the provider again.

    Read accessors return None on any failure, since an unauthenticated
    caller is a normal state. Mutating calls always return a result object
    and never raise.
    """

    def __init__(self, provider: IdentityProvider):
        self._provider = provider

    def get_current_identity(self, access_token: Optional[str]) -> Optional[Identity]:
        if not access_token:
            return None
        try:
            return self._provider.get_user(access_token)
        except IdentityProviderError as error:
            logger.error("Error fetching current user: %s", error)
            return None

    def get_current_user_id(self, access_token: Optional[str]) -> Optional[str]:
        identity = self.get_current_identity(access_token)
        return identity.id if identity else None

    def get_current_username(self, access_token: Optional[str]) -> Optional[str]:
        identity = self.get_current_identity(access_token)
        return identity.username if identity else None

    def get_current_user_email(self, access_token: Optional[str]) -> Optional[str]:
        identity = self.get_current_identity(access_token)
        return identity.email if identity else None

    def sign_up(self, username: str, email: str, password: str) -> AuthResult:
        try:
            identity, session = self._provider.sign_up(email, password, username)
        except IdentityProviderError as error:
            logger.error("Signup failed: email=%s, error=%s", email, error)
            return AuthResult(ok=False, error=str(error))

        logger.info("Signup successful: user=%s", identity.id if identity else None)
        return AuthResult(ok=identity is not None, identity=identity, session=session)

    def login(self, email: str, password: str) -> AuthResult:
        logger.info("Attempting login: email=%s", email)
        try:
            identity, session = self._provider.sign_in(email, password)
        except IdentityProviderError as error:
            logger.error("Login failed: email=%s, error=%s", email, error)
            return AuthResult(ok=False, error=str(error))

        logger.info("Login successful: user=%s", identity.id if identity else None)
        return AuthResult(ok=identity is not None, identity=identity, session=session)

    def logout(self, access_token: Optional[str]) -> ActionResult:
        if not access_token:
            return ActionResult(success=False, error="No active session")
        try:
            self._provider.sign_out(access_token)
        except IdentityProviderError as error:
            logger.error("Logout failed: %s", error)
            return ActionResult(success=False, error=str(error))
        return ActionResult(success=True)
