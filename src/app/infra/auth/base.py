# src/app/infra/auth/base.py
"""
Abstract base class for the identity provider.
The platform owns password hashing and session issuance; this is the narrow
surface the blog needs from it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from src.app.domain.models import AuthSession, Identity


class IdentityProvider(ABC):
    """
    Implementations raise IdentityProviderError for every platform failure.

    Implementations:
    - SupabaseIdentityProvider: Supabase Auth (GoTrue)
    """

    @abstractmethod
    def get_user(self, access_token: str) -> Optional[Identity]:
        """Resolve the user behind an access token, or None if there is none."""
        pass

    @abstractmethod
    def sign_up(
        self,
        email: str,
        password: str,
        username: str,
    ) -> tuple[Optional[Identity], Optional[AuthSession]]:
        """
        Create an account. The username is stored as profile metadata.

        Returns:
            Tuple of (identity, session). The session is None when the
            platform requires email confirmation first.
        """
        pass

    @abstractmethod
    def sign_in(self, email: str, password: str) -> tuple[Optional[Identity], Optional[AuthSession]]:
        """Exchange credentials for a session."""
        pass

    @abstractmethod
    def sign_out(self, access_token: str) -> None:
        """Invalidate the session behind an access token."""
        pass
