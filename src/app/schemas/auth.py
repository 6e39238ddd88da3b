# src/app/schemas/auth.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from src.app.domain.models import AuthResult, Identity


class SignUpRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    username: Optional[str] = None

    @classmethod
    def from_identity(cls, identity: Identity) -> "UserResponse":
        return cls(id=identity.id, email=identity.email, username=identity.username)


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


class AuthResponse(BaseModel):
    user: Optional[UserResponse] = None
    session: Optional[SessionResponse] = None
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        session = None
        if result.session is not None:
            session = SessionResponse(
                access_token=result.session.access_token,
                refresh_token=result.session.refresh_token,
                expires_at=result.session.expires_at,
            )
        return cls(
            user=UserResponse.from_identity(result.identity) if result.identity else None,
            session=session,
            error=result.error,
        )


class ActionResponse(BaseModel):
    success: bool
    error: Optional[str] = None
