from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from src.app.deps import get_access_token, get_auth_service, get_current_user
from src.app.domain.models import Identity
from src.app.schemas.auth import ActionResponse, AuthResponse, LoginRequest, SignUpRequest, UserResponse
from src.app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse)
async def signup(
    body: SignUpRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = await run_in_threadpool(auth.sign_up, body.username, body.email, body.password)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error or "Signup failed")
    return AuthResponse.from_result(result)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = await run_in_threadpool(auth.login, body.email, body.password)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error or "Login failed")
    return AuthResponse.from_result(result)


@router.post("/logout", response_model=ActionResponse)
async def logout(
    token: Optional[str] = Depends(get_access_token),
    auth: AuthService = Depends(get_auth_service),
) -> ActionResponse:
    result = await run_in_threadpool(auth.logout, token)
    return ActionResponse(success=result.success, error=result.error)


@router.get("/me", response_model=UserResponse)
async def me(user: Identity = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_identity(user)
