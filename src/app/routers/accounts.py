# src/app/routers/accounts.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from src.app.deps import get_account_service
from src.app.schemas.accounts import AuthResponse, LoginRequest, PublicUser, RegisterRequest
from src.app.services.account_service import AccountService

router = APIRouter(tags=["accounts"])


@router.post("/register", response_model=AuthResponse)
async def register(
    payload: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> AuthResponse:
    # bcrypt and S3 calls block; keep them off the event loop
    user = await run_in_threadpool(
        accounts.register,
        payload.username or "",
        payload.email or "",
        payload.password or "",
    )
    return AuthResponse(message="User registered successfully", user=PublicUser(**user))


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> AuthResponse:
    user = await run_in_threadpool(
        accounts.authenticate,
        payload.username or "",
        payload.password or "",
    )
    return AuthResponse(message="Login successful", user=PublicUser(**user))
