"""Session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from shipdesk.auth import SessionGate
from shipdesk.dependencies import get_session_gate
from shipdesk.schemas import (
    ApiResponse,
    ChangePasswordRequest,
    CheckResponse,
    LoginRequest,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse)
async def login(
    body: LoginRequest,
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> ApiResponse:
    user = await gate.login(request.session, body.username, body.password)
    return ApiResponse(message="Logged in", data=user)


@router.post("/logout", response_model=ApiResponse)
async def logout(
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> ApiResponse:
    gate.logout(request.session)
    return ApiResponse(message="Logged out")


@router.get("/check", response_model=CheckResponse)
async def check(
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> CheckResponse:
    user = gate.check(request.session)
    return CheckResponse(loggedIn=user is not None, data=user)


@router.post("/change-password", response_model=ApiResponse)
async def change_password(
    body: ChangePasswordRequest,
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> ApiResponse:
    await gate.change_password(
        request.session, body.old_password, body.new_password
    )
    return ApiResponse(message="Password changed")
