"""Operator account endpoints, admin only."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shipdesk.auth import UserAdmin
from shipdesk.dependencies import get_user_admin, require_admin
from shipdesk.schemas import (
    ApiResponse,
    CreatedId,
    UserCreate,
    UserStatusUpdate,
    UserUpdate,
)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=ApiResponse)
async def list_users(
    admin: UserAdmin = Depends(get_user_admin),
) -> ApiResponse:
    return ApiResponse(data=await admin.list())


@router.post("", response_model=ApiResponse)
async def create_user(
    body: UserCreate,
    admin: UserAdmin = Depends(get_user_admin),
) -> ApiResponse:
    new_id = await admin.create(body.username, body.password)
    return ApiResponse(message="User created", data=CreatedId(id=new_id))


@router.put("/{user_id}", response_model=ApiResponse)
async def update_user(
    user_id: int,
    body: UserUpdate,
    admin: UserAdmin = Depends(get_user_admin),
) -> ApiResponse:
    await admin.update(user_id, body.username, body.password)
    return ApiResponse(message="User updated")


@router.delete("/{user_id}", response_model=ApiResponse)
async def delete_user(
    user_id: int,
    admin: UserAdmin = Depends(get_user_admin),
) -> ApiResponse:
    await admin.delete(user_id)
    return ApiResponse(message="User deleted")


@router.put("/{user_id}/status", response_model=ApiResponse)
async def set_user_status(
    user_id: int,
    body: UserStatusUpdate,
    admin: UserAdmin = Depends(get_user_admin),
) -> ApiResponse:
    status = await admin.set_status(user_id, body.status)
    return ApiResponse(
        message="User enabled" if status == "active" else "User disabled"
    )
