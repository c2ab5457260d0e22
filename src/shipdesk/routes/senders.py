"""Sender registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shipdesk.dependencies import get_sender_registry, require_login
from shipdesk.registries import SenderRegistry
from shipdesk.schemas import ApiResponse, CreatedId, SenderCreate, SenderUpdate

router = APIRouter(
    prefix="/senders",
    tags=["senders"],
    dependencies=[Depends(require_login)],
)


@router.get("", response_model=ApiResponse)
async def list_senders(
    registry: SenderRegistry = Depends(get_sender_registry),
) -> ApiResponse:
    return ApiResponse(data=await registry.list())


@router.get("/{sender_id}", response_model=ApiResponse)
async def get_sender(
    sender_id: int,
    registry: SenderRegistry = Depends(get_sender_registry),
) -> ApiResponse:
    return ApiResponse(data=await registry.get(sender_id))


@router.post("", response_model=ApiResponse)
async def create_sender(
    body: SenderCreate,
    registry: SenderRegistry = Depends(get_sender_registry),
) -> ApiResponse:
    new_id = await registry.create(body)
    return ApiResponse(message="Sender created", data=CreatedId(id=new_id))


@router.put("/{sender_id}", response_model=ApiResponse)
async def update_sender(
    sender_id: int,
    body: SenderUpdate,
    registry: SenderRegistry = Depends(get_sender_registry),
) -> ApiResponse:
    await registry.update(sender_id, body)
    return ApiResponse(message="Sender updated")


@router.delete("/{sender_id}", response_model=ApiResponse)
async def delete_sender(
    sender_id: int,
    registry: SenderRegistry = Depends(get_sender_registry),
) -> ApiResponse:
    await registry.delete(sender_id)
    return ApiResponse(message="Sender deleted")
