"""Address registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shipdesk.dependencies import get_address_registry, require_login
from shipdesk.registries import AddressRegistry
from shipdesk.schemas import (
    AddressCreate,
    AddressUpdate,
    ApiResponse,
    CreatedId,
)

router = APIRouter(
    prefix="/addresses",
    tags=["addresses"],
    dependencies=[Depends(require_login)],
)


@router.get("", response_model=ApiResponse)
async def list_addresses(
    registry: AddressRegistry = Depends(get_address_registry),
) -> ApiResponse:
    return ApiResponse(data=await registry.list())


@router.get("/{address_id}", response_model=ApiResponse)
async def get_address(
    address_id: int,
    registry: AddressRegistry = Depends(get_address_registry),
) -> ApiResponse:
    return ApiResponse(data=await registry.get(address_id))


@router.post("", response_model=ApiResponse)
async def create_address(
    body: AddressCreate,
    registry: AddressRegistry = Depends(get_address_registry),
) -> ApiResponse:
    new_id = await registry.create(body)
    return ApiResponse(message="Address created", data=CreatedId(id=new_id))


@router.put("/{address_id}", response_model=ApiResponse)
async def update_address(
    address_id: int,
    body: AddressUpdate,
    registry: AddressRegistry = Depends(get_address_registry),
) -> ApiResponse:
    await registry.update(address_id, body)
    return ApiResponse(message="Address updated")


@router.delete("/{address_id}", response_model=ApiResponse)
async def delete_address(
    address_id: int,
    registry: AddressRegistry = Depends(get_address_registry),
) -> ApiResponse:
    await registry.delete(address_id)
    return ApiResponse(message="Address deleted")
