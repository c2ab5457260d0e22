"""Carrier registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shipdesk.dependencies import get_carrier_registry, require_login
from shipdesk.registries import CarrierRegistry
from shipdesk.schemas import (
    ApiResponse,
    CarrierCreate,
    CarrierUpdate,
    CreatedId,
)

router = APIRouter(
    prefix="/carriers",
    tags=["carriers"],
    dependencies=[Depends(require_login)],
)


@router.get("", response_model=ApiResponse)
async def list_carriers(
    registry: CarrierRegistry = Depends(get_carrier_registry),
) -> ApiResponse:
    return ApiResponse(data=await registry.list())


@router.get("/{carrier_id}", response_model=ApiResponse)
async def get_carrier(
    carrier_id: int,
    registry: CarrierRegistry = Depends(get_carrier_registry),
) -> ApiResponse:
    return ApiResponse(data=await registry.get(carrier_id))


@router.post("", response_model=ApiResponse)
async def create_carrier(
    body: CarrierCreate,
    registry: CarrierRegistry = Depends(get_carrier_registry),
) -> ApiResponse:
    new_id = await registry.create(body)
    return ApiResponse(message="Carrier created", data=CreatedId(id=new_id))


@router.put("/{carrier_id}", response_model=ApiResponse)
async def update_carrier(
    carrier_id: int,
    body: CarrierUpdate,
    registry: CarrierRegistry = Depends(get_carrier_registry),
) -> ApiResponse:
    await registry.update(carrier_id, body)
    return ApiResponse(message="Carrier updated")


@router.delete("/{carrier_id}", response_model=ApiResponse)
async def delete_carrier(
    carrier_id: int,
    registry: CarrierRegistry = Depends(get_carrier_registry),
) -> ApiResponse:
    await registry.delete(carrier_id)
    return ApiResponse(message="Carrier deleted")
