"""Shipment ledger and query endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from shipdesk.dependencies import (
    get_filters,
    get_ledger,
    get_queries,
    require_login,
)
from shipdesk.ledger import ShipmentLedger
from shipdesk.queries import ShipmentQueries
from shipdesk.schemas import (
    ApiResponse,
    CreatedId,
    ShipmentCreate,
    ShipmentFilters,
    ShipmentUpdate,
)

router = APIRouter(
    prefix="/shipments",
    tags=["shipments"],
    dependencies=[Depends(require_login)],
)


@router.get("", response_model=ApiResponse)
async def list_shipments(
    filters: ShipmentFilters = Depends(get_filters),
    queries: ShipmentQueries = Depends(get_queries),
) -> ApiResponse:
    """List shipments matching the month/carrier/status/search filters."""
    return ApiResponse(data=await queries.list(filters))


@router.get("/summary", response_model=ApiResponse)
async def shipment_summary(
    filters: ShipmentFilters = Depends(get_filters),
    queries: ShipmentQueries = Depends(get_queries),
) -> ApiResponse:
    """Totals per carrier per month."""
    return ApiResponse(data=await queries.summary(filters))


@router.get("/monthly", response_model=ApiResponse)
async def monthly_summary(
    queries: ShipmentQueries = Depends(get_queries),
) -> ApiResponse:
    return ApiResponse(data=await queries.monthly())


@router.get("/export")
async def export_shipments(
    filters: ShipmentFilters = Depends(get_filters),
    queries: ShipmentQueries = Depends(get_queries),
) -> Response:
    """Download the filtered listing as CSV."""
    content = await queries.export_csv(filters)
    filename = f"shipments_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{shipment_id}", response_model=ApiResponse)
async def get_shipment(
    shipment_id: int,
    ledger: ShipmentLedger = Depends(get_ledger),
) -> ApiResponse:
    return ApiResponse(data=await ledger.get(shipment_id))


@router.post("", response_model=ApiResponse)
async def create_shipment(
    body: ShipmentCreate,
    ledger: ShipmentLedger = Depends(get_ledger),
) -> ApiResponse:
    new_id = await ledger.create(body)
    return ApiResponse(message="Shipment created", data=CreatedId(id=new_id))


@router.put("/{shipment_id}", response_model=ApiResponse)
async def update_shipment(
    shipment_id: int,
    body: ShipmentUpdate,
    ledger: ShipmentLedger = Depends(get_ledger),
) -> ApiResponse:
    await ledger.update(shipment_id, body)
    return ApiResponse(message="Shipment updated")


@router.delete("/{shipment_id}", response_model=ApiResponse)
async def delete_shipment(
    shipment_id: int,
    ledger: ShipmentLedger = Depends(get_ledger),
) -> ApiResponse:
    await ledger.delete(shipment_id)
    return ApiResponse(message="Shipment deleted")
