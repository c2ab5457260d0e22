"""Carrier tracking endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shipdesk.dependencies import get_tracking, require_login
from shipdesk.protocols import TrackingLookup
from shipdesk.schemas import ApiResponse

router = APIRouter(
    prefix="/tracking",
    tags=["tracking"],
    dependencies=[Depends(require_login)],
)


@router.get("/{tracking_number}", response_model=ApiResponse)
async def query_tracking(
    tracking_number: str,
    tracking: TrackingLookup = Depends(get_tracking),
) -> ApiResponse:
    """Fetch the carrier's traces for a tracking number."""
    return ApiResponse(data=await tracking.query(tracking_number))
