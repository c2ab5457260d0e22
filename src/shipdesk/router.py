"""Router factory for the shipdesk API."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter

from shipdesk.routes.addresses import router as addresses_router
from shipdesk.routes.auth import router as auth_router
from shipdesk.routes.carriers import router as carriers_router
from shipdesk.routes.senders import router as senders_router
from shipdesk.routes.shipments import router as shipments_router
from shipdesk.routes.tracking import router as tracking_router
from shipdesk.routes.users import router as users_router


def create_api_router() -> APIRouter:
    """Create the API router with every endpoint group mounted."""
    router = APIRouter()

    @router.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check; needs no session."""
        return {
            "status": "ok",
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    router.include_router(auth_router)
    router.include_router(carriers_router)
    router.include_router(senders_router)
    router.include_router(addresses_router)
    router.include_router(shipments_router)
    router.include_router(tracking_router)
    router.include_router(users_router)
    return router
