"""Dependency providers for request handlers."""

from __future__ import annotations

from fastapi import Depends, Request

from shipdesk.auth import SessionGate, UserAdmin
from shipdesk.config import ShipdeskConfig
from shipdesk.exceptions import PermissionDeniedError
from shipdesk.ledger import ShipmentLedger
from shipdesk.protocols import TrackingLookup
from shipdesk.queries import ShipmentQueries
from shipdesk.registries import (
    AddressRegistry,
    CarrierRegistry,
    SenderRegistry,
)
from shipdesk.schemas import SessionUser, ShipmentFilters
from shipdesk.storage.gateway import Database


def get_config(request: Request) -> ShipdeskConfig:
    """Read config from FastAPI app state."""
    return request.app.state.shipdesk_config


def get_database(request: Request) -> Database:
    """Read the persistence gateway from FastAPI app state."""
    return request.app.state.shipdesk_database


def get_tracking(request: Request) -> TrackingLookup:
    """Read the tracking lookup from FastAPI app state."""
    return request.app.state.shipdesk_tracking


def get_session_gate(
    db: Database = Depends(get_database),
    config: ShipdeskConfig = Depends(get_config),
) -> SessionGate:
    return SessionGate(db, bcrypt_rounds=config.bcrypt_rounds)


async def require_login(
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> SessionUser:
    """Admission check for every operator route."""
    return await gate.admit(request.session)


def require_admin(
    user: SessionUser = Depends(require_login),
    config: ShipdeskConfig = Depends(get_config),
) -> SessionUser:
    if user.username != config.admin_username:
        raise PermissionDeniedError()
    return user


def get_user_admin(
    db: Database = Depends(get_database),
    config: ShipdeskConfig = Depends(get_config),
) -> UserAdmin:
    return UserAdmin(
        db,
        admin_username=config.admin_username,
        bcrypt_rounds=config.bcrypt_rounds,
    )


def get_carrier_registry(
    db: Database = Depends(get_database),
) -> CarrierRegistry:
    return CarrierRegistry(db)


def get_sender_registry(
    db: Database = Depends(get_database),
) -> SenderRegistry:
    return SenderRegistry(db)


def get_address_registry(
    db: Database = Depends(get_database),
) -> AddressRegistry:
    return AddressRegistry(db)


def get_ledger(db: Database = Depends(get_database)) -> ShipmentLedger:
    return ShipmentLedger(db)


def get_queries(db: Database = Depends(get_database)) -> ShipmentQueries:
    return ShipmentQueries(db)


def get_filters(
    month: str | None = None,
    carrier_id: str | None = None,
    status: str | None = None,
    search: str | None = None,
) -> ShipmentFilters:
    """Collect listing filters from the query string."""
    return ShipmentFilters(
        month=month,
        carrier_id=carrier_id,
        status=status,
        search=search,
    )
