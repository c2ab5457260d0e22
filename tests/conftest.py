"""Shared fixtures for shipdesk tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

import pytest
from fastapi.testclient import TestClient

from shipdesk.app import create_app
from shipdesk.config import ShipdeskConfig
from shipdesk.ledger import ShipmentLedger
from shipdesk.queries import ShipmentQueries
from shipdesk.registries import (
    AddressRegistry,
    CarrierRegistry,
    SenderRegistry,
)
from shipdesk.schemas import (
    AddressCreate,
    CarrierCreate,
    SenderCreate,
    ShipmentCreate,
    TrackingInfo,
    TrackingTrace,
)
from shipdesk.storage.gateway import Database

ADMIN_USERNAME = "operator"
ADMIN_PASSWORD = "s3cret-pass"


class StubTracking:
    """Tracking lookup answering from a dict."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def query(self, tracking_number: str) -> TrackingInfo:
        self.calls.append(tracking_number)
        return TrackingInfo(
            tracking_number=tracking_number,
            carrier="Stub Express",
            status="signed",
            traces=[TrackingTrace(time="2024-06-02 10:00", desc="已签收")],
            update_time="2024-06-02 10:05:00",
        )


@pytest.fixture()
def config() -> ShipdeskConfig:
    return ShipdeskConfig(
        database_url="sqlite+aiosqlite://",
        session_secret="test-secret",
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        bcrypt_rounds=4,
        tracking_api_url="http://tracking.test/express",
    )


@pytest.fixture()
async def database():
    """Connected in-memory store with the schema applied."""
    db = Database("sqlite+aiosqlite://")
    await db.connect()
    await db.create_schema()
    yield db
    await db.close()


@pytest.fixture()
def carriers(database) -> CarrierRegistry:
    return CarrierRegistry(database)


@pytest.fixture()
def senders(database) -> SenderRegistry:
    return SenderRegistry(database)


@pytest.fixture()
def addresses(database) -> AddressRegistry:
    return AddressRegistry(database)


@pytest.fixture()
def ledger(database) -> ShipmentLedger:
    return ShipmentLedger(database)


@pytest.fixture()
def queries(database) -> ShipmentQueries:
    return ShipmentQueries(database)


@pytest.fixture()
async def references(carriers, senders, addresses) -> dict[str, int]:
    """One carrier, sender and address; returns their ids."""
    return {
        "carrier_id": await carriers.create(CarrierCreate(name="顺丰速运")),
        "sender_id": await senders.create(SenderCreate(name="鑫达公司")),
        "address_id": await addresses.create(
            AddressCreate(
                recipient_name="李先生",
                recipient_phone="18611112222",
                recipient_address="上海市浦东新区陆家嘴环路1000号",
            )
        ),
    }


def shipment_payload(
    references: dict[str, int],
    tracking_number: str = "SF100",
    shipping_date: date = date(2024, 6, 1),
    **fields,
) -> ShipmentCreate:
    return ShipmentCreate(
        tracking_number=tracking_number,
        shipping_date=shipping_date,
        **references,
        **fields,
    )


@pytest.fixture()
def tracking() -> StubTracking:
    return StubTracking()


@pytest.fixture()
def app(config, tracking):
    return create_app(config, tracking=tracking)


@pytest.fixture()
def anonymous_client(app) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def client(anonymous_client) -> TestClient:
    """Client logged in as the admin operator."""
    resp = anonymous_client.post(
        "/api/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert resp.json()["success"] is True
    return anonymous_client
