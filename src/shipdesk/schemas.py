"""Request and response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ApiResponse(BaseModel):
    """Uniform response envelope."""

    success: bool = True
    message: str | None = None
    data: Any = None


class CheckResponse(ApiResponse):
    loggedIn: bool = False  # noqa: N815


# --- Reference registries ---


class CarrierCreate(BaseModel):
    name: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    address: str | None = None


class CarrierUpdate(CarrierCreate):
    pass


class CarrierRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    contact_person: str | None = ""
    phone: str | None = ""
    address: str | None = ""
    created_at: datetime | None = None


class SenderCreate(BaseModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None


class SenderUpdate(SenderCreate):
    pass


class SenderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str | None = ""
    address: str | None = ""
    created_at: datetime | None = None


class AddressCreate(BaseModel):
    recipient_name: str | None = None
    contact_person: str | None = None
    recipient_phone: str | None = None
    recipient_address: str | None = None


class AddressUpdate(AddressCreate):
    pass


class AddressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    recipient_name: str
    contact_person: str | None = ""
    recipient_phone: str
    recipient_address: str
    created_at: datetime | None = None


# --- Shipments ---


class ShipmentCreate(BaseModel):
    """Incoming shipment fields.

    ``weight`` and ``amount`` accept anything; values that do not parse as
    a number are stored as 0.
    """

    tracking_number: str | None = None
    carrier_id: int | None = None
    sender_id: int | None = None
    address_id: int | None = None
    weight: float | str | None = None
    amount: float | str | None = None
    shipping_date: date | None = None
    notes: str | None = None
    status: str | None = None


class ShipmentUpdate(ShipmentCreate):
    pass


class ShipmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tracking_number: str
    carrier_id: int
    sender_id: int
    address_id: int
    weight: float = 0
    amount: float = 0
    status: str
    shipping_date: date
    notes: str | None = ""
    created_at: datetime | None = None


class ShipmentDetail(ShipmentRead):
    """Shipment joined with its carrier, sender and address display fields."""

    carrier_name: str | None = None
    sender_name: str | None = None
    recipient_name: str | None = None
    recipient_phone: str | None = None
    recipient_address: str | None = None


class ShipmentFilters(BaseModel):
    month: str | None = None
    carrier_id: str | None = None
    status: str | None = None
    search: str | None = None


class CarrierMonthSummary(BaseModel):
    carrier_id: int
    carrier_name: str | None = None
    month: str
    total_count: int
    total_amount: float
    total_weight: float


class SummaryTotals(BaseModel):
    total_count: int = 0
    total_amount: float = 0
    total_weight: float = 0


class ShipmentSummary(BaseModel):
    details: list[CarrierMonthSummary]
    totals: SummaryTotals


class MonthlySummary(BaseModel):
    month: str
    total_count: int
    total_amount: float


class CreatedId(BaseModel):
    id: int


# --- Session gate and operator accounts ---


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class ChangePasswordRequest(BaseModel):
    old_password: str | None = None
    new_password: str | None = None


class SessionUser(BaseModel):
    id: int
    username: str


class UserCreate(BaseModel):
    username: str | None = None
    password: str | None = None


class UserUpdate(UserCreate):
    pass


class UserStatusUpdate(BaseModel):
    status: str | None = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    status: str
    created_at: datetime | None = None


# --- Tracking lookup ---


class TrackingTrace(BaseModel):
    time: str | None = None
    desc: str = ""


class TrackingInfo(BaseModel):
    tracking_number: str
    carrier: str
    status: str
    traces: list[TrackingTrace]
    update_time: str
