"""SQLAlchemy table models."""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum

from sqlalchemy import Date, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    # SQLite DATETIME columns are naive; store UTC.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class ShipmentStatus(StrEnum):
    SHIPPED = "shipped"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    RETURNED = "returned"


class UserStatus(StrEnum):
    ACTIVE = "active"
    DISABLED = "disabled"


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""


class User(Base):
    """Operator account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True)
    password: Mapped[str] = mapped_column(String(128))
    status: Mapped[str] = mapped_column(
        String(16), default=UserStatus.ACTIVE.value
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Carrier(Base):
    __tablename__ = "carriers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128))
    contact_person: Mapped[str | None] = mapped_column(
        String(64), default=""
    )
    phone: Mapped[str | None] = mapped_column(String(32), default="")
    address: Mapped[str | None] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Sender(Base):
    __tablename__ = "senders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128))
    phone: Mapped[str | None] = mapped_column(String(32), default="")
    address: Mapped[str | None] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Address(Base):
    """Recipient address book entry."""

    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    recipient_name: Mapped[str] = mapped_column(String(128))
    contact_person: Mapped[str | None] = mapped_column(
        String(64), default=""
    )
    recipient_phone: Mapped[str] = mapped_column(String(32))
    recipient_address: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Shipment(Base):
    """One dispatched parcel.

    The foreign keys are declared for documentation only; SQLite does not
    enforce them unless ``PRAGMA foreign_keys`` is switched on, and the
    registries guard deletions themselves.
    """

    __tablename__ = "shipments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tracking_number: Mapped[str] = mapped_column(String(128), unique=True)
    carrier_id: Mapped[int] = mapped_column(ForeignKey("carriers.id"))
    sender_id: Mapped[int] = mapped_column(ForeignKey("senders.id"))
    address_id: Mapped[int] = mapped_column(ForeignKey("addresses.id"))
    weight: Mapped[float] = mapped_column(Float, default=0)
    amount: Mapped[float] = mapped_column(Float, default=0)
    status: Mapped[str] = mapped_column(
        String(16), default=ShipmentStatus.SHIPPED.value
    )
    shipping_date: Mapped[date] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


# Columns added after the first release. Applied on every start; a
# "duplicate column" failure means the column is already there.
ADDITIVE_COLUMNS: tuple[tuple[str, str, str], ...] = (
    ("addresses", "contact_person", "VARCHAR(64)"),
)
