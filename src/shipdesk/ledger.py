"""The shipment ledger: validated create/update/delete of shipments."""

from __future__ import annotations

import logging
import math
from typing import Any

from sqlalchemy import delete, insert, select, update

from shipdesk.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from shipdesk.queries import shipment_detail_query
from shipdesk.registries import is_blank
from shipdesk.schemas import ShipmentCreate, ShipmentDetail, ShipmentUpdate
from shipdesk.storage.gateway import Database
from shipdesk.storage.models import (
    Address,
    Carrier,
    Sender,
    Shipment,
    ShipmentStatus,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "tracking_number",
    "carrier_id",
    "sender_id",
    "address_id",
    "shipping_date",
)

_REFERENCES = (
    ("carrier_id", Carrier, "Carrier"),
    ("sender_id", Sender, "Sender"),
    ("address_id", Address, "Address"),
)


def to_number(value: Any, field: str) -> float:
    """Coerce a submitted weight/amount; unparseable values become 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    if number < 0:
        raise ValidationError(f"{field} must not be negative")
    return number


def to_status(value: str | None) -> str:
    if is_blank(value):
        return ShipmentStatus.SHIPPED.value
    try:
        return ShipmentStatus(value).value
    except ValueError as exc:
        allowed = ", ".join(s.value for s in ShipmentStatus)
        raise ValidationError(
            f"Unknown status {value!r}, expected one of: {allowed}"
        ) from exc


class ShipmentLedger:
    """Authoritative record set of shipments.

    Every mutation holds the gateway lock from its first check to the
    commit, so the tracking number and reference checks see the same
    state the write lands on.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def _fetch(self, shipment_id: int) -> dict[str, Any]:
        row = await self.db.query_one(
            select(Shipment.__table__).where(Shipment.id == shipment_id)
        )
        if row is None:
            raise NotFoundError("Shipment", shipment_id)
        return row

    async def _tracking_number_taken(
        self, tracking_number: str, exclude_id: int | None = None
    ) -> bool:
        statement = select(Shipment.id).where(
            Shipment.tracking_number == tracking_number
        )
        if exclude_id is not None:
            statement = statement.where(Shipment.id != exclude_id)
        return await self.db.query_one(statement) is not None

    async def _check_references(self, values: dict[str, Any]) -> None:
        for field, model, label in _REFERENCES:
            entity_id = values[field]
            row = await self.db.query_one(
                select(model.id).where(model.id == entity_id)
            )
            if row is None:
                raise ConflictError(f"{label} {entity_id} does not exist")

    async def get(self, shipment_id: int) -> ShipmentDetail:
        async with self.db.exclusive():
            row = await self.db.query_one(
                shipment_detail_query().where(Shipment.id == shipment_id)
            )
        if row is None:
            raise NotFoundError("Shipment", shipment_id)
        return ShipmentDetail.model_validate(row)

    async def create(self, payload: ShipmentCreate) -> int:
        if any(not getattr(payload, field) for field in REQUIRED_FIELDS) or (
            is_blank(payload.tracking_number)
        ):
            raise ValidationError(
                "Tracking number, carrier, sender, address and shipping "
                "date are required"
            )
        values = {
            "tracking_number": payload.tracking_number,
            "carrier_id": payload.carrier_id,
            "sender_id": payload.sender_id,
            "address_id": payload.address_id,
            "weight": to_number(payload.weight, "weight"),
            "amount": to_number(payload.amount, "amount"),
            "shipping_date": payload.shipping_date,
            "notes": payload.notes or "",
            "status": to_status(payload.status),
        }

        async with self.db.exclusive():
            if await self._tracking_number_taken(payload.tracking_number):
                logger.warning(
                    "Rejected duplicate tracking number %s",
                    payload.tracking_number,
                )
                raise ConflictError(
                    f"Tracking number {payload.tracking_number} already exists"
                )
            await self._check_references(values)
            result = await self.db.execute(
                insert(Shipment.__table__).values(**values)
            )
            if not result.inserted_id:
                raise InternalError()
            await self.db.persist()

        logger.info(
            "Created shipment %s (%s)",
            result.inserted_id,
            payload.tracking_number,
        )
        return result.inserted_id

    async def update(self, shipment_id: int, payload: ShipmentUpdate) -> None:
        """Merge ``payload`` into the stored shipment.

        Blank identity, reference, date and status fields keep the stored
        value. ``notes`` is replaced whenever it is sent. ``weight`` and
        ``amount`` keep the stored value only when they are not sent at
        all, so an explicit 0 is written.
        """
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.exclusive():
            existing = await self._fetch(shipment_id)

            values: dict[str, Any] = {}
            tracking_number = changes.get("tracking_number")
            if is_blank(tracking_number):
                values["tracking_number"] = existing["tracking_number"]
            else:
                if (
                    tracking_number != existing["tracking_number"]
                    and await self._tracking_number_taken(
                        tracking_number, exclude_id=shipment_id
                    )
                ):
                    raise ConflictError(
                        f"Tracking number {tracking_number} is used by "
                        "another shipment"
                    )
                values["tracking_number"] = tracking_number

            for field in (
                "carrier_id",
                "sender_id",
                "address_id",
                "shipping_date",
            ):
                values[field] = changes.get(field) or existing[field]

            for field in ("weight", "amount"):
                if field in changes:
                    values[field] = to_number(changes[field], field)
                else:
                    values[field] = existing[field]

            if "notes" in changes:
                values["notes"] = changes["notes"] or ""
            else:
                values["notes"] = existing["notes"]

            status = changes.get("status")
            values["status"] = (
                existing["status"] if is_blank(status) else to_status(status)
            )

            await self._check_references(values)
            result = await self.db.execute(
                update(Shipment.__table__)
                .where(Shipment.id == shipment_id)
                .values(**values)
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()

        logger.info("Updated shipment %s", shipment_id)

    async def delete(self, shipment_id: int) -> None:
        async with self.db.exclusive():
            await self._fetch(shipment_id)
            result = await self.db.execute(
                delete(Shipment.__table__).where(
                    Shipment.id == shipment_id
                )
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()

        logger.info("Deleted shipment %s", shipment_id)
