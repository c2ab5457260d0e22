"""CRUD managers for the entities shipments refer to."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.orm import InstrumentedAttribute

from shipdesk.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from shipdesk.schemas import AddressRead, CarrierRead, SenderRead
from shipdesk.storage.gateway import Database
from shipdesk.storage.models import Address, Base, Carrier, Sender, Shipment

logger = logging.getLogger(__name__)

ReadT = TypeVar("ReadT", bound=BaseModel)


def is_blank(value: Any) -> bool:
    """Absent, ``None``, empty and whitespace-only values are blank."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class ReferenceRegistry(Generic[ReadT]):
    """CRUD over one reference table, guarding deletes against shipments.

    Subclasses declare the table, the read schema, which fields must be
    filled in, and the shipment column that points at the table.

    Updates merge into the stored row. A blank required field keeps its
    stored value. Optional fields are tri-state: omitted keeps, ``None``
    clears to an empty string, any string replaces.
    """

    model: ClassVar[type[Base]]
    read_schema: ClassVar[type[BaseModel]]
    label: ClassVar[str]
    required_fields: ClassVar[tuple[str, ...]]
    optional_fields: ClassVar[tuple[str, ...]]
    shipment_column: ClassVar[InstrumentedAttribute[int]]

    def __init__(self, db: Database) -> None:
        self.db = db

    @property
    def table(self):
        return self.model.__table__

    async def _fetch(self, entity_id: int) -> dict[str, Any]:
        row = await self.db.query_one(
            select(self.table).where(self.table.c.id == entity_id)
        )
        if row is None:
            raise NotFoundError(self.label, entity_id)
        return row

    async def list(self) -> list[ReadT]:
        """All rows, newest first."""
        async with self.db.exclusive():
            rows = await self.db.query_all(
                select(self.table).order_by(
                    self.table.c.created_at.desc(), self.table.c.id.desc()
                )
            )
        return [self.read_schema.model_validate(row) for row in rows]

    async def get(self, entity_id: int) -> ReadT:
        async with self.db.exclusive():
            row = await self._fetch(entity_id)
        return self.read_schema.model_validate(row)

    async def create(self, payload: BaseModel) -> int:
        values = payload.model_dump()
        missing = [f for f in self.required_fields if is_blank(values.get(f))]
        if missing:
            raise ValidationError(
                f"{self.label} field(s) required: {', '.join(missing)}"
            )
        row = {field: values[field] for field in self.required_fields}
        for field in self.optional_fields:
            row[field] = values.get(field) or ""

        async with self.db.exclusive():
            result = await self.db.execute(insert(self.table).values(**row))
            if not result.inserted_id:
                raise InternalError()
            await self.db.persist()

        logger.info("Created %s %s", self.label.lower(), result.inserted_id)
        return result.inserted_id

    async def update(self, entity_id: int, payload: BaseModel) -> None:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.exclusive():
            existing = await self._fetch(entity_id)
            values: dict[str, Any] = {}
            for field in self.required_fields:
                value = changes.get(field)
                values[field] = existing[field] if is_blank(value) else value
            for field in self.optional_fields:
                if field in changes:
                    values[field] = changes[field] or ""

            result = await self.db.execute(
                update(self.table)
                .where(self.table.c.id == entity_id)
                .values(**values)
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()

        logger.info("Updated %s %s", self.label.lower(), entity_id)

    async def count_references(self, entity_id: int) -> int:
        row = await self.db.query_one(
            select(func.count().label("count"))
            .select_from(Shipment)
            .where(type(self).shipment_column == entity_id)
        )
        if row is None:
            # An unreadable count must not be mistaken for zero.
            raise InternalError()
        return row["count"]

    async def delete(self, entity_id: int) -> None:
        async with self.db.exclusive():
            await self._fetch(entity_id)
            references = await self.count_references(entity_id)
            if references > 0:
                logger.warning(
                    "Refusing to delete %s %s referenced by %d shipment(s)",
                    self.label.lower(),
                    entity_id,
                    references,
                )
                raise ConflictError(
                    f"{self.label} is used by {references} shipment(s) "
                    "and cannot be deleted"
                )
            result = await self.db.execute(
                delete(self.table).where(self.table.c.id == entity_id)
            )
            if not result.rows_affected:
                raise InternalError()
            await self.db.persist()

        logger.info("Deleted %s %s", self.label.lower(), entity_id)


class CarrierRegistry(ReferenceRegistry[CarrierRead]):
    model = Carrier
    read_schema = CarrierRead
    label = "Carrier"
    required_fields = ("name",)
    optional_fields = ("contact_person", "phone", "address")
    shipment_column = Shipment.carrier_id


class SenderRegistry(ReferenceRegistry[SenderRead]):
    model = Sender
    read_schema = SenderRead
    label = "Sender"
    required_fields = ("name",)
    optional_fields = ("phone", "address")
    shipment_column = Shipment.sender_id


class AddressRegistry(ReferenceRegistry[AddressRead]):
    model = Address
    read_schema = AddressRead
    label = "Address"
    required_fields = (
        "recipient_name",
        "recipient_phone",
        "recipient_address",
    )
    optional_fields = ("contact_person",)
    shipment_column = Shipment.address_id
