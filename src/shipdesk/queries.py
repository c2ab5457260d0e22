"""Filtered listings and aggregations over the shipment ledger."""

from __future__ import annotations

import csv
import io
import logging

from sqlalchemy import Select, desc, func, or_, select

from shipdesk.exceptions import ValidationError
from shipdesk.schemas import (
    CarrierMonthSummary,
    MonthlySummary,
    ShipmentDetail,
    ShipmentFilters,
    ShipmentSummary,
    SummaryTotals,
)
from shipdesk.storage.gateway import Database
from shipdesk.storage.models import Address, Carrier, Sender, Shipment

logger = logging.getLogger(__name__)

ALL = "all"

EXPORT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Shipping date", "shipping_date"),
    ("Carrier", "carrier_name"),
    ("Tracking number", "tracking_number"),
    ("Sender", "sender_name"),
    ("Recipient", "recipient_name"),
    ("Recipient phone", "recipient_phone"),
    ("Recipient address", "recipient_address"),
    ("Weight (kg)", "weight"),
    ("Amount", "amount"),
    ("Status", "status"),
    ("Notes", "notes"),
)


def shipping_month():
    """``YYYY-MM`` of the shipping date."""
    return func.strftime("%Y-%m", Shipment.shipping_date)


def shipment_detail_query() -> Select:
    """Shipments joined with carrier, sender and address display fields."""
    return (
        select(
            *Shipment.__table__.c,
            Carrier.name.label("carrier_name"),
            Sender.name.label("sender_name"),
            Address.recipient_name,
            Address.recipient_phone,
            Address.recipient_address,
        )
        .select_from(Shipment)
        .outerjoin(Carrier, Shipment.carrier_id == Carrier.id)
        .outerjoin(Sender, Shipment.sender_id == Sender.id)
        .outerjoin(Address, Shipment.address_id == Address.id)
    )


def _is_set(value: str | None) -> bool:
    return bool(value) and value != ALL


def apply_filters(statement: Select, filters: ShipmentFilters) -> Select:
    """AND-compose the optional filters onto a shipments query."""
    if filters.month:
        statement = statement.where(shipping_month() == filters.month)
    if _is_set(filters.carrier_id):
        try:
            carrier_id = int(filters.carrier_id)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid carrier filter: {filters.carrier_id!r}"
            ) from exc
        statement = statement.where(Shipment.carrier_id == carrier_id)
    if _is_set(filters.status):
        statement = statement.where(Shipment.status == filters.status)
    if filters.search:
        statement = statement.where(
            or_(
                Shipment.tracking_number.icontains(
                    filters.search, autoescape=True
                ),
                Shipment.notes.icontains(filters.search, autoescape=True),
            )
        )
    return statement


class ShipmentQueries:
    """Read side of the ledger: listings, summaries and CSV export."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def list(self, filters: ShipmentFilters) -> list[ShipmentDetail]:
        statement = apply_filters(shipment_detail_query(), filters).order_by(
            Shipment.shipping_date.desc(),
            Shipment.created_at.desc(),
            Shipment.id.desc(),
        )
        async with self.db.exclusive():
            rows = await self.db.query_all(statement)
        return [ShipmentDetail.model_validate(row) for row in rows]

    async def summary(self, filters: ShipmentFilters) -> ShipmentSummary:
        """Per carrier per month totals.

        The overall totals are summed from the emitted groups rather than
        queried separately, so they always agree with the details.
        """
        month = shipping_month().label("month")
        statement = (
            select(
                Carrier.id.label("carrier_id"),
                Carrier.name.label("carrier_name"),
                month,
                func.count().label("total_count"),
                func.coalesce(func.sum(Shipment.amount), 0).label(
                    "total_amount"
                ),
                func.coalesce(func.sum(Shipment.weight), 0).label(
                    "total_weight"
                ),
            )
            .select_from(Shipment)
            .join(Carrier, Shipment.carrier_id == Carrier.id)
        )
        statement = (
            apply_filters(statement, filters)
            .group_by(Carrier.id, month)
            .order_by(desc("month"), desc("total_amount"))
        )
        async with self.db.exclusive():
            rows = await self.db.query_all(statement)

        details = [CarrierMonthSummary.model_validate(row) for row in rows]
        totals = SummaryTotals(
            total_count=sum(d.total_count for d in details),
            total_amount=sum(d.total_amount for d in details),
            total_weight=sum(d.total_weight for d in details),
        )
        return ShipmentSummary(details=details, totals=totals)

    async def monthly(self) -> list[MonthlySummary]:
        month = shipping_month().label("month")
        statement = (
            select(
                month,
                func.count().label("total_count"),
                func.coalesce(func.sum(Shipment.amount), 0).label(
                    "total_amount"
                ),
            )
            .select_from(Shipment)
            .group_by(month)
            .order_by(desc("month"))
        )
        async with self.db.exclusive():
            rows = await self.db.query_all(statement)
        return [MonthlySummary.model_validate(row) for row in rows]

    async def export_csv(self, filters: ShipmentFilters) -> str:
        """Render :meth:`list` as CSV with every cell quoted."""
        shipments = await self.list(filters)
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow([title for title, _ in EXPORT_COLUMNS])
        for shipment in shipments:
            writer.writerow(
                [
                    _cell(getattr(shipment, field))
                    for _, field in EXPORT_COLUMNS
                ]
            )
        logger.info("Exported %d shipment(s)", len(shipments))
        return buffer.getvalue()


def _cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
