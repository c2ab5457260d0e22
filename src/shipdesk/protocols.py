"""Collaborator protocols."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shipdesk.schemas import TrackingInfo


@runtime_checkable
class TrackingLookup(Protocol):
    """Looks up carrier traces for a tracking number."""

    async def query(self, tracking_number: str) -> TrackingInfo: ...
