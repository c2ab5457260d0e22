"""Carrier tracking lookup against the public express-query API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from urllib.parse import quote

import httpx

from shipdesk.exceptions import (
    TrackingLookupError,
    TrackingUnavailableError,
    ValidationError,
)
from shipdesk.schemas import TrackingInfo, TrackingTrace

logger = logging.getLogger(__name__)

# First match wins, checked in this order against the latest trace.
STATUS_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("signed", ("已签收", "代签")),
    ("delivering", ("派送", "投递")),
    ("picked_up", ("揽收", "揽件")),
    ("in_transit", ("运输", "中转")),
    ("returned", ("退回", "退")),
    ("exception", ("异常", "问题")),
)
DEFAULT_STATUS = "in_transit"
UNKNOWN_STATUS = "unknown"


def infer_status(traces: Sequence[TrackingTrace]) -> str:
    """Derive a status label from the newest trace description."""
    if not traces:
        return UNKNOWN_STATUS
    latest = traces[0].desc.lower()
    for status, keywords in STATUS_KEYWORDS:
        if any(keyword in latest for keyword in keywords):
            return status
    return DEFAULT_STATUS


class HTTPTrackingLookup:
    """Tracking lookup over HTTP.

    The upstream answers ``{"carrier_name": ..., "tracks": [{"time": ...,
    "context": ...}, ...]}`` with the newest trace first, or an object with
    ``error``/``message`` when it knows nothing about the number.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def query(self, tracking_number: str) -> TrackingInfo:
        if not tracking_number or not tracking_number.strip():
            raise ValidationError("Tracking number is required")
        url = f"{self.base_url}/{quote(tracking_number, safe='')}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(
                    url, headers={"Accept": "application/json"}
                )
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Tracking lookup for %s failed", tracking_number)
            raise TrackingLookupError() from exc

        if not isinstance(payload, dict):
            logger.warning(
                "Unexpected tracking payload for %s: %r",
                tracking_number,
                payload,
            )
            raise TrackingLookupError()

        tracks = payload.get("tracks") or []
        if not tracks:
            message = payload.get("message") or payload.get("error")
            raise TrackingUnavailableError(str(message) if message else None)
        if not isinstance(tracks, list) or not all(
            isinstance(track, dict) for track in tracks
        ):
            logger.warning(
                "Malformed tracks for %s: %r", tracking_number, tracks
            )
            raise TrackingLookupError()

        traces = [
            TrackingTrace(
                time=_text(track.get("time")),
                desc=_text(track.get("context")) or "",
            )
            for track in tracks
        ]
        return TrackingInfo(
            tracking_number=tracking_number,
            carrier=payload.get("carrier_name") or "unknown",
            status=infer_status(traces),
            traces=traces,
            update_time=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        )


def _text(value: object) -> str | None:
    return None if value is None else str(value)
