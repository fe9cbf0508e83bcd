"""Write sinks for alert state series."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol, Sequence

import httpx

from .models.frame import Frame

logger = logging.getLogger(__name__)


class WriteError(RuntimeError):
    """Raised when a batch of series could not be written."""


class SeriesWriter(Protocol):
    async def write_datasource(
        self,
        ds_uid: str,
        name: str,
        t: datetime,
        frames: Sequence[Frame],
        org_id: int,
        extra_labels: Mapping[str, str] | None,
    ) -> None:
        """Write ``frames`` to datasource ``ds_uid``; raise on failure."""
        ...


def encode_payload(
    ds_uid: str,
    name: str,
    t: datetime,
    frames: Sequence[Frame],
    org_id: int,
    extra_labels: Mapping[str, str] | None,
) -> dict[str, Any]:
    """Build the JSON body of a write request.

    A naive ``t`` is taken to be UTC, never the host's local time.
    """
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    return {
        "datasource_uid": ds_uid,
        "metric_name": name,
        "timestamp_ms": int(t.timestamp() * 1000),
        "org_id": org_id,
        "extra_labels": dict(extra_labels or {}),
        "frames": [f.to_dict() for f in frames],
    }


class HttpSeriesWriter:
    """Async HTTP client posting frame batches to the datasource write API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = dict(headers or {})
        self._transport = transport

    def write_url(self, ds_uid: str) -> str:
        return f"{self.base_url}/api/datasources/uid/{ds_uid}/metrics/write"

    async def write_datasource(
        self,
        ds_uid: str,
        name: str,
        t: datetime,
        frames: Sequence[Frame],
        org_id: int,
        extra_labels: Mapping[str, str] | None,
    ) -> None:
        url = self.write_url(ds_uid)
        payload = encode_payload(ds_uid, name, t, frames, org_id, extra_labels)
        headers = {**self.headers, "X-Org-Id": str(org_id)}

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                resp = await client.post(url, json=payload, headers=headers)
            except httpx.HTTPError as e:
                logger.warning("Metrics write to %s failed: %s", url, e)
                raise WriteError(f"Metrics write failed: {e}") from e

        if resp.is_success:
            logger.debug("Wrote %d frames to datasource %s", len(frames), ds_uid)
            return
        snippet = resp.text[:500].replace("\n", " ")
        raise WriteError(f"Metrics write HTTP {resp.status_code}: {snippet}")
