"""Single-value data frames written to the metrics datasource."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import Any

FRAME_TYPE_NUMERIC_MULTI = "numeric_multi"
# Latest version of the numeric multi-frame format.
NUMERIC_MULTI_FRAME_VERSION_LATEST: tuple[int, int] = (0, 1)

# Prometheus marks a series as ended with this exact NaN bit pattern.
STALE_NAN_BITS = 0x7FF0000000000002
STALE_NAN: float = struct.unpack("<d", struct.pack("<Q", STALE_NAN_BITS))[0]


def float_bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", value))[0]


def is_stale_nan(value: float) -> bool:
    return float_bits(value) == STALE_NAN_BITS


@dataclass(frozen=True)
class FrameMeta:
    type: str = FRAME_TYPE_NUMERIC_MULTI
    type_version: tuple[int, int] = NUMERIC_MULTI_FRAME_VERSION_LATEST


@dataclass
class Field:
    name: str
    labels: dict[str, str]
    values: list[float]


@dataclass
class Frame:
    name: str
    fields: list[Field]
    meta: FrameMeta = field(default_factory=FrameMeta)

    @property
    def value(self) -> float:
        """The one sample this frame carries."""
        return self.fields[0].values[0]

    @property
    def labels(self) -> dict[str, str]:
        return self.fields[0].labels

    def to_dict(self) -> dict[str, Any]:
        """Render the frame in the data-frame JSON layout.

        JSON has no NaN or infinity, so such values are written as ``null``
        and their row indexes listed under ``data.entities``. The staleness
        marker gets its own ``StaleNaN`` key so it stays distinct from an
        ordinary NaN.
        """
        schema_fields = []
        values: list[list[float | None]] = []
        entities: list[dict[str, list[int]] | None] = []
        for f in self.fields:
            schema_fields.append(
                {"name": f.name, "type": "number", "labels": dict(f.labels)}
            )
            column: list[float | None] = []
            special: dict[str, list[int]] = {}
            for idx, v in enumerate(f.values):
                key = _entity_key(v)
                if key is None:
                    column.append(v)
                else:
                    column.append(None)
                    special.setdefault(key, []).append(idx)
            values.append(column)
            entities.append(special or None)

        data: dict[str, Any] = {"values": values}
        if any(entities):
            data["entities"] = entities
        return {
            "schema": {
                "name": self.name,
                "meta": {
                    "type": self.meta.type,
                    "typeVersion": list(self.meta.type_version),
                },
                "fields": schema_fields,
            },
            "data": data,
        }


def _entity_key(value: float) -> str | None:
    if is_stale_nan(value):
        return "StaleNaN"
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Inf" if value > 0 else "NegInf"
    return None
