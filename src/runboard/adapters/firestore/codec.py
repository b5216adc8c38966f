"""Convert between plain Python values and Firestore REST typed values."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

type FirestoreValue = dict[str, Any]


def encode_value(value: object) -> FirestoreValue:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(cast("Mapping[str, object]", value))}}
    if isinstance(value, Sequence):
        items = cast("Sequence[object]", value)
        return {"arrayValue": {"values": [encode_value(item) for item in items]}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def encode_fields(data: Mapping[str, object]) -> dict[str, FirestoreValue]:
    return {key: encode_value(value) for key, value in data.items()}


def decode_value(value: Mapping[str, Any]) -> object:
    """Return the Python value held by a typed Firestore value.

    Timestamps and references come back as their string form; geo points as a
    ``{"latitude", "longitude"}`` mapping.
    """

    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields") or {})
    if "arrayValue" in value:
        return [decode_value(item) for item in value["arrayValue"].get("values") or []]
    for key in ("stringValue", "timestampValue", "referenceValue", "bytesValue"):
        if key in value:
            return value[key]
    if "geoPointValue" in value:
        return dict(value["geoPointValue"])
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def decode_fields(fields: Mapping[str, Mapping[str, Any]]) -> dict[str, object]:
    return {key: decode_value(value) for key, value in fields.items()}


def document_id_from_name(name: str) -> str:
    """``projects/p/databases/d/documents/runs/abc`` -> ``abc``."""

    return name.rsplit("/", 1)[-1]
