"""
Extended JSON codec for the Data API wire format.

Rich BSON scalars (ObjectId, Binary, UUID, datetime, Int64, Decimal128)
travel as single-key wrapper documents such as ``{"$oid": "..."}``.
Encoding and decoding are delegated to ``bson.json_util`` so the wire
form matches what the gateway and the MongoDB drivers produce.

Datetimes carry millisecond precision and always decode as
timezone-aware UTC values. A naive datetime is encoded as if it were
UTC, so it comes back as the same instant with ``tzinfo=timezone.utc``
attached rather than as an equal naive value.

Example:
    from bson import ObjectId
    from mongo_data_api import ejson

    text = ejson.encode({"_id": ObjectId(), "foo": "bar"})
    doc = ejson.decode(text)
"""

from __future__ import annotations

from datetime import timezone
from decimal import InvalidOperation
from typing import Any

from bson import json_util
from bson.binary import UuidRepresentation
from bson.errors import BSONError
from bson.json_util import JSONMode, JSONOptions

from .types import EJSONDecodeError

__all__ = [
    "CANONICAL_OPTIONS",
    "RELAXED_OPTIONS",
    "decode",
    "encode",
]

RELAXED_OPTIONS = JSONOptions(
    json_mode=JSONMode.RELAXED,
    uuid_representation=UuidRepresentation.STANDARD,
    tz_aware=True,
    tzinfo=timezone.utc,
)

CANONICAL_OPTIONS = JSONOptions(
    json_mode=JSONMode.CANONICAL,
    uuid_representation=UuidRepresentation.STANDARD,
    tz_aware=True,
    tzinfo=timezone.utc,
)


def encode(document: Any, *, relaxed: bool = True) -> str:
    """
    Serialize a value to extended JSON text.

    Args:
        document: Document (or any JSON-like value) to encode.
        relaxed: Emit relaxed extended JSON (plain numbers, ISO dates)
                 instead of canonical extended JSON.

    Returns:
        The extended JSON text.

    Raises:
        TypeError: If the value contains something with no BSON mapping.
    """
    options = RELAXED_OPTIONS if relaxed else CANONICAL_OPTIONS
    return json_util.dumps(document, json_options=options)


def decode(text: str | bytes) -> Any:
    """
    Parse extended JSON text, restoring rich scalars.

    Both relaxed and canonical forms are accepted, as is plain JSON.

    Args:
        text: Extended JSON text, or UTF-8 encoded bytes of it.

    Returns:
        The decoded value, documents as ``dict`` in wire order.

    Raises:
        EJSONDecodeError: If the text is not valid extended JSON.
    """
    try:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        return json_util.loads(text, json_options=RELAXED_OPTIONS)
    except (BSONError, InvalidOperation, RecursionError, TypeError, ValueError) as e:
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        raise EJSONDecodeError(f"Invalid extended JSON: {e}", text) from e
