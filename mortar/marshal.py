"""Serialise message bodies to JSON bytes."""

from __future__ import annotations

import dataclasses
import json
from typing import Any


def _dumps(value: Any) -> bytes:
    return json.dumps(
        value, separators=(",", ":"), sort_keys=True, ensure_ascii=False
    ).encode("utf-8")


def marshal_message_body(body: Any) -> bytes:
    """Return ``body`` as JSON bytes.

    Raw bytes are returned unchanged, dataclass messages are serialised
    field by field, anything else goes through the JSON encoder. Values
    that cannot be encoded raise ``TypeError``.
    """
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if dataclasses.is_dataclass(body) and not isinstance(body, type):
        return _dumps(dataclasses.asdict(body))
    return _dumps(body)