"""Canonical text encoding of attribute values."""

from __future__ import annotations

import json
from typing import Any

from sns_topic.errors import ConfigurationError


def canonical_json(value: Any) -> str:
    """Serialize *value* as compact JSON with sorted keys."""
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        msg = f"Value of type {type(value).__name__} is not JSON-serializable: {exc}"
        raise ConfigurationError(msg) from exc


def encode_value(value: Any) -> str:
    """Encode an attribute value for transmission.

    Strings go out verbatim, everything else as canonical JSON text.
    """
    if isinstance(value, str):
        return value
    return canonical_json(value)


def decode_structured(value: Any) -> Any:
    """Return the decoded form of a structured value.

    JSON text is parsed; text that is not valid JSON is returned unchanged so
    that it compares unequal to any decoded document.
    """
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value
