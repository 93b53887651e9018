"""Compute the minimal mutations between desired and observed attributes.

Both attribute classes go through :func:`diff_attributes`; they differ only in
the whitelist of keys, which keys hold JSON documents, and whether removed keys
may be cleared.  Keys on both sides are normalized with
:func:`~sns_topic.attributes.naming.to_wire_name`, so a desired
``displayName`` and an observed ``DisplayName`` refer to the same attribute.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from sns_topic.attributes.encoding import decode_structured, encode_value
from sns_topic.attributes.naming import (
    DELIVERY_STATUS_ATTRIBUTES,
    GENERAL_ATTRIBUTES,
    STRUCTURED_ATTRIBUTES,
    is_sample_rate,
    to_wire_name,
)
from sns_topic.errors import ConfigurationError


class _Clear(Enum):
    CLEAR = "clear"

    def __repr__(self) -> str:
        return "CLEAR"


CLEAR: Final = _Clear.CLEAR
"""Mutation value meaning "reset this attribute, it is no longer declared"."""


@dataclass(frozen=True)
class Mutation:
    """A single attribute change: set *name* to *value*, or clear it."""

    name: str
    value: Any

    @property
    def is_clear(self) -> bool:
        return self.value is CLEAR

    def __str__(self) -> str:
        if self.is_clear:
            return f"CLEAR {self.name}"
        return f"SET {self.name}={self.value!r}"


def diff_attributes(
    desired: Mapping[str, Any],
    observed: Mapping[str, Any],
    *,
    keys: Collection[str] | None = None,
    structured: Collection[str] = (),
    keep_on_removal: Callable[[str], bool] | None = None,
) -> list[Mutation]:
    """Return the mutations that bring *observed* in line with *desired*.

    SET mutations come first in *desired* order, followed by CLEAR mutations
    in *observed* order.  ``None`` desired values count as undeclared.  Keys
    outside *keys* are ignored on both sides.  Removed keys for which
    *keep_on_removal* returns true are left untouched.
    """
    wanted = _normalize(desired, keys, drop_none=True)
    current = _normalize(observed, keys, drop_none=False)

    mutations: list[Mutation] = []
    for name, value in wanted.items():
        if not _same(value, current.get(name), structured=name in structured):
            mutations.append(Mutation(name, value))

    for name, value in current.items():
        if name in wanted or _is_unset(value):
            continue
        if keep_on_removal is not None and keep_on_removal(name):
            continue
        mutations.append(Mutation(name, CLEAR))
    return mutations


def diff_general(
    desired: Mapping[str, Any], observed: Mapping[str, Any]
) -> list[Mutation]:
    """Diff display name, policy and delivery policy."""
    return diff_attributes(
        desired,
        observed,
        keys=GENERAL_ATTRIBUTES,
        structured=STRUCTURED_ATTRIBUTES,
    )


def diff_delivery_status(
    desired: Mapping[str, Any], observed: Mapping[str, Any]
) -> list[Mutation]:
    """Diff per-protocol delivery status attributes; sample rates are never cleared."""
    return diff_attributes(
        desired,
        observed,
        keys=DELIVERY_STATUS_ATTRIBUTES,
        keep_on_removal=is_sample_rate,
    )


def _normalize(
    attributes: Mapping[str, Any],
    keys: Collection[str] | None,
    *,
    drop_none: bool,
) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in attributes.items():
        if drop_none and value is None:
            continue
        name = to_wire_name(key)
        if keys is not None and name not in keys:
            continue
        normalized[name] = value
    return normalized


def _is_unset(value: Any) -> bool:
    # SNS reports an attribute that was never set, or was cleared, as "".
    return value is None or value == ""


def _same(desired: Any, observed: Any, *, structured: bool) -> bool:
    if _is_unset(observed):
        return _is_unset(desired)
    if structured:
        return _json_equal(decode_structured(desired), decode_structured(observed))
    text = _as_text(desired)
    return text is not None and text == _as_text(observed)


def _as_text(value: Any) -> str | None:
    try:
        return encode_value(value)
    except ConfigurationError:
        return None


def _json_equal(left: Any, right: Any) -> bool:
    """Structural JSON equality: ``true`` is never equal to ``1``."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            _json_equal(value, right[key]) for key, value in left.items()
        )
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            _json_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return False
    return left == right
