"""Pydantic configuration models for SNS topics."""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from sns_topic.attributes.encoding import canonical_json
from sns_topic.attributes.naming import DELIVERY_STATUS_ATTRIBUTES, to_wire_name

# Up to 256 alphanumerics, hyphens or underscores; FIFO topics end in ".fifo".
TopicName = Annotated[str, Field(pattern=r"^[A-Za-z0-9_-]{1,256}(\.fifo)?$")]


class TopicConfig(
    BaseModel, extra="forbid", alias_generator=to_camel, populate_by_name=True
):
    """Desired state of one SNS topic.

    Fields may be written in snake_case or camelCase (``display_name`` or
    ``displayName``).  ``policy`` and ``delivery_policy`` left unset are filled
    in by :func:`sns_topic.config.defaults.apply_defaults`.
    """

    name: TopicName = "serverless"
    region: str = "us-east-1"
    description: str = "AWS SNS Topic Component"
    display_name: str = ""
    policy: dict[str, Any] | None = None
    delivery_policy: dict[str, Any] | None = None
    delivery_status_attributes: dict[str, str] = Field(default_factory=dict)

    @field_validator("policy", "delivery_policy", mode="before")
    @classmethod
    def decode_json_text(cls, v: Any) -> Any:
        """Accept JSON documents written as text."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except ValueError as exc:
                msg = f"not a valid JSON document: {exc}"
                raise ValueError(msg) from exc
        return v

    @field_validator("policy", "delivery_policy")
    @classmethod
    def check_serializable(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        # Unquoted YAML dates (Version: 2012-10-17) are the usual offender.
        if v is not None:
            canonical_json(v)
        return v

    @field_validator("delivery_status_attributes", mode="before")
    @classmethod
    def flatten_delivery_status(cls, v: Any) -> Any:
        """Flatten a list of mappings and normalize keys to their SNS names.

        Numeric values (sample rates) are kept as their text form.
        """
        if v is None:
            return {}
        if isinstance(v, list):
            merged: dict[str, Any] = {}
            for item in v:
                if not isinstance(item, dict):
                    msg = f"expected a mapping, got {type(item).__name__}"
                    raise ValueError(msg)
                merged.update(item)
            v = merged
        if not isinstance(v, dict):
            return v

        normalized: dict[str, str] = {}
        for key, value in v.items():
            name = to_wire_name(str(key))
            if name not in DELIVERY_STATUS_ATTRIBUTES:
                msg = (
                    f"unknown delivery status attribute '{key}' "
                    f"(allowed: {', '.join(DELIVERY_STATUS_ATTRIBUTES)})"
                )
                raise ValueError(msg)
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                msg = f"delivery status attribute '{key}' must be a string or number"
                raise ValueError(msg)
            normalized[name] = value if isinstance(value, str) else str(value)
        return normalized
