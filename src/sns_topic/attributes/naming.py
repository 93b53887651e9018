"""Attribute names and the SNS wire casing convention."""

from __future__ import annotations

DISPLAY_NAME = "DisplayName"
POLICY = "Policy"
DELIVERY_POLICY = "DeliveryPolicy"

GENERAL_ATTRIBUTES: tuple[str, ...] = (DISPLAY_NAME, POLICY, DELIVERY_POLICY)
STRUCTURED_ATTRIBUTES: frozenset[str] = frozenset({POLICY, DELIVERY_POLICY})

DELIVERY_STATUS_ATTRIBUTES: tuple[str, ...] = (
    "ApplicationSuccessFeedbackRoleArn",
    "ApplicationSuccessFeedbackSampleRate",
    "ApplicationFailureFeedbackRoleArn",
    "HTTPSuccessFeedbackRoleArn",
    "HTTPSuccessFeedbackSampleRate",
    "HTTPFailureFeedbackRoleArn",
    "LambdaSuccessFeedbackRoleArn",
    "LambdaSuccessFeedbackSampleRate",
    "LambdaFailureFeedbackRoleArn",
    "SQSSuccessFeedbackRoleArn",
    "SQSSuccessFeedbackSampleRate",
    "SQSFailureFeedbackRoleArn",
)

SAMPLE_RATE_SUFFIX = "SampleRate"


def to_wire_name(name: str) -> str:
    """Upper-case the first letter of an attribute name, leaving the rest as is.

    ``displayName`` becomes ``DisplayName``; ``HTTPSuccessFeedbackRoleArn`` is
    already in wire form and is returned unchanged.
    """
    if not name:
        return name
    return name[0].upper() + name[1:]


def is_sample_rate(name: str) -> bool:
    """Sample-rate attributes are numeric and never cleared on removal."""
    return name.endswith(SAMPLE_RATE_SUFFIX)
