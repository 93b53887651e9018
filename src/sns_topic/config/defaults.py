"""Default topic policy and delivery policy, and the function that applies them."""

from __future__ import annotations

import copy
from typing import Any

from sns_topic.config.models import TopicConfig

DEFAULT_POLICY_ACTIONS: tuple[str, ...] = (
    "SNS:Publish",
    "SNS:RemovePermission",
    "SNS:SetTopicAttributes",
    "SNS:DeleteTopic",
    "SNS:ListSubscriptionsByTopic",
    "SNS:GetTopicAttributes",
    "SNS:Receive",
    "SNS:AddPermission",
    "SNS:Subscribe",
)

DEFAULT_DELIVERY_POLICY: dict[str, Any] = {
    "http": {
        "defaultHealthyRetryPolicy": {
            "minDelayTarget": 20,
            "maxDelayTarget": 20,
            "numRetries": 3,
            "numMaxDelayRetries": 0,
            "numNoDelayRetries": 0,
            "numMinDelayRetries": 0,
            "backoffFunction": "linear",
        },
        "disableSubscriptionOverrides": False,
    }
}


def default_statement(arn: str, account_id: str) -> dict[str, Any]:
    """Allow the owning account full access to the topic."""
    return {
        "Sid": "statement_id",
        "Effect": "Allow",
        "Principal": {"AWS": "*"},
        "Action": list(DEFAULT_POLICY_ACTIONS),
        "Resource": arn,
        "Condition": {"StringEquals": {"AWS:SourceOwner": account_id}},
    }


def default_policy(arn: str, account_id: str) -> dict[str, Any]:
    return {
        "Version": "2008-10-17",
        "Id": "policy_id",
        "Statement": [default_statement(arn, account_id)],
    }


def merge_documents(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively deep-merge *overrides* into *base* (non-mutating).

    Nested mappings are merged key by key; any other value in *overrides*,
    lists included, replaces the one in *base*.
    """
    merged: dict[str, Any] = copy.deepcopy(base)
    for key, value in overrides.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_documents(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_defaults(config: TopicConfig, *, account_id: str, arn: str) -> TopicConfig:
    """Return a copy of *config* with every optional document filled in.

    - A missing ``policy`` becomes :func:`default_policy`; a declared one is
      deep-merged over it, and each declared statement is deep-merged over the
      default statement.
    - ``delivery_policy`` is deep-merged over :data:`DEFAULT_DELIVERY_POLICY`.

    Declared values always win; declared lists replace default lists.
    """
    base = default_policy(arn, account_id)
    policy = merge_documents(base, config.policy or {})
    statements = policy["Statement"]
    if isinstance(statements, dict):
        statements = [statements]
    if config.policy is not None and "Statement" in config.policy:
        statements = [_complete_statement(s, base["Statement"][0]) for s in statements]
    policy["Statement"] = statements

    delivery_policy = merge_documents(
        DEFAULT_DELIVERY_POLICY, config.delivery_policy or {}
    )
    return config.model_copy(
        update={"policy": policy, "delivery_policy": delivery_policy}
    )


def _complete_statement(statement: Any, default: dict[str, Any]) -> Any:
    if not isinstance(statement, dict):
        return statement
    return merge_documents(default, statement)
