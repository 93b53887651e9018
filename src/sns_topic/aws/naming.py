"""SNS topic ARN conventions."""

from __future__ import annotations


def topic_arn(region: str, account_id: str, name: str) -> str:
    """Build the ARN of a topic from its region, owning account and name."""
    return f"arn:aws:sns:{region}:{account_id}:{name}"
