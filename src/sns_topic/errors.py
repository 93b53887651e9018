"""Exception types raised by the reconciler and its adapters."""

from __future__ import annotations


class TopicError(Exception):
    """Base class for topic deployment failures."""


class TopicNotFoundError(TopicError):
    """Raised when the topic does not exist on the remote side."""

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Topic not found: {resource_id}")
        self.resource_id = resource_id


class ConfigurationError(TopicError, ValueError):
    """Raised when a desired attribute value cannot be encoded or is not allowed."""


class ApplyError(TopicError):
    """Raised when a mutation call fails partway through a batch.

    ``succeeded`` counts the calls of the same batch that completed, so a
    caller can report progress and re-run the reconciliation safely.
    """

    def __init__(
        self,
        *,
        phase: str,
        attribute: str,
        succeeded: int,
        total: int,
        cause: BaseException,
    ) -> None:
        super().__init__(
            f"Failed to apply {phase} attribute '{attribute}' "
            f"({succeeded}/{total} succeeded): {cause}"
        )
        self.phase = phase
        self.attribute = attribute
        self.succeeded = succeeded
        self.total = total
        self.cause = cause
