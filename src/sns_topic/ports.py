"""Protocols for the remote collaborators the reconciler depends on."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ResourceReader(Protocol):
    """Reads the current attributes of a topic."""

    async def get_attributes(self, resource_id: str) -> dict[str, str]:
        """Return the topic attributes, or an empty dict if the topic is absent."""
        ...


@runtime_checkable
class ResourceWriter(Protocol):
    """Writes a single topic attribute."""

    async def set_attribute(self, resource_id: str, name: str, value: str) -> None:
        """Set *name* to *value*; raises TopicNotFoundError if the topic is absent."""
        ...


@runtime_checkable
class ResourceLifecycle(Protocol):
    """Creates and deletes topics."""

    async def create(self, name: str) -> str:
        """Create the topic (idempotent) and return its identifier."""
        ...

    async def delete(self, resource_id: str) -> None:
        """Delete the topic; a missing topic is not an error."""
        ...


@runtime_checkable
class IdentityResolver(Protocol):
    """Resolves the account that owns the topic."""

    async def account_id(self) -> str:
        ...
