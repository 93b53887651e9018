"""Issue mutation calls against a ResourceWriter."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NoReturn

import structlog

from sns_topic.attributes.differ import Mutation
from sns_topic.attributes.encoding import encode_value
from sns_topic.attributes.naming import to_wire_name
from sns_topic.errors import ApplyError
from sns_topic.ports import ResourceWriter

logger = structlog.get_logger()

GENERAL_PHASE = "general"
DELIVERY_STATUS_PHASE = "delivery-status"


@dataclass
class ApplyResult:
    """Attributes written by one batch, in dispatch order."""

    phase: str
    applied: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.applied)


class AttributeApplier:
    """Applies a batch of mutations to one topic.

    With ``sequential=False`` every call is dispatched at once and the batch
    waits for all of them; a failure does not cancel the others.  With
    ``sequential=True`` call *i+1* is only issued after call *i* returned,
    and the first failure stops the batch.  SNS silently drops rapid
    successive writes of delivery status attributes, which is why that class
    is applied sequentially.
    """

    def __init__(
        self,
        writer: ResourceWriter,
        *,
        phase: str = GENERAL_PHASE,
        sequential: bool = False,
    ) -> None:
        self._writer = writer
        self._phase = phase
        self._sequential = sequential

    @property
    def sequential(self) -> bool:
        return self._sequential

    async def apply(
        self, resource_id: str, mutations: Sequence[Mutation]
    ) -> ApplyResult:
        # Encode everything up front so a bad value fails before any write.
        calls = [_encode(m) for m in mutations]
        if not calls:
            return ApplyResult(phase=self._phase)

        if self._sequential:
            result = await self._apply_sequential(resource_id, calls)
        else:
            result = await self._apply_concurrent(resource_id, calls)

        logger.info(
            "attributes.applied",
            phase=self._phase,
            resource=resource_id,
            attributes=result.applied,
        )
        return result

    async def _apply_concurrent(
        self, resource_id: str, calls: list[tuple[str, str]]
    ) -> ApplyResult:
        outcomes = await asyncio.gather(
            *[
                self._writer.set_attribute(resource_id, name, value)
                for name, value in calls
            ],
            return_exceptions=True,
        )
        failures = [
            (name, outcome)
            for (name, _), outcome in zip(calls, outcomes)
            if isinstance(outcome, BaseException)
        ]
        if failures:
            name, exc = failures[0]
            self._fail(resource_id, name, len(calls) - len(failures), len(calls), exc)
        return ApplyResult(phase=self._phase, applied=[name for name, _ in calls])

    async def _apply_sequential(
        self, resource_id: str, calls: list[tuple[str, str]]
    ) -> ApplyResult:
        result = ApplyResult(phase=self._phase)
        for name, value in calls:
            try:
                await self._writer.set_attribute(resource_id, name, value)
            except Exception as exc:
                self._fail(resource_id, name, result.count, len(calls), exc)
            result.applied.append(name)
        return result

    def _fail(
        self,
        resource_id: str,
        name: str,
        succeeded: int,
        total: int,
        exc: BaseException,
    ) -> NoReturn:
        logger.error(
            "attributes.apply_failed",
            phase=self._phase,
            resource=resource_id,
            attribute=name,
            succeeded=succeeded,
            total=total,
            error=str(exc),
        )
        raise ApplyError(
            phase=self._phase,
            attribute=name,
            succeeded=succeeded,
            total=total,
            cause=exc,
        ) from exc


def _encode(mutation: Mutation) -> tuple[str, str]:
    value = "" if mutation.is_clear else encode_value(mutation.value)
    return to_wire_name(mutation.name), value


async def apply_general(
    writer: ResourceWriter, resource_id: str, mutations: Sequence[Mutation]
) -> ApplyResult:
    """Apply general attribute mutations concurrently."""
    applier = AttributeApplier(writer, phase=GENERAL_PHASE)
    return await applier.apply(resource_id, mutations)


async def apply_delivery_status(
    writer: ResourceWriter, resource_id: str, mutations: Sequence[Mutation]
) -> ApplyResult:
    """Apply delivery status mutations one at a time, in order."""
    applier = AttributeApplier(writer, phase=DELIVERY_STATUS_PHASE, sequential=True)
    return await applier.apply(resource_id, mutations)
