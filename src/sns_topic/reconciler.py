"""Converge a remote SNS topic to its declared configuration."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from sns_topic.attributes.applier import (
    DELIVERY_STATUS_PHASE,
    GENERAL_PHASE,
    ApplyResult,
    AttributeApplier,
)
from sns_topic.attributes.differ import Mutation, diff_delivery_status, diff_general
from sns_topic.attributes.encoding import decode_structured, encode_value
from sns_topic.attributes.naming import (
    DELIVERY_POLICY,
    DELIVERY_STATUS_ATTRIBUTES,
    DISPLAY_NAME,
    GENERAL_ATTRIBUTES,
    POLICY,
    STRUCTURED_ATTRIBUTES,
)
from sns_topic.aws.naming import topic_arn
from sns_topic.config.defaults import apply_defaults
from sns_topic.config.models import TopicConfig
from sns_topic.errors import ApplyError
from sns_topic.ports import (
    IdentityResolver,
    ResourceLifecycle,
    ResourceReader,
    ResourceWriter,
)
from sns_topic.state import TopicState

logger = structlog.get_logger()


@dataclass
class ReconcilePlan:
    """Mutations needed to converge one topic, computed without writing."""

    arn: str
    exists: bool
    config: TopicConfig
    observed: dict[str, str]
    general: list[Mutation] = field(default_factory=list)
    delivery_status: list[Mutation] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.general and not self.delivery_status


@dataclass
class DeployResult:
    state: TopicState
    created: bool
    general: ApplyResult
    delivery_status: ApplyResult

    @property
    def outputs(self) -> dict[str, str]:
        return {"arn": self.state.arn}


def desired_general(config: TopicConfig) -> dict[str, Any]:
    """General attributes of *config*, keyed by their SNS names."""
    return {
        DISPLAY_NAME: config.display_name,
        POLICY: config.policy,
        DELIVERY_POLICY: config.delivery_policy,
    }


def merge_view(
    observed: Mapping[str, Any],
    general: Mapping[str, Any],
    delivery_status: Mapping[str, Any],
    cleared: Iterable[str] = (),
) -> dict[str, Any]:
    """Build the post-deploy attribute view without reading the topic again.

    Starts from the previously observed managed attributes (documents
    decoded), drops the cleared ones, then overlays the desired values.
    """
    managed = set(GENERAL_ATTRIBUTES) | set(DELIVERY_STATUS_ATTRIBUTES)
    view: dict[str, Any] = {
        name: decode_structured(value) if name in STRUCTURED_ATTRIBUTES else value
        for name, value in observed.items()
        if name in managed
    }
    for name in cleared:
        view.pop(name, None)
    view.update({k: v for k, v in general.items() if v is not None})
    view.update(delivery_status)
    return view


class TopicReconciler:
    """Creates, updates and deletes one SNS topic.

    General attributes are applied concurrently; delivery status attributes
    are applied one at a time after them.
    """

    def __init__(
        self,
        *,
        reader: ResourceReader,
        writer: ResourceWriter,
        lifecycle: ResourceLifecycle,
        identity: IdentityResolver,
    ) -> None:
        self._reader = reader
        self._lifecycle = lifecycle
        self._identity = identity
        self._general = AttributeApplier(writer, phase=GENERAL_PHASE)
        self._delivery_status = AttributeApplier(
            writer, phase=DELIVERY_STATUS_PHASE, sequential=True
        )

    async def resolve_arn(self, name: str, region: str) -> str:
        account_id = await self._identity.account_id()
        return topic_arn(region, account_id, name)

    async def plan(self, config: TopicConfig) -> ReconcilePlan:
        """Read the topic and compute the mutations a deploy would apply."""
        account_id = await self._identity.account_id()
        arn = topic_arn(config.region, account_id, config.name)
        resolved = apply_defaults(config, account_id=account_id, arn=arn)
        observed = await self._reader.get_attributes(arn)
        return ReconcilePlan(
            arn=arn,
            exists=bool(observed),
            config=resolved,
            observed=observed,
            general=diff_general(desired_general(resolved), observed),
            delivery_status=diff_delivery_status(
                resolved.delivery_status_attributes, observed
            ),
        )

    async def deploy(self, config: TopicConfig) -> DeployResult:
        """Create the topic if needed and converge its attributes."""
        plan = await self.plan(config)
        _check_encodable([*plan.general, *plan.delivery_status])

        arn = plan.arn
        created = False
        if not plan.exists:
            logger.info("topic.creating", topic=arn)
            arn = await self._lifecycle.create(config.name)
            created = True
        else:
            logger.info(
                "topic.updating",
                topic=arn,
                general=len(plan.general),
                delivery_status=len(plan.delivery_status),
            )

        try:
            general = await self._general.apply(arn, plan.general)
            delivery_status = await self._delivery_status.apply(
                arn, plan.delivery_status
            )
        except ApplyError as exc:
            logger.error(
                "topic.reconcile_failed",
                topic=arn,
                phase=exc.phase,
                attribute=exc.attribute,
                succeeded=exc.succeeded,
                total=exc.total,
            )
            raise

        resolved = plan.config
        cleared = [
            m.name for m in (*plan.general, *plan.delivery_status) if m.is_clear
        ]
        view = merge_view(
            plan.observed,
            desired_general(resolved),
            resolved.delivery_status_attributes,
            cleared,
        )
        state = TopicState(
            name=resolved.name,
            arn=arn,
            region=resolved.region,
            display_name=view.get(DISPLAY_NAME, ""),
            policy=view.get(POLICY),
            delivery_policy=view.get(DELIVERY_POLICY),
            delivery_status_attributes={
                k: v for k, v in view.items() if k in DELIVERY_STATUS_ATTRIBUTES
            },
        )
        logger.info("topic.deployed", topic=arn, created=created)
        return DeployResult(
            state=state,
            created=created,
            general=general,
            delivery_status=delivery_status,
        )

    async def remove(
        self, name: str, region: str, *, arn: str | None = None
    ) -> str:
        """Delete the topic; returns the ARN that was targeted."""
        if arn is None:
            arn = await self.resolve_arn(name, region)
        await self._lifecycle.delete(arn)
        logger.info("topic.removed", topic=arn)
        return arn


def _check_encodable(mutations: Iterable[Mutation]) -> None:
    for mutation in mutations:
        if not mutation.is_clear:
            encode_value(mutation.value)
