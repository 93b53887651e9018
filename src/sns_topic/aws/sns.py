"""boto3-backed SNS topic reader, writer and lifecycle."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from sns_topic.errors import TopicNotFoundError

logger = structlog.get_logger()


class SnsTopicClient:
    """Thin async wrapper around the SNS topic API.

    Blocking boto3 calls run in the loop's default executor.  A missing topic
    reads as an empty attribute set and deletes as a no-op; writing to it
    raises :class:`TopicNotFoundError`.
    """

    def __init__(self, region: str) -> None:
        self._region = region
        self._client = None

    def _get_client(self):  # noqa: ANN202
        if self._client is None:
            import boto3

            self._client = boto3.client("sns", region_name=self._region)
        return self._client

    async def _call(self, method: str, **kwargs: Any) -> Any:
        client = self._get_client()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, lambda: getattr(client, method)(**kwargs)
        )

    async def get_attributes(self, resource_id: str) -> dict[str, str]:
        client = self._get_client()
        try:
            response = await self._call("get_topic_attributes", TopicArn=resource_id)
        except client.exceptions.NotFoundException:
            logger.info("sns.topic_not_found", topic=resource_id)
            return {}
        return dict(response.get("Attributes", {}))

    async def set_attribute(self, resource_id: str, name: str, value: str) -> None:
        client = self._get_client()
        try:
            await self._call(
                "set_topic_attributes",
                TopicArn=resource_id,
                AttributeName=name,
                AttributeValue=value,
            )
        except client.exceptions.NotFoundException as exc:
            raise TopicNotFoundError(resource_id) from exc
        logger.debug("sns.attribute_set", topic=resource_id, attribute=name)

    async def create(self, name: str) -> str:
        response = await self._call("create_topic", Name=name)
        arn: str = response["TopicArn"]
        logger.info("sns.topic_created", topic=arn)
        return arn

    async def delete(self, resource_id: str) -> None:
        client = self._get_client()
        try:
            await self._call("delete_topic", TopicArn=resource_id)
        except client.exceptions.NotFoundException:
            logger.info("sns.topic_not_found", topic=resource_id)
            return
        logger.info("sns.topic_deleted", topic=resource_id)
