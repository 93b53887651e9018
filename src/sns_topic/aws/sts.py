"""STS-backed account lookup."""

from __future__ import annotations

import asyncio

import structlog

logger = structlog.get_logger()


class StsIdentityResolver:
    """Resolves the account id of the active credentials via ``GetCallerIdentity``."""

    def __init__(self, region: str | None = None) -> None:
        self._region = region
        self._client = None
        self._account_id: str | None = None

    def _get_client(self):  # noqa: ANN202
        if self._client is None:
            import boto3

            self._client = boto3.client("sts", region_name=self._region)
        return self._client

    async def account_id(self) -> str:
        if self._account_id is None:
            client = self._get_client()
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(None, client.get_caller_identity)
            self._account_id = response["Account"]
            logger.debug("sts.account_resolved", account_id=self._account_id)
        return self._account_id
