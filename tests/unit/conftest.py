"""In-memory doubles of the topic API shared by the unit tests."""

from __future__ import annotations

import asyncio
import json

import pytest

from sns_topic.errors import TopicNotFoundError
from sns_topic.reconciler import TopicReconciler

ACCOUNT_ID = "123456789012"
REGION = "us-east-1"


class FakeTopicApi:
    """Implements every port over a dict of topics.

    Each ``set_attribute`` call gets a global sequence number and records
    ``("start", seq, name)`` / ``("end", seq, name)`` events, yielding to the
    loop in between so concurrent calls interleave.
    """

    def __init__(
        self,
        *,
        account_id: str = ACCOUNT_ID,
        region: str = REGION,
        fail_on: set[str] | None = None,
    ) -> None:
        self.account = account_id
        self.region = region
        self.fail_on = set(fail_on or ())
        self.topics: dict[str, dict[str, str]] = {}
        self.calls: list[tuple[str, str]] = []
        self.events: list[tuple[str, int, str]] = []
        self.created: list[str] = []
        self.deleted: list[str] = []
        self.max_in_flight = 0
        self._in_flight = 0
        self._seq = 0

    def arn(self, name: str) -> str:
        return f"arn:aws:sns:{self.region}:{self.account}:{name}"

    def add_topic(self, name: str, **attributes: str) -> str:
        arn = self.arn(name)
        self.topics[arn] = {
            "TopicArn": arn,
            "Owner": self.account,
            "DisplayName": "",
            "SubscriptionsConfirmed": "0",
            **attributes,
        }
        return arn

    async def get_attributes(self, resource_id: str) -> dict[str, str]:
        return dict(self.topics.get(resource_id, {}))

    async def set_attribute(self, resource_id: str, name: str, value: str) -> None:
        if resource_id not in self.topics:
            raise TopicNotFoundError(resource_id)
        self._seq += 1
        seq = self._seq
        self.events.append(("start", seq, name))
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            await asyncio.sleep(0)
            if name in self.fail_on:
                raise RuntimeError(f"Rate exceeded: {name}")
            self.topics[resource_id][name] = value
            self.calls.append((name, value))
        finally:
            self._in_flight -= 1
            self.events.append(("end", seq, name))

    async def create(self, name: str) -> str:
        arn = self.arn(name)
        if arn not in self.topics:
            self.add_topic(
                name,
                Policy=json.dumps({"Version": "2008-10-17", "Statement": []}),
            )
        self.created.append(arn)
        return arn

    async def delete(self, resource_id: str) -> None:
        self.topics.pop(resource_id, None)
        self.deleted.append(resource_id)

    async def account_id(self) -> str:
        return self.account


@pytest.fixture
def api() -> FakeTopicApi:
    return FakeTopicApi()


@pytest.fixture
def reconciler(api: FakeTopicApi) -> TopicReconciler:
    return TopicReconciler(reader=api, writer=api, lifecycle=api, identity=api)


@pytest.fixture
def make_api() -> type[FakeTopicApi]:
    return FakeTopicApi
