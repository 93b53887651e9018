"""Persisted view of a deployed topic."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError

from sns_topic.errors import ConfigurationError

logger = structlog.get_logger()


class TopicState(BaseModel):
    """Attribute view recorded after a successful deploy.

    Structured documents are stored decoded; a remote document that was not
    valid JSON is kept as text.
    """

    name: str
    arn: str
    region: str
    display_name: str = ""
    policy: dict[str, Any] | str | None = None
    delivery_policy: dict[str, Any] | str | None = None
    delivery_status_attributes: dict[str, str] = Field(default_factory=dict)


class FileStateStore:
    """Stores a single TopicState as a JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TopicState | None:
        if not self._path.exists():
            return None
        try:
            return TopicState.model_validate_json(self._path.read_text())
        except ValidationError as exc:
            msg = f"Corrupt state file {self._path}:\n{exc}"
            raise ConfigurationError(msg) from exc

    def save(self, state: TopicState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(state.model_dump_json(indent=2))
        logger.debug("state.saved", path=str(self._path), topic=state.arn)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.debug("state.cleared", path=str(self._path))
