"""YAML + environment variable config loader."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError

from sns_topic.config.models import TopicConfig
from sns_topic.errors import ConfigurationError

# Matches ${VAR} or ${VAR:-default}
_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-((?:[^}\\]|\\.)*))?}")


def _resolve_env_str(value: str) -> str:
    """Replace all ${VAR} / ${VAR:-default} references in a string."""

    def _replace(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        env_val = os.environ.get(var_name)
        if env_val is not None:
            return env_val
        if default is not None:
            return default.replace("\\}", "}")
        msg = f"Environment variable '{var_name}' is not set and no default provided"
        raise ConfigurationError(msg)

    return _ENV_PATTERN.sub(_replace, value)


def resolve_env_vars(data: Any) -> Any:
    """Recursively resolve ${VAR} and ${VAR:-default} in parsed YAML data."""
    if isinstance(data, str):
        return _resolve_env_str(data)
    if isinstance(data, dict):
        return {k: resolve_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars(item) for item in data]
    return data


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML mapping and resolve its environment references."""
    p = Path(path)
    if not p.exists():
        msg = f"Config file not found: {p}"
        raise FileNotFoundError(msg)
    try:
        data = yaml.safe_load(p.read_text())
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        where = f" at line {mark.line + 1}, column {mark.column + 1}" if mark else ""
        msg = f"Failed to parse YAML in {p}{where}: {exc}"
        raise ConfigurationError(msg) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Expected a YAML mapping at top level in {p}, got {type(data).__name__}"
        raise ConfigurationError(msg)
    try:
        return cast(dict[str, Any], resolve_env_vars(data))
    except ConfigurationError as exc:
        raise ConfigurationError(f"{p}: {exc}") from exc


def build_topic_config(data: dict[str, Any], *, source: str = "<inline>") -> TopicConfig:
    """Validate a raw mapping into a TopicConfig."""
    try:
        return TopicConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid topic config ({source}):\n{exc}"
        raise ConfigurationError(msg) from exc


def load_topic_config(path: str | Path) -> TopicConfig:
    """Load a topic config YAML file.

    A top-level ``topic:`` key is unwrapped so the topic can sit next to other
    documents in a shared file.
    """
    data = load_yaml(path)
    if isinstance(data.get("topic"), dict):
        data = data["topic"]
    return build_topic_config(data, source=str(path))
