"""Reads the key/value configuration file handed to `Session.init`."""

from __future__ import annotations

import logging
from typing import Any
from pathlib import Path

import orjson

from trackbridge.errors import InitError
from trackbridge.config.session import REASON_INVALID_CONFIG, REASON_INVALID_CONFIG_PATH

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    # The SDK stores every value as a string.
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return orjson.dumps(value).decode("utf-8")


def flatten_config(data: dict[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested objects into dotted keys: {"Depth": {"Mirror": true}} -> {"Depth.Mirror": "true"}."""
    flat: dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten_config(value, name))
        else:
            flat[name] = _format_value(value)
    return flat


def load_config_file(path: str | Path) -> dict[str, str]:
    config_path = Path(path).expanduser()
    try:
        raw = config_path.read_bytes()
    except OSError as exc:
        raise InitError(f"cannot read config file {config_path}: {exc}", REASON_INVALID_CONFIG_PATH) from exc

    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise InitError(f"config file {config_path} is not valid JSON: {exc}", REASON_INVALID_CONFIG) from exc
    if not isinstance(data, dict):
        raise InitError(f"config file {config_path} must contain a JSON object", REASON_INVALID_CONFIG)

    flat = flatten_config(data)
    logger.info("loaded %d config value(s) from %s", len(flat), config_path)
    return flat


__all__ = ["flatten_config", "load_config_file"]
