"""Shared CLI runtime primitives (environment, logging, payload emission, proxy)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

_PROXY_ENV_KEYS = ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy")
_DEFAULT_BACKEND_URL = "http://localhost:9200"
_DEFAULT_INDEX = "orders_pagination"
_DEFAULT_LOG_LEVEL = "WARNING"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def env_bool(name: str, *, default_value: bool) -> bool:
    """Read a boolean value from environment variables.

    Args:
        name (str): Environment variable name.
        default_value (bool): Fallback value when missing or invalid.

    Returns:
        bool: Parsed boolean value.

    """
    raw = os.getenv(name)
    if raw is None:
        return default_value
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default_value


def env_int(name: str, *, default_value: int) -> int:
    """Read an integer value from environment variables.

    Args:
        name (str): Environment variable name.
        default_value (int): Fallback value when missing or invalid.

    Returns:
        int: Parsed integer value.

    """
    raw = os.getenv(name)
    if raw is None:
        return default_value
    try:
        return int(raw.strip())
    except ValueError:
        return default_value


def default_log_level() -> str:
    """Return the log level configured through `AGG_LENS_LOG_LEVEL`."""
    return os.getenv("AGG_LENS_LOG_LEVEL", _DEFAULT_LOG_LEVEL).strip().upper() or _DEFAULT_LOG_LEVEL


def configure_logging(level: str | None) -> None:
    """Configure root logging for one CLI run.

    Args:
        level (str | None): Level name; the environment default when `None`.

    """
    logging.basicConfig(level=(level or default_log_level()).upper(), format=_LOG_FORMAT)


def emit_payload(payload: Any, output: str) -> None:  # noqa: ANN401
    """Emit payload to stdout or to a file.

    Args:
        payload (Any): Pydantic model, JSON-compatible data or models nested in lists and dicts.
        output (str): Output path or "-" for stdout.

    """
    if isinstance(payload, str):
        serialized = payload
    else:
        payload_data = payload.model_dump(mode="json") if isinstance(payload, BaseModel) else to_jsonable_python(payload)
        serialized = json.dumps(payload_data, ensure_ascii=False, indent=2)

    if output == "-":
        print(serialized)
        return

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if serialized.endswith("\n"):
        output_path.write_text(serialized, encoding="utf-8")
    else:
        output_path.write_text(serialized + "\n", encoding="utf-8")


def apply_proxy_environment(proxy_url: str | None) -> None:
    """Apply proxy url to standard proxy environment variables.

    Args:
        proxy_url (str | None): Proxy URL when provided.

    """
    if not proxy_url:
        return

    for key in _PROXY_ENV_KEYS:
        os.environ[key] = proxy_url
