"""
Environment configuration for the Cloudera Manager gateway.

Environment variables:
  CLDR_CM_BASE_URL      — Cloudera Manager URL, e.g. https://cm.example.com:7183 (required)
  CLDR_CM_USERNAME      — API user (required)
  CLDR_CM_PASSWORD      — API password (required)
  CLDR_CM_API_VERSION   — pin the API version (e.g. v54) instead of discovering it
  CLDR_CM_VERIFY_SSL    — set to "false" to accept self-signed certificates (default: true)
  CLDR_CM_TIMEOUT       — per-request timeout in seconds (default: 30)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from cm_mcp.errors import ConfigError

DEFAULT_TIMEOUT = 30.0  # seconds


@dataclass(frozen=True)
class Config:
    base_url: str
    username: str
    password: str
    api_version: str | None = None
    verify_ssl: bool = True
    timeout: float = DEFAULT_TIMEOUT


def _require(env: Mapping[str, str], key: str) -> str:
    value = env.get(key, "")
    if not value:
        raise ConfigError(f"{key} is required")
    return value


def load_config_from_env(env: Mapping[str, str] | None = None) -> Config:
    """Build a Config from the process environment (or an explicit mapping)."""
    env = os.environ if env is None else env

    base_url = _require(env, "CLDR_CM_BASE_URL")
    username = _require(env, "CLDR_CM_USERNAME")
    password = _require(env, "CLDR_CM_PASSWORD")

    raw_timeout = env.get("CLDR_CM_TIMEOUT", "")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ConfigError(f"CLDR_CM_TIMEOUT must be a number of seconds, got {raw_timeout!r}")

    return Config(
        base_url=base_url[:-1] if base_url.endswith("/") else base_url,
        username=username,
        password=password,
        api_version=env.get("CLDR_CM_API_VERSION") or None,
        verify_ssl=env.get("CLDR_CM_VERIFY_SSL", "true").lower() != "false",
        timeout=timeout,
    )
