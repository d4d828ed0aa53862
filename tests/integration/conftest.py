"""
Integration test fixtures — requires a live Cloudera Manager.

Set CLDR_CM_BASE_URL / CLDR_CM_USERNAME / CLDR_CM_PASSWORD to run them.
"""

from __future__ import annotations

import httpx
import pytest

from cm_mcp.client import ClouderaManagerClient, set_client
from cm_mcp.config import load_config_from_env
from cm_mcp.errors import ConfigError


def _live_config():
    try:
        return load_config_from_env()
    except ConfigError:
        return None


def _cm_reachable() -> bool:
    cfg = _live_config()
    if cfg is None:
        return False
    try:
        res = httpx.get(
            f"{cfg.base_url}/api/version",
            auth=(cfg.username, cfg.password),
            verify=cfg.verify_ssl,
            timeout=5,
        )
        return res.is_success
    except httpx.HTTPError:
        return False


skip_no_cm = pytest.mark.skipif(
    not _cm_reachable(),
    reason="Cloudera Manager not reachable — skipping integration tests",
)


@pytest.fixture
def live_client():
    client = ClouderaManagerClient(load_config_from_env())
    set_client(client)
    yield client
    set_client(None)
