"""
Unit tests for cm_mcp/config.py
"""

from __future__ import annotations

import pytest

from cm_mcp.config import DEFAULT_TIMEOUT, load_config_from_env
from cm_mcp.errors import ConfigError

ENV = {
    "CLDR_CM_BASE_URL": "https://cm.example.com:7183/",
    "CLDR_CM_USERNAME": "admin",
    "CLDR_CM_PASSWORD": "s3cret",
}


def test_minimal_env_defaults():
    cfg = load_config_from_env(ENV)
    assert cfg.base_url == "https://cm.example.com:7183"
    assert cfg.username == "admin"
    assert cfg.password == "s3cret"
    assert cfg.api_version is None
    assert cfg.verify_ssl is True
    assert cfg.timeout == DEFAULT_TIMEOUT


@pytest.mark.parametrize("missing", sorted(ENV))
def test_required_variables(missing):
    env = {k: v for k, v in ENV.items() if k != missing}
    with pytest.raises(ConfigError, match=missing):
        load_config_from_env(env)


def test_blank_required_variable_counts_as_missing():
    with pytest.raises(ConfigError, match="CLDR_CM_PASSWORD"):
        load_config_from_env({**ENV, "CLDR_CM_PASSWORD": ""})


def test_pinned_api_version():
    assert load_config_from_env({**ENV, "CLDR_CM_API_VERSION": "v51"}).api_version == "v51"


@pytest.mark.parametrize(
    "raw,expected",
    [("false", False), ("FALSE", False), ("true", True), ("0", True), ("", True)],
)
def test_verify_ssl_only_disabled_by_false(raw, expected):
    assert load_config_from_env({**ENV, "CLDR_CM_VERIFY_SSL": raw}).verify_ssl is expected


def test_timeout_override():
    assert load_config_from_env({**ENV, "CLDR_CM_TIMEOUT": "5"}).timeout == 5.0


def test_timeout_not_a_number():
    with pytest.raises(ConfigError, match="CLDR_CM_TIMEOUT"):
        load_config_from_env({**ENV, "CLDR_CM_TIMEOUT": "soon"})


def test_reads_process_environment(monkeypatch):
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)
    assert load_config_from_env().username == "admin"
