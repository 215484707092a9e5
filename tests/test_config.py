import logging

import pytest

from txrelay.config import DEFAULT_PUBLIC_DIR, RelayConfig, configure_logging, load_relay_config

_VARS = ("PORT", "HOST", "WSS_HOST", "WSS_PORT", "PUBLIC_DIR", "RELAY_LOG_LEVEL")


@pytest.fixture
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    cfg = load_relay_config()
    assert cfg.port == 3000
    assert cfg.host == "0.0.0.0"
    assert cfg.wss_host == "localhost"
    assert cfg.wss_port == 3000
    assert cfg.public_dir == str(DEFAULT_PUBLIC_DIR)
    assert cfg.ws_url == "ws://localhost:3000/"
    assert cfg.http_url == "http://localhost:3000"


def test_wss_port_follows_port(clean_env):
    clean_env.setenv("PORT", "8080")
    cfg = load_relay_config()
    assert cfg.port == 8080
    assert cfg.wss_port == 8080


def test_advertised_endpoint_overrides(clean_env):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("WSS_HOST", "relay.example.com")
    clean_env.setenv("WSS_PORT", "443")
    clean_env.setenv("RELAY_LOG_LEVEL", "debug")
    cfg = load_relay_config()
    assert cfg.ws_url == "ws://relay.example.com:443/"
    assert cfg.log_level == "DEBUG"


def test_empty_values_fall_back_to_defaults(clean_env):
    clean_env.setenv("PORT", "")
    clean_env.setenv("WSS_HOST", "")
    cfg = load_relay_config()
    assert cfg.port == 3000
    assert cfg.wss_host == "localhost"


def test_non_integer_port_is_rejected(clean_env):
    clean_env.setenv("WSS_PORT", "abc")
    with pytest.raises(ValueError, match="WSS_PORT"):
        load_relay_config()


def test_configure_logging_sets_root_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("warning")
        assert root.level == logging.WARNING
        configure_logging("DEBUG")
        assert root.level == logging.DEBUG
        configure_logging("no-such-level")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)
    assert RelayConfig().log_level == "INFO"
