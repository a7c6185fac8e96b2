"""Tests for zxdecode/config.py."""

import os
import pytest
from unittest.mock import patch

from zxdecode.config import ConfigError, load_config


def _base_env() -> dict:
    return {
        "ZXDECODE_PORT": "9123",
        "ZXDECODE_TRY_HARDER": "true",
        "ZXDECODE_FETCH_TIMEOUT": "12.5",
        "ZXDECODE_PARENT_POLL_SECONDS": "0.25",
        "LOG_LEVEL": "DEBUG",
        "LOG_FILE": "/tmp/zxdecode-test.log",
    }


def test_load_config_success():
    with patch.dict(os.environ, _base_env(), clear=True):
        config = load_config()
    assert config.port == 9123
    assert config.try_harder is True
    assert config.fetch_timeout == 12.5
    assert config.parent_poll_seconds == 0.25
    assert config.log_level == "DEBUG"
    assert config.log_file == "/tmp/zxdecode-test.log"


def test_load_config_defaults():
    with patch.dict(os.environ, {}, clear=True):
        config = load_config()
    assert config.port == 7888
    assert config.try_harder is True
    assert config.fetch_timeout == 30.0
    assert config.parent_poll_seconds == 0.5
    assert config.log_level == "INFO"
    assert config.log_file is None


def test_load_config_try_harder_false():
    env = _base_env()
    env["ZXDECODE_TRY_HARDER"] = "False"
    with patch.dict(os.environ, env, clear=True):
        config = load_config()
    assert config.try_harder is False


def test_load_config_try_harder_true_variants():
    """ZXDECODE_TRY_HARDER should be True for any value other than 'false'."""
    env = _base_env()
    for value in ("true", "True", "1", "yes"):
        env["ZXDECODE_TRY_HARDER"] = value
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.try_harder is True, f"Expected True for ZXDECODE_TRY_HARDER={value!r}"


def test_load_config_port_invalid():
    env = _base_env()
    env["ZXDECODE_PORT"] = "not-a-number"
    with patch.dict(os.environ, env, clear=True):
        with pytest.raises(ConfigError, match="ZXDECODE_PORT"):
            load_config()


def test_load_config_port_out_of_range():
    env = _base_env()
    env["ZXDECODE_PORT"] = "70000"
    with patch.dict(os.environ, env, clear=True):
        with pytest.raises(ConfigError, match="ZXDECODE_PORT"):
            load_config()


def test_load_config_poll_interval_must_be_positive():
    env = _base_env()
    env["ZXDECODE_PARENT_POLL_SECONDS"] = "0"
    with patch.dict(os.environ, env, clear=True):
        with pytest.raises(ConfigError, match="ZXDECODE_PARENT_POLL_SECONDS"):
            load_config()


def test_load_config_empty_log_file_is_none():
    env = _base_env()
    env["LOG_FILE"] = ""
    with patch.dict(os.environ, env, clear=True):
        config = load_config()
    assert config.log_file is None
