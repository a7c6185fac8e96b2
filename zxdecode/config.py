"""Service and decoder configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass
class Config:
    port: int
    try_harder: bool
    fetch_timeout: float
    parent_poll_seconds: float
    log_level: str
    log_file: str | None

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise ConfigError(f"ZXDECODE_PORT must be between 0 and 65535, got: {self.port}")
        if self.parent_poll_seconds <= 0:
            raise ConfigError(
                f"ZXDECODE_PARENT_POLL_SECONDS must be positive, got: {self.parent_poll_seconds}"
            )


def _parse_number(name: str, default: str, kind: type) -> int | float:
    raw = os.getenv(name, default)
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got: {raw!r}")


def load_config() -> Config:
    """Load and validate configuration from environment variables."""
    # ZXDECODE_TRY_HARDER: default True, False only if value is "false"
    try_harder_raw = os.getenv("ZXDECODE_TRY_HARDER", "true")
    try_harder = try_harder_raw.strip().lower() != "false"

    return Config(
        port=_parse_number("ZXDECODE_PORT", "7888", int),
        try_harder=try_harder,
        fetch_timeout=_parse_number("ZXDECODE_FETCH_TIMEOUT", "30", float),
        parent_poll_seconds=_parse_number("ZXDECODE_PARENT_POLL_SECONDS", "0.5", float),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE") or None,
    )
