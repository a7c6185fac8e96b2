"""Module-level decode operations backed by one shared Decoder."""

from __future__ import annotations

import threading
from typing import Any

from .config import load_config
from .decoding.decoder import Decoder
from .decoding.engine import DecodeHints
from .decoding.result import Result

_default_decoder: Decoder | None = None
_lock = threading.Lock()


def build_decoder() -> Decoder:
    """Build a Decoder from the environment configuration."""
    config = load_config()
    return Decoder(
        hints=DecodeHints(try_harder=config.try_harder),
        fetch_timeout=config.fetch_timeout,
    )


def default_decoder() -> Decoder:
    global _default_decoder
    with _lock:
        if _default_decoder is None:
            _default_decoder = build_decoder()
        return _default_decoder


def decode(ref: Any) -> Result | None:
    return default_decoder().decode(ref)


def decode_strict(ref: Any) -> Result:
    return default_decoder().decode_strict(ref)


def decode_all(ref: Any) -> list[Result]:
    return default_decoder().decode_all(ref)


def decode_all_strict(ref: Any) -> list[Result]:
    return default_decoder().decode_all_strict(ref)


def decode_qr(ref: Any) -> str | None:
    return default_decoder().decode_qr(ref)
