"""Decoder: the facade that turns an image reference into decode results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .engine import BarcodeEngine, DecodeHints, load_luminance
from .errors import UndecodableError
from .result import Result, symbology_for
from .source import DEFAULT_FETCH_TIMEOUT, resolve

logger = logging.getLogger(__name__)


class DecodeMode(Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    QR = "qr"


@dataclass(frozen=True)
class DecodeOutcome:
    """Tagged result of one decode attempt: a value or an UndecodableError."""

    value: Any = None
    error: UndecodableError | None = None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value

    def or_default(self, default: Any) -> Any:
        return default if self.error is not None else self.value


class Decoder:
    """Decode barcodes from local paths, file handles and HTTP(S) URIs.

    Strict variants raise ``UndecodableError`` when nothing is found; lenient
    variants return ``None`` or ``[]`` instead. ``InvalidReferenceError`` and
    ``EngineFaultError`` propagate from both.
    """

    def __init__(
        self,
        hints: DecodeHints | None = None,
        engine: BarcodeEngine | None = None,
        fetch_timeout: float | None = DEFAULT_FETCH_TIMEOUT,
    ) -> None:
        if engine is not None and hints is not None:
            raise ValueError("Pass either hints or an engine, not both; the engine carries its own hints")
        self._engine = engine or BarcodeEngine(hints)
        self._fetch_timeout = fetch_timeout

    @property
    def engine(self) -> BarcodeEngine:
        return self._engine

    def decode_strict(self, ref: Any) -> Result:
        """Decode exactly one symbol.

        Raises:
            UndecodableError: No binarizer found a symbol.
            InvalidReferenceError: The reference does not resolve.
        """
        return self._attempt(ref, DecodeMode.SINGLE).unwrap()

    def decode(self, ref: Any) -> Result | None:
        return self._attempt(ref, DecodeMode.SINGLE).or_default(None)

    def decode_all_strict(self, ref: Any) -> list[Result]:
        """Decode every symbol in the image, in engine order."""
        return self._attempt(ref, DecodeMode.MULTIPLE).unwrap()

    def decode_all(self, ref: Any) -> list[Result]:
        return self._attempt(ref, DecodeMode.MULTIPLE).or_default([])

    def decode_qr(self, ref: Any) -> str | None:
        """Best-effort QR-only decode returning the bare text or None."""
        return self._attempt(ref, DecodeMode.QR).or_default(None)

    def _attempt(self, ref: Any, mode: DecodeMode) -> DecodeOutcome:
        with resolve(ref, timeout=self._fetch_timeout) as stream:
            try:
                luminance = load_luminance(stream)
                value = self._run(mode, luminance)
            except UndecodableError as exc:
                return DecodeOutcome(error=exc)
        return DecodeOutcome(value=value)

    def _run(self, mode: DecodeMode, luminance) -> Any:
        if mode is DecodeMode.QR:
            return self._engine.decode_qr(luminance)
        if mode is DecodeMode.MULTIPLE:
            return [self._to_result(found) for found in self._engine.decode_multiple(luminance)]
        result = self._to_result(self._engine.decode_single(luminance))
        logger.debug("Decoded %s: %s", result.symbology.value, result.text)
        return result

    @staticmethod
    def _to_result(found) -> Result:
        return Result(symbology_for(found.format), found.text)
