"""Barcode engine adapter: zxing-cpp calls over a Pillow luminance source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable

import zxingcpp
from PIL import Image, UnidentifiedImageError

from .errors import EngineFaultError, UndecodableError

logger = logging.getLogger(__name__)

GLOBAL_HISTOGRAM = zxingcpp.Binarizer.GlobalHistogram
HYBRID = zxingcpp.Binarizer.LocalAverage

# Global histogram is fast; hybrid copes with uneven lighting.
_FALLBACK_BINARIZERS = (GLOBAL_HISTOGRAM, HYBRID)


@dataclass(frozen=True)
class DecodeHints:
    """Options passed to every single and multi-symbol engine call."""

    try_harder: bool = True

    def engine_options(self) -> dict[str, Any]:
        return {
            "try_rotate": self.try_harder,
            "try_downscale": self.try_harder,
        }


def load_luminance(stream: BinaryIO) -> Image.Image:
    """Decode image bytes into a grayscale luminance source.

    Args:
        stream: Binary stream holding a PNG/JPEG/GIF/... image.

    Returns:
        Pillow image in mode ``L``.

    Raises:
        UndecodableError: The bytes are not an image Pillow can read.
    """
    try:
        with Image.open(stream) as image:
            return image.convert("L")
    except (UnidentifiedImageError, OSError) as exc:
        logger.debug("Image could not be loaded: %s", exc)
        raise UndecodableError() from exc


def _is_found(result) -> bool:
    return result is not None and result.valid


class BarcodeEngine:
    """Single, multi-symbol and QR-only decoding with binarizer fallback.

    Holds nothing but its hints, so one instance can serve many threads.
    """

    def __init__(self, hints: DecodeHints | None = None) -> None:
        self._hints = hints or DecodeHints()

    @property
    def hints(self) -> DecodeHints:
        return self._hints

    def decode_single(self, luminance: Image.Image):
        """Decode one symbol, global histogram first and hybrid second.

        Returns:
            The engine's result object.

        Raises:
            UndecodableError: Neither binarizer produced a valid symbol.
            EngineFaultError: The engine failed internally.
        """
        for binarizer in _FALLBACK_BINARIZERS:
            found = self._call(
                zxingcpp.read_barcode,
                luminance,
                binarizer=binarizer,
                **self._hints.engine_options(),
            )
            if _is_found(found):
                return found
            logger.debug("No symbol found with %s binarizer", binarizer.name)
        raise UndecodableError()

    def decode_multiple(self, luminance: Image.Image) -> list:
        """Decode every symbol in a single global-histogram pass.

        The engine's order is kept as-is; it does not follow symbol position.
        """
        found = self._call(
            zxingcpp.read_barcodes,
            luminance,
            binarizer=GLOBAL_HISTOGRAM,
            **self._hints.engine_options(),
        )
        valid = [result for result in found if result.valid]
        if not valid:
            raise UndecodableError()
        return valid

    def decode_qr(self, luminance: Image.Image) -> str | None:
        """QR-only decode. Returns the text, or None when nothing was found."""
        for binarizer in _FALLBACK_BINARIZERS:
            found = self._call(
                zxingcpp.read_barcode,
                luminance,
                formats=zxingcpp.BarcodeFormat.QRCode,
                binarizer=binarizer,
            )
            if _is_found(found):
                return found.text
        return None

    @staticmethod
    def _call(read: Callable[..., Any], luminance: Image.Image, **options: Any) -> Any:
        try:
            return read(luminance, **options)
        except Exception as exc:
            logger.exception("Barcode engine fault %s: %s", type(exc).__name__, exc)
            raise EngineFaultError(f"{type(exc).__name__}: {exc}") from exc
