"""Error taxonomy for decode calls."""

from __future__ import annotations


class DecodeError(Exception):
    """Base class for every error raised by the decoding layer."""


class InvalidReferenceError(DecodeError, ValueError):
    """Raised when an image reference does not point at readable bytes.

    A caller error: it always propagates, lenient variants included.
    """


class UndecodableError(DecodeError):
    """Raised when the engine ran but found no valid symbol."""

    def __init__(self, message: str = "Image not decodable") -> None:
        super().__init__(message)


class EngineFaultError(DecodeError):
    """Raised when the barcode engine fails for a reason other than "not found"."""
