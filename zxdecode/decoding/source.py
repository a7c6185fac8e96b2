"""Image source resolver: turns an image reference into a byte stream."""

from __future__ import annotations

import logging
import os
import re
from io import BytesIO
from typing import Any, BinaryIO

import requests

from .errors import InvalidReferenceError

logger = logging.getLogger(__name__)

_HEADERS = {"User-Agent": "zxdecode/1.0"}
DEFAULT_FETCH_TIMEOUT = 30
_URI_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def is_remote(ref: Any) -> bool:
    return isinstance(ref, str) and bool(_URI_PATTERN.match(ref))


def reference_path(ref: Any) -> str | None:
    """Return the local path an image reference points at, if it has one.

    Plain strings and ``os.PathLike`` objects are paths themselves. Other
    objects are asked for a ``path`` (attribute or method), then a ``name``
    as file objects returned by ``open()`` carry.
    """
    if isinstance(ref, (str, os.PathLike)):
        return os.fspath(ref)
    for attr in ("path", "name"):
        value = getattr(ref, attr, None)
        if callable(value):
            value = value()
        if isinstance(value, (str, os.PathLike)):
            return os.fspath(value)
    return None


def fetch(uri: str, timeout: float | None = DEFAULT_FETCH_TIMEOUT) -> BinaryIO:
    """Download a remote image. Network errors propagate unchanged."""
    logger.debug("Fetching image from %s", uri)
    resp = requests.get(uri, headers=_HEADERS, timeout=timeout)
    resp.raise_for_status()
    return BytesIO(resp.content)


def resolve(ref: Any, timeout: float | None = DEFAULT_FETCH_TIMEOUT) -> BinaryIO:
    """Open an image reference as a binary stream.

    Args:
        ref: HTTP(S) URI, local path, object exposing a path, or a readable
            in-memory binary stream.
        timeout: Seconds to wait for a remote fetch.

    Returns:
        A stream the caller owns and must close.

    Raises:
        InvalidReferenceError: The reference names a local file that does not
            exist, or is not an image reference at all.
        requests.RequestException: A remote fetch failed.
    """
    if is_remote(ref):
        return fetch(ref, timeout=timeout)

    path = reference_path(ref)
    if path is not None:
        if not os.path.isfile(path):
            raise InvalidReferenceError(f"File {path} could not be found")
        return open(path, "rb")

    if hasattr(ref, "read"):
        return BytesIO(ref.read())

    raise InvalidReferenceError(f"Cannot read an image from {ref!r}")
