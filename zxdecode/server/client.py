"""Client for the decode service, with a helper that launches it as a child process."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import Any
from xmlrpc.client import Fault, ServerProxy

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_delay,
    wait_fixed,
)

from ..decoding.errors import InvalidReferenceError
from ..decoding.result import Result
from ..decoding.source import is_remote, reference_path
from .protocol import LOOPBACK, decode_value, error_for

logger = logging.getLogger(__name__)

_STARTUP_TIMEOUT = 30
_TERMINATE_TIMEOUT = 5


class ServiceStartError(RuntimeError):
    """Raised when a spawned decode service exits before answering."""


def _on_retry(retry_state) -> None:
    logger.debug(
        "Decode service not ready (attempt %d): %s",
        retry_state.attempt_number,
        retry_state.outcome.exception(),
    )


def _wire_reference(ref: Any) -> str:
    """The service only accepts a path or URI string.

    Local paths are made absolute: the service may run from another directory.
    """
    if is_remote(ref):
        return ref
    path = reference_path(ref)
    if path is None:
        raise InvalidReferenceError(f"Cannot send {ref!r} to the decode service, pass a path or URI")
    return os.path.abspath(path)


class ServiceClient:
    """Call a running decode service as if it were a local Decoder.

    Faults raised by the service come back as the same exception types the
    local Decoder raises.

    Args:
        port: Service port on loopback.
        host: Service host.
        process: The service process, when this client launched it.
    """

    def __init__(self, port: int, host: str = LOOPBACK, process: subprocess.Popen | None = None) -> None:
        self._url = f"http://{host}:{port}/"
        self._process = process

    @property
    def process(self) -> subprocess.Popen | None:
        return self._process

    def _call(self, name: str, *args: Any) -> Any:
        # ServerProxy is not thread-safe; one per call
        with ServerProxy(self._url, allow_none=True) as proxy:
            try:
                return decode_value(getattr(proxy, name)(*args))
            except Fault as fault:
                raise error_for(fault) from None

    def ping(self) -> bool:
        return self._call("ping")

    def decode(self, ref: Any) -> Result | None:
        return self._call("decode", _wire_reference(ref))

    def decode_strict(self, ref: Any) -> Result:
        return self._call("decode_strict", _wire_reference(ref))

    def decode_all(self, ref: Any) -> list[Result]:
        return self._call("decode_all", _wire_reference(ref))

    def decode_all_strict(self, ref: Any) -> list[Result]:
        return self._call("decode_all_strict", _wire_reference(ref))

    def decode_qr(self, ref: Any) -> str | None:
        return self._call("decode_qr", _wire_reference(ref))

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_delay(_STARTUP_TIMEOUT),
        wait=wait_fixed(0.25),
        before_sleep=_on_retry,
        reraise=True,
    )
    def wait_until_ready(self) -> None:
        """Block until the service answers ``ping``."""
        if self._process is not None and self._process.poll() is not None:
            raise ServiceStartError(
                f"Decode service exited with code {self._process.returncode} before it was ready"
            )
        self.ping()

    def close(self) -> None:
        """Terminate the service process if this client launched it."""
        if self._process is None or self._process.poll() is not None:
            return
        self._process.terminate()
        try:
            self._process.wait(timeout=_TERMINATE_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.warning("Decode service did not stop in %ds, killing it", _TERMINATE_TIMEOUT)
            self._process.kill()
            self._process.wait()

    def __enter__(self) -> ServiceClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def spawn_service(port: int, python: str = sys.executable) -> ServiceClient:
    """Launch the decode service as a child of this process and connect to it.

    The service exits on its own once this process is gone.

    Args:
        port: Port for the service to bind on loopback.
        python: Interpreter used to run the service.

    Returns:
        A ready ServiceClient that owns the child process.
    """
    process = subprocess.Popen(
        [
            python,
            "-m",
            "zxdecode.server.service",
            "--port",
            str(port),
            "--parent-pid",
            str(os.getpid()),
        ],
    )
    client = ServiceClient(port, process=process)
    try:
        client.wait_until_ready()
    except Exception:
        client.close()
        raise
    logger.info("Decode service started on port %d (pid %d)", port, process.pid)
    return client
