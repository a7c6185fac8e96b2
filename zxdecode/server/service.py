"""Remote decode service: one warm Decoder served over XML-RPC on loopback."""

from __future__ import annotations

import argparse
import logging
import signal
import socketserver
import sys
import threading
from typing import Any, Callable
from xmlrpc.server import SimpleXMLRPCServer

from ..config import ConfigError, load_config
from ..decoder import build_decoder
from ..decoding.decoder import Decoder
from ..decoding.errors import DecodeError
from ..utils.logger import setup_logging
from .protocol import LOOPBACK, OPERATIONS, encode_value, fault_for
from .supervisor import DEFAULT_POLL_SECONDS, ParentWatcher

logger = logging.getLogger(__name__)


class _ThreadedXMLRPCServer(socketserver.ThreadingMixIn, SimpleXMLRPCServer):
    daemon_threads = True
    allow_reuse_address = True

    def handle_error(self, request, client_address) -> None:
        logger.exception("Unhandled error serving %s", client_address)


class DecodeService:
    """Expose a shared Decoder's operations to other local processes.

    Every request runs on its own thread against the same Decoder, which
    keeps no per-call state.
    """

    def __init__(self, decoder: Decoder, port: int, host: str = LOOPBACK) -> None:
        self._decoder = decoder
        self._server = _ThreadedXMLRPCServer((host, port), logRequests=False, allow_none=True)
        self._stopping = threading.Event()
        self._serving = threading.Event()
        self._state_lock = threading.Lock()
        self._watcher: ParentWatcher | None = None

        for name in OPERATIONS:
            self._server.register_function(self._operation(name), name)
        self._server.register_function(self.ping, "ping")

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._server.server_address[:2]
        return host, port

    @property
    def port(self) -> int:
        return self.address[1]

    def ping(self) -> bool:
        return True

    def _operation(self, name: str) -> Callable[[str], Any]:
        method = getattr(self._decoder, name)

        def handle(ref: str) -> Any:
            try:
                return encode_value(method(ref))
            except DecodeError as exc:
                logger.debug("%s(%r) failed: %s", name, ref, exc)
                raise fault_for(exc)
            except Exception as exc:
                logger.exception("%s(%r) raised %s", name, ref, type(exc).__name__)
                raise fault_for(exc)

        handle.__name__ = name
        return handle

    def start(
        self,
        parent_pid: int | None = None,
        poll_interval: float = DEFAULT_POLL_SECONDS,
    ) -> None:
        """Start the parent watcher, then serve until stopped."""
        self._watcher = ParentWatcher(self.stop, parent_pid=parent_pid, interval=poll_interval)
        self._watcher.start()
        self.serve_forever()

    def serve_forever(self) -> None:
        logger.info("Decode service listening on %s:%d", *self.address)
        try:
            while True:
                with self._state_lock:
                    if self._stopping.is_set():
                        break
                    self._serving.set()
                try:
                    self._server.serve_forever(poll_interval=0.5)
                except Exception:
                    logger.exception("Decode service loop failed, resuming")
        finally:
            self._serving.clear()
            self._server.server_close()
            if self._watcher is not None:
                self._watcher.stop()
            logger.info("Decode service stopped")

    def stop(self) -> None:
        """Stop serving. Must not be called from the serving thread."""
        with self._state_lock:
            self._stopping.set()
            serving = self._serving.is_set()
        if serving:
            self._server.shutdown()

    @property
    def stopped(self) -> bool:
        return self._stopping.is_set()


def main(argv: list[str] | None = None) -> None:
    """Command-line entry point for the decode service process."""
    try:
        config = load_config()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO)
        logging.critical("Configuration error: %s", exc)
        sys.exit(1)

    parser = argparse.ArgumentParser(description="Serve barcode decoding over XML-RPC on loopback.")
    parser.add_argument("--port", type=int, default=config.port, help="port to listen on")
    parser.add_argument(
        "--parent-pid",
        type=int,
        default=None,
        help="exit when this process is gone (default: the launching process)",
    )
    args = parser.parse_args(argv)

    setup_logging(config.log_level, config.log_file)

    service = DecodeService(build_decoder(), args.port)

    # stop() blocks until the serving loop exits, so it cannot run on this thread
    def _shutdown(signum, frame):
        logger.info("Shutdown signal received, stopping...")
        threading.Thread(target=service.stop, daemon=True).start()

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)

    service.start(parent_pid=args.parent_pid, poll_interval=config.parent_poll_seconds)


if __name__ == "__main__":
    main()
