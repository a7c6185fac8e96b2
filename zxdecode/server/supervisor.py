"""Parent-liveness supervision for the decode service process."""

from __future__ import annotations

import logging
import os
import threading
from typing import Callable

import psutil

logger = logging.getLogger(__name__)

DEFAULT_POLL_SECONDS = 0.5


def parent_alive(pid: int) -> bool:
    """Return True while ``pid`` is a running (non-zombie) process."""
    try:
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        return True


class ParentWatcher:
    """Background thread that calls ``on_exit`` once the parent process is gone.

    Args:
        on_exit: Called once, from the watcher thread, when the parent exits.
        parent_pid: Process to watch. Defaults to the current parent.
        interval: Seconds between checks.
        is_alive: Liveness check taking a pid. Defaults to ``parent_alive``.
    """

    def __init__(
        self,
        on_exit: Callable[[], None],
        parent_pid: int | None = None,
        interval: float = DEFAULT_POLL_SECONDS,
        is_alive: Callable[[int], bool] | None = None,
    ) -> None:
        self._on_exit = on_exit
        self._parent_pid = parent_pid if parent_pid is not None else os.getppid()
        self._interval = interval
        self._is_alive = is_alive or parent_alive
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def parent_pid(self) -> int:
        return self._parent_pid

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self._watch, name="parent-watcher", daemon=True)
        self._thread.start()
        logger.info("Watching parent process %d every %.2fs", self._parent_pid, self._interval)
        return self._thread

    def stop(self) -> None:
        self._stopped.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _watch(self) -> None:
        while True:
            if not self._is_alive(self._parent_pid):
                logger.warning("Parent process %d is gone, shutting down", self._parent_pid)
                self._on_exit()
                return
            if self._stopped.wait(self._interval):
                return
