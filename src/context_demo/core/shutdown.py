"""
Interruptible waiting for the polling loop.

`time.sleep()` keeps a SIGTERM'd process alive until the pause ends. Instead the
update loop waits on a `threading.Event`. While `signals_set` is active,
SIGINT/SIGTERM set the event and raise `Interrupted` in the main thread, so a
signal stops an in-flight search or query as well as a pause.
"""

from __future__ import annotations

import logging
import signal
import threading
from contextlib import contextmanager
from types import FrameType
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class Interrupted(RuntimeError):
    """Raised when shutdown was requested.

    ``signum`` is the signal that triggered it, or None when the shutdown event
    was set by other means.
    """

    def __init__(self, message: str = "Shutdown requested", signum: Optional[int] = None):
        super().__init__(message)
        self.signum = signum

    @property
    def exit_code(self) -> int:
        """Shell convention: 128 + signal number (130 for SIGINT)."""
        return 128 + (self.signum or signal.SIGINT)


@contextmanager
def signals_set(event: threading.Event) -> Iterator[bool]:
    """Route SIGINT/SIGTERM to *event* for the duration of the block.

    The handler sets *event* and raises `Interrupted` from whatever the main
    thread is doing. A previous handler of SIG_IGN is honored: the event is
    set but nothing is raised.

    Yields False (and installs nothing) when not on the main thread, where
    Python refuses to install signal handlers. Previous handlers are restored
    on exit.
    """
    if threading.current_thread() is not threading.main_thread():
        yield False
        return

    previous = {s: signal.getsignal(s) for s in (signal.SIGINT, signal.SIGTERM)}

    def _handler(signum: int, frame: Optional[FrameType]) -> None:
        logger.info("Received signal %s, shutting down", signum)
        event.set()
        if previous.get(signum) == signal.SIG_IGN:
            return
        raise Interrupted(f"Received signal {signum}", signum=signum)

    for s in previous:
        signal.signal(s, _handler)
    try:
        yield True
    finally:
        for s, handler in previous.items():
            signal.signal(s, handler)


def wait_or_interrupt(event: threading.Event, timeout_s: float) -> None:
    """Wait up to *timeout_s* seconds; raise Interrupted if *event* gets set."""
    if event.wait(timeout=max(0.0, float(timeout_s))):
        raise Interrupted("Shutdown requested")


__all__ = ["Interrupted", "signals_set", "wait_or_interrupt"]
