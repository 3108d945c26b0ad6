"""Cooperative cancellation for long-running operations."""

from collections.abc import Callable
import logging
import threading

from blast_feed.errors import CancelledError

logger = logging.getLogger(__name__)


class Context:
    """
    Cancellation token passed to operations that may block.

    Cancellation is cooperative: holders check ``cancelled`` (or call
    ``raise_if_cancelled``) at their own wake-up points. A child context is
    cancelled together with its parent but can also be cancelled on its own.
    """

    def __init__(self, parent: "Context | None" = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self._timer: threading.Timer | None = None
        self._parent = parent
        if parent is not None:
            parent.add_callback(self.cancel)

    def cancel(self) -> None:
        """
        Cancel this context and detach it from its parent.

        Calling it again has no effect.
        """
        with self._lock:
            if self._event.is_set():
                return
            # Lock order is always child, then parent.
            if self._parent is not None:
                self._parent.remove_callback(self.cancel)
                self._parent = None
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        for callback in callbacks:
            callback()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError("context cancelled")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled. Returns False if the timeout expired first."""
        return self._event.wait(timeout)

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation, or immediately if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        """Forget a callback that has not run yet."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def child(self) -> "Context":
        return Context(parent=self)

    def with_timeout(self, seconds: float) -> "Context":
        """Return a child context that cancels itself after ``seconds``."""
        ctx = Context(parent=self)
        timer = threading.Timer(seconds, ctx.cancel)
        timer.daemon = True
        with ctx._lock:
            if ctx._event.is_set():
                return ctx
            ctx._timer = timer
        timer.start()
        logger.debug("Context deadline set to %.3fs", seconds)
        return ctx


def background() -> Context:
    """Return a fresh root context that is never cancelled unless asked to."""
    return Context()
