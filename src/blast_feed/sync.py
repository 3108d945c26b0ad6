"""Thread synchronization helpers shared by the run state and status loop."""

from collections.abc import Callable
import threading


class WaitGroup:
    """
    Wait for a collection of background tasks to finish.

    The owner calls ``add`` before starting each task, every task calls
    ``done`` when it exits, and ``wait`` blocks until the counter is zero.
    """

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    def add(self, delta: int = 1) -> None:
        with self._cond:
            count = self._count + delta
            if count < 0:
                raise ValueError("negative WaitGroup counter")
            self._count = count
            if count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until every registered task has called ``done``.

        Returns:
            bool: False if the timeout expired first.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)

    @property
    def count(self) -> int:
        with self._cond:
            return self._count


class CompletionSignal:
    """One-shot notification that record consumption has ended."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    def fire(self) -> None:
        """
        Raise the signal.

        Raises:
            RuntimeError: If the signal has already been fired.
        """
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("completion signal fired more than once")
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def is_set(self) -> bool:
        return self._event.is_set()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        """Forget a callback that has not run yet."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the signal fires, or now if it already has."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()
