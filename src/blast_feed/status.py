"""Background status loop: periodic progress reports and the rate prompt."""

from collections.abc import Callable
from enum import Enum
import logging
import threading
import time
from typing import IO

from blast_feed.context import Context
from blast_feed.state import RunState

logger = logging.getLogger(__name__)

STATUS_INTERVAL = 10.0

RATE_PROMPT = """
Current rate is %.0f requests / second. Enter a new rate or press enter to view status.

Rate?
"""


class LoopState(Enum):
    """Lifecycle of the status loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class StatusReporter:
    """
    Report progress of a run to its output sink.

    Every write is a no-op when the run is quiet or has no output sink, and
    write failures on the sink are logged and dropped.
    """

    def __init__(
        self,
        state: RunState,
        snapshot: Callable[[], str],
        interval: float = STATUS_INTERVAL,
    ) -> None:
        """
        Initialize the reporter.

        Args:
            state: Run state whose sink, input and rate are reported.
            snapshot: Returns the formatted progress text of the engine.
            interval: Seconds between periodic reports (default: 10).

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.state = state
        self.snapshot = snapshot
        self.interval = interval
        self.loop_state = LoopState.IDLE
        self._write_lock = threading.Lock()

    def start(self, context: Context) -> threading.Thread | None:
        """
        Start the status loop in a background thread.

        The loop stops when ``context`` is cancelled or the run's completion
        signal fires, whichever comes first. Nothing is started when
        reporting is disabled or the loop was already started.

        Returns:
            threading.Thread | None: The loop thread, or None if not started.
        """
        if not self.state.reporting or self.loop_state is not LoopState.IDLE:
            return None

        wake = threading.Event()
        context.add_callback(wake.set)
        self.state.completion.add_callback(wake.set)

        self.state.shutdown.add(1)
        thread = threading.Thread(
            target=self._run,
            args=(context, wake),
            daemon=True,
            name="status-loop",
        )
        self.loop_state = LoopState.RUNNING
        thread.start()
        logger.debug("Status loop started (interval=%.1fs)", self.interval)
        return thread

    def _run(self, context: Context, wake: threading.Event) -> None:
        try:
            next_tick = time.monotonic() + self.interval
            while True:
                # Termination wins over a tick that is due at the same time.
                if context.cancelled or self.state.completion.is_set():
                    return

                now = time.monotonic()
                if now < next_tick:
                    wake.wait(next_tick - now)
                    continue

                self.print_status(final=False)
                while next_tick <= time.monotonic():
                    next_tick += self.interval
        finally:
            context.remove_callback(wake.set)
            self.state.completion.remove_callback(wake.set)
            self.loop_state = LoopState.STOPPED
            self.println("Exiting status loop")
            self.state.shutdown.done()

    def write_status(self, writer: IO[str]) -> None:
        """Write the current progress snapshot to ``writer``."""
        writer.write(self.snapshot())

    def print_status(self, final: bool = False) -> None:
        """
        Report progress to the output sink.

        Non-final reports are followed by the rate prompt when the run
        accepts operator input. A failing snapshot is logged and skipped.
        """
        if not self.state.reporting:
            return

        try:
            text = self.snapshot()
        except Exception:
            logger.exception("Status snapshot failed")
            return

        self._write(text)

        if not final:
            self.print_rate_prompt()

    def print_rate_prompt(self) -> None:
        if self.state.input_reader is None:
            return
        self.printf(RATE_PROMPT, self.state.rate)

    def println(self, *args: object) -> None:
        self._write(" ".join(str(a) for a in args) + "\n")

    def printf(self, fmt: str, *args: object) -> None:
        self._write(fmt % args)

    def _write(self, text: str) -> None:
        writer = self.state.out_writer
        if self.state.quiet or writer is None:
            return
        with self._write_lock:
            try:
                writer.write(text)
                flush = getattr(writer, "flush", None)
                if flush is not None:
                    flush()
            except (OSError, ValueError) as e:
                logger.debug("Dropped status output: %s", e)
