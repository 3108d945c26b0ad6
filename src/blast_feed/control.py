"""Operator input handling: interactive rate changes."""

import logging
import math
import threading

from blast_feed.context import Context
from blast_feed.state import RunState
from blast_feed.status import StatusReporter

logger = logging.getLogger(__name__)


class RateController:
    """
    Apply rate changes typed by the operator.

    A blank line shows the current status, a number replaces the target rate.
    """

    def __init__(self, state: RunState, reporter: StatusReporter) -> None:
        self.state = state
        self.reporter = reporter

    def handle_line(self, line: str) -> bool:
        """
        Apply one line of operator input.

        Returns:
            bool: True if the rate was changed.
        """
        text = line.strip()
        if text == "":
            self.reporter.print_status(final=False)
            return False

        try:
            rate = float(text)
        except ValueError:
            self.reporter.println(f"Invalid rate {text!r}. Enter a number of requests / second.")
            return False

        if not math.isfinite(rate) or rate < 0:
            self.reporter.println(f"Invalid rate {text!r}. Rate must be a non-negative number.")
            return False

        previous = self.state.rate
        self.state.rate = rate
        logger.info("Rate changed from %.0f to %.0f requests / second", previous, rate)
        self.reporter.printf("Rate changed to %.0f requests / second.\n", rate)
        return True

    def run(self, context: Context) -> None:
        """
        Read operator input until end of input, cancellation or completion.

        Cancellation is checked between lines; a blocked read is not interrupted.
        """
        reader = self.state.input_reader
        if reader is None:
            return

        for line in reader:
            if context.cancelled or self.state.completion.is_set():
                break
            self.handle_line(line)
        logger.debug("Rate input loop finished")

    def start(self, context: Context) -> threading.Thread | None:
        """Run the input loop in a daemon thread, if input is configured."""
        if self.state.input_reader is None:
            return None
        thread = threading.Thread(
            target=self.run,
            args=(context,),
            daemon=True,
            name="rate-input",
        )
        thread.start()
        return thread
