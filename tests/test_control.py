"""Tests for RateController."""

import io

from blast_feed.context import Context
from blast_feed.control import RateController
from blast_feed.state import RunState
from blast_feed.status import StatusReporter


def make_controller(
    input_text: str = "", rate: float = 10
) -> tuple[RateController, RunState, io.StringIO]:
    out = io.StringIO()
    state = RunState(out_writer=out, input_reader=io.StringIO(input_text), rate=rate)
    reporter = StatusReporter(state, lambda: "status\n")
    return RateController(state, reporter), state, out


def test_handle_line_sets_rate() -> None:
    """Test that a number replaces the target rate."""
    controller, state, out = make_controller()

    assert controller.handle_line("250\n") is True

    assert state.rate == 250.0
    assert out.getvalue() == "Rate changed to 250 requests / second.\n"


def test_handle_blank_line_shows_status() -> None:
    """Test that a blank line prints status and the prompt."""
    controller, state, out = make_controller(rate=10)

    assert controller.handle_line("\n") is False

    assert state.rate == 10
    assert out.getvalue().startswith("status\n\nCurrent rate is 10 requests / second.")


def test_handle_invalid_rate() -> None:
    """Test that non-numeric and negative input leaves the rate unchanged."""
    controller, state, out = make_controller(rate=10)

    assert controller.handle_line("fast") is False
    assert controller.handle_line("-5") is False
    assert controller.handle_line("nan") is False

    assert state.rate == 10
    assert out.getvalue().count("Invalid rate") == 3


def test_run_reads_until_end_of_input() -> None:
    """Test that run applies every line of input."""
    controller, state, _ = make_controller("5\n\n7.5\n")

    controller.run(Context())

    assert state.rate == 7.5


def test_run_stops_after_completion() -> None:
    """Test that no input is applied once the run has completed."""
    controller, state, _ = make_controller("5\n")
    state.completion.fire()

    controller.run(Context())

    assert state.rate == 10


def test_start_without_input() -> None:
    """Test that no input thread is started without an input source."""
    state = RunState()
    controller = RateController(state, StatusReporter(state, lambda: ""))

    assert controller.start(Context()) is None


def test_start_runs_in_background() -> None:
    """Test the background input thread."""
    controller, state, _ = make_controller("42\n")

    thread = controller.start(Context())
    assert thread is not None
    thread.join(timeout=5)

    assert state.rate == 42.0
