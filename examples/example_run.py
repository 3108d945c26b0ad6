"""Example: Feeding inline records to a toy engine with live status output."""

import sys
import threading
import time

from blast_feed import Context, RunState, StatusReporter, open_data
from blast_feed.control import RateController

DATA = """user_id,action
1,login
2,search
3,checkout
4,logout
"""

ctx = Context()
sent = 0

with RunState(out_writer=sys.stdout, input_reader=sys.stdin, rate=2) as state:
    open_data(state, ctx, DATA, headers=True)
    print("Headers:", state.headers)

    reporter = StatusReporter(state, lambda: f"Sent {sent} requests\n", interval=1.0)
    reporter.start(ctx)
    RateController(state, reporter).start(ctx)

    def engine() -> None:
        global sent
        while (record := state.read_record()) is not None:
            print("Request:", dict(zip(state.headers, record)))
            sent += 1
            time.sleep(1 / max(state.rate, 0.1))
        state.completion.fire()

    worker = threading.Thread(target=engine)
    worker.start()
    worker.join()

    reporter.print_status(final=True)
    state.shutdown.wait()
