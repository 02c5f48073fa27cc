"""Wall-clock timing of a single connection attempt."""

import time
from typing import Callable

from tlsping.models import AttemptOutcome


def time_operation(operation: Callable[[], None]) -> AttemptOutcome:
    """Measure how long operation takes to return.

    Only the call itself is timed. A failed call yields a zero duration
    together with the exception it raised.

    Args:
        operation: Zero-argument callable, e.g. Dialer.connect_and_close

    Returns:
        AttemptOutcome with the elapsed seconds, or the error
    """
    start = time.perf_counter()
    try:
        operation()
    except Exception as e:
        return AttemptOutcome(seconds=0.0, error=e)
    end = time.perf_counter()
    return AttemptOutcome(seconds=end - start)
