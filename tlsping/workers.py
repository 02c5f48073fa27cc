"""Worker performing one timed connection attempt in a background thread."""

import logging
import queue
from typing import Callable

from tlsping.models import AttemptOutcome
from tlsping.timing import time_operation

logger = logging.getLogger(__name__)


class AttemptWorker:
    """Runs one timed invocation of an operation and reports the outcome.

    Exactly one AttemptOutcome is put on the results queue per run() call,
    even if the thread is torn down by something time_operation does not catch.
    """

    def __init__(self, operation: Callable[[], None], index: int, results: queue.Queue):
        self.operation = operation
        self.index = index
        self.results = results

    def run(self):
        """Execute the attempt and report its outcome."""
        logger.debug("Worker starting: attempt=%d", self.index)

        outcome = AttemptOutcome(
            seconds=0.0, error=RuntimeError(f"attempt {self.index} did not complete")
        )
        try:
            outcome = time_operation(self.operation)
        except Exception as e:
            logger.exception(
                "Worker exception: attempt=%d, error=%s", self.index, str(e)
            )
            outcome = AttemptOutcome(seconds=0.0, error=e)
        finally:
            # Always report, the sampler counts on one outcome per worker
            self.results.put(outcome)

        if outcome.ok:
            logger.debug("Worker completed: attempt=%d, seconds=%.6f", self.index, outcome.seconds)
        else:
            logger.debug("Worker failed: attempt=%d, error=%s", self.index, outcome.error)
