"""Concurrent sampler: fans out timed attempts and collects their durations."""

import logging
import queue
import threading
from typing import Callable

from tlsping.workers import AttemptWorker

logger = logging.getLogger(__name__)

# Put on the results queue once every worker has finished
_CLOSED = object()


class ConcurrentSampler:
    """Runs a fixed number of timed attempts in parallel.

    Key features:
    - One thread per attempt, no pooling or throttling beyond count
    - A coordinator thread joins all workers, then closes the result queue
    - First error wins: the caller gets it as soon as it is dequeued
    - Workers still in flight after a failure finish in the background and
      their outcomes are dropped

    Workers share nothing but the operation, which must be safe to call
    concurrently, and the result queue.
    """

    def __init__(self, operation: Callable[[], None], count: int):
        """Initialize the sampler.

        Args:
            operation: Zero-argument connect-and-close operation to time
            count: Number of attempts to run, at least 1
        """
        if count < 1:
            raise ValueError("count must be at least 1")

        self.operation = operation
        self.count = count

    def run(self) -> list[float]:
        """Run all attempts and return their durations in arrival order.

        Returns:
            List of exactly count durations in seconds

        Raises:
            Exception: The error of the first failed attempt to be dequeued
        """
        # Room for every outcome plus the close marker, so no producer ever blocks
        results: queue.Queue = queue.Queue(maxsize=self.count + 1)

        threads = []
        for index in range(self.count):
            worker = AttemptWorker(self.operation, index, results)
            thread = threading.Thread(
                target=worker.run, name=f"tlsping-attempt-{index}", daemon=True
            )
            threads.append(thread)

        for thread in threads:
            thread.start()
        logger.debug("Started %d workers", len(threads))

        coordinator = threading.Thread(
            target=self._close_when_done,
            args=(threads, results),
            name="tlsping-coordinator",
            daemon=True,
        )
        coordinator.start()

        durations: list[float] = []
        while True:
            outcome = results.get()
            if outcome is _CLOSED:
                break
            if not outcome.ok:
                logger.debug(
                    "Attempt failed after %d successes, discarding the rest: %s",
                    len(durations),
                    outcome.error,
                )
                raise outcome.error
            durations.append(outcome.seconds)

        return durations

    @staticmethod
    def _close_when_done(threads: list[threading.Thread], results: queue.Queue):
        """Wait for every worker, then mark the result queue as closed."""
        for thread in threads:
            thread.join()
        results.put(_CLOSED)
