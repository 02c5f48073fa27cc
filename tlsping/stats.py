"""Summary statistics over connection durations."""

import statistics
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class SummaryStats:
    """Min, max, mean and population standard deviation, in seconds."""

    min: float
    max: float
    average: float
    stddev: float


def summarize(durations: Iterable[float]) -> SummaryStats:
    """Reduce durations to summary statistics (pure function).

    The standard deviation is the population one (divides by N, not N-1).
    The result does not depend on the order of the input.

    Args:
        durations: Non-empty sequence of durations in seconds

    Returns:
        SummaryStats for the given durations

    Raises:
        ValueError: If durations is empty

    Examples:
        >>> summarize([1.0, 2.0, 3.0])
        SummaryStats(min=1.0, max=3.0, average=2.0, stddev=0.816496580927726)
    """
    # Sorted so floating point accumulation is independent of input order
    values = sorted(float(d) for d in durations)
    if not values:
        raise ValueError("cannot summarize an empty sequence of durations")

    return SummaryStats(
        min=values[0],
        max=values[-1],
        average=statistics.mean(values),
        stddev=statistics.pstdev(values),
    )
