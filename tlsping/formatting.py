"""Rendering of measurement results as text or JSON."""

import json

from tlsping.models import MeasurementResult

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE


def format_duration(seconds: float) -> str:
    """Format a duration the way Go's time.Duration prints (pure function).

    The value is rounded to whole nanoseconds and printed at full precision
    with the largest unit below one second, or as h/m/s above it.

    Examples:
        >>> format_duration(0.012345678)
        '12.345678ms'
        >>> format_duration(2.5)
        '2.5s'
        >>> format_duration(90.5)
        '1m30.5s'
        >>> format_duration(0)
        '0s'
    """
    ns = round(seconds * SECOND)
    if ns == 0:
        return "0s"

    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < MICROSECOND:
        return f"{sign}{ns}ns"
    if ns < MILLISECOND:
        return f"{sign}{_fraction(ns, MICROSECOND)}µs"
    if ns < SECOND:
        return f"{sign}{_fraction(ns, MILLISECOND)}ms"

    hours, rest = divmod(ns, HOUR)
    minutes, rest = divmod(rest, MINUTE)
    text = f"{_fraction(rest, SECOND)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{text}"
    if minutes:
        return f"{sign}{minutes}m{text}"
    return f"{sign}{text}"


def _fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def render_text(result: MeasurementResult) -> str:
    """Render the two-line plain text summary."""
    header = (
        f"{result.connection} connection to {result.address} ({result.ip}) "
        f"({result.count} connections)"
    )
    stats = "/".join(
        format_duration(value)
        for value in (result.min, result.average, result.max, result.stddev)
    )
    return f"{header}\nmin/avg/max/stddev = {stats}"


def render_json(result: MeasurementResult) -> str:
    """Render the result as a compact JSON object."""
    return json.dumps(result.to_dict(), separators=(",", ":"), ensure_ascii=False)
