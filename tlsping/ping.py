"""Measurement entry point: time repeated TCP or TLS connections to one address."""

import logging

from tlsping.dialers import select_dialer
from tlsping.models import MeasurementConfig, MeasurementResult
from tlsping.resolver import resolve_address
from tlsping.sampler import ConcurrentSampler
from tlsping.stats import summarize

logger = logging.getLogger(__name__)


def measure(address: str, config: MeasurementConfig | None = None) -> MeasurementResult:
    """Connect config.count times to address and summarize the connection times.

    The host name is resolved once before timing starts and a single IP
    address is used for every attempt, so neither the DNS lookup nor the
    reachability probing is included in the statistics. Attempts run
    concurrently. If any of them fails the whole run fails; statistics
    are never computed over a subset of attempts.

    Args:
        address: Target of the form "host:port"; an empty host means localhost
        config: Measurement settings, defaults to a single TLS connection

    Returns:
        MeasurementResult with min/max/average/stddev in seconds

    Raises:
        AddressFormatError: If address is not of the form host:port
        ResolutionError: If the host name does not resolve
        ConnectError: If a TCP connection attempt fails
        TLSHandshakeError: If a TLS handshake or certificate check fails
    """
    if config is None:
        config = MeasurementConfig()

    target = resolve_address(address, ip_override=config.ip_override)
    dialer = select_dialer(config, target, address=address)

    logger.debug(
        "Measuring: address=%s, ip=%s, mode=%s, count=%d",
        address,
        target.ip,
        config.connection_mode,
        config.count,
    )
    durations = ConcurrentSampler(dialer.connect_and_close, config.count).run()
    summary = summarize(durations)

    return MeasurementResult(
        host=target.host,
        ip=target.ip,
        address=address,
        count=len(durations),
        connection=config.connection_mode,
        min=summary.min,
        max=summary.max,
        average=summary.average,
        stddev=summary.stddev,
    )
