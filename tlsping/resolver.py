"""Address resolution with reachability probing."""

import logging
import socket

from tlsping.errors import AddressFormatError, ResolutionError
from tlsping.models import ResolvedTarget

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 3.0  # seconds
DEFAULT_HOST = "localhost"
MAX_PORT = 65535


def split_host_port(address: str) -> tuple[str, str]:
    """Split "host:port", "[v6addr]:port" or ":port" into host and port (pure function).

    The host may be empty. IPv6 literals must be bracketed.

    Args:
        address: Address string to split

    Returns:
        Tuple of (host, port), both as strings

    Raises:
        AddressFormatError: If the address is not of the form host:port

    Examples:
        >>> split_host_port("example.com:443")
        ('example.com', '443')
        >>> split_host_port("[::1]:8443")
        ('::1', '8443')
    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise AddressFormatError(address, f"missing ']' in address '{address}'")
        host = address[1:end]
        rest = address[end + 1 :]
        if not rest.startswith(":"):
            raise AddressFormatError(address, f"missing port in address '{address}'")
        port = rest[1:]
    else:
        host, sep, port = address.rpartition(":")
        if not sep:
            raise AddressFormatError(address, f"missing port in address '{address}'")
        if ":" in host:
            raise AddressFormatError(address, f"too many colons in address '{address}'")

    if any(c in host for c in "[]") or any(c in port for c in "[]"):
        raise AddressFormatError(address, f"unexpected bracket in address '{address}'")
    if not port:
        raise AddressFormatError(address, f"missing port in address '{address}'")
    if port.isascii() and port.isdigit() and int(port) > MAX_PORT:
        raise AddressFormatError(address, f"invalid port '{port}' in address '{address}'")
    return host, port


def lookup_host(host: str, port: str, address: str) -> list[str]:
    """Resolve a host name to its IP addresses, in resolver order, without duplicates."""
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(address, f"lookup {host} failed", cause=e) from e

    candidates: list[str] = []
    for _family, _type, _proto, _canonname, sockaddr in infos:
        ip = sockaddr[0]
        if ip not in candidates:
            candidates.append(ip)

    if not candidates:
        raise ResolutionError(address, f"lookup {host}: no addresses found")
    return candidates


def probe(ip: str, port: str, timeout: float = PROBE_TIMEOUT) -> bool:
    """Return True if a plain TCP connection to ip:port can be established."""
    try:
        with socket.create_connection((ip, port), timeout=timeout):
            return True
    except OSError as e:
        logger.debug("Probe failed: ip=%s, port=%s, error=%s", ip, port, e)
        return False


def resolve_address(
    address: str,
    probe_timeout: float = PROBE_TIMEOUT,
    ip_override: str | None = None,
) -> ResolvedTarget:
    """Resolve address to the target used by every attempt of a run.

    The host name is looked up once. If it has several addresses, the first
    one accepting a TCP connection within probe_timeout is used. When none
    of them does, the first address is returned anyway and the timed
    attempts report the actual failure.

    Args:
        address: Target of the form "host:port"; an empty host means localhost
        probe_timeout: Timeout in seconds for each reachability probe
        ip_override: IP address to use instead of looking the host up

    Returns:
        ResolvedTarget with host name, chosen IP and the unchanged port

    Raises:
        AddressFormatError: If address does not split into host and port
        ResolutionError: If the lookup fails or returns no address
    """
    host, port = split_host_port(address)
    if not host:
        host = DEFAULT_HOST

    if ip_override:
        logger.debug("Using IP override: host=%s, ip=%s", host, ip_override)
        return ResolvedTarget(host=host, ip=ip_override, port=port)

    candidates = lookup_host(host, port, address)
    logger.debug("Resolved: host=%s, candidates=%s", host, candidates)

    for ip in candidates:
        if probe(ip, port, timeout=probe_timeout):
            logger.debug("Reachable: host=%s, ip=%s, port=%s", host, ip, port)
            return ResolvedTarget(host=host, ip=ip, port=port)

    logger.debug("No candidate reachable, using first: host=%s, ip=%s", host, candidates[0])
    return ResolvedTarget(host=host, ip=candidates[0], port=port)
