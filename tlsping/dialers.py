"""Dial strategies: the connect-and-close operation timed by each attempt."""

import logging
import socket
import ssl
import time
from typing import Protocol

from tlsping.errors import ConnectError, TLSHandshakeError
from tlsping.models import MeasurementConfig, ResolvedTarget

logger = logging.getLogger(__name__)

DIAL_TIMEOUT = 5.0  # seconds, connect and handshake together
MIN_HANDSHAKE_TIMEOUT = 0.001


class Dialer(Protocol):
    """Protocol for the connection operation measured by every attempt."""

    def connect_and_close(self) -> None:
        """Establish one connection to the target and close it immediately."""
        ...


class TCPDialer:
    """Opens a plain TCP connection to the resolved target."""

    def __init__(self, target: ResolvedTarget, address: str = "", timeout: float = DIAL_TIMEOUT):
        self.target = target
        self.address = address or f"{target.host}:{target.port}"
        self.timeout = timeout

    def connect_and_close(self) -> None:
        """Connect and close at once.

        Raises:
            ConnectError: If the TCP connection cannot be established
        """
        _connect(self.target, self.address, self.timeout).close()


class TLSDialer:
    """Opens a TCP connection to the resolved target and performs a TLS handshake.

    The SSL context is built once per run and shared read-only by every
    attempt, so instances may be called from several threads at once.
    """

    def __init__(
        self,
        target: ResolvedTarget,
        context: ssl.SSLContext,
        address: str = "",
        timeout: float = DIAL_TIMEOUT,
    ):
        self.target = target
        self.context = context
        self.address = address or f"{target.host}:{target.port}"
        self.timeout = timeout

    def connect_and_close(self) -> None:
        """Connect, complete the handshake and close.

        Raises:
            ConnectError: If the TCP connection cannot be established
            TLSHandshakeError: If the handshake or certificate verification fails
        """
        deadline = time.monotonic() + self.timeout
        sock = _connect(self.target, self.address, self.timeout)
        try:
            # Connect and handshake share one time budget
            sock.settimeout(max(deadline - time.monotonic(), MIN_HANDSHAKE_TIMEOUT))
            with self.context.wrap_socket(sock, server_hostname=self.target.host):
                pass
        except (ssl.SSLError, OSError, ValueError) as e:
            # ValueError also covers host names that cannot be IDNA-encoded
            raise TLSHandshakeError(
                self.address, f"TLS handshake with {_format_endpoint(self.target)} failed", cause=e
            ) from e
        finally:
            sock.close()


def _connect(target: ResolvedTarget, address: str, timeout: float) -> socket.socket:
    try:
        return socket.create_connection(target.endpoint, timeout=timeout)
    except OSError as e:
        raise ConnectError(address, f"dial tcp {_format_endpoint(target)} failed", cause=e) from e


def _format_endpoint(target: ResolvedTarget) -> str:
    if ":" in target.ip:
        return f"[{target.ip}]:{target.port}"
    return f"{target.ip}:{target.port}"


def build_tls_context(config: MeasurementConfig) -> ssl.SSLContext:
    """Build the client SSL context for a run.

    Custom trust roots replace the platform's default set. With skip_verify
    neither the certificate chain nor the host name is checked.
    """
    if config.trust_roots:
        context = ssl.create_default_context(cadata=config.trust_roots)
    else:
        context = ssl.create_default_context()

    if config.skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def select_dialer(config: MeasurementConfig, target: ResolvedTarget, address: str = "") -> Dialer:
    """Pick the dial strategy for the whole run based on config.tcp_only."""
    if config.tcp_only:
        logger.debug("Dial strategy: TCP, target=%s", _format_endpoint(target))
        return TCPDialer(target, address=address)

    logger.debug(
        "Dial strategy: TLS, target=%s, server_name=%s, skip_verify=%s, custom_roots=%s",
        _format_endpoint(target),
        target.host,
        config.skip_verify,
        config.trust_roots is not None,
    )
    return TLSDialer(target, build_tls_context(config), address=address)
