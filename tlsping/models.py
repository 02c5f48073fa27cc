"""Data models for tlsping measurements."""

import ipaddress
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MeasurementConfig:
    """Settings for one measurement run.

    Built once by the caller and never mutated while the run is in progress.
    """

    count: int = 1
    tcp_only: bool = False
    skip_verify: bool = False
    trust_roots: str | None = None  # PEM bundle; None means platform roots
    ip_override: str | None = None

    def __post_init__(self):
        """Clamp the attempt count and validate the IP override."""
        if self.count <= 0:
            object.__setattr__(self, "count", 1)
        if self.ip_override:
            try:
                ipaddress.ip_address(self.ip_override)
            except ValueError:
                raise ValueError(
                    f"ip_override is not an IP address: {self.ip_override!r}"
                ) from None

    @property
    def connection_mode(self) -> str:
        """Return "TCP" or "TLS" depending on the dial strategy in use."""
        return "TCP" if self.tcp_only else "TLS"


@dataclass(frozen=True)
class ResolvedTarget:
    """Host name, reachable IP address and port used for every attempt."""

    host: str
    ip: str
    port: str

    @property
    def endpoint(self) -> tuple[str, int | str]:
        """Address pair suitable for socket.create_connection()."""
        if self.port.isascii() and self.port.isdigit():
            return (self.ip, int(self.port))
        return (self.ip, self.port)
        return (self.ip, port)


@dataclass
class AttemptOutcome:
    """Result of a single timed connection attempt."""

    seconds: float
    error: BaseException | None = None

    def __post_init__(self):
        """A failed attempt never carries a duration."""
        if self.error is not None:
            self.seconds = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MeasurementResult:
    """Summary of a completed measurement run. Durations are in seconds."""

    host: str
    ip: str
    address: str
    count: int
    connection: str
    min: float
    max: float
    average: float
    stddev: float

    def to_dict(self) -> dict[str, Any]:
        """Return the structured record used for JSON output."""
        return {
            "host": self.host,
            "ip": self.ip,
            "address": self.address,
            "connection": self.connection,
            "count": self.count,
            "min": self.min,
            "max": self.max,
            "average": self.average,
            "stddev": self.stddev,
            "error": "",
        }
