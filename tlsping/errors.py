"""Exceptions raised while measuring connection latency.

Every failure of a measurement run surfaces as a subclass of
MeasurementError carrying the target address and, where there is one, the
underlying socket or SSL exception.
"""


class MeasurementError(Exception):
    """Base class for errors that abort a measurement run.

    Attributes:
        address: The address the run was targeting.
        cause: The lower-level exception that triggered the error, if any.
    """

    def __init__(self, address: str, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.address = address
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class AddressFormatError(MeasurementError):
    """Raised when an address does not split into host and port."""


class ResolutionError(MeasurementError):
    """Raised when the host name resolves to no address."""


class ConnectError(MeasurementError):
    """Raised when a timed TCP dial fails (refused, timed out, unreachable)."""


class TLSHandshakeError(MeasurementError):
    """Raised when a TLS handshake or certificate verification fails."""


class TrustRootError(Exception):
    """Raised when a CA certificate bundle cannot be loaded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"error loading CA certificates from '{path}': {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "AddressFormatError",
    "ConnectError",
    "MeasurementError",
    "ResolutionError",
    "TLSHandshakeError",
    "TrustRootError",
]
