"""Loading of custom certificate authority bundles."""

import logging
import ssl

from tlsping.errors import TrustRootError

logger = logging.getLogger(__name__)


def load_trust_roots(path: str | None) -> str | None:
    """Read a PEM bundle of CA certificates.

    Args:
        path: File holding one or more PEM certificates; empty for none

    Returns:
        The PEM text, or None when no path was given

    Raises:
        TrustRootError: If the file cannot be read or holds no usable certificate
    """
    if not path:
        return None

    try:
        with open(path, encoding="ascii") as f:
            pem = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TrustRootError(path, str(e)) from e

    if "-----BEGIN CERTIFICATE-----" not in pem:
        raise TrustRootError(path, "no PEM certificate found")

    # Parse once here so a broken bundle is reported before any connection
    scratch = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    try:
        scratch.load_verify_locations(cadata=pem)
    except (ssl.SSLError, ValueError) as e:
        raise TrustRootError(path, f"invalid certificate data: {e}") from e

    logger.debug(
        "Loaded CA certificates: path=%s, count=%d", path, scratch.cert_store_stats()["x509"]
    )
    return pem
