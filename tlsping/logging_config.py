"""Logging configuration for tlsping."""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(default_level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure process-wide logging.

    Respects TLSPING_LOG_LEVEL environment variable (default: WARNING, so
    measurement output is not mixed with log lines). Logs to stderr with
    timestamp, level, module name, and message.

    Environment Variables:
        TLSPING_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Examples:
        # Trace resolution, probing and every attempt
        $ TLSPING_LOG_LEVEL=DEBUG tlsping -c 5 example.com:443
    """
    log_level_str = os.environ.get("TLSPING_LOG_LEVEL", default_level).upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    fallback = log_level_map.get(default_level.upper(), logging.WARNING)
    log_level = log_level_map.get(log_level_str, fallback)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured: level=%s", logging.getLevelName(log_level))
