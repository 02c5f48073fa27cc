"""Entry point for the tlsping command."""

import sys

from tlsping.cli import main
from tlsping.logging_config import configure_logging


def run():
    """Configure logging and run the command line."""
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
