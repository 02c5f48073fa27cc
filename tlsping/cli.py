"""Command line interface for tlsping."""

import argparse
import logging
import sys

from tlsping.errors import MeasurementError, TrustRootError
from tlsping.formatting import render_json, render_text
from tlsping.models import MeasurementConfig
from tlsping.ping import measure
from tlsping.trust import load_trust_roots
from tlsping.version import __version__

logger = logging.getLogger(__name__)

APP_NAME = "tlsping"
DEFAULT_COUNT = 1
MAX_COUNT = 100

DESCRIPTION = """\
Measure the time needed to establish TLS connections to a server.

By default a TLS handshake is performed and the server certificate is
verified against the host's root certificate authorities. The host name is
resolved once and its resolution time is not part of the measurement."""

EPILOG = f"""\
examples:
  {APP_NAME} example.com:443
  {APP_NAME} -c 10 --tcponly 192.0.2.10:443
  {APP_NAME} --json --ca ca.pem internal.example.com:8443"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("address", metavar="host:port", help="server to connect to")
    parser.add_argument(
        "-c",
        dest="count",
        type=int,
        default=DEFAULT_COUNT,
        help=f"number of connections to establish (default {DEFAULT_COUNT}, max {MAX_COUNT})",
    )
    parser.add_argument(
        "--tcponly",
        action="store_true",
        help="only establish the TCP connection, without TLS handshake",
    )
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="do not verify the server certificate",
    )
    parser.add_argument(
        "--ca",
        metavar="FILE",
        default="",
        help="PEM file of CA certificates to verify the server with, instead of the host's",
    )
    parser.add_argument(
        "--ip",
        default=None,
        help="connect to this IP address instead of resolving the host name",
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run tlsping with the given arguments and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    count = args.count if args.count > 0 else DEFAULT_COUNT
    if count > MAX_COUNT:
        parser.error(f"number of allowed connections cannot exceed {MAX_COUNT}")

    try:
        trust_roots = load_trust_roots(args.ca)
        config = MeasurementConfig(
            count=count,
            tcp_only=args.tcponly,
            skip_verify=args.insecure,
            trust_roots=trust_roots,
            ip_override=args.ip,
        )
    except (TrustRootError, ValueError) as e:
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return 1

    try:
        result = measure(args.address, config)
    except MeasurementError as e:
        logger.debug("Measurement failed: address=%s", args.address, exc_info=True)
        print(f"{APP_NAME}: error connecting to '{args.address}': {e}", file=sys.stderr)
        return 1

    if args.json:
        print(render_json(result))
    else:
        print(render_text(result))
    return 0
