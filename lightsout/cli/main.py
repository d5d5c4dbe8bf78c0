"""
CLI Main - Entry point for the `lightsout` command.

Usage:
    lightsout [--host HOST] [--port PORT] [--timeout SECONDS]
              [--keep-online] [--client rest|sdk] [--log-level LEVEL]

Flags override the corresponding environment variables.
"""

import argparse
import asyncio
import sys

import structlog

from .. import __version__
from ..config import CLIENT_STRATEGIES, ConfigError, LightsoutConfig
from ..logging import configure_logging
from .server import serve

logger = structlog.get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lightsout",
        description="Suspend this instance after a period without pings",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--host", help="Bind address (env: HOST)")
    parser.add_argument("--port", type=int, help="Port number (env: PORT)")
    parser.add_argument(
        "--timeout",
        type=int,
        dest="inactivity_timeout",
        help="Seconds without a ping before suspending (env: INACTIVITY_TIMEOUT)",
    )
    parser.add_argument(
        "--keep-online",
        action="store_const",
        const=True,
        dest="keep_online",
        help="Never suspend (env: LIBOPS_KEEP_ONLINE=yes)",
    )
    parser.add_argument(
        "--client",
        choices=CLIENT_STRATEGIES,
        help="Compute API strategy (env: LIGHTSOUT_CLIENT)",
    )
    parser.add_argument("--log-level", help="Log level (env: LOG_LEVEL)")
    return parser


def load_config(args: argparse.Namespace) -> LightsoutConfig:
    """Environment config with command line overrides applied."""
    return LightsoutConfig.from_env().with_overrides(
        host=args.host,
        port=args.port,
        inactivity_timeout=args.inactivity_timeout,
        keep_online=args.keep_online,
        client=args.client,
        log_level=args.log_level.upper() if args.log_level else None,
    )


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    parsed = create_parser().parse_args(args)

    try:
        config = load_config(parsed)
    except ConfigError as e:
        print(f"lightsout: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level)
    logger.info(
        "lightsout_starting",
        version=__version__,
        port=config.port,
        inactivity_timeout=config.inactivity_timeout,
        keep_online=config.keep_online,
        client=config.client,
    )

    return asyncio.run(serve(config))


if __name__ == "__main__":
    sys.exit(main())
