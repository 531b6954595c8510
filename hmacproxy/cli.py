"""
Command Line Entry Point
========================
Parses flags, validates them, and runs the proxy.
"""

import argparse
import sys
from typing import Optional, Sequence

from . import config
from .errors import InvalidOptionsError
from .handlers import new_http_proxy_handler
from .logging import setup_logging
from .options import options_from_namespace, register_command_line_options
from .server import run_server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hmacproxy",
        description="Sign requests with an HMAC signature, or authenticate signed requests.",
    )
    register_command_line_options(parser)
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument(
        "--log-format",
        choices=("json", "console"),
        default=config.LOG_FORMAT,
        help="Log output format (default: %(default)s)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the proxy; returns the process exit status."""
    args = build_parser().parse_args(argv)
    opts = options_from_namespace(args)
    try:
        opts.validate()
    except InvalidOptionsError as e:
        print(e, file=sys.stderr)
        return 1

    setup_logging(
        service_name=config.SERVICE_NAME,
        level=args.log_level,
        json_output=args.log_format == "json",
    )
    handler, description = new_http_proxy_handler(opts)
    run_server(handler, opts, description)
    return 0
