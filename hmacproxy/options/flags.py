"""
Command Line Flags
==================
Registers proxy options on an argparse parser and builds ProxyOptions from
the parsed namespace. Defaults come from hmacproxy.config.
"""

import argparse
from typing import Optional, Sequence

from .. import config
from .models import DigestSpec, ProxyOptions, UpstreamURL, parse_header_list


def register_command_line_options(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add every proxy option to ``parser``."""
    parser.add_argument(
        "--port",
        type=int,
        default=config.DEFAULT_PORT,
        help="Port on which to listen for requests",
    )
    parser.add_argument(
        "--auth",
        action="store_true",
        default=False,
        help="Authenticate requests rather than signing them",
    )
    parser.add_argument(
        "--digest",
        default=config.DEFAULT_DIGEST,
        help="Hash algorithm to use when signing requests (default: %(default)s)",
    )
    parser.add_argument(
        "--secret",
        default=config.DEFAULT_SECRET,
        help="Secret key",
    )
    parser.add_argument(
        "--sign-header",
        default=config.DEFAULT_SIGN_HEADER,
        help="Header containing request signature",
    )
    parser.add_argument(
        "--headers",
        type=parse_header_list,
        default=parse_header_list(config.DEFAULT_HEADERS),
        help="Headers to factor into the signature, comma-separated",
    )
    parser.add_argument(
        "--upstream",
        default=config.DEFAULT_UPSTREAM,
        help="Signed/authenticated requests are proxied to this server",
    )
    parser.add_argument(
        "--file-root",
        default=config.DEFAULT_FILE_ROOT,
        help="Root of file system from which to serve documents",
    )
    parser.add_argument(
        "--ssl-cert",
        default=config.DEFAULT_SSL_CERT,
        help="Path to the server's SSL certificate",
    )
    parser.add_argument(
        "--ssl-key",
        default=config.DEFAULT_SSL_KEY,
        help="Path to the key for --ssl-cert",
    )
    return parser


def options_from_namespace(args: argparse.Namespace) -> ProxyOptions:
    """Build unvalidated ProxyOptions from parsed arguments."""
    return ProxyOptions(
        port=args.port,
        auth=args.auth,
        digest=DigestSpec(name=args.digest),
        secret=args.secret,
        sign_header=args.sign_header,
        headers=list(args.headers),
        upstream=UpstreamURL(raw=args.upstream),
        file_root=args.file_root,
        ssl_cert=args.ssl_cert,
        ssl_key=args.ssl_key,
    )


def parse_options(argv: Optional[Sequence[str]] = None) -> ProxyOptions:
    """Parse ``argv`` into unvalidated ProxyOptions."""
    parser = register_command_line_options(argparse.ArgumentParser(prog="hmacproxy"))
    return options_from_namespace(parser.parse_args(argv))
