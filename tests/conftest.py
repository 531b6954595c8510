"""
Shared fixtures and helpers for hmacproxy tests.
"""

from typing import List, Optional

import httpx
import pytest

from hmacproxy.handlers import new_http_proxy_handler
from hmacproxy.options import parse_options


def option_errors(msgs: List[str]) -> str:
    return "Invalid options:\n  " + "\n  ".join(msgs)


def make_handler(argv: List[str], transport: Optional[httpx.AsyncBaseTransport] = None):
    """
    Validate ``argv`` and build its handler.

    The command line requires --port, but the test servers never listen,
    so a placeholder port is added here.
    """
    opts = parse_options(["--port=1", *argv])
    opts.validate()
    return new_http_proxy_handler(opts, transport=transport)


@pytest.fixture
def file_root(tmp_path):
    """Directory with a couple of files to serve."""
    root = tmp_path / "www"
    root.mkdir()
    (root / "hello.txt").write_text("Hello, files!")
    (root / "index.html").write_text("<h1>index</h1>")
    return root
