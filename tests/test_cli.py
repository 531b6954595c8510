"""
Tests for the command line entry point.
"""

import pytest

from hmacproxy import cli
from hmacproxy.options import HandlerMode


@pytest.fixture
def served(monkeypatch):
    """Record what main() would serve instead of starting uvicorn."""
    calls = []
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(
        cli,
        "run_server",
        lambda handler, opts, description: calls.append((handler, opts, description)),
    )
    return calls


def test_invalid_options_exit_non_zero_with_full_report(served, capsys):
    status = cli.main(["--port=-1", "--digest=unsupported"])

    assert status == 1
    assert served == []
    err = capsys.readouterr().err
    assert err.startswith("Invalid options:\n")
    for msg in (
        "neither upstream, file-root, nor auth specified",
        "port must be specified and greater than zero",
        "unsupported digest: unsupported",
        "no secret specified",
        "no signature header specified",
    ):
        assert f"  {msg}" in err


def test_valid_options_start_the_server(served):
    status = cli.main([
        "--port=8080",
        "--secret=foobar",
        "--sign-header=Test-Signature",
        "--auth",
    ])

    assert status == 0
    (handler, opts, description), = served
    assert opts.mode == HandlerMode.AUTH_ONLY
    assert description == "responding Accepted/Unauthorized for auth queries"


def test_log_format_is_restricted():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--log-format=xml"])
