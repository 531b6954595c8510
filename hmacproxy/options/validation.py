"""
Option Validation
=================
Checks proxy options and derives the handler mode.

Every check takes the options and the problems found so far and returns the
extended list. All checks always run, so one pass reports everything an
operator needs to fix.
"""

import os
import stat
from typing import List, Tuple
from urllib.parse import urlsplit

from ..errors import UnsupportedDigestError
from ..hmacauth import digest_name_to_hash
from .models import HandlerMode, ProxyOptions


def derive_mode(auth: bool, upstream_defined: bool, file_root_defined: bool) -> HandlerMode:
    """Pure mapping from the three mode-relevant options to a HandlerMode."""
    if not auth:
        return HandlerMode.SIGN_AND_PROXY
    if upstream_defined:
        return HandlerMode.AUTH_AND_PROXY
    if file_root_defined:
        return HandlerMode.AUTH_FOR_FILES
    return HandlerMode.AUTH_ONLY


def validate_mode(opts: ProxyOptions, msgs: List[str]) -> List[str]:
    upstream_defined = opts.upstream.raw != ""
    file_root_defined = opts.file_root != ""

    if not (upstream_defined or file_root_defined or opts.auth):
        msgs.append("neither upstream, file-root, nor auth specified")
    elif upstream_defined and file_root_defined:
        msgs.append("both upstream and file-root specified")
    if file_root_defined and not opts.auth:
        msgs.append("auth must be specified with file-root")
    return msgs


def validate_port(opts: ProxyOptions, msgs: List[str]) -> List[str]:
    if isinstance(opts.port, bool) or not isinstance(opts.port, int) or opts.port <= 0:
        msgs.append("port must be specified and greater than zero")
    return msgs


def validate_auth_params(opts: ProxyOptions, msgs: List[str]) -> List[str]:
    try:
        opts.digest.hash = digest_name_to_hash(opts.digest.name)
    except UnsupportedDigestError as e:
        opts.digest.hash = None
        msgs.append(str(e))
    if opts.secret == "":
        msgs.append("no secret specified")
    if opts.sign_header == "":
        msgs.append("no signature header specified")
    return msgs


def _request_uri(path: str, query: str) -> str:
    uri = path or "/"
    if query:
        uri += "?" + query
    return uri


def validate_upstream(opts: ProxyOptions, msgs: List[str]) -> List[str]:
    if opts.upstream.raw == "":
        return msgs

    try:
        url = urlsplit(opts.upstream.raw)
    except ValueError as e:
        opts.upstream.url = None
        msgs.append(f"upstream URL failed to parse: {e}")
        return msgs
    opts.upstream.url = url

    # urlsplit defers port parsing; a bad port is still a parse failure but
    # the remaining components can be checked
    try:
        url.port
    except ValueError as e:
        msgs.append(f"upstream URL failed to parse: {e}")

    if url.scheme == "":
        msgs.append("upstream scheme not specified")
    elif url.scheme not in ("http", "https"):
        msgs.append(f"invalid upstream scheme: {url.scheme}")
    if not url.hostname:
        msgs.append("upstream host not specified")
    path = _request_uri(url.path, url.query)
    if path != "/":
        msgs.append(f'upstream path must be "/", not {path}')
    return msgs


def check_existence_and_permission(
    path: str,
    option_name: str,
    dir_or_file: str,
    msgs: List[str],
) -> List[str]:
    """Append at most one problem about ``path``, checked in order."""
    if dir_or_file not in ("dir", "file"):
        raise ValueError(f"invalid dir_or_file parameter: {dir_or_file}")

    try:
        info = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        msgs.append(f"{option_name} does not exist: {path}")
        return msgs
    except PermissionError:
        msgs.append(f"{option_name} permission is denied: {path}")
        return msgs
    except OSError as e:
        msgs.append(f"{option_name} cannot be accessed: {path} ({e.strerror})")
        return msgs

    if dir_or_file == "dir" and not stat.S_ISDIR(info.st_mode):
        msgs.append(f"{option_name} is not a directory: {path}")
    elif dir_or_file == "file" and not stat.S_ISREG(info.st_mode):
        msgs.append(f"{option_name} is not a regular file: {path}")
    elif not os.access(path, os.R_OK):
        msgs.append(f"{option_name} permission is denied: {path}")
    return msgs


def validate_file_root(opts: ProxyOptions, msgs: List[str]) -> List[str]:
    if opts.file_root == "":
        return msgs
    return check_existence_and_permission(opts.file_root, "file-root", "dir", msgs)


def validate_ssl(opts: ProxyOptions, msgs: List[str]) -> List[str]:
    cert_specified = opts.ssl_cert != ""
    key_specified = opts.ssl_key != ""
    if not (cert_specified or key_specified):
        return msgs
    if not (cert_specified and key_specified):
        msgs.append("ssl-cert and ssl-key must both be specified, or neither must be")

    if cert_specified:
        msgs = check_existence_and_permission(opts.ssl_cert, "ssl-cert", "file", msgs)
    if key_specified:
        msgs = check_existence_and_permission(opts.ssl_key, "ssl-key", "file", msgs)
    return msgs


CHECKS = (
    validate_mode,
    validate_port,
    validate_auth_params,
    validate_upstream,
    validate_file_root,
    validate_ssl,
)


def validate_options(opts: ProxyOptions) -> Tuple[HandlerMode, List[str]]:
    """
    Run every check and derive the handler mode.

    The mode is returned even when problems were found; callers must not act
    on it unless the problem list is empty.
    """
    msgs: List[str] = []
    for check in CHECKS:
        msgs = check(opts, msgs)
    mode = derive_mode(opts.auth, opts.upstream.raw != "", opts.file_root != "")
    return mode, msgs
