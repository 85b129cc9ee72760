"""Loggers that keep revocation-endpoint credentials out of log output.

Revocation URLs are logged when a check runs.  Their query strings or
user-info may carry access tokens, so every logger in this package is
obtained through :func:`get_logger`, which installs :class:`ScrubFilter`.
The filter rewrites each URL it finds in a record with
:func:`redact_url`.

The package attaches only a :class:`logging.NullHandler`; handlers and
levels are left to the embedding application.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote, urlsplit, urlunsplit

_REDACTED = "***REDACTED***"

# Query parameter names whose values are never logged (compared lowercased).
_SECRET_PARAMS = frozenset({
    "access_token",
    "api_key",
    "apikey",
    "auth",
    "key",
    "password",
    "secret",
    "sig",
    "signature",
    "token",
})

_URL_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*://[^\s\"'<>]+")


def redact_url(url: str) -> str:
    """Return *url* with its password and secret query values replaced.

    Everything else, including a resolved license id, is kept verbatim.
    Text that does not split as a URL is returned unchanged.
    """
    try:
        parts = urlsplit(url)
        password = parts.password
    except ValueError:
        return url

    netloc = parts.netloc
    if password is not None:
        userinfo, _, hostport = netloc.rpartition("@")
        username = userinfo.split(":", 1)[0]
        netloc = f"{username}:{_REDACTED}@{hostport}"

    query = parts.query
    if query:
        pairs = []
        for pair in query.split("&"):
            name, sep, _ = pair.partition("=")
            if sep and unquote(name).lower() in _SECRET_PARAMS:
                pair = f"{name}={_REDACTED}"
            pairs.append(pair)
        query = "&".join(pairs)

    if netloc == parts.netloc and query == parts.query:
        return url
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def _scrub(text: str) -> str:
    """Redact every URL embedded in *text*."""
    return _URL_RE.sub(lambda m: redact_url(m.group(0)), text)


class ScrubFilter(logging.Filter):
    """Logging filter that redacts URL credentials from messages and args."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _scrub(record.msg)
        if isinstance(record.args, dict):
            record.args = {
                k: _scrub(v) if isinstance(v, str) else v
                for k, v in record.args.items()
            }
        elif isinstance(record.args, tuple):
            record.args = tuple(
                _scrub(a) if isinstance(a, str) else a for a in record.args
            )
        return True


def get_logger(name: str) -> logging.Logger:
    """Return the logger *name* with :class:`ScrubFilter` installed once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, ScrubFilter) for f in logger.filters):
        logger.addFilter(ScrubFilter())
    return logger
