"""Transports used to probe a license revocation endpoint.

A transport performs exactly one GET against a URL and reports the HTTP
status code.  :class:`~typedlicense.extended.ExtendedLicense` only talks
to the :class:`RevocationTransport` protocol, so tests and embedding
applications can substitute their own implementation.

Contract:

- return the integer HTTP status of the response;
- return ``None`` when the URL's scheme has no HTTP-style status;
- raise :class:`~typedlicense.errors.NetworkError` when the endpoint
  cannot be reached (connection refused, DNS failure, timeout, I/O error).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import requests
from requests.exceptions import RequestException, Timeout

from typedlicense.errors import NetworkError
from typedlicense.features import url_scheme
from typedlicense.log_config import get_logger

logger = get_logger(__name__)

_DEFAULT_TIMEOUT = 10.0  # seconds

_HTTP_SCHEMES = frozenset({"http", "https"})

# Revocation answers must never come from an intermediate cache.
_NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
}


@runtime_checkable
class RevocationTransport(Protocol):
    """Protocol for a single-shot revocation probe."""

    def probe(self, url: str) -> int | None:
        """GET *url* once and return its HTTP status, or ``None`` if unavailable."""
        ...


class RequestsTransport:
    """:class:`RevocationTransport` backed by :mod:`requests`.

    Issues one GET per call with caching disabled, no body, and no retry
    logic.  Redirects are followed the way :mod:`requests` does by
    default.  Only the status line is consumed; the response body is never
    downloaded.

    Args:
        timeout: Connect/read timeout in seconds.
        session: Optional :class:`requests.Session` to send through.  When
            omitted, module-level :func:`requests.get` is used.
    """

    def __init__(
        self,
        timeout: float = _DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self._session = session

    def probe(self, url: str) -> int | None:
        scheme = url_scheme(url)
        if scheme not in _HTTP_SCHEMES:
            logger.warning("Revocation URL scheme %r has no HTTP status", scheme)
            return None

        get = self._session.get if self._session is not None else requests.get
        try:
            response = get(
                url,
                headers=dict(_NO_CACHE_HEADERS),
                timeout=self.timeout,
                stream=True,
            )
        except Timeout as exc:
            raise NetworkError(
                f"Revocation check timed out after {self.timeout}s", cause=exc
            ) from exc
        except RequestException as exc:
            raise NetworkError(f"Revocation check failed: {exc}", cause=exc) from exc

        try:
            logger.debug("Revocation probe %s -> HTTP %s", url, response.status_code)
            return response.status_code
        finally:
            response.close()
