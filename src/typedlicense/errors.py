"""Exception hierarchy for typed license feature access.

All errors raised by :mod:`typedlicense` derive from :class:`LicenseError`
so callers can catch the whole family with a single ``except`` clause.
"""

from __future__ import annotations


class LicenseError(Exception):
    """Base class for licensing errors.

    Args:
        message: Human-readable description.
        name: The feature name involved, if any.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.name = name
        self.cause = cause


class NotFoundError(LicenseError):
    """Raised when a requested feature is absent from the license."""


class ConversionError(LicenseError):
    """Raised when a value cannot be converted to or from the requested kind."""


class UnsupportedKindError(LicenseError):
    """Raised when a feature kind outside the supported set is requested."""


class MalformedURLError(LicenseError):
    """Raised when the resolved revocation URL is not a valid URL."""


class NetworkError(LicenseError):
    """Raised by a transport when the revocation endpoint cannot be reached."""
