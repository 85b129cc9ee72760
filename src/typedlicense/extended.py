"""Typed extension layer over a base license's string feature store.

:class:`ExtendedLicense` wraps any :class:`~typedlicense.base.BaseLicense`
and adds:

- integer, date, URL and UUID features on top of plain strings;
- a fail-closed expiry check against the ``expiryDate`` feature;
- license id generation and storage under ``licenseId``;
- an online revocation check against the ``revocationUrl`` feature.

Nothing is cached: every call reads the base license's current features.
The expiry and revocation checks do **not** verify the license payload;
callers must check :meth:`ExtendedLicense.is_verified` separately.

Example::

    from typedlicense import ExtendedLicense, InMemoryLicense

    lic = ExtendedLicense(InMemoryLicense(verified=True))
    lic.set_expiry(datetime.date(2030, 1, 31))
    lic.generate_license_id()
    lic.set_revocation_url("https://lic.example.com/revoked/${licenseId}")

    usable = lic.is_verified() and not lic.is_expired() and not lic.is_revoked()
"""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any
from urllib.parse import ParseResult, SplitResult

from typedlicense.base import BaseLicense
from typedlicense.config import LicenseConfig
from typedlicense.errors import (
    ConversionError,
    MalformedURLError,
    NetworkError,
    NotFoundError,
)
from typedlicense.features import FeatureKind, parse_url
from typedlicense.log_config import get_logger
from typedlicense.transport import RequestsTransport, RevocationTransport

logger = get_logger(__name__)

EXPIRY_DATE = "expiryDate"
LICENSE_ID = "licenseId"
REVOCATION_URL = "revocationUrl"

LICENSE_ID_PLACEHOLDER = "${licenseId}"

_HTTP_OK = 200


# ---------------------------------------------------------------------------
# Status snapshot
# ---------------------------------------------------------------------------


@dataclass
class LicenseStatus:
    """Point-in-time summary of a license's usability checks."""

    verified: bool
    expired: bool
    expiry_date: datetime.date | None = None
    license_id: uuid.UUID | None = None
    revocation_url: str | None = None  # resolved; None if absent or malformed
    revoked: bool | None = None  # None when revocation was not checked

    @property
    def is_usable(self) -> bool:
        """Verified, not expired, and not known to be revoked."""
        return self.verified and not self.expired and not self.revoked

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["expiry_date"] = self.expiry_date.isoformat() if self.expiry_date else None
        data["license_id"] = str(self.license_id) if self.license_id else None
        data["is_usable"] = self.is_usable
        return data


# ---------------------------------------------------------------------------
# Extended license
# ---------------------------------------------------------------------------


class ExtendedLicense:
    """Typed accessors, expiry and revocation checks over a base license.

    Args:
        base: The license whose feature store is extended.
        config: Settings for the reference timezone, revocation timeout
            and unreachable-endpoint default.  Defaults to
            :class:`~typedlicense.config.LicenseConfig` defaults; no file or
            environment is consulted implicitly.
        transport: Revocation probe.  Defaults to a
            :class:`~typedlicense.transport.RequestsTransport` using
            ``config.revocation_timeout``.
        clock: Returns the current time in a given zone, or in the
            process-local zone when passed ``None``.  Defaults to
            :meth:`datetime.datetime.now`.
    """

    def __init__(
        self,
        base: BaseLicense,
        *,
        config: LicenseConfig | None = None,
        transport: RevocationTransport | None = None,
        clock: Callable[[datetime.tzinfo | None], datetime.datetime] | None = None,
    ) -> None:
        self._base = base
        self.config = config or LicenseConfig()
        self._tz = self.config.tzinfo()
        self.transport = transport or RequestsTransport(timeout=self.config.revocation_timeout)
        self._clock = clock or datetime.datetime.now

    @property
    def base(self) -> BaseLicense:
        """The wrapped base license."""
        return self._base

    def is_verified(self) -> bool:
        """Return the base license's verification flag."""
        return self._base.is_verified()

    # ------------------------------------------------------------------
    # Typed features
    # ------------------------------------------------------------------

    def get_raw_feature(self, name: str) -> str | None:
        """Return the stored text of feature *name*, or ``None``."""
        return self._base.get_raw_feature(name)

    def set_feature(self, name: str, value: Any, kind: FeatureKind | type | None = None) -> None:
        """Store *value* under feature *name* as canonical text.

        Without *kind*, the kind is inferred from the value's type:
        ``int``, ``datetime.date``/``datetime.datetime``, ``uuid.UUID``, or
        a parsed URL (``SplitResult``/``ParseResult``).  A ``str`` without
        a *kind* is stored verbatim as a plain string feature.

        :raises ValueError: If *name* is empty.
        :raises UnsupportedKindError: If *kind* (or the inferred kind) is
            not supported.
        :raises ConversionError: If *value* does not fit *kind*.
        """
        if not name:
            raise ValueError("Feature name must be a non-empty string")
        resolved = FeatureKind.infer(value) if kind is None else FeatureKind.resolve(kind)
        if resolved is None:
            self._base.set_raw_feature(name, value)
            return
        try:
            text = resolved.format(value)
        except ConversionError as exc:
            exc.name = name
            raise
        self._base.set_raw_feature(name, text)

    def get_feature(self, name: str, kind: FeatureKind | type) -> Any:
        """Read feature *name* and parse it as *kind*.

        :param kind: A :class:`FeatureKind`, or one of ``int``,
            ``datetime.date``, ``uuid.UUID``.
        :raises UnsupportedKindError: If *kind* is outside the fixed set,
            whatever the stored content.
        :raises NotFoundError: If the feature is absent.
        :raises ConversionError: If the stored text does not parse.
        """
        resolved = FeatureKind.resolve(kind)
        text = self._base.get_raw_feature(name)
        if text is None:
            raise NotFoundError(f"License has no feature {name!r}", name=name)
        try:
            return resolved.parse(text)
        except ConversionError as exc:
            exc.name = name
            raise

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def set_expiry(self, expiry: datetime.date) -> None:
        """Set ``expiryDate``.  The time of day of a ``datetime`` is dropped."""
        self.set_feature(EXPIRY_DATE, expiry, FeatureKind.DATE)

    def get_expiry(self) -> datetime.date | None:
        """Return ``expiryDate``, or ``None`` if it is missing or malformed."""
        try:
            return self.get_feature(EXPIRY_DATE, FeatureKind.DATE)
        except Exception as exc:
            logger.debug("No usable %s: %s", EXPIRY_DATE, exc)
            return None

    def today(self, tz: datetime.tzinfo | None = None) -> datetime.date:
        """Return the current calendar day in *tz* (or the configured zone).

        With the ``"local"`` zone configured, the process-local offset is
        looked up on every call, so DST transitions are honoured.
        """
        zone = tz if tz is not None else self._tz
        return self._clock(zone).date()

    def is_expired(self, tz: datetime.tzinfo | None = None) -> bool:
        """Return ``True`` if the license is past its ``expiryDate``.

        The license is still valid on the expiry day itself.  "Today" is the
        calendar day in *tz*, defaulting to the configured timezone.

        Fails closed: a missing or malformed ``expiryDate``, or any other
        error while checking, counts as expired.
        """
        try:
            expiry = self.get_feature(EXPIRY_DATE, FeatureKind.DATE)
            return self.today(tz) > expiry
        except Exception as exc:
            logger.debug("Treating license as expired: %s", exc)
            return True

    # ------------------------------------------------------------------
    # License id
    # ------------------------------------------------------------------

    def generate_license_id(self) -> uuid.UUID:
        """Create a random license id, store it under ``licenseId`` and return it.

        Any existing id is overwritten.
        """
        license_id = uuid.uuid4()
        self.set_license_id(license_id)
        return license_id

    def get_license_id(self) -> uuid.UUID | None:
        """Return the ``licenseId`` feature, or ``None`` if missing or malformed."""
        try:
            return self.get_feature(LICENSE_ID, FeatureKind.UUID)
        except Exception as exc:
            logger.debug("No usable %s: %s", LICENSE_ID, exc)
            return None

    def set_license_id(self, license_id: uuid.UUID | str) -> None:
        """Store *license_id* under ``licenseId``, overwriting any prior value.

        :raises ConversionError: If *license_id* is text that is not a UUID.
        """
        if isinstance(license_id, str):
            license_id = FeatureKind.UUID.parse(license_id)
        self.set_feature(LICENSE_ID, license_id, FeatureKind.UUID)

    # ------------------------------------------------------------------
    # Revocation
    # ------------------------------------------------------------------

    def set_revocation_url(self, url: str | SplitResult | ParseResult) -> None:
        """Store the revocation URL template verbatim.

        The text may contain ``${licenseId}``, which
        :meth:`get_revocation_url` replaces with the license id.  Prefer
        passing a string in that case; parsed URL objects may re-quote it.
        """
        if isinstance(url, (SplitResult, ParseResult)):
            url = url.geturl()
        if not isinstance(url, str):
            raise TypeError(f"revocation URL must be str, got {type(url).__name__}")
        self._base.set_raw_feature(REVOCATION_URL, url)

    def get_revocation_url(self) -> str | None:
        """Return the revocation URL with ``${licenseId}`` filled in.

        Returns ``None`` when the license has no ``revocationUrl``.  If the
        license has no usable id the placeholder is left as is.

        :raises MalformedURLError: If the resulting text is not a valid URL.
        """
        template = self._base.get_raw_feature(REVOCATION_URL)
        if template is None:
            return None

        license_id = self.get_license_id()
        if license_id is not None:
            url = template.replace(LICENSE_ID_PLACEHOLDER, str(license_id))
        else:
            url = template

        try:
            return parse_url(url)
        except ValueError as exc:
            raise MalformedURLError(
                f"Invalid revocation URL {url!r}: {exc}", name=REVOCATION_URL, cause=exc
            ) from exc

    def is_revoked(self, default_on_unreachable: bool | None = None) -> bool:
        """Ask the revocation endpoint whether this license was revoked.

        Issues one GET to :meth:`get_revocation_url`.  HTTP 200 means not
        revoked; any other status means revoked.  A URL whose scheme yields
        no HTTP status is treated as revoked.

        :param default_on_unreachable: Result when the endpoint cannot be
            reached.  ``True`` treats an unreachable service as revoked;
            ``False`` treats it as not revoked.  When omitted, the
            configured ``default_on_unreachable`` (``False`` unless set) is
            used.
        :returns: ``False`` when the license has no revocation URL.
        :raises MalformedURLError: If the revocation URL is invalid.
        """
        url = self.get_revocation_url()
        if url is None:
            return False

        if default_on_unreachable is None:
            default_on_unreachable = self.config.default_on_unreachable

        try:
            status = self.transport.probe(url)
        except NetworkError as exc:
            logger.warning(
                "Revocation endpoint unreachable (%s); using default revoked=%s",
                str(exc),
                default_on_unreachable,
            )
            return default_on_unreachable

        if status is None:
            logger.warning("No HTTP status from revocation URL %s; treating as revoked", url)
            return True

        revoked = status != _HTTP_OK
        if revoked:
            logger.info("License revoked: %s returned HTTP %s", url, status)
        return revoked

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def status(self, check_revocation: bool = False) -> LicenseStatus:
        """Return a :class:`LicenseStatus` snapshot.

        The revocation endpoint is only contacted when *check_revocation*
        is true.
        """
        return LicenseStatus(
            verified=self.is_verified(),
            expired=self.is_expired(),
            expiry_date=self.get_expiry(),
            license_id=self.get_license_id(),
            revocation_url=self._resolved_revocation_url(),
            revoked=self.is_revoked() if check_revocation else None,
        )

    def _resolved_revocation_url(self) -> str | None:
        try:
            return self.get_revocation_url()
        except MalformedURLError as exc:
            logger.debug("No usable %s: %s", REVOCATION_URL, exc)
            return None
