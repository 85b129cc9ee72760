"""Typed feature kinds and their text codecs.

A license stores every feature as a string.  :class:`FeatureKind` is the
closed set of semantic types this package knows how to read and write,
each paired with a parse/format function:

=========  ====================  =================================
Kind       Python type           Stored text
=========  ====================  =================================
INTEGER    ``int``               ``[+-]?digits`` (base 10)
DATE       ``datetime.date``     ``YYYY-MM-DD``
URL        ``str``               absolute URL text
UUID       ``uuid.UUID``         canonical lowercase, hyphenated
=========  ====================  =================================

Adding a kind means adding an enum member and one ``_Codec`` entry.
"""

from __future__ import annotations

import datetime
import enum
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import ParseResult, SplitResult, urlsplit

from typedlicense.errors import ConversionError, UnsupportedKindError

DATE_FORMAT = "%Y-%m-%d"

# Matched with fullmatch(); "$" would accept a trailing newline.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_WHITESPACE_RE = re.compile(r"\s")

# Schemes whose URLs are meaningless without a host.
_NETLOC_SCHEMES = frozenset({"http", "https", "ftp"})


# ---------------------------------------------------------------------------
# URL validation
# ---------------------------------------------------------------------------


def parse_url(text: str) -> str:
    """Validate *text* as an absolute URL and return it unchanged.

    :raises ValueError: If *text* is not an absolute URL.
    """
    if not isinstance(text, str) or not text:
        raise ValueError("URL must be a non-empty string")
    if _WHITESPACE_RE.search(text):
        raise ValueError(f"URL contains whitespace: {text!r}")
    parts = urlsplit(text)
    if not parts.scheme or not _SCHEME_RE.fullmatch(parts.scheme):
        raise ValueError(f"URL has no valid scheme: {text!r}")
    if parts.scheme.lower() in _NETLOC_SCHEMES and not parts.hostname:
        raise ValueError(f"URL has no host: {text!r}")
    if not (parts.netloc or parts.path):
        raise ValueError(f"URL has nothing after the scheme: {text!r}")
    # Accessing .port validates it.
    parts.port  # noqa: B018
    return text


def url_scheme(url: str) -> str:
    """Return the lowercased scheme of an already-validated *url*."""
    return urlsplit(url).scheme.lower()


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------


def _parse_integer(text: str) -> int:
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError(f"not a base-10 integer: {text!r}")
    return int(text)


def _format_integer(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    return str(value)


def _parse_date(text: str) -> datetime.date:
    if not _DATE_RE.fullmatch(text):
        raise ValueError(f"not a YYYY-MM-DD date: {text!r}")
    return datetime.datetime.strptime(text, DATE_FORMAT).date()


def _format_date(value: Any) -> str:
    # datetime is a date subclass; the time of day is dropped.
    if not isinstance(value, datetime.date):
        raise TypeError(f"expected date, got {type(value).__name__}")
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def _format_url(value: Any) -> str:
    if isinstance(value, (SplitResult, ParseResult)):
        value = value.geturl()
    if not isinstance(value, str):
        raise TypeError(f"expected URL, got {type(value).__name__}")
    return parse_url(value)


def _parse_uuid(text: str) -> uuid.UUID:
    # Only the hyphenated 8-4-4-4-12 form; no braces, urn: prefix or bare hex.
    if not _UUID_RE.fullmatch(text):
        raise ValueError(f"not a canonical UUID: {text!r}")
    return uuid.UUID(text)


def _format_uuid(value: Any) -> str:
    if not isinstance(value, uuid.UUID):
        raise TypeError(f"expected UUID, got {type(value).__name__}")
    return str(value)


@dataclass(frozen=True)
class _Codec:
    parse: Callable[[str], Any]
    format: Callable[[Any], str]


class FeatureKind(enum.Enum):
    """The semantic types a license feature can be read or written as."""

    INTEGER = "integer"
    DATE = "date"
    URL = "url"
    UUID = "uuid"

    def parse(self, text: str) -> Any:
        """Parse stored *text* into this kind's Python value.

        :raises ConversionError: If *text* is not valid for this kind.
        """
        try:
            return _CODECS[self].parse(text)
        except (ValueError, TypeError) as exc:
            raise ConversionError(
                f"Cannot read {text!r} as {self.value}: {exc}", cause=exc
            ) from exc

    def format(self, value: Any) -> str:
        """Render *value* as this kind's canonical stored text.

        :raises ConversionError: If *value* does not fit this kind.
        """
        try:
            return _CODECS[self].format(value)
        except (ValueError, TypeError) as exc:
            raise ConversionError(
                f"Cannot store {value!r} as {self.value}: {exc}", cause=exc
            ) from exc

    @classmethod
    def resolve(cls, kind: Any) -> FeatureKind:
        """Map *kind* (a member or a Python type) to a :class:`FeatureKind`.

        :raises UnsupportedKindError: If *kind* is not one of the fixed kinds.
        """
        if isinstance(kind, cls):
            return kind
        try:
            found = _TYPE_KINDS.get(kind)
        except TypeError:
            found = None
        if found is None:
            raise UnsupportedKindError(f"{kind!r} is not a supported feature kind")
        return found

    @classmethod
    def infer(cls, value: Any) -> FeatureKind | None:
        """Return the kind matching *value*'s type, or ``None`` for plain text."""
        if isinstance(value, str):
            return None
        if isinstance(value, bool):
            raise UnsupportedKindError("bool is not a supported feature kind")
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, datetime.date):
            return cls.DATE
        if isinstance(value, uuid.UUID):
            return cls.UUID
        if isinstance(value, (SplitResult, ParseResult)):
            return cls.URL
        raise UnsupportedKindError(
            f"{type(value).__name__} is not a supported feature kind"
        )


_CODECS: dict[FeatureKind, _Codec] = {
    FeatureKind.INTEGER: _Codec(_parse_integer, _format_integer),
    FeatureKind.DATE: _Codec(_parse_date, _format_date),
    FeatureKind.URL: _Codec(parse_url, _format_url),
    FeatureKind.UUID: _Codec(_parse_uuid, _format_uuid),
}

_TYPE_KINDS: dict[Any, FeatureKind] = {
    int: FeatureKind.INTEGER,
    datetime.date: FeatureKind.DATE,
    uuid.UUID: FeatureKind.UUID,
}
