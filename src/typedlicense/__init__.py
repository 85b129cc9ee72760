"""typedlicense - typed features, expiry and revocation checks for licenses."""

from __future__ import annotations

import logging
import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from typedlicense.base import BaseLicense, InMemoryLicense
from typedlicense.config import LicenseConfig, load_config
from typedlicense.errors import (
    ConversionError,
    LicenseError,
    MalformedURLError,
    NetworkError,
    NotFoundError,
    UnsupportedKindError,
)
from typedlicense.extended import ExtendedLicense, LicenseStatus
from typedlicense.features import FeatureKind
from typedlicense.log_config import get_logger
from typedlicense.transport import RequestsTransport, RevocationTransport

_logger = get_logger(__name__)
_logger.addHandler(logging.NullHandler())


def _resolve_version() -> str:
    """Resolve the installed package version with a source-tree fallback."""
    try:
        pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
        if pyproject.is_file():
            content = pyproject.read_text(encoding="utf-8")
            match = re.search(r'(?m)^\s*version\s*=\s*"([^"]+)"\s*$', content)
            if match:
                return match.group(1)
    except Exception as exc:
        _logger.debug("Local pyproject version fallback failed: %s", exc)

    try:
        return version("typedlicense")
    except PackageNotFoundError:
        return "unknown"


__version__ = _resolve_version()

__all__ = [
    "BaseLicense",
    "ConversionError",
    "ExtendedLicense",
    "FeatureKind",
    "InMemoryLicense",
    "LicenseConfig",
    "LicenseError",
    "LicenseStatus",
    "MalformedURLError",
    "NetworkError",
    "NotFoundError",
    "RequestsTransport",
    "RevocationTransport",
    "UnsupportedKindError",
    "load_config",
]
