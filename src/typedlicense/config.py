"""Configuration for typed license checks.

Settings are resolved with a layered precedence (highest first):

    1. Explicit keyword overrides passed to :func:`load_config`.
    2. Environment variables (``TYPEDLICENSE_TIMEZONE``,
       ``TYPEDLICENSE_REVOCATION_TIMEOUT``,
       ``TYPEDLICENSE_DEFAULT_ON_UNREACHABLE``).
    3. The YAML config file (``~/.typedlicense/config.yaml`` by default).
    4. Built-in defaults.

Nothing in this package reads configuration implicitly.  Callers that
want file/env settings call :func:`load_config` and hand the result to
:class:`~typedlicense.extended.ExtendedLicense`.
"""

from __future__ import annotations

import datetime
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from typedlicense.log_config import get_logger

logger = get_logger(__name__)

_ENV_PREFIX = "TYPEDLICENSE_"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass
class LicenseConfig:
    """Resolved settings for expiry and revocation checks."""

    # Reference zone for "today": "UTC", "local", or an IANA name.
    timezone: str = "UTC"
    revocation_timeout: float = 10.0
    # Answer of is_revoked() when the endpoint is unreachable and the
    # caller passes no explicit default.
    default_on_unreachable: bool = False

    def tzinfo(self) -> datetime.tzinfo | None:
        """Return the :class:`datetime.tzinfo` for :attr:`timezone`.

        ``None`` stands for the process-local zone; see :func:`resolve_timezone`.
        """
        return resolve_timezone(self.timezone)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_default_config_path() -> Path:
    """Return the default config file path (``~/.typedlicense/config.yaml``)."""
    return Path.home() / ".typedlicense" / "config.yaml"


def resolve_timezone(name: str) -> datetime.tzinfo | None:
    """Map a timezone setting to a :class:`datetime.tzinfo`.

    ``"local"`` is an explicit opt-in to the zone of the running process
    and resolves to ``None``: the local offset changes with DST, so it
    has to be looked up each time the current time is read.

    :raises ValueError: If *name* is not a known zone.
    """
    key = (name or "").strip()
    if not key:
        raise ValueError("Timezone must not be empty")
    if key.upper() == "UTC":
        return datetime.timezone.utc
    if key.lower() == "local":
        return None
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name!r}") from exc


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Read and parse a YAML config file, returning an empty dict on any failure."""
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (yaml.YAMLError, OSError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", config_path, exc)
        return {}
    if isinstance(data, dict):
        return data
    return {}


def load_config(
    config_path: str | Path | None = None,
    **overrides: Any,
) -> LicenseConfig:
    """Resolve a :class:`LicenseConfig` from file, environment and *overrides*.

    :param config_path: YAML file to read.  Defaults to
        :func:`get_default_config_path`; a missing file is not an error.
    :param overrides: Field values that take top priority.  ``None``
        values are ignored.
    :raises ValueError: If a value cannot be coerced to its field type, or
        an override names an unknown field.
    """
    known = {f.name for f in fields(LicenseConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    raw: dict[str, Any] = LicenseConfig().to_dict()

    path = Path(config_path) if config_path else get_default_config_path()
    file_values = _load_config_file(path)
    for key in known:
        if file_values.get(key) is not None:
            raw[key] = file_values[key]

    for key in known:
        env_value = os.environ.get(_ENV_PREFIX + key.upper())
        if env_value:
            raw[key] = env_value

    for key, value in overrides.items():
        if value is not None:
            raw[key] = value

    try:
        return LicenseConfig(
            timezone=str(raw["timezone"]),
            revocation_timeout=float(raw["revocation_timeout"]),
            default_on_unreachable=_parse_bool(raw["default_on_unreachable"]),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc


def validate_config(config: LicenseConfig) -> tuple[bool, str | None]:
    """Validate a resolved configuration.

    Returns ``(True, None)`` when the config is valid, or
    ``(False, error_message)`` describing the first problem found.
    """
    try:
        resolve_timezone(config.timezone)
    except ValueError as exc:
        return False, str(exc)

    if config.revocation_timeout <= 0:
        return False, "revocation_timeout must be positive"

    return True, None
