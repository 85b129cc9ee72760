"""Base license interface consumed by :class:`~typedlicense.extended.ExtendedLicense`.

The base license owns the raw feature map, payload signing and
verification, and serialization.  This package only needs three
operations from it, captured by the :class:`BaseLicense` protocol.  Any
object providing them can be wrapped; no subclassing is required.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BaseLicense(Protocol):
    """Protocol for the license whose string feature store is being extended.

    Example::

        class SignedLicense:
            def get_raw_feature(self, name: str) -> str | None: ...
            def set_raw_feature(self, name: str, value: str) -> None: ...
            def is_verified(self) -> bool: ...

        assert isinstance(SignedLicense(), BaseLicense)
    """

    def get_raw_feature(self, name: str) -> str | None:
        """Return the stored text of feature *name*, or ``None`` if absent."""
        ...

    def set_raw_feature(self, name: str, value: str) -> None:
        """Store *value* as the text of feature *name*."""
        ...

    def is_verified(self) -> bool:
        """Return whether the license payload passed signature verification."""
        ...


class InMemoryLicense:
    """Dict-backed :class:`BaseLicense` with an explicit verification flag.

    Useful for embedding applications that verify the payload themselves,
    and for tests.

    Args:
        features: Initial feature map.  Copied, never aliased.
        verified: Value reported by :meth:`is_verified`.
    """

    def __init__(
        self,
        features: dict[str, str] | None = None,
        *,
        verified: bool = False,
    ) -> None:
        self._features: dict[str, str] = dict(features or {})
        self.verified = verified

    def get_raw_feature(self, name: str) -> str | None:
        return self._features.get(name)

    def set_raw_feature(self, name: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"feature values must be str, got {type(value).__name__}")
        self._features[name] = value

    def is_verified(self) -> bool:
        return self.verified

    def features(self) -> dict[str, str]:
        """Return a copy of the raw feature map."""
        return dict(self._features)

    def __repr__(self) -> str:
        return f"InMemoryLicense(features={self._features!r}, verified={self.verified!r})"
