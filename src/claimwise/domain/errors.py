"""Domain error hierarchy.

Ownership conflicts are deliberately absent: a rejected claim is a business
result (see ``claimwise.domain.ownership.detector``), not a failure. Storage
failures are not wrapped either; whatever the adapter raises reaches the caller
unchanged.
"""

from __future__ import annotations


class ClaimwiseError(Exception):
    """Base class for errors raised by the engine itself."""


class InvalidInputError(ClaimwiseError, ValueError):
    """Raised synchronously for empty or malformed keys, payloads or timestamps."""


class UnsupportedBackendError(ClaimwiseError):
    """Raised when a storage dialect cannot express a primitive atomically."""

    def __init__(self, dialect: str, primitive: str) -> None:
        self.dialect = dialect
        self.primitive = primitive
        super().__init__(f"Dialect {dialect!r} does not support {primitive}")
