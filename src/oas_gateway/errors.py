"""Error taxonomy for registry load, per-document conversion, and schema composition.

Unknown identifiers are not errors: lookups return None.
"""

from __future__ import annotations

from pathlib import Path


class GatewayError(Exception):
    """Base class for oas_gateway failures."""


class LoadError(GatewayError):
    """Specifications directory unreadable or a file unparsable. Fatal at startup."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load specifications from {path}: {reason}")


class ConversionError(GatewayError):
    """One document failed OpenAPI -> GraphQL conversion; carries its identifier."""

    def __init__(self, identifier: str, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Conversion of {identifier!r} failed: {reason}")


class CompositionError(GatewayError):
    """Merging schema fragments failed (e.g. name collisions)."""
