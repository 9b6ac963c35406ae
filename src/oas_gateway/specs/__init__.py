"""Specification registry, environment base-URL resolution, and exposure filtering."""

from oas_gateway.specs.environment import ambient_environment, resolve_base_url
from oas_gateway.specs.exposure import is_exposed
from oas_gateway.specs.registry import RegistryEntry, SpecificationRegistry

__all__ = [
    "RegistryEntry",
    "SpecificationRegistry",
    "ambient_environment",
    "is_exposed",
    "resolve_base_url",
]
