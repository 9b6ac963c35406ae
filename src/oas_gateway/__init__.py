"""oas_gateway: federate OpenAPI service descriptions into one GraphQL schema."""

from oas_gateway.errors import CompositionError, ConversionError, GatewayError, LoadError
from oas_gateway.gateway import OasSpecifications
from oas_gateway.schema import ConversionResult, OpenAPIConverter, compose, convert_all, merge_schemas
from oas_gateway.specs import SpecificationRegistry, is_exposed, resolve_base_url

__all__ = [
    "CompositionError",
    "ConversionError",
    "ConversionResult",
    "GatewayError",
    "LoadError",
    "OasSpecifications",
    "OpenAPIConverter",
    "SpecificationRegistry",
    "compose",
    "convert_all",
    "is_exposed",
    "merge_schemas",
    "resolve_base_url",
]
