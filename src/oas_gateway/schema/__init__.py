"""GraphQL side: per-document conversion, sequential orchestration, and composition."""

from oas_gateway.schema.compose import Merger, compose, merge_schemas
from oas_gateway.schema.convert import (
    ConversionResult,
    Converter,
    GraphQLBigInt,
    GraphQLJSON,
    OpenAPIConverter,
)
from oas_gateway.schema.orchestrate import convert_all, entry_options

__all__ = [
    "ConversionResult",
    "Converter",
    "GraphQLBigInt",
    "GraphQLJSON",
    "Merger",
    "OpenAPIConverter",
    "compose",
    "convert_all",
    "entry_options",
    "merge_schemas",
]
