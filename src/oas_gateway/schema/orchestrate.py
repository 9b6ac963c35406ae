"""Convert every exposed registry entry into a GraphQL schema fragment, one at a time.

Fragments come back in registry order. Each entry gets its own shallow copy of the
caller options with "base_url" set for the active environment.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

from graphql import GraphQLSchema

from oas_gateway.errors import ConversionError
from oas_gateway.schema.convert import ConversionResult, Converter, OpenAPIConverter
from oas_gateway.specs.environment import resolve_base_url
from oas_gateway.specs.exposure import is_exposed
from oas_gateway.specs.registry import RegistryEntry, SpecificationRegistry

log = logging.getLogger(__name__)


def entry_options(
    base_options: dict[str, Any] | None,
    entry: RegistryEntry,
    environment: str | None,
    env_var: str,
) -> dict[str, Any]:
    """Fresh copy of base_options with this entry's base_url."""
    options = dict(base_options or {})
    options["base_url"] = resolve_base_url(entry.document, environment, env_var=env_var)
    return options


async def _convert_one(converter: Any, entry: RegistryEntry, options: dict[str, Any]) -> GraphQLSchema:
    convert = getattr(converter, "convert", converter)
    result = convert(entry.document, options)
    if inspect.isawaitable(result):
        result = await result
    if isinstance(result, ConversionResult):
        return result.schema
    if isinstance(result, GraphQLSchema):
        return result
    msg = f"converter returned {type(result).__name__}, expected a GraphQL schema"
    raise TypeError(msg)


async def convert_all(
    registry: SpecificationRegistry,
    options: dict[str, Any] | None = None,
    *,
    converter: Converter | None = None,
    environment: str | None = None,
    timeout: float | None = None,
    skip_failures: bool = False,
) -> list[GraphQLSchema]:
    """Convert exposed entries sequentially; fail fast with ConversionError.

    timeout bounds each conversion (seconds). skip_failures=True logs and skips
    failing entries instead of aborting.
    """
    converter = converter or OpenAPIConverter()
    fragments: list[GraphQLSchema] = []
    for entry in registry.entries():
        if not is_exposed(entry.document):
            log.info("Skipping %s (%s): x-expose-graphql is false", entry.identifier, entry.filename)
            continue

        opts = entry_options(options, entry, environment, registry.env_var)
        if opts["base_url"] is None:
            log.info("No servers declared for %s; converting without base_url", entry.identifier)
        try:
            if timeout is None:
                schema = await _convert_one(converter, entry, opts)
            else:
                schema = await asyncio.wait_for(_convert_one(converter, entry, opts), timeout)
        except Exception as e:
            if isinstance(e, asyncio.TimeoutError) and timeout is not None:
                reason = f"timed out after {timeout}s"
            else:
                reason = str(e) or type(e).__name__
            err = ConversionError(entry.identifier, reason)
            if not skip_failures:
                raise err from e
            log.warning("%s; skipping", err)
            continue

        log.info("Converted %s (%s)", entry.identifier, opts["base_url"])
        fragments.append(schema)
    return fragments
