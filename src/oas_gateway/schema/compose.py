"""Merge GraphQL schema fragments into one composed schema.

All fragments are equal peers: root Query/Mutation fields are unioned, every other
named type is carried over. A type declared by several fragments with the same shape
(same kind, field names, field and argument types) is kept once; the first fragment's
definition wins and references from later fragments are pointed at it. Root field
collisions and same-named types of different shape are errors.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Sequence
from typing import Any, Protocol, Union

from graphql import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLUnionType,
    is_introspection_type,
    is_specified_scalar_type,
    validate_schema,
)

from oas_gateway.errors import CompositionError

log = logging.getLogger(__name__)

MergeOutput = Union[GraphQLSchema, Awaitable[GraphQLSchema]]


class Merger(Protocol):
    """merge(schemas) -> GraphQLSchema, optionally awaitable."""

    def merge(self, schemas: Sequence[GraphQLSchema]) -> MergeOutput: ...


def _shape(named_type: GraphQLNamedType) -> tuple:
    """Comparable description of a named type; wrapped types compare by printed form."""
    if isinstance(named_type, (GraphQLObjectType, GraphQLInterfaceType)):
        return (
            type(named_type).__name__,
            sorted(
                (name, str(f.type), sorted((a, str(arg.type)) for a, arg in f.args.items()))
                for name, f in named_type.fields.items()
            ),
            sorted(i.name for i in named_type.interfaces),
        )
    if isinstance(named_type, GraphQLInputObjectType):
        return ("input", sorted((name, str(f.type)) for name, f in named_type.fields.items()))
    if isinstance(named_type, GraphQLEnumType):
        return ("enum", sorted(named_type.values))
    if isinstance(named_type, GraphQLUnionType):
        return ("union", sorted(t.name for t in named_type.types))
    return ("scalar",)


def _merge_root_fields(
    merged: dict[str, GraphQLField],
    root: GraphQLObjectType | None,
    root_name: str,
) -> None:
    if root is None:
        return
    for name, gql_field in root.fields.items():
        if name in merged and merged[name] is not gql_field:
            msg = f"Field collision: {root_name}.{name} is defined by more than one fragment"
            raise CompositionError(msg)
        merged[name] = gql_field


class _Rebinder:
    """Copies named types so every reference resolves to the single kept type per name."""

    def __init__(self, kept: dict[str, GraphQLNamedType]):
        self.types: dict[str, GraphQLNamedType] = {}
        for name, named_type in kept.items():
            self.types[name] = self._copy(named_type)

    def replace(self, type_: Any) -> Any:
        if isinstance(type_, GraphQLList):
            return GraphQLList(self.replace(type_.of_type))
        if isinstance(type_, GraphQLNonNull):
            return GraphQLNonNull(self.replace(type_.of_type))
        return self.types.get(type_.name, type_)

    def fields(self, fields: dict[str, GraphQLField]) -> dict[str, GraphQLField]:
        return {
            name: GraphQLField(
                **{
                    **f.to_kwargs(),
                    "type_": self.replace(f.type),
                    "args": {
                        a: GraphQLArgument(**{**arg.to_kwargs(), "type_": self.replace(arg.type)})
                        for a, arg in f.args.items()
                    },
                }
            )
            for name, f in fields.items()
        }

    def _copy(self, named_type: GraphQLNamedType) -> GraphQLNamedType:
        if isinstance(named_type, (GraphQLObjectType, GraphQLInterfaceType)):
            kwargs = named_type.to_kwargs()
            kwargs["fields"] = lambda: self.fields(named_type.fields)
            kwargs["interfaces"] = lambda: [self.replace(i) for i in named_type.interfaces]
            return type(named_type)(**kwargs)
        if isinstance(named_type, GraphQLInputObjectType):
            kwargs = named_type.to_kwargs()
            kwargs["fields"] = lambda: {
                name: GraphQLInputField(**{**f.to_kwargs(), "type_": self.replace(f.type)})
                for name, f in named_type.fields.items()
            }
            return GraphQLInputObjectType(**kwargs)
        if isinstance(named_type, GraphQLUnionType):
            kwargs = named_type.to_kwargs()
            kwargs["types"] = lambda: [self.replace(t) for t in named_type.types]
            return GraphQLUnionType(**kwargs)
        return named_type


def merge_schemas(schemas: Sequence[GraphQLSchema]) -> GraphQLSchema:
    """Union the root fields and named types of all schemas. Raises CompositionError on collisions."""
    if not schemas:
        msg = "No schema fragments to merge"
        raise CompositionError(msg)

    types: dict[str, GraphQLNamedType] = {}
    query_fields: dict[str, GraphQLField] = {}
    mutation_fields: dict[str, GraphQLField] = {}

    for schema in schemas:
        roots = [t for t in (schema.query_type, schema.mutation_type, schema.subscription_type) if t]
        _merge_root_fields(query_fields, schema.query_type, "Query")
        _merge_root_fields(mutation_fields, schema.mutation_type, "Mutation")
        for name, named_type in schema.type_map.items():
            if named_type in roots or is_introspection_type(named_type):
                continue
            if is_specified_scalar_type(named_type):
                continue
            existing = types.get(name)
            if existing is None:
                types[name] = named_type
            elif existing is not named_type:
                if _shape(existing) != _shape(named_type):
                    msg = f"Type collision: {name!r} is defined by more than one fragment"
                    raise CompositionError(msg)
                log.debug("Type %r is declared identically by more than one fragment; keeping the first", name)

    if not query_fields:
        msg = "Composed schema has no query fields"
        raise CompositionError(msg)

    rebinder = _Rebinder(types)
    try:
        merged = GraphQLSchema(
            query=GraphQLObjectType("Query", rebinder.fields(query_fields)),
            mutation=GraphQLObjectType("Mutation", rebinder.fields(mutation_fields)) if mutation_fields else None,
            types=list(rebinder.types.values()),
        )
    except TypeError as e:
        raise CompositionError(str(e)) from e
    errors = validate_schema(merged)
    if errors:
        msg = "; ".join(e.message for e in errors)
        raise CompositionError(msg)
    return merged


async def compose(schemas: Sequence[GraphQLSchema], *, merger: Any = None) -> GraphQLSchema:
    """Merge fragments with merger (default merge_schemas); failures become CompositionError."""
    merge = merge_schemas if merger is None else getattr(merger, "merge", merger)
    try:
        result = merge(list(schemas))
        if inspect.isawaitable(result):
            result = await result
    except CompositionError:
        raise
    except Exception as e:
        msg = f"Schema merge failed: {e}"
        raise CompositionError(msg) from e
    log.info("Composed schema from %d fragment(s)", len(schemas))
    return result
