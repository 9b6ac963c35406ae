"""OpenAPI -> GraphQL conversion: one GraphQL schema fragment per OpenAPI document.

Component schemas (v3 components.schemas, v2 definitions) become object types; GET
operations become Query fields, other methods Mutation fields. Resolvers proxy to the
upstream service at options["base_url"] with httpx.

Options read here:
- base_url: upstream base URL (v2 documents fall back to schemes/host/basePath)
- headers: extra request headers sent upstream
- timeout: upstream request timeout in seconds (default 30)
- include_mutations: expose non-GET operations (default True)
- http_client: an httpx.AsyncClient to reuse instead of one per request
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, Union
from urllib.parse import quote

import httpx
from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLField,
    GraphQLFloat,
    GraphQLInputType,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLString,
)

from oas_gateway.schema._text import field_name, operation_field_name, to_pascal_case

log = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "patch")
DEFAULT_TIMEOUT = 30.0

# Shared across all fragments so the composer sees one type object per name.
GraphQLJSON = GraphQLScalarType(
    name="JSON",
    description="Arbitrary JSON value (objects without declared properties, free-form bodies).",
)

GraphQLBigInt = GraphQLScalarType(
    name="BigInt",
    description="64-bit integer (OpenAPI integer/int64).",
    serialize=int,
    parse_value=int,
)

_SCALARS: dict[str, GraphQLScalarType] = {
    "string": GraphQLString,
    "number": GraphQLFloat,
    "boolean": GraphQLBoolean,
}

_RESERVED_TYPE_NAMES = {
    "Query",
    "Mutation",
    "Subscription",
    "JSON",
    "BigInt",
    "String",
    "Int",
    "Float",
    "Boolean",
    "ID",
}


@dataclass
class ConversionResult:
    schema: GraphQLSchema
    report: dict[str, Any] = field(default_factory=dict)


ConversionOutput = Union[ConversionResult, GraphQLSchema]


class Converter(Protocol):
    """convert(document, options) -> ConversionResult or GraphQLSchema, optionally awaitable."""

    def convert(
        self, document: dict[str, Any], options: dict[str, Any]
    ) -> ConversionOutput | Awaitable[ConversionOutput]: ...


def _schema_type(schema: dict[str, Any]) -> str | None:
    """OpenAPI type; 3.1 type lists use the first non-null entry."""
    t = schema.get("type")
    if isinstance(t, list):
        t = next((x for x in t if x != "null"), None)
    if t is None and "properties" in schema:
        return "object"
    return t


def _ref_name(ref: str) -> str:
    for prefix in ("#/components/schemas/", "#/definitions/"):
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    msg = f"Unsupported $ref: {ref}"
    raise ValueError(msg)


def v2_base_url(document: dict[str, Any]) -> str | None:
    """Swagger 2.0 base URL from schemes/host/basePath, or None without host."""
    host = document.get("host")
    if not host:
        return None
    schemes = document.get("schemes") or ["https"]
    return f"{schemes[0]}://{host}{document.get('basePath', '')}".rstrip("/")


def _key_resolver(key: str) -> Callable[..., Any]:
    def resolve(obj: Any, _info: Any) -> Any:
        return obj.get(key) if isinstance(obj, dict) else None

    return resolve


class _FragmentBuilder:
    """Builds one GraphQLSchema for one OpenAPI document."""

    def __init__(self, document: dict[str, Any], options: dict[str, Any]):
        self.document = document
        self.options = options
        components = document.get("components") or {}
        self.schemas: dict[str, Any] = components.get("schemas") or document.get("definitions") or {}
        self.parameters: dict[str, Any] = (
            components.get("parameters") or document.get("parameters") or {}
        )
        self.base_url: str | None = options.get("base_url") or v2_base_url(document)
        self._types: dict[str, GraphQLOutputType] = {}
        self._objects: list[GraphQLObjectType] = []
        self._used_names: set[str] = set(_RESERVED_TYPE_NAMES)
        self._resolving: set[str] = set()
        self.report: dict[str, Any] = {"queries": 0, "mutations": 0, "skipped": []}

    def _unique_name(self, name: str) -> str:
        base = to_pascal_case(name)
        candidate = base
        n = 2
        while candidate in self._used_names:
            candidate = f"{base}{n}"
            n += 1
        self._used_names.add(candidate)
        return candidate

    def _deref(self, schema: dict[str, Any]) -> dict[str, Any]:
        if "$ref" in schema:
            name = _ref_name(schema["$ref"])
            if name not in self.schemas:
                msg = f"Unresolvable $ref: {schema['$ref']}"
                raise ValueError(msg)
            return self.schemas[name]
        return schema

    def _properties(self, schema: dict[str, Any]) -> dict[str, Any]:
        props: dict[str, Any] = {}
        for part in schema.get("allOf") or []:
            if isinstance(part, dict):
                props.update(self._properties(self._deref(part)))
        props.update(schema.get("properties") or {})
        return props

    # --- Output types ---

    def component_type(self, name: str) -> GraphQLOutputType:
        if name in self._types:
            return self._types[name]
        if name not in self.schemas:
            msg = f"Unresolvable $ref: {name}"
            raise ValueError(msg)
        if name in self._resolving:
            return GraphQLJSON
        self._resolving.add(name)
        try:
            gql_type = self.output_type(self.schemas[name], name)
        finally:
            self._resolving.discard(name)
        self._types[name] = gql_type
        return gql_type

    def output_type(self, schema: Any, hint: str) -> GraphQLOutputType:
        if not isinstance(schema, dict):
            return GraphQLJSON
        if "$ref" in schema:
            return self.component_type(_ref_name(schema["$ref"]))
        t = _schema_type(schema)
        if t in _SCALARS:
            return _SCALARS[t]
        if t == "integer":
            return GraphQLBigInt if schema.get("format") == "int64" else GraphQLInt
        if t == "array":
            return GraphQLList(self.output_type(schema.get("items") or {}, f"{hint}Item"))
        if (t == "object" or "allOf" in schema) and self._properties(schema):
            return self._object_type(schema, hint)
        return GraphQLJSON

    def _object_type(self, schema: dict[str, Any], hint: str) -> GraphQLObjectType:
        name = self._unique_name(hint)

        def fields() -> dict[str, GraphQLField]:
            out: dict[str, GraphQLField] = {}
            for prop, prop_schema in self._properties(schema).items():
                fname = field_name(prop)
                out[fname] = GraphQLField(
                    self.output_type(prop_schema, f"{name}{to_pascal_case(prop)}"),
                    description=prop_schema.get("description") if isinstance(prop_schema, dict) else None,
                    resolve=_key_resolver(prop) if fname != prop else None,
                )
            return out

        obj = GraphQLObjectType(name, fields, description=schema.get("description"))
        self._objects.append(obj)
        return obj

    # --- Input types ---

    def input_type(self, schema: Any) -> GraphQLInputType:
        if not isinstance(schema, dict):
            return GraphQLJSON
        if "$ref" in schema:
            schema = self._deref(schema)
        t = _schema_type(schema)
        if t in _SCALARS:
            return _SCALARS[t]
        if t == "integer":
            return GraphQLBigInt if schema.get("format") == "int64" else GraphQLInt
        if t == "array":
            return GraphQLList(self.input_type(schema.get("items") or {}))
        return GraphQLJSON

    # --- Operations ---

    def _resolve_parameter(self, param: dict[str, Any]) -> dict[str, Any]:
        ref = param.get("$ref")
        if not ref:
            return param
        name = ref.rsplit("/", 1)[-1]
        if name not in self.parameters:
            msg = f"Unresolvable parameter $ref: {ref}"
            raise ValueError(msg)
        return self.parameters[name]

    def _response_schema(self, op: dict[str, Any]) -> Any:
        responses = op.get("responses") or {}
        codes = sorted(str(c) for c in responses if str(c).startswith("2"))
        if "default" in responses:
            codes.append("default")
        for code in codes:
            response = responses.get(code)
            if response is None:
                response = responses.get(int(code)) if code.isdigit() else None
            if not isinstance(response, dict):
                continue
            if "schema" in response:
                return response["schema"]
            for media, content in (response.get("content") or {}).items():
                if "json" in media and isinstance(content, dict) and "schema" in content:
                    return content["schema"]
            return None
        return None

    def operation_field(
        self, path: str, method: str, op: dict[str, Any], shared_params: list[Any]
    ) -> tuple[str, GraphQLField]:
        params = [self._resolve_parameter(p) for p in [*shared_params, *(op.get("parameters") or [])]]
        args: dict[str, GraphQLArgument] = {}
        arg_map: dict[str, tuple[str, str]] = {}
        has_body = "requestBody" in op
        body_required = bool((op.get("requestBody") or {}).get("required"))
        for param in params:
            location = param.get("in")
            if location == "body":
                has_body = True
                body_required = bool(param.get("required"))
                continue
            if location not in ("path", "query"):
                continue
            arg_type = self.input_type(param.get("schema", param))
            if location == "path" or param.get("required"):
                arg_type = GraphQLNonNull(arg_type)
            aname = field_name(param["name"])
            args[aname] = GraphQLArgument(arg_type, description=param.get("description"))
            arg_map[aname] = (param["name"], location)

        body_arg = None
        if has_body:
            body_arg = "requestBody" if "body" in args else "body"
            args[body_arg] = GraphQLArgument(
                GraphQLNonNull(GraphQLJSON) if body_required else GraphQLJSON,
                description="Request body sent as JSON.",
            )

        fname = operation_field_name(method, path, op.get("operationId"))
        return_type = self.output_type(self._response_schema(op), f"{fname}Response")
        return fname, GraphQLField(
            return_type,
            args=args,
            description=op.get("summary") or op.get("description"),
            resolve=self._make_resolver(method, path, arg_map, body_arg),
        )

    def _make_resolver(
        self,
        method: str,
        path: str,
        arg_map: dict[str, tuple[str, str]],
        body_arg: str | None,
    ) -> Callable[..., Awaitable[Any]]:
        base_url = self.base_url
        headers = dict(self.options.get("headers") or {})
        timeout = self.options.get("timeout", DEFAULT_TIMEOUT)
        client = self.options.get("http_client")

        async def resolve(_root: Any, _info: Any, **kwargs: Any) -> Any:
            if not base_url:
                msg = f"No base URL configured for {method.upper()} {path}"
                raise ValueError(msg)
            url_path = path
            query: dict[str, Any] = {}
            for aname, (pname, location) in arg_map.items():
                value = kwargs.get(aname)
                if value is None:
                    continue
                if location == "path":
                    url_path = url_path.replace(f"{{{pname}}}", quote(str(value), safe=""))
                else:
                    query[pname] = value
            url = f"{base_url.rstrip('/')}/{url_path.lstrip('/')}"
            body = kwargs.get(body_arg) if body_arg else None
            return await _send(client, method, url, query, body, headers, timeout)

        return resolve

    def build(self) -> ConversionResult:
        queries: dict[str, GraphQLField] = {}
        mutations: dict[str, GraphQLField] = {}
        include_mutations = self.options.get("include_mutations", True)

        for name in self.schemas:
            self.component_type(name)

        for path, path_item in (self.document.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                self.report["skipped"].append(str(path))
                continue
            shared = path_item.get("parameters") or []
            for method in HTTP_METHODS:
                op = path_item.get(method)
                if op is None:
                    continue
                if not isinstance(op, dict):
                    self.report["skipped"].append(f"{method.upper()} {path}")
                    continue
                if method != "get" and not include_mutations:
                    continue
                target = queries if method == "get" else mutations
                fname, gql_field = self.operation_field(path, method, op, shared)
                if fname in target:
                    log.warning("Duplicate operation field %r (%s %s); renamed", fname, method.upper(), path)
                    n = 2
                    while f"{fname}{n}" in target:
                        n += 1
                    fname = f"{fname}{n}"
                target[fname] = gql_field

        if not queries and not mutations:
            msg = "Document has no operations to expose"
            raise ValueError(msg)

        self.report["queries"] = len(queries)
        self.report["mutations"] = len(mutations)
        self.report["types"] = len(self._objects)
        schema = GraphQLSchema(
            query=GraphQLObjectType("Query", queries) if queries else None,
            mutation=GraphQLObjectType("Mutation", mutations) if mutations else None,
            types=list(self._objects),
        )
        return ConversionResult(schema=schema, report=self.report)


async def _send(
    client: httpx.AsyncClient | None,
    method: str,
    url: str,
    query: dict[str, Any],
    body: Any,
    headers: dict[str, str],
    timeout: float,
) -> Any:
    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            return await _send(own_client, method, url, query, body, headers, timeout)
    response = await client.request(
        method.upper(),
        url,
        params=query or None,
        json=body,
        headers=headers or None,
    )
    response.raise_for_status()
    if not response.content:
        return None
    return response.json()


class OpenAPIConverter:
    """Default converter: builds a GraphQL schema fragment from one OpenAPI document."""

    async def convert(self, document: dict[str, Any], options: dict[str, Any]) -> ConversionResult:
        result = _FragmentBuilder(document, options).build()
        log.debug(
            "Converted %s: %d queries, %d mutations, %d types",
            (document.get("info") or {}).get("title", "<untitled>"),
            result.report["queries"],
            result.report["mutations"],
            result.report["types"],
        )
        return result
