"""Tests for convert_all: exposure filtering, per-entry options, ordering, fail-fast."""

import asyncio
from pathlib import Path
from typing import Any

import pytest
from graphql import GraphQLField, GraphQLObjectType, GraphQLSchema, GraphQLString
from spec_documents import GAMMA

from oas_gateway.errors import ConversionError
from oas_gateway.schema.convert import ConversionResult
from oas_gateway.schema.orchestrate import convert_all
from oas_gateway.specs.registry import SpecificationRegistry


def _tiny_schema(field: str) -> GraphQLSchema:
    return GraphQLSchema(query=GraphQLObjectType("Query", {field: GraphQLField(GraphQLString)}))


class RecordingConverter:
    """Records (title, options) per call; fails for titles in fail_on."""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail_on = fail_on
        self.active = 0
        self.max_active = 0

    async def convert(self, document: dict[str, Any], options: dict[str, Any]) -> ConversionResult:
        title = (document.get("info") or {}).get("title", "alpha")
        self.calls.append((title, options))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0)
        self.active -= 1
        if title in self.fail_on:
            msg = f"cannot convert {title}"
            raise RuntimeError(msg)
        options["leak"] = title
        return ConversionResult(schema=_tiny_schema(title.lower()), report={"ignored": True})


@pytest.fixture
def registry(specs_dir: Path, write_spec) -> SpecificationRegistry:
    write_spec("gamma-service.yaml", GAMMA)
    return SpecificationRegistry(specs_dir)


@pytest.mark.asyncio
async def test_skips_unexposed_and_keeps_registry_order(registry: SpecificationRegistry) -> None:
    converter = RecordingConverter()
    fragments = await convert_all(registry, converter=converter, environment="production")
    assert [title for title, _ in converter.calls] == ["alpha", "Gamma"]
    assert [list(f.query_type.fields) for f in fragments] == [["alpha"], ["gamma"]]
    assert converter.max_active == 1


@pytest.mark.asyncio
async def test_base_url_injected_per_entry_into_fresh_copy(registry: SpecificationRegistry) -> None:
    converter = RecordingConverter()
    options = {"headers": {"Authorization": "Bearer t"}}
    await convert_all(registry, options, converter=converter, environment="production")

    (_, alpha_opts), (_, gamma_opts) = converter.calls
    assert alpha_opts["base_url"] == "https://a.prod"
    assert gamma_opts["base_url"] == "https://g.staging"
    assert alpha_opts is not gamma_opts
    assert alpha_opts["headers"] is options["headers"]
    assert gamma_opts["leak"] == "Gamma"
    assert alpha_opts["leak"] == "alpha"
    assert options == {"headers": {"Authorization": "Bearer t"}}


@pytest.mark.asyncio
async def test_ambient_environment_used(registry: SpecificationRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "local")
    converter = RecordingConverter()
    await convert_all(registry, converter=converter)
    assert converter.calls[0][1]["base_url"] == "http://a.local"


@pytest.mark.asyncio
async def test_failure_aborts_with_identifier(registry: SpecificationRegistry) -> None:
    converter = RecordingConverter(fail_on=("alpha",))
    with pytest.raises(ConversionError) as exc:
        await convert_all(registry, converter=converter)
    assert exc.value.identifier == "alpha"
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert len(converter.calls) == 1


@pytest.mark.asyncio
async def test_skip_failures_is_opt_in(registry: SpecificationRegistry) -> None:
    converter = RecordingConverter(fail_on=("alpha",))
    fragments = await convert_all(registry, converter=converter, skip_failures=True)
    assert [list(f.query_type.fields) for f in fragments] == [["gamma"]]


@pytest.mark.asyncio
async def test_sync_callable_converter_accepted(specs_dir: Path) -> None:
    def convert(document: dict[str, Any], options: dict[str, Any]) -> GraphQLSchema:
        return _tiny_schema("plain")

    fragments = await convert_all(SpecificationRegistry(specs_dir), converter=convert)
    assert len(fragments) == 1


@pytest.mark.asyncio
async def test_timeout_becomes_conversion_error(specs_dir: Path) -> None:
    class Slow:
        async def convert(self, document: dict[str, Any], options: dict[str, Any]) -> GraphQLSchema:
            await asyncio.sleep(5)
            return _tiny_schema("slow")

    with pytest.raises(ConversionError, match="timed out"):
        await convert_all(SpecificationRegistry(specs_dir), converter=Slow(), timeout=0.01)


@pytest.mark.asyncio
async def test_default_converter_used(specs_dir: Path) -> None:
    fragments = await convert_all(SpecificationRegistry(specs_dir), environment="production")
    assert len(fragments) == 1
    assert fragments[0].get_type("Widget") is not None
    assert fragments[0].get_type("Gadget") is None


@pytest.mark.asyncio
async def test_bad_return_type_is_conversion_error(specs_dir: Path) -> None:
    with pytest.raises(ConversionError, match="expected a GraphQL schema"):
        await convert_all(SpecificationRegistry(specs_dir), converter=lambda d, o: {"not": "schema"})
