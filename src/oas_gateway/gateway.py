"""OasSpecifications: list and retrieve the OpenAPI documents in a specifications
directory, resolve each service's upstream URL for the current environment, and
convert all exposed documents into one GraphQL schema.

The registry is built by the caller (usually the process entry point) and injected;
there is no module-level instance.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from graphql import GraphQLSchema

from oas_gateway.config import DEFAULT_ENV_VAR, load_gateway_config, resolve_settings
from oas_gateway.schema.compose import Merger, compose
from oas_gateway.schema.convert import Converter
from oas_gateway.schema.orchestrate import convert_all
from oas_gateway.specs.registry import SpecificationRegistry

log = logging.getLogger(__name__)


class OasSpecifications:
    """Public operations over one SpecificationRegistry."""

    def __init__(
        self,
        registry: SpecificationRegistry,
        *,
        converter: Converter | None = None,
        merger: Merger | None = None,
        environment: str | None = None,
        options: dict[str, Any] | None = None,
    ):
        self.registry = registry
        self.converter = converter
        self.merger = merger
        self.environment = environment
        self.options = dict(options or {})

    @classmethod
    def from_directory(
        cls,
        directory: Path,
        *,
        env_var: str = DEFAULT_ENV_VAR,
        **kwargs: Any,
    ) -> OasSpecifications:
        """Load the registry from directory (raises LoadError) and wrap it."""
        return cls(SpecificationRegistry(directory, env_var=env_var), **kwargs)

    @classmethod
    def from_settings(cls, settings: dict[str, Any] | None = None, **kwargs: Any) -> OasSpecifications:
        """Build from a settings dict (see oas_gateway.config)."""
        cfg = resolve_settings(settings)
        return cls.from_directory(
            Path(cfg["specifications_dir"]),
            env_var=cfg["environment_variable"],
            environment=cfg["environment"],
            options=cfg["options"],
            **kwargs,
        )

    @classmethod
    def from_config(
        cls, config_path: Path, base_dir: Path | None = None, **kwargs: Any
    ) -> OasSpecifications:
        """Build from a gateway YAML config file."""
        return cls.from_settings(load_gateway_config(config_path, base_dir=base_dir), **kwargs)

    def available(self) -> dict[str, dict[str, Any]]:
        """Identifier -> info block (or {}) plus "filename"; memoized."""
        return self.registry.available()

    def specification(self, identifier: str) -> dict[str, Any] | None:
        """OpenAPI document for identifier, or None."""
        return self.registry.get(identifier)

    def base_url(self, identifier: str, environment: str | None = None) -> str | None:
        """Server url tagged env:<environment> (default: configured/ambient environment), else the first server."""
        if environment is None:
            environment = self.environment
        return self.registry.base_url(identifier, environment)

    async def to_graphql(
        self,
        options: dict[str, Any] | None = None,
        *,
        environment: str | None = None,
        timeout: float | None = None,
        skip_failures: bool = False,
    ) -> GraphQLSchema:
        """Convert every exposed document and merge the fragments into one schema.

        options are converter options shared by all services (merged over the configured
        ones); base_url is set per service. Raises ConversionError or CompositionError.
        """
        base_options = {**self.options, **(options or {})}
        fragments = await convert_all(
            self.registry,
            base_options,
            converter=self.converter,
            environment=environment if environment is not None else self.environment,
            timeout=timeout,
            skip_failures=skip_failures,
        )
        return await compose(fragments, merger=self.merger)
