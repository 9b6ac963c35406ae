"""CLI for specifications: oas-gateway available | spec <id> | base-url <id> | schema."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import yaml
from graphql import print_schema

from oas_gateway.cli.parse_common import parse_flags, path_resolver
from oas_gateway.config import load_gateway_config
from oas_gateway.errors import GatewayError
from oas_gateway.gateway import OasSpecifications

COMMON_USAGE = "[--specs-dir <path>] [--config <path>] [--env <name>] [--verbose]"


def parse_common_argv(argv: list[str]) -> tuple[dict[str, Any], list[str]]:
    """Parse shared flags. Returns (parsed, positional args)."""
    return parse_flags(
        argv,
        ("specs_dir", "--specs-dir", None, path_resolver),
        ("config", "--config", None, path_resolver),
        ("env", "--env", None, None),
        ("output", "--output", None, Path),
        switches=("--verbose",),
    )


def _settings(parsed: dict[str, Any]) -> dict[str, Any]:
    if parsed["config"] is not None:
        if not parsed["config"].exists():
            print(f"Error: Gateway config file not found: {parsed['config']}", file=sys.stderr)
            sys.exit(1)
        settings = load_gateway_config(parsed["config"], base_dir=parsed["config"].parent)
    else:
        settings = {"specifications_dir": Path.cwd() / "specifications"}
    if parsed["specs_dir"] is not None:
        settings["specifications_dir"] = parsed["specs_dir"]
    if parsed["env"] is not None:
        settings["environment"] = parsed["env"]
    return settings


def _gateway(parsed: dict[str, Any]) -> OasSpecifications:
    try:
        return OasSpecifications.from_settings(_settings(parsed))
    except (GatewayError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def run_available(parsed: dict[str, Any]) -> None:
    """oas-gateway available: identifiers with info summary, as JSON."""
    print(json.dumps(_gateway(parsed).available(), indent=2, sort_keys=True, default=str))


def run_spec(parsed: dict[str, Any], args: list[str]) -> None:
    """oas-gateway spec <id>: the stored document, as JSON."""
    if len(args) != 1:
        print(f"Usage: oas-gateway spec <id> {COMMON_USAGE}", file=sys.stderr)
        sys.exit(1)
    document = _gateway(parsed).specification(args[0])
    if document is None:
        print(f"Error: Unknown service: {args[0]}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(document, indent=2, default=str))


def run_base_url(parsed: dict[str, Any], args: list[str]) -> None:
    """oas-gateway base-url <id> [--env <name>]."""
    if len(args) != 1:
        print(f"Usage: oas-gateway base-url <id> {COMMON_USAGE}", file=sys.stderr)
        sys.exit(1)
    gateway = _gateway(parsed)
    if gateway.specification(args[0]) is None:
        print(f"Error: Unknown service: {args[0]}", file=sys.stderr)
        sys.exit(1)
    url = gateway.base_url(args[0], parsed["env"])
    if url is None:
        print(f"Error: No servers declared for {args[0]}", file=sys.stderr)
        sys.exit(1)
    print(url)


def run_schema(parsed: dict[str, Any]) -> None:
    """oas-gateway schema [--output <path>]: composed schema as SDL."""
    gateway = _gateway(parsed)
    try:
        schema = asyncio.run(gateway.to_graphql(environment=parsed["env"]))
    except GatewayError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sdl = print_schema(schema) + "\n"
    out: Path | None = parsed["output"]
    if out is None:
        sys.stdout.write(sdl)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(sdl, encoding="utf-8")
    print(f"Wrote GraphQL schema: {out}")
