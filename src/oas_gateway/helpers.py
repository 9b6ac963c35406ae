"""Shared helpers for oas_gateway (spec file listing/loading, identifiers).

Used by specs, config, and cli modules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

# --- Identifiers ---


def service_identifier(filename: str) -> str:
    """Identifier from a `<identifier>-<anything>.<ext>` filename: text before the first '-'.

    A filename without '-' is used whole (e.g. "alpha.json" -> "alpha.json").
    """
    return filename.split("-", 1)[0]


# --- Spec / file ---


def load_spec_document(p: Path) -> Any:
    """Load a JSON or YAML OpenAPI document from path (.json via json, anything else via YAML)."""
    with p.open(encoding="utf-8") as f:
        if p.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def find_specification_files(root: Path) -> list[Path]:
    """Regular, non-hidden files directly under root, sorted by name. Raises OSError if unreadable."""
    out: list[Path] = []
    for p in root.iterdir():
        if p.name.startswith(".") or not p.is_file():
            continue
        out.append(p)
    return sorted(out, key=lambda p: p.name)

