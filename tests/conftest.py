"""Pytest fixtures for oas_gateway tests."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml
from spec_documents import ALPHA, BETA


@pytest.fixture
def write_spec(tmp_path: Path) -> Callable[[str, dict[str, Any]], Path]:
    """Write a document into tmp_path/specifications as JSON or YAML (by suffix)."""
    specs = tmp_path / "specifications"
    specs.mkdir(exist_ok=True)

    def _write(filename: str, document: dict[str, Any]) -> Path:
        path = specs / filename
        if path.suffix == ".json":
            path.write_text(json.dumps(document))
        else:
            path.write_text(yaml.safe_dump(document, sort_keys=False))
        return path

    return _write


@pytest.fixture
def specs_dir(tmp_path: Path, write_spec: Callable[[str, dict[str, Any]], Path]) -> Path:
    """alpha (no info, env-tagged servers) and beta (x-expose-graphql: false)."""
    write_spec("alpha-service.json", ALPHA)
    write_spec("beta-service.json", BETA)
    return tmp_path / "specifications"
