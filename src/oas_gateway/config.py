"""Gateway settings: defaults, overrides, and YAML config file loading.

Config YAML format:
- specifications_dir: directory of OpenAPI documents (relative to base_dir)
- environment_variable: env var naming the deployment environment (default APP_ENV)
- environment (optional): explicit environment, overrides the env var
- options (optional): converter options shared by every service (headers, timeout, ...)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

DEFAULT_ENV_VAR = "APP_ENV"

DEFAULT_SETTINGS: dict[str, Any] = {
    "specifications_dir": "specifications",
    "environment_variable": DEFAULT_ENV_VAR,
    "environment": None,
    "options": {},
}


def resolve_settings(overrides: dict[str, Any] | None) -> dict[str, Any]:
    """Return settings dict with defaults filled. Unknown keys are dropped."""
    out = dict(DEFAULT_SETTINGS)
    out["options"] = {}
    if overrides is None:
        return out
    out.update({k: v for k, v in overrides.items() if k in out and v is not None})
    if not isinstance(out["options"], dict):
        msg = f"options must be a mapping, got {type(out['options']).__name__}"
        raise ValueError(msg)
    out["options"] = dict(out["options"])
    return out


def load_gateway_config(config_path: Path, base_dir: Path | None = None) -> dict[str, Any]:
    """Load and normalize gateway config from YAML.

    specifications_dir is resolved relative to base_dir (default: cwd).

    Returns:
        Settings dict; "specifications_dir" is an absolute Path.
    """
    import yaml

    with config_path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        msg = f"Gateway config must be a mapping: {config_path}"
        raise ValueError(msg)

    settings = resolve_settings(data)
    base = (Path(base_dir) if base_dir else Path.cwd()).resolve()
    specs_dir = Path(str(settings["specifications_dir"]))
    settings["specifications_dir"] = specs_dir if specs_dir.is_absolute() else (base / specs_dir).resolve()
    return settings
