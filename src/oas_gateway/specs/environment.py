"""Pick a document's upstream base URL for a deployment environment.

Servers are tagged with `description: env:<name>` (env:production, env:staging, ...).
No exact match falls back to the first server entry.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from oas_gateway.config import DEFAULT_ENV_VAR

log = logging.getLogger(__name__)

ENV_DESCRIPTOR_PREFIX = "env:"


def ambient_environment(env_var: str = DEFAULT_ENV_VAR) -> str | None:
    """Deployment environment from the process environment, or None if unset."""
    return os.environ.get(env_var)


def resolve_base_url(
    document: dict[str, Any],
    environment: str | None = None,
    *,
    env_var: str = DEFAULT_ENV_VAR,
) -> str | None:
    """Return the url of the server tagged env:<environment>, else the first server's url.

    environment defaults to the env_var environment variable. Returns None when the
    document has no servers (missing, not a list, or empty).
    """
    servers = document.get("servers")
    if not isinstance(servers, list) or not servers:
        return None

    if environment is None:
        environment = ambient_environment(env_var)

    if environment is not None:
        desc = f"{ENV_DESCRIPTOR_PREFIX}{environment}"
        for server in servers:
            if isinstance(server, dict) and server.get("description") == desc:
                return server.get("url")

    first = servers[0]
    log.debug(
        "No server tagged %s%s; falling back to first server entry",
        ENV_DESCRIPTOR_PREFIX,
        environment,
    )
    return first.get("url") if isinstance(first, dict) else None
