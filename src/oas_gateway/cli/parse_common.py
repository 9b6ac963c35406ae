"""Shared CLI argument parsing for gateway flags (--specs-dir, --config, --env, --verbose)."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

FlagSpec = tuple[str, str, Any, Callable[[str], Any] | None]


def parse_flags(
    argv: list[str],
    *specs: FlagSpec,
    switches: tuple[str, ...] = (),
) -> tuple[dict[str, Any], list[str]]:
    """Parse `--flag value`, `--flag=value` and boolean switches from argv in one pass.

    Each spec is (key, flag_str, default, converter), e.g.
    ("specs_dir", "--specs-dir", None, path_resolver); converter None keeps the string.
    switches are bare flags such as "--verbose"; their key is the flag without dashes.
    Returns (dict of key -> value, positional/unknown argv).
    """
    by_flag = {flag: (key, converter) for key, flag, _default, converter in specs}
    result: dict[str, Any] = {key: default for key, _flag, default, _conv in specs}
    for sw in switches:
        result[sw.lstrip("-").replace("-", "_")] = False

    rest: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        flag, eq, inline = arg.partition("=")
        if arg in switches:
            result[arg.lstrip("-").replace("-", "_")] = True
            i += 1
        elif flag in by_flag and eq:
            key, converter = by_flag[flag]
            result[key] = converter(inline) if converter else inline
            i += 1
        elif arg in by_flag and i + 1 < len(argv):
            key, converter = by_flag[arg]
            result[key] = converter(argv[i + 1]) if converter else argv[i + 1]
            i += 2
        else:
            rest.append(arg)
            i += 1
    return result, rest


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path."""
    return Path(s).resolve()
