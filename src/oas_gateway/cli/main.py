"""Main CLI entry point for oas-gateway."""

import logging
import sys

from oas_gateway.cli import specs_cmd


def _usage() -> None:
    print("Usage: oas-gateway <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print("  available         - List services with their info summary (JSON)", file=sys.stderr)
    print("  spec <id>         - Print one service's OpenAPI document (JSON)", file=sys.stderr)
    print(
        "  base-url <id>     - Upstream base URL for the environment (--env or $APP_ENV)",
        file=sys.stderr,
    )
    print(
        "  schema            - Compose the GraphQL schema and print SDL (--output <path>)",
        file=sys.stderr,
    )
    print(f"Common flags: {specs_cmd.COMMON_USAGE}", file=sys.stderr)


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        _usage()
        sys.exit(1)

    command = sys.argv[1]
    parsed, args = specs_cmd.parse_common_argv(sys.argv[2:])
    logging.basicConfig(
        level=logging.DEBUG if parsed["verbose"] else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if command == "available":
        specs_cmd.run_available(parsed)
    elif command == "spec":
        specs_cmd.run_spec(parsed, args)
    elif command == "base-url":
        specs_cmd.run_base_url(parsed, args)
    elif command == "schema":
        specs_cmd.run_schema(parsed)
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        _usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
