"""Shared text helpers for GraphQL naming (type names, field names)."""

import re

_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def _words(name: str) -> list[str]:
    return _WORD_RE.findall(name)


def _ensure_leading(name: str) -> str:
    """GraphQL names must not start with a digit; empty names become '_'."""
    if not name:
        return "_"
    return f"_{name}" if name[0].isdigit() else name


def to_pascal_case(name: str) -> str:
    """Convert any separator style to PascalCase (e.g. my-service -> MyService, pet_status -> PetStatus)."""
    return _ensure_leading("".join(w[0].upper() + w[1:] for w in _words(name)))


def to_camel_case(name: str) -> str:
    """Convert to camelCase (e.g. list_pets -> listPets, get-user -> getUser, listPets -> listPets)."""
    pascal = "".join(w[0].upper() + w[1:] for w in _words(name))
    return _ensure_leading(pascal[:1].lower() + pascal[1:])


def field_name(name: str) -> str:
    """GraphQL-safe field/argument name; keeps valid names as-is."""
    if re.fullmatch(r"[_A-Za-z][_0-9A-Za-z]*", name) and not name.startswith("__"):
        return name
    return to_camel_case(name)


def operation_field_name(method: str, path: str, operation_id: str | None) -> str:
    """Field name for an operation: camelCased operationId, else method + path segments.

    e.g. ("get", "/pets/{petId}", None) -> getPetsPetId
    """
    if operation_id:
        return to_camel_case(operation_id)
    return to_camel_case(f"{method} {path}")
