from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from event_document_relay.errors import InvalidValueError, RelayConfigurationError


def uppercase(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``record`` with its ``value`` field upper-cased."""

    value = record.get("value")
    if not isinstance(value, str):
        raise InvalidValueError(
            f"Record {record.get('id')!r} has no string 'value' (got {type(value).__name__})"
        )
    return {**record, "value": value.upper()}


FUNCTIONS: dict[str, Callable[[Any], Any]] = {
    "uppercase": uppercase,
}


def resolve_function(name: str) -> Callable[[Any], Any]:
    try:
        return FUNCTIONS[name]
    except KeyError:
        known = ", ".join(sorted(FUNCTIONS))
        raise RelayConfigurationError(
            f"Unknown function '{name}' (known: {known})"
        ) from None
