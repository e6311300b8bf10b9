from __future__ import annotations

import pytest

from event_document_relay.errors import InvalidValueError, RelayConfigurationError
from event_document_relay.transforms import resolve_function, uppercase


def test_uppercase_does_not_mutate_input() -> None:
    record = {"id": 1, "value": "abc", "extra": True}

    result = uppercase(record)

    assert result == {"id": 1, "value": "ABC", "extra": True}
    assert record["value"] == "abc"


@pytest.mark.parametrize("record", [{"id": 2, "value": None}, {"id": 3}, {"id": 4, "value": 12}])
def test_uppercase_rejects_non_string_values(record: dict[str, object]) -> None:
    with pytest.raises(InvalidValueError):
        uppercase(record)


def test_invalid_value_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        uppercase({"id": 2, "value": None})


def test_resolve_function_returns_registered_function() -> None:
    assert resolve_function("uppercase") is uppercase


def test_resolve_function_rejects_unknown_name() -> None:
    with pytest.raises(RelayConfigurationError, match="lowercase"):
        resolve_function("lowercase")
