from __future__ import annotations

import pytest

from envbind.errors import (
    CoercionError,
    EnvBindError,
    InvalidBoolError,
    InvalidDurationError,
    InvalidNumberError,
    InvalidStructuredValueError,
    RequiredValueMissingError,
    is_secret,
)


def test_message_includes_field_key_and_raw() -> None:
    error = InvalidNumberError("invalid integer", key="PORT", raw="eighty")
    error.at("port").at("server")
    assert error.field == "server.port"
    assert str(error) == "server.port: invalid integer [env PORT] (received='eighty')"


def test_bracketed_paths_join_without_dot() -> None:
    error = InvalidBoolError("invalid boolean", raw="maybe")
    error.at("[1]").at("[flags]").at("features")
    assert error.field == "features[flags][1]"


def test_at_keeps_first_key() -> None:
    error = RequiredValueMissingError("required variable is not set", key="A")
    error.at("a", key="B")
    assert error.key == "A"


@pytest.mark.parametrize(
    ("names", "expected"),
    [
        (("db_password",), True),
        (("value", "SERVICE_API_KEY"), True),
        (("github_token",), True),
        (("port", "PORT"), False),
        ((None, ""), False),
    ],
)
def test_is_secret(names, expected: bool) -> None:
    assert is_secret(*names) is expected


def test_coercion_errors_are_value_errors() -> None:
    for error_type in (
        InvalidBoolError,
        InvalidNumberError,
        InvalidDurationError,
        InvalidStructuredValueError,
    ):
        assert issubclass(error_type, CoercionError)
        assert issubclass(error_type, ValueError)
        assert issubclass(error_type, EnvBindError)
    assert issubclass(EnvBindError, RuntimeError)
