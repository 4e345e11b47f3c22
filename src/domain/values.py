"""
Fixture values - the scalar types a record may carry.

Record values arrive dynamically typed from the fixture decoder. They are
classified into a closed set of kinds at the boundary and only the
``NOW()`` sentinel is transformed before binding.
"""

from collections.abc import Callable
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from .exceptions import DecodeError

# String token replaced with the current time when a record is bound.
NOW_SENTINEL = "NOW()"

FixtureValue = str | int | float | bool | date | datetime | time | None
Record = dict[str, FixtureValue]
FixtureSet = dict[str, list[Record]]


class ValueKind(str, Enum):
    """Kinds of scalar values accepted in fixture records."""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    TIMESTAMP = "timestamp"
    NULL = "null"


def classify_value(value: Any, path: str = "<fixture>") -> ValueKind:
    """
    Return the kind of a record value.

    Raises:
        DecodeError: If the value is not a supported scalar
    """
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TIMESTAMP if value == NOW_SENTINEL else ValueKind.STRING
    if isinstance(value, (date, datetime, time)):
        return ValueKind.TIMESTAMP
    raise DecodeError(path, f"unsupported value of type {type(value).__name__}")


def bind_value(value: FixtureValue, clock: Callable[[], datetime]) -> Any:
    """
    Convert a record value to the parameter bound for it.

    The sentinel string becomes ``clock()``; every other value is passed
    through unchanged.
    """
    if isinstance(value, str) and value == NOW_SENTINEL:
        return clock()
    return value
