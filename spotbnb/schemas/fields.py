"""Field checks shared by request bodies.

Each check takes the raw JSON value and either returns the cleaned value or
raises ``ValueError`` with the message shown to API clients.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any


def required_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(message)
    return value.strip()


def decimal_in_range(value: Any, message: str, *, bound: float) -> float:
    if value is None or isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(message)
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(message) from None
    if not number.is_finite() or abs(number) > Decimal(str(bound)):
        raise ValueError(message)
    return float(number)


def integer_in_range(value: Any, message: str, *, minimum: int, maximum: int | None = None) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError(message)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(message)
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValueError(message) from None
    elif not isinstance(value, int):
        raise ValueError(message)

    if value < minimum or (maximum is not None and value > maximum):
        raise ValueError(message)
    return value
