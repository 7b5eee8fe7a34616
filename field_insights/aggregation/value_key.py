import math
from decimal import Decimal
from typing import Any, Tuple


class UnstringifiableValue(ValueError):
    """Raised when a value has no canonical string form."""


class ValueKey:
    NULL_KEY = "null"
    TRUE_KEY = "true"
    FALSE_KEY = "false"

    # Decimal-point positions written without an exponent: 1e-6 <= |x| < 1e21
    MAX_PLAIN_POSITION = 21
    MIN_PLAIN_POSITION = -5

    @classmethod
    def canonical(cls, value: Any) -> str:
        if value is None:
            return cls.NULL_KEY

        if isinstance(value, str):
            return value

        if isinstance(value, bool):
            return cls.TRUE_KEY if value else cls.FALSE_KEY

        if isinstance(value, int):
            return str(value)

        if isinstance(value, float):
            return cls._format_float(value)

        if isinstance(value, (dict, list, tuple, set, frozenset, bytes, bytearray)):
            raise UnstringifiableValue(f"non-scalar value of type {type(value).__name__}")

        # Decimal, numpy scalars and other number-likes
        try:
            as_float = float(value)
        except (TypeError, ValueError, OverflowError):
            as_float = None
        if as_float is not None:
            return cls._format_float(as_float)

        try:
            return str(value)
        except Exception as e:
            raise UnstringifiableValue(f"str() failed for {type(value).__name__}: {e}") from e

    @classmethod
    def _format_float(cls, value: float) -> str:
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value == 0:
            return "0"

        sign = "-" if value < 0 else ""
        digits, point = cls._shortest_digits(abs(value))
        size = len(digits)

        if size <= point <= cls.MAX_PLAIN_POSITION:
            return sign + digits + "0" * (point - size)
        if 0 < point <= cls.MAX_PLAIN_POSITION:
            return sign + digits[:point] + "." + digits[point:]
        if cls.MIN_PLAIN_POSITION <= point <= 0:
            return sign + "0." + "0" * -point + digits

        exponent = point - 1
        mantissa = digits[0] + ("." + digits[1:] if size > 1 else "")
        return f"{sign}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"

    @staticmethod
    def _shortest_digits(value: float) -> Tuple[str, int]:
        """
        Shortest round-trip digits of a positive float and the position of
        the decimal point relative to them (value = 0.DIGITS * 10**point).
        """
        _, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
        digits = "".join(str(d) for d in digit_tuple).rstrip("0")
        exponent += len(digit_tuple) - len(digits)
        return digits, exponent + len(digits)
