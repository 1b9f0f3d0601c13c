"""Exact money amounts counted in fen, the hundredth part of a yuan."""

from __future__ import annotations

import math
from dataclasses import dataclass

_DIGITS = frozenset("0123456789")


class MoneyFormatError(ValueError):
    """Raised when a value does not describe a valid amount of money."""


def _is_number(text: str) -> bool:
    return text.count(".") <= 1 and all(c in _DIGITS or c == "." for c in text)


def _decimal_places(text: str) -> int:
    _, dot, fraction = text.partition(".")
    if not dot:
        return 0
    return len(fraction.rstrip("0"))


def is_valid_amount(value: str | float) -> bool:
    """Tell whether a yuan amount has at most two decimal places.

    Strings must consist of digits and at most one dot; numbers must be
    finite and become whole when multiplied by one hundred.
    """
    if isinstance(value, str):
        return _is_number(value) and _decimal_places(value) <= 2
    if isinstance(value, (int, float)):
        scaled = value * 100
        return math.isfinite(scaled) and scaled == int(scaled)
    raise TypeError(f"cannot check an amount of type {type(value).__name__}")


def _text_to_fen(text: str) -> int:
    integer, _, fraction = text.partition(".")
    fraction = fraction[:2].ljust(2, "0")
    if integer in ("", "-", "+"):
        integer += "0"
    return int(integer + fraction)


@dataclass(frozen=True)
class Money:
    """An amount of money held as a whole number of fen."""

    fen: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.fen, int):
            raise TypeError("fen must be an integer")

    @classmethod
    def from_yuan(cls, text: str) -> Money:
        """Parse a yuan amount as a floating-point number."""
        try:
            value = float(text)
        except (TypeError, ValueError) as exc:
            raise MoneyFormatError(f"money format error: {text!r}") from exc
        scaled = value * 100
        if not math.isfinite(scaled) or scaled != int(scaled):
            raise MoneyFormatError(f"money format error: {text!r}")
        return cls(int(scaled))

    @classmethod
    def from_decimal_string(cls, text: str) -> Money:
        """Parse a yuan amount written with digits and at most two decimals."""
        if not isinstance(text, str):
            raise TypeError("amount text must be a string")
        if not is_valid_amount(text):
            raise MoneyFormatError(f"money format error: {text!r}")
        return cls(_text_to_fen(text))

    @classmethod
    def from_fen(cls, fen: int) -> Money:
        """Build an amount from a whole number of fen."""
        return cls(fen)

    def to_float(self) -> float:
        """Return the whole yuan part of the amount as a float."""
        whole = abs(self.fen) // 100
        return float(whole if self.fen >= 0 else -whole)

    def __str__(self) -> str:
        return f"{self.fen / 100:.2f}"

    def __add__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.fen + other.fen)

    def __sub__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.fen - other.fen)

    def __mul__(self, factor: object) -> Money:
        if not isinstance(factor, int):
            return NotImplemented
        return Money(self.fen * factor)

    __rmul__ = __mul__

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.fen < other.fen

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.fen <= other.fen

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.fen > other.fen

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.fen >= other.fen