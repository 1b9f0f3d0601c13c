"""Topping up a user's balance by one of the fixed amounts on offer."""

from __future__ import annotations

import enum

from .money import Money
from .user_data import UserData


class ChargeAmount(enum.Enum):
    """The amounts, in yuan, that a balance can be topped up by."""

    DEFAULT = 0
    YUAN_10 = 10
    YUAN_20 = 20
    YUAN_30 = 30
    YUAN_50 = 50
    YUAN_100 = 100
    YUAN_200 = 200

    @property
    def money(self) -> Money:
        """The amount as money; DEFAULT stands for no choice and has none."""
        if self is ChargeAmount.DEFAULT:
            raise ValueError("no charge amount chosen")
        return Money.from_decimal_string(str(self.value))


def apply_charge(user_data: UserData | None, amount: ChargeAmount) -> UserData:
    """Add a charge amount to a user's balance in place and return the data."""
    if user_data is None:
        raise ValueError("no passenger data to charge")
    amount = ChargeAmount(amount)
    user_data.money = user_data.money + amount.money
    return user_data