import pytest

from taxisim.charge import ChargeAmount, apply_charge
from taxisim.money import Money
from taxisim.user_data import UserData


def _data(amount: str) -> UserData:
    password = "password"
    return UserData(password=password, money=Money.from_decimal_string(amount))


def test_charge_ten_from_zero():
    data = _data("0")
    apply_charge(data, ChargeAmount.YUAN_10)
    assert str(data.money) == "10.00"


def test_charge_returns_same_object():
    data = _data("3")
    assert apply_charge(data, ChargeAmount.YUAN_50) is data


def test_charge_keeps_password():
    data = _data("0")
    apply_charge(data, ChargeAmount.YUAN_200)
    assert data.password == "password"


def test_two_tens_equal_one_twenty():
    twice = _data("7")
    apply_charge(twice, ChargeAmount.YUAN_10)
    apply_charge(twice, ChargeAmount.YUAN_10)
    once = _data("7")
    apply_charge(once, ChargeAmount.YUAN_20)
    assert twice.money == once.money


@pytest.mark.parametrize("amount", [a for a in ChargeAmount if a is not ChargeAmount.DEFAULT])
def test_charge_increases_balance(amount):
    data = _data("1.5")
    before = data.money
    apply_charge(data, amount)
    assert data.money > before
    assert data.money - before == amount.money


def test_amounts_are_ordered():
    balances = [
        str(apply_charge(_data("0"), amount).money)
        for amount in ChargeAmount
        if amount is not ChargeAmount.DEFAULT
    ]
    assert balances == ["10.00", "20.00", "30.00", "50.00", "100.00", "200.00"]


def test_default_amount_is_rejected():
    data = _data("0")
    with pytest.raises(ValueError):
        apply_charge(data, ChargeAmount.DEFAULT)
    assert data.money == Money()


def test_missing_user_data_is_rejected():
    with pytest.raises(ValueError):
        apply_charge(None, ChargeAmount.YUAN_10)


def test_amount_from_yuan_value():
    assert ChargeAmount(100) is ChargeAmount.YUAN_100