import random

import pytest

from taxisim.city_map import CityMap, OrderError
from taxisim.driver import DriverState
from taxisim.money import Money
from taxisim.order import OrderInfo, Point
from taxisim.trip_manager import TripManager
from taxisim.user_data import UserData, UserDataStore


@pytest.fixture
def store(tmp_path):
    s = UserDataStore(tmp_path / "users.json")
    password = "password"
    s.add("alice", UserData(password=password, money=Money.from_decimal_string("100")))
    s.add("bob", UserData(password=password, money=Money.from_decimal_string("1")))
    return s


@pytest.fixture
def city(store):
    manager = TripManager(store, 12, random.Random(2), lambda seconds: None)
    return CityMap(store, 12, 100, manager)


def test_cell_size_follows_map_size(city):
    assert city.cell_size * city.map_length == city.map_size
    city.map_size = 600
    assert city.cell_size * city.map_length == 600


def test_add_passenger_places_and_notifies(city):
    seen = []
    city.passenger_changed.connect(seen.append)
    passenger = city.add_passenger("alice", Point(300, 200))
    assert city.passenger is passenger
    assert passenger.pos == Point(300, 200)
    assert seen == [passenger]


def test_second_passenger_is_rejected(city):
    city.add_passenger("alice", Point())
    with pytest.raises(ValueError):
        city.add_passenger("bob", Point())


def test_remove_passenger(city):
    city.add_passenger("alice", Point())
    city.remove_passenger()
    assert city.passenger is None
    with pytest.raises(LookupError):
        city.remove_passenger()


def test_set_passenger_known_and_unknown(city):
    seen = []
    city.passenger_changed.connect(seen.append)
    assert city.set_passenger("nobody") is False
    assert seen == []
    assert city.set_passenger("bob") is True
    assert city.passenger.name == "bob"
    assert seen == [city.passenger]


def test_add_driver_starts_wandering(city):
    driver = city.add_driver(7, 1)
    assert city.drivers == (driver,)
    assert driver.pos == Point(700, 100)
    assert driver.state is DriverState.WANDER
    target = driver.moving_target
    assert abs(target.x - 700) + abs(target.y - 100) == 100


def test_nearest_idle_driver(city):
    first = city.add_driver(0, 1)
    city.add_driver(7, 1)
    third = city.add_driver(3, 1)
    assert city.nearest_idle_driver(Point(0, 0)) is first
    first.set_state(DriverState.MOVING_TO_TARGET)
    assert city.nearest_idle_driver(Point(0, 0)) is third


def test_nearest_idle_driver_none(city):
    assert city.nearest_idle_driver(Point()) is None


def test_call_taxi_without_passenger(city):
    city.add_driver(1, 1)
    with pytest.raises(OrderError):
        city.call_taxi(OrderInfo(None, Point(), Point(100, 0)))


def test_call_taxi_without_drivers(city):
    passenger = city.add_passenger("alice", Point())
    with pytest.raises(OrderError):
        city.call_taxi(OrderInfo(passenger, Point(), Point(100, 0)))


def test_call_taxi_off_grid_distance(city):
    passenger = city.add_passenger("alice", Point())
    city.add_driver(3, 0)
    with pytest.raises(OrderError):
        city.call_taxi(OrderInfo(passenger, Point(), Point(150, 0)))
    assert city.trip is None


def test_call_taxi_low_balance(city):
    passenger = city.add_passenger("bob", Point())
    driver = city.add_driver(3, 0)
    with pytest.raises(OrderError):
        city.call_taxi(OrderInfo(passenger, Point(), Point(200, 200)))
    assert driver.state is DriverState.WANDER
    assert city.trip is None


def test_call_taxi_runs_whole_trip(city, store):
    passenger = city.add_passenger("alice", Point())
    driver = city.add_driver(3, 0)
    got_off = []
    city.passenger_get_off.connect(got_off.append)

    detail = city.call_taxi(OrderInfo(passenger, Point(), Point(200, 200)))
    assert detail is city.trip
    assert detail.driver is driver
    assert detail.pay_money == driver.start_price + driver.unit_price * 4
    assert driver.state is DriverState.MOVING_TO_PASSENGER
    assert detail.need_turn_to_target
    assert detail.waypoint_to_target == Point(0, 200)

    for _ in range(60):
        if got_off:
            break
        driver.finish_move()

    assert got_off == [Point(200, 200)]
    assert driver.state is DriverState.WANDER
    expected = Money.from_decimal_string("100") - detail.pay_money
    assert store.get("alice").money == expected
    assert passenger.user_data.money == expected