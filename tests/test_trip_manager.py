import random

import pytest

from taxisim.driver import Driver, DriverState
from taxisim.money import Money
from taxisim.order import OrderInfo, Point, TripDetail
from taxisim.passenger import Passenger
from taxisim.trip_manager import PosType, TripManager
from taxisim.user_data import UserData, UserDataStore


@pytest.fixture
def store(tmp_path):
    s = UserDataStore(tmp_path / "users.json")
    password = "password"
    s.add("alice", UserData(password=password, money=Money.from_decimal_string("100")))
    return s


def make_manager(store, map_length=10, seed=0, pauses=None):
    pause = pauses.append if pauses is not None else (lambda seconds: None)
    return TripManager(store, map_length, random.Random(seed), pause)


def drive_until(driver, flag, limit=60):
    for _ in range(limit):
        if flag:
            return
        driver.finish_move()
    raise AssertionError("trip did not finish")


def is_adjacent(a, b, size):
    return abs(a.x - b.x) + abs(a.y - b.y) == size


def test_random_neighbour_on_single_cell_map_is_origin(store):
    manager = make_manager(store, map_length=1)
    driver = Driver(100)
    assert manager.random_neighbour(driver) == Point()


def test_random_neighbour_from_corner_stays_inside(store):
    manager = make_manager(store, map_length=3)
    driver = Driver(100)
    seen = {manager.random_neighbour(driver) for _ in range(50)}
    assert seen == {Point(0, 100), Point(100, 0)}


def test_random_neighbour_is_adjacent(store):
    manager = make_manager(store, map_length=5, seed=3)
    driver = Driver(100)
    driver.set_cell(2, 2)
    seen = {manager.random_neighbour(driver) for _ in range(50)}
    assert seen == {Point(200, 100), Point(200, 300), Point(100, 200), Point(300, 200)}


def test_attach_wandering_driver_starts_a_move(store):
    manager = make_manager(store)
    driver = Driver(100)
    driver.set_cell(4, 4)
    manager.attach_driver(driver)
    assert driver.move_tasks == (driver.moving_target,)
    assert is_adjacent(driver.moving_target, driver.pos, 100)


def test_attach_busy_driver_adds_no_move(store):
    manager = make_manager(store)
    driver = Driver(100)
    driver.set_state(DriverState.MOVING_TO_TARGET)
    manager.attach_driver(driver)
    assert driver.move_tasks == ()
    assert driver.moving_target is None


def test_wandering_continues_after_each_move(store):
    manager = make_manager(store)
    driver = Driver(100)
    driver.set_cell(4, 4)
    manager.attach_driver(driver)
    for _ in range(5):
        target = driver.moving_target
        driver.finish_move()
        assert driver.pos == target
        assert is_adjacent(driver.moving_target, driver.pos, 100)
        assert 0 <= driver.x <= 9 and 0 <= driver.y <= 9


def test_move_finished_without_trip_is_ignored(store):
    manager = make_manager(store)
    driver = Driver(100)
    driver.set_state(DriverState.MOVING_TO_PASSENGER)
    manager.on_move_finished(driver)
    assert manager.last_pos is PosType.NONE
    assert driver.move_tasks == ()


def test_start_trip_requires_driver(store):
    manager = make_manager(store)
    with pytest.raises(ValueError):
        manager.start_trip(TripDetail())


def _trip(store, fare):
    pauses = []
    manager = make_manager(store, seed=5, pauses=pauses)
    driver = Driver(100)
    driver.set_cell(2, 0)
    manager.attach_driver(driver)
    passenger = Passenger(store, "alice")
    order = OrderInfo(passenger, Point(0, 0), Point(0, 300))
    detail = TripDetail.from_order(order, driver)
    detail.pay_money = fare
    return manager, driver, passenger, detail, pauses


def test_full_trip_charges_the_fare(store):
    fare = Money.from_decimal_string("11")
    manager, driver, passenger, detail, pauses = _trip(store, fare)
    states = []
    driver.state_changed.connect(lambda d: states.append(d.state))
    got_off = []
    manager.passenger_get_off.connect(got_off.append)

    manager.start_trip(detail)
    assert driver.state is DriverState.MOVING_TO_PASSENGER
    drive_until(driver, got_off)

    assert got_off == [Point(0, 300)]
    assert passenger.pos == Point(0, 300)
    assert passenger.visible
    assert manager.last_pos is PosType.TARGET
    assert pauses == [1.0, 1.0]
    assert states == [
        DriverState.MOVING_TO_PASSENGER,
        DriverState.STOP_WAIT_ARRIVE,
        DriverState.MOVING_TO_TARGET,
        DriverState.STOP_WAIT_LEAVE,
        DriverState.WANDER,
    ]
    expected = Money.from_decimal_string("100") - fare
    assert passenger.user_data.money == expected
    assert store.get("alice").money == expected


def test_trip_without_enough_money_charges_nothing(store):
    manager, driver, passenger, detail, _ = _trip(store, Money.from_fen(10_000_00))
    got_off = []
    manager.passenger_get_off.connect(got_off.append)
    manager.start_trip(detail)
    drive_until(driver, got_off)
    assert got_off == [Point(0, 300)]
    assert store.get("alice").money == Money.from_decimal_string("100")
    assert driver.state is DriverState.WANDER