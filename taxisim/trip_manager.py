"""Drives taxis through a trip: pick-up, ride, drop-off and payment."""

from __future__ import annotations

import dataclasses
import enum
import logging
import math
import random
import time
from collections.abc import Callable

from .driver import Driver, DriverState, MoveDirection, MoveType, Signal
from .order import Point, TripDetail
from .user_data import UserDataStore

logger = logging.getLogger(__name__)

_STOP_SECONDS = 1.0


class PosType(enum.Enum):
    """The last point of a trip that the driver reached."""

    NONE = 0
    DRIVER = 1
    WAYPOINT_TO_PASSENGER = 2
    PASSENGER = 3
    WAYPOINT_TO_TARGET = 4
    TARGET = 5


_STEPS = {
    MoveDirection.UP: (0, -1),
    MoveDirection.DOWN: (0, 1),
    MoveDirection.LEFT: (-1, 0),
    MoveDirection.RIGHT: (1, 0),
}


def _cell(coordinate: float) -> int:
    return math.floor(coordinate + 0.5)


class TripManager:
    """Sends wandering drivers around the map and runs one trip at a time."""

    def __init__(
        self,
        store: UserDataStore,
        map_length: int = 10,
        rng: random.Random | None = None,
        pause: Callable[[float], object] | None = None,
    ) -> None:
        self._store = store
        self.map_length = map_length
        self._rng = rng if rng is not None else random.Random()
        self._pause = pause if pause is not None else time.sleep
        self._detail: TripDetail | None = None
        self._last_pos = PosType.NONE
        self.passenger_get_off = Signal()

    @property
    def trip(self) -> TripDetail | None:
        """The trip being run, if any."""
        return self._detail

    @property
    def last_pos(self) -> PosType:
        """The last trip point the driver reached."""
        return self._last_pos

    def attach_driver(self, driver: Driver) -> None:
        """Follow a driver's moves, and set it wandering if it is idle."""
        driver.move_finished.connect(self.on_move_finished)
        if driver.state is DriverState.WANDER:
            self._wander(driver)

    def _wander(self, driver: Driver) -> None:
        driver.clear_move_tasks()
        driver.add_move_task(self.random_neighbour(driver), MoveType.IMMEDIATE)

    def random_neighbour(self, driver: Driver) -> Point:
        """Pick a random adjacent cell inside the map, in pixels."""
        size = driver.size
        pos = driver.pos
        x = _cell(pos.x / size)
        y = _cell(pos.y / size)
        last = self.map_length - 1
        allowed = {
            MoveDirection.UP: y > 0,
            MoveDirection.DOWN: y < last,
            MoveDirection.LEFT: x > 0,
            MoveDirection.RIGHT: x < last,
        }
        directions = [direction for direction, ok in allowed.items() if ok]
        if not directions:
            logger.warning("no valid move direction")
            return Point()
        dx, dy = _STEPS[self._rng.choice(directions)]
        return Point(pos.x + dx * size, pos.y + dy * size)

    def start_trip(self, detail: TripDetail) -> None:
        """Send the trip's driver to pick up the passenger."""
        if detail.driver is None or detail.passenger is None:
            raise ValueError("a trip needs a driver and a passenger")
        self._detail = dataclasses.replace(detail)
        self._last_pos = PosType.NONE
        driver = self._detail.driver
        driver.set_state(DriverState.MOVING_TO_PASSENGER)
        driver.clear_move_tasks()
        first_stop = (
            self._detail.waypoint_to_passenger
            if self._detail.need_turn_to_passenger
            else self._detail.passenger_position
        )
        driver.add_move_task(first_stop, MoveType.DELAY)

    def on_move_finished(self, driver: Driver) -> None:
        """Decide a driver's next move once it has reached a point."""
        state = driver.state
        if state is DriverState.WANDER:
            self._wander(driver)
            return
        if state not in (DriverState.MOVING_TO_PASSENGER, DriverState.MOVING_TO_TARGET):
            return
        detail = self._detail
        if detail is None or detail.driver is not driver:
            logger.warning("move finished for a driver that has no trip")
            return

        if state is DriverState.MOVING_TO_PASSENGER:
            if self._last_pos is PosType.NONE:
                self._last_pos = PosType.DRIVER
            elif self._last_pos is PosType.DRIVER:
                if detail.need_turn_to_passenger:
                    self._last_pos = PosType.WAYPOINT_TO_PASSENGER
                    driver.add_move_task(detail.passenger_position, MoveType.IMMEDIATE)
                else:
                    self._last_pos = PosType.PASSENGER
                    self._board()
            elif self._last_pos is PosType.WAYPOINT_TO_PASSENGER:
                self._last_pos = PosType.PASSENGER
                self._board()
            else:
                logger.warning("unexpected trip point %s", self._last_pos)
        else:
            if self._last_pos is PosType.PASSENGER:
                if detail.need_turn_to_target:
                    self._last_pos = PosType.WAYPOINT_TO_TARGET
                    driver.add_move_task(detail.target_position, MoveType.IMMEDIATE)
                else:
                    self._last_pos = PosType.TARGET
                    self._alight()
            elif self._last_pos is PosType.WAYPOINT_TO_TARGET:
                self._last_pos = PosType.TARGET
                self._alight()
            else:
                logger.warning("unexpected trip point %s", self._last_pos)

    def _board(self) -> None:
        detail = self._detail
        driver = detail.driver
        detail.passenger.visible = False
        driver.set_state(DriverState.STOP_WAIT_ARRIVE)
        self._pause(_STOP_SECONDS)
        driver.set_state(DriverState.MOVING_TO_TARGET)
        next_stop = detail.waypoint_to_target if detail.need_turn_to_target else detail.target_position
        driver.add_move_task(next_stop, MoveType.IMMEDIATE)

    def _alight(self) -> None:
        detail = self._detail
        driver = detail.driver
        passenger = detail.passenger
        driver.set_state(DriverState.STOP_WAIT_LEAVE)
        passenger.pos = detail.target_position
        passenger.visible = True
        self._pause(_STOP_SECONDS)
        self._collect_fare()
        self.passenger_get_off.emit(passenger.pos)
        driver.set_state(DriverState.WANDER)
        self._wander(driver)
        driver.visible = True

    def _collect_fare(self) -> None:
        detail = self._detail
        passenger = detail.passenger
        fee = detail.pay_money
        data = passenger.user_data
        if data.money < fee:
            logger.warning(
                "passenger cannot pay: has %s, fare is %s", data.money, fee
            )
            return
        data.money = data.money - fee
        passenger.user_data = data
        try:
            self._store.update(passenger.name, data)
        except KeyError:
            logger.warning("user %s is not registered, balance not saved", passenger.name)
            return
        logger.info("payment successful, remaining money: %s", data.money)