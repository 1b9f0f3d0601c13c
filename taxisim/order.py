"""Points on the city grid, taxi orders and the details of a trip."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .money import Money

if TYPE_CHECKING:
    from .driver import Driver
    from .passenger import Passenger

_MIDNIGHT = datetime.time(0, 0, 0)


@dataclass(frozen=True)
class Point:
    """A position on the map in pixels."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: object) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: object) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y)

    def manhattan_length(self) -> float:
        """Return the sum of the absolute coordinates."""
        return abs(self.x) + abs(self.y)


@dataclass
class OrderInfo:
    """A passenger's request for a taxi."""

    passenger: Passenger | None = None
    passenger_position: Point = field(default_factory=Point)
    target_position: Point = field(default_factory=Point)
    start_call_taxi_time: datetime.time = _MIDNIGHT


@dataclass
class TripDetail(OrderInfo):
    """An order together with the driver serving it and the route taken."""

    driver: Driver | None = None
    driver_position: Point = field(default_factory=Point)
    need_turn_to_target: bool = False
    waypoint_to_target: Point = field(default_factory=Point)
    need_turn_to_passenger: bool = False
    waypoint_to_passenger: Point = field(default_factory=Point)
    start_take_taxi_time: datetime.time = _MIDNIGHT
    start_moving_time: datetime.time = _MIDNIGHT
    end_moving_time: datetime.time = _MIDNIGHT
    end_take_taxi_time: datetime.time = _MIDNIGHT
    pay_money: Money = field(default_factory=Money)

    @classmethod
    def from_order(cls, order: OrderInfo, driver: Driver) -> TripDetail:
        """Plan the route for a driver serving an order.

        The driver sets off from the end of its queued moves, or from where
        it stands if it has none. Each leg turns at most once, travelling
        vertically along the passenger's column first.
        """
        tasks = driver.move_tasks
        driver_position = tasks[-1] if tasks else driver.pos
        start = order.passenger_position
        target = order.target_position

        detail = cls(
            passenger=order.passenger,
            passenger_position=start,
            target_position=target,
            start_call_taxi_time=datetime.datetime.now().time(),
            driver=driver,
            driver_position=driver_position,
        )
        if start.x != target.x and start.y != target.y:
            detail.need_turn_to_target = True
            detail.waypoint_to_target = Point(start.x, target.y)
        if start.x != driver_position.x and start.y != driver_position.y:
            detail.need_turn_to_passenger = True
            detail.waypoint_to_passenger = Point(start.x, driver_position.y)
        return detail