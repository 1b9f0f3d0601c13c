"""The city grid holding drivers and a passenger, and where taxis are called."""

from __future__ import annotations

import logging

from .driver import Driver, DriverState, Signal
from .order import OrderInfo, Point, TripDetail
from .passenger import Passenger
from .trip_manager import TripManager
from .user_data import UserDataStore

logger = logging.getLogger(__name__)


class OrderError(Exception):
    """Raised when a taxi cannot be called."""


class CityMap:
    """A square grid of cells with one passenger and any number of drivers."""

    def __init__(
        self,
        store: UserDataStore,
        map_length: int = 12,
        cell_size: float = 100.0,
        manager: TripManager | None = None,
    ) -> None:
        self._store = store
        self.map_length = map_length
        self.map_size = map_length * cell_size
        self.manager = manager if manager is not None else TripManager(store, map_length)
        self._passenger: Passenger | None = None
        self._drivers: list[Driver] = []
        self._trip: TripDetail | None = None

        self.passenger_changed = Signal()
        self.driver_changed = Signal()
        self.trip_started = Signal()
        self.passenger_get_off = Signal()

        self.driver_changed.connect(self.manager.attach_driver)
        self.trip_started.connect(self.manager.start_trip)
        self.manager.passenger_get_off.connect(self.passenger_get_off.emit)

    @property
    def cell_size(self) -> float:
        """Side of one grid cell in pixels."""
        return self.map_size / self.map_length

    @property
    def passenger(self) -> Passenger | None:
        return self._passenger

    @property
    def drivers(self) -> tuple[Driver, ...]:
        return tuple(self._drivers)

    @property
    def trip(self) -> TripDetail | None:
        """The most recently ordered trip."""
        return self._trip

    def add_passenger(self, name: str, position: Point) -> Passenger:
        """Place a passenger at a position in pixels."""
        if self._passenger is not None:
            raise ValueError("a passenger is already on the map")
        passenger = Passenger(self._store, name, self.cell_size)
        passenger.pos = position
        self._passenger = passenger
        self.passenger_changed.emit(passenger)
        return passenger

    def remove_passenger(self) -> None:
        """Take the passenger off the map."""
        if self._passenger is None:
            raise LookupError("no passenger on the map")
        self._passenger = None

    def set_passenger(self, name: str) -> bool:
        """Make the passenger a registered user; return False if unknown."""
        if self._passenger is None:
            self._passenger = Passenger(self._store, name, self.cell_size)
        if not self._passenger.set_user(name):
            return False
        self.passenger_changed.emit(self._passenger)
        return True

    def add_driver(self, x: float, y: float) -> Driver:
        """Put a new driver on a grid cell."""
        driver = Driver(self.cell_size)
        driver.set_cell(x, y)
        self._drivers.append(driver)
        self.driver_changed.emit(driver)
        return driver

    def nearest_idle_driver(self, position: Point) -> Driver | None:
        """Return the wandering driver closest to a position, first on ties."""
        idle = [d for d in self._drivers if d.state is DriverState.WANDER]
        if not idle:
            return None
        return min(idle, key=lambda d: (d.pos - position).manhattan_length())

    def call_taxi(self, order: OrderInfo) -> TripDetail:
        """Assign the nearest idle driver to an order and start the trip."""
        passenger = order.passenger
        if passenger is None:
            raise OrderError("no passenger in the order")
        driver = self.nearest_idle_driver(passenger.pos)
        if driver is None:
            raise OrderError("no drivers available")

        distance = (order.passenger_position - order.target_position).manhattan_length()
        cells = distance / driver.size
        if cells != int(cells):
            raise OrderError("driver size does not fit the grid, fare cannot be computed")
        fee = driver.start_price + driver.unit_price * int(cells)
        if passenger.user_data.money < fee:
            raise OrderError("balance too low, please recharge")

        detail = TripDetail.from_order(order, driver)
        detail.pay_money = fee
        self._trip = detail
        passenger.pos = order.passenger_position
        self.trip_started.emit(detail)
        return detail