"""Taxi drivers moving on the grid, and a small signal mechanism."""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Callable
from typing import Any

from .money import Money
from .order import Point

logger = logging.getLogger(__name__)


class Signal:
    """A list of callbacks that are called, in order, on emit."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[..., Any]] = []

    def connect(self, callback: Callable[..., Any]) -> bool:
        """Add a callback; return False if it was already connected."""
        if callback in self._callbacks:
            return False
        self._callbacks.append(callback)
        return True

    def disconnect(self, callback: Callable[..., Any]) -> None:
        """Remove a callback; raise ValueError if it is not connected."""
        self._callbacks.remove(callback)

    def emit(self, *args: Any) -> None:
        """Call every connected callback with the given arguments."""
        for callback in list(self._callbacks):
            callback(*args)


class Direction(enum.Enum):
    """Which way the car icon faces."""

    RIGHT = 0
    LEFT = 1


class MoveType(enum.Enum):
    """Whether a queued move starts now or after the current one."""

    IMMEDIATE = 0
    DELAY = 1


class MoveDirection(enum.Enum):
    """A step on the grid."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


class DriverState(enum.Enum):
    """What a driver is doing."""

    STOP_WAIT_ARRIVE = 0
    STOP_WAIT_LEAVE = 1
    WANDER = 2
    MOVING_TO_TARGET = 3
    MOVING_TO_PASSENGER = 4


class PriceError(ValueError):
    """Raised when a price is zero or negative."""


_CARRYING_STATES = frozenset({DriverState.STOP_WAIT_ARRIVE, DriverState.MOVING_TO_TARGET})


def _same_point(a: Point, b: Point) -> bool:
    return math.isclose(a.x, b.x, rel_tol=1e-12) and math.isclose(a.y, b.y, rel_tol=1e-12)


class Driver:
    """A taxi with a position in grid cells, prices and a queue of moves.

    A move is started by move_to and completed by finish_move, which stands
    in for the end of the driving animation.
    """

    def __init__(self, size: float = 100.0) -> None:
        self._size = size
        self._x = 0.0
        self._y = 0.0
        self._start_price = Money.from_decimal_string("5.0")
        self._unit_price = Money.from_decimal_string("2.0")
        self.speed = 100.0
        self._direction = Direction.LEFT
        self._state = DriverState.WANDER
        self._tasks: list[Point] = []
        self._moving_target: Point | None = None
        self._move_duration = 0.0
        self.visible = True
        self.size_changed = Signal()
        self.direction_changed = Signal()
        self.state_changed = Signal()
        self.move_finished = Signal()

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def pos(self) -> Point:
        """Position in pixels."""
        return Point(self._x * self._size, self._y * self._size)

    @pos.setter
    def pos(self, pos: Point) -> None:
        self._x = pos.x / self._size
        self._y = pos.y / self._size

    def set_cell(self, x: float, y: float) -> None:
        """Place the driver on a grid cell."""
        self._x = x
        self._y = y

    @property
    def size(self) -> float:
        return self._size

    @size.setter
    def size(self, size: float) -> None:
        if size != self._size:
            self._size = size
            self.size_changed.emit(self)

    @property
    def direction(self) -> Direction:
        return self._direction

    def set_direction(self, direction: Direction) -> None:
        """Turn the car, notifying listeners if the facing changes."""
        direction = Direction(direction)
        if direction != self._direction:
            self._direction = direction
            self.direction_changed.emit(self)

    @property
    def state(self) -> DriverState:
        return self._state

    def set_state(self, state: DriverState) -> None:
        """Change the driver's state, notifying listeners if it changes."""
        state = DriverState(state)
        if state != self._state:
            self._state = state
            self.state_changed.emit(self)

    @property
    def sprite(self) -> str:
        """Name of the image shown: a plain car, or one carrying a passenger."""
        return "moving_car" if self._state in _CARRYING_STATES else "car"

    @property
    def mirrored(self) -> bool:
        """Whether the image is flipped to face right."""
        return self._direction == Direction.RIGHT

    @property
    def start_price(self) -> Money:
        return self._start_price

    @start_price.setter
    def start_price(self, price: Money) -> None:
        if price <= Money():
            raise PriceError("start price cannot be negative or zero")
        self._start_price = price

    @property
    def unit_price(self) -> Money:
        return self._unit_price

    @unit_price.setter
    def unit_price(self, price: Money) -> None:
        if price <= Money():
            raise PriceError("unit price cannot be negative or zero")
        self._unit_price = price

    @property
    def move_tasks(self) -> tuple[Point, ...]:
        """Queued destinations in pixels, the current one first."""
        return tuple(self._tasks)

    @property
    def moving_target(self) -> Point | None:
        """Destination of the move in progress, if any."""
        return self._moving_target

    @property
    def move_duration(self) -> float:
        """Duration of the move in progress in milliseconds."""
        return self._move_duration

    def move_to(self, x: float, y: float) -> None:
        """Start driving to a grid cell, facing the direction of travel."""
        target = Point(x * self._size, y * self._size)
        current = self.pos
        distance = (target - current).manhattan_length()
        if current.x < target.x:
            self.set_direction(Direction.RIGHT)
        elif current.x > target.x:
            self.set_direction(Direction.LEFT)
        self._moving_target = target
        self._move_duration = distance * self.speed / 10

    def finish_move(self) -> None:
        """Complete the move in progress and drop its task from the queue."""
        if self._moving_target is None:
            raise RuntimeError("no move in progress")
        target = self._moving_target
        self._moving_target = None
        self._move_duration = 0.0
        self.pos = target
        here = self.pos
        index = next((i for i, task in enumerate(self._tasks) if _same_point(task, here)), None)
        if index is not None:
            del self._tasks[index]
        self.move_finished.emit(self)

    def _move_to_next(self, *_: Any) -> None:
        if self._tasks:
            target = self._tasks[0]
            self.move_to(target.x / self._size, target.y / self._size)

    def add_move_task(self, pos: Point, move_type: MoveType) -> bool:
        """Queue a destination in pixels.

        An immediate move heads for the first queued task at once; a delayed
        one makes the driver continue with the queue after each finished
        move. Return False if pos is already the last queued task.
        """
        move_type = MoveType(move_type)
        if self._tasks and self._tasks[-1] == pos:
            logger.warning("move task already exists")
            return False
        self._tasks.append(pos)
        if move_type is MoveType.IMMEDIATE:
            self._move_to_next()
        else:
            self.move_finished.connect(self._move_to_next)
        return True

    def remove_move_task(self, x: float, y: float) -> bool:
        """Drop the queued task at a grid cell; return whether one was found."""
        target = Point(x * self._size, y * self._size)
        for index, task in enumerate(self._tasks):
            if _same_point(task, target):
                del self._tasks[index]
                return True
        return False

    def clear_move_tasks(self) -> None:
        """Empty the queue of moves."""
        self._tasks.clear()