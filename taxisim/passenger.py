"""A passenger standing on the map, tied to a registered user."""

from __future__ import annotations

import dataclasses

from .driver import Signal
from .money import Money
from .order import Point
from .user_data import UserData, UserDataStore


class Passenger:
    """A user placed on the map, with a copy of the user's data."""

    def __init__(self, store: UserDataStore, name: str = "", size: float = 100.0) -> None:
        self._store = store
        self.name = name
        self._data = store.get(name)
        self._size = size
        self._x = 0.0
        self._y = 0.0
        self.visible = True
        self.data_changed = Signal()
        self.pos_changed = Signal()
        self.size_changed = Signal()

    @property
    def user_data(self) -> UserData:
        """A copy of the passenger's user data."""
        return dataclasses.replace(self._data)

    @user_data.setter
    def user_data(self, data: UserData) -> None:
        if data != self._data:
            self._data = dataclasses.replace(data)
            self.data_changed.emit(self)

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
        self.set_cell(pos.x / self._size, pos.y / self._size)

    def set_cell(self, x: float, y: float) -> None:
        """Place the passenger on a grid cell, notifying listeners on change."""
        if x != self._x or y != self._y:
            self._x = x
            self._y = y
            self.pos_changed.emit(self)

    @property
    def size(self) -> float:
        return self._size

    @size.setter
    def size(self, size: float) -> None:
        if size != self._size:
            self._size = size
            self.size_changed.emit(self)

    def set_user(self, name: str) -> bool:
        """Switch to another registered user; return False if unknown."""
        if not self._store.exists(name):
            return False
        self.name = name
        self.user_data = self._store.get(name)
        return True

    def charge(self, money: Money) -> None:
        """Add money to the passenger's balance."""
        self._data = dataclasses.replace(self._data, money=self._data.money + money)
        self.data_changed.emit(self)