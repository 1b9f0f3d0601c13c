"""A taxi session for one logged-in user, and the command-line front end."""

from __future__ import annotations

import argparse
import datetime
import itertools
import logging
import logging.handlers
import sys
from pathlib import Path

from .charge import ChargeAmount, apply_charge
from .city_map import CityMap, OrderError
from .money import Money
from .order import OrderInfo, Point, TripDetail
from .trip_manager import TripManager
from .user_data import (
    APP_NAME,
    APP_VERSION,
    LOG_FOLDER_NAME,
    UserData,
    UserDataFormatError,
    UserDataStore,
    default_data_path,
)

logger = logging.getLogger(__name__)

_PACKAGE_LOGGER = "taxisim"
_DRIVER_CELLS = ((0, 1), (7, 1), (3, 1))
_NAME_PROMPT = "user name: "
_CREDENTIAL_PROMPT = "password: "


class LoginError(Exception):
    """Raised when a user cannot log in."""


def setup_logging(log_dir: str | Path) -> Path:
    """Log to a new dated file in log_dir and to standard output.

    The file is the first of log_<date>_0.txt, log_<date>_1.txt, ... that
    does not exist yet. Return its path.
    """
    log_dir = Path(log_dir)
    if not log_dir.exists():
        logger.info("log folder does not exist, creating it")
        log_dir.mkdir(parents=True, exist_ok=True)

    date = datetime.date.today().isoformat()
    path = next(
        candidate
        for candidate in (log_dir / f"log_{date}_{i}.txt" for i in itertools.count())
        if not candidate.exists()
    )
    logger.info("creating log file %s", path)
    path.touch()

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)

    file_handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=512, backupCount=2, encoding="utf-8"
    )
    file_handler.setFormatter(
        logging.Formatter("%(levelname)s %(asctime)s %(name)s %(message)s")
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("From log function: %(message)s %(levelno)s"))

    package_logger.addHandler(file_handler)
    package_logger.addHandler(console_handler)
    return path


def login(store: UserDataStore, user_name: str, password: str) -> UserData:
    """Check a user's password and return the user's data."""
    if not store.exists(user_name):
        raise LoginError("user name does not exist, please register a new user")
    data = store.get(user_name)
    if data.password != password:
        raise LoginError("wrong password, please try again")
    return data


class TaxiSession:
    """A user's map with their passenger and three drivers, ready to call taxis."""

    def __init__(self, store: UserDataStore, user_name: str) -> None:
        self._store = store
        self.user_name = user_name
        self.map = CityMap(store, manager=TripManager(store))
        self.start: tuple[float, float] | None = None
        self.map.passenger_get_off.connect(self._on_passenger_get_off)
        self.map.add_passenger(user_name, Point(0, 0))
        for x, y in _DRIVER_CELLS:
            self.map.add_driver(x, y)

    @property
    def balance(self) -> Money:
        """The user's saved balance."""
        return self._store.get(self.user_name).money

    def _on_passenger_get_off(self, pos: Point) -> None:
        cell = self.map.cell_size
        self.start = (pos.x / cell, pos.y / cell)

    def recharge(self, amount: ChargeAmount) -> Money:
        """Top up the user's balance, save it and return the new balance."""
        data = self._store.get(self.user_name)
        apply_charge(data, amount)
        self._store.update(self.user_name, data)
        self.map.set_passenger(self.user_name)
        return data.money

    def _to_pixels(self, cell: tuple[int, int]) -> Point:
        highest = self.map.map_size - 1
        x, y = cell
        for value in (x, y):
            if not isinstance(value, int) or not 0 <= value <= highest:
                raise OrderError(f"coordinate {value!r} is outside the map")
        size = self.map.cell_size
        return Point(size * x, size * y)

    def call_taxi(self, start: tuple[int, int], target: tuple[int, int]) -> TripDetail:
        """Order a taxi from a start cell to a target cell."""
        start_point = self._to_pixels(start)
        target_point = self._to_pixels(target)
        passenger = self.map.passenger
        if passenger is None:
            raise OrderError("add a passenger to the map first")
        order = OrderInfo(
            passenger=passenger,
            passenger_position=start_point,
            target_position=target_point,
            start_call_taxi_time=datetime.datetime.now().time(),
        )
        return self.map.call_taxi(order)


_HELP = (
    "commands: balance | recharge <10|20|30|50|100|200> | "
    "call <start x> <start y> <target x> <target y> | step | quit"
)


def _run_commands(session: TaxiSession) -> None:
    print(_HELP)
    while True:
        try:
            line = input("> ")
        except EOFError:
            return
        words = line.split()
        if not words:
            continue
        command, args = words[0].lower(), words[1:]
        try:
            if command == "quit":
                return
            if command == "balance":
                print(f"balance: {session.balance}")
            elif command == "recharge" and len(args) == 1:
                print(f"balance: {session.recharge(ChargeAmount(int(args[0])))}")
            elif command == "call" and len(args) == 4:
                sx, sy, tx, ty = (int(a) for a in args)
                detail = session.call_taxi((sx, sy), (tx, ty))
                print(f"taxi on its way, fare {detail.pay_money}")
            elif command == "step":
                for driver in session.map.drivers:
                    if driver.moving_target is not None:
                        driver.finish_move()
                if session.start is not None:
                    print(f"now at {session.start[0]:g} {session.start[1]:g}")
            else:
                print(_HELP)
        except (OrderError, ValueError, KeyError) as exc:
            print(f"error: {exc}")


def main(argv: list[str] | None = None) -> int:
    """Log in on the console and call taxis on the city map."""
    parser = argparse.ArgumentParser(prog=APP_NAME.lower(), description=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("--data-dir", type=Path, default=Path.cwd())
    parser.add_argument("--log-dir", type=Path, default=None)
    args = parser.parse_args(argv)

    log_dir = args.log_dir if args.log_dir is not None else args.data_dir / LOG_FOLDER_NAME
    setup_logging(log_dir)

    store = UserDataStore(default_data_path(args.data_dir))
    try:
        store.load()
    except UserDataFormatError as exc:
        logger.warning("failed to load user data: %s", exc)

    try:
        user_name = input(_NAME_PROMPT)
        password = input(_CREDENTIAL_PROMPT)
    except EOFError:
        return 1
    try:
        login(store, user_name, password)
    except LoginError as exc:
        print(exc)
        return 1

    session = TaxiSession(store, user_name)
    print(f"welcome, {user_name}; balance: {session.balance}")
    _run_commands(session)
    return 0