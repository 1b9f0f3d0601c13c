# taxisim

A small ride-hailing simulation set on a square grid city. Registered users
hold a balance and can top it up by fixed amounts. A passenger calls a taxi
between two cells, and the nearest wandering driver is dispatched. Drivers
travel along grid lines, turning at most once on the way to the passenger and
once on the way to the destination. When the passenger gets off, the fare is
charged and saved: a start price (5.00 by default) plus a unit price (2.00 by
default) for each cell between the pick-up and the destination.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
taxisim [--data-dir DIR] [--log-dir DIR]
```

The program reads users from `DIR/UserData/UserData.json` (the data directory
defaults to the current directory) and logs to a new file
`log_<date>_<n>.txt` in `DIR/Log` unless `--log-dir` is given, as well as to
standard output. It then asks for a user name and password and, once they
match a registered user, accepts these commands:

- `balance`: show the saved balance.
- `recharge <10|20|30|50|100|200>`: top up the balance.
- `call <start x> <start y> <target x> <target y>`: order a taxi between two cells.
- `step`: complete the move every driver is making, advancing the simulation.
- `quit`: leave (end of input does the same).

## Library use

Amounts are kept exactly, in fen (hundredths of a yuan):

```python
from taxisim.money import Money

fare = Money.from_decimal_string("5.0") + Money.from_decimal_string("2.0") * 3
print(fare)          # 11.00
```

`Money.from_decimal_string` accepts digits with at most one dot and two
decimals and raises `MoneyFormatError` otherwise; `Money.from_yuan` parses a
float, and `is_valid_amount` checks a string or number.

User accounts are kept in a JSON file and saved after every change:

```python
from taxisim.user_data import UserData, UserDataStore, default_data_path
from taxisim.money import Money

store = UserDataStore(default_data_path("."))
store.load()
password = "password"
store.add("alice", UserData(password, Money.from_decimal_string("50")))
```

`load` creates the file if it is missing and raises `UserDataFormatError` if
it cannot be read or holds no user list; a file saved with no users has no
such list. `update` and `remove` raise `KeyError` for unknown users, and `get`
returns empty `UserData` for them.

A session ties a logged-in user to a 12 by 12 city map with the user's
passenger at cell (0, 0) and three drivers:

```python
from taxisim.app import TaxiSession, login
from taxisim.charge import ChargeAmount

login(store, "alice", password)
session = TaxiSession(store, "alice")
session.recharge(ChargeAmount.YUAN_20)
trip = session.call_taxi((0, 0), (3, 2))
print(trip.pay_money)   # 15.00
```

`login` raises `LoginError` for an unknown user or a wrong password, and
`call_taxi` raises `OrderError` when no driver is idle or the balance does not
cover the fare. Driving is not timed: each move is completed by calling
`Driver.finish_move()` on the driver making it, after which the `TripManager`
sends the driver on to its next point.

The modules are:

- `taxisim.money`: `Money`, `MoneyFormatError` and `is_valid_amount`.
- `taxisim.user_data`: `UserData`, `UserDataStore`, `UserDataFormatError` and `default_data_path`.
- `taxisim.order`: `Point`, `OrderInfo` and `TripDetail`.
- `taxisim.driver`: `Driver`, its states and directions, `PriceError` and `Signal`, a list of callbacks.
- `taxisim.passenger`: `Passenger`.
- `taxisim.trip_manager`: `TripManager` and `PosType`, which take a trip through its stages.
- `taxisim.city_map`: `CityMap` and `OrderError`, which dispatch the nearest idle driver.
- `taxisim.charge`: `ChargeAmount` and `apply_charge`.
- `taxisim.app`: `login`, `LoginError`, `TaxiSession`, `setup_logging` and `main`.

## What it does not do

There is no graphical map and no animation: positions and the car's image
name (`Driver.sprite`) are tracked as data only. There is no registration
command; users have to be in the data file or be added with
`UserDataStore.add`.