"""Registered users and their balances, persisted to a JSON file."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .money import Money, MoneyFormatError

APP_NAME = "TaxiSim"
APP_VERSION = "1.0.0"
LOG_FOLDER_NAME = "Log"
USER_DATA_FOLDER_NAME = "UserData"
USER_DATA_FILE_NAME = "UserData.json"

_USERS_KEY = "用户信息"
_NAME_KEY = "用户名"
_CREDENTIAL_KEY = "密码"
_MONEY_KEY = "金额"

logger = logging.getLogger(__name__)


class UserDataFormatError(ValueError):
    """Raised when the user data file cannot be understood."""


@dataclass
class UserData:
    """A user's password and current balance."""

    password: str = ""
    money: Money = field(default_factory=Money)


def default_data_path(base_dir: str | Path) -> Path:
    """Return the user data file location below an application directory."""
    return Path(base_dir) / USER_DATA_FOLDER_NAME / USER_DATA_FILE_NAME


class UserDataStore:
    """Users keyed by name, saved to a JSON file after every change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._users: dict[str, UserData] = {}

    def __contains__(self, user_name: object) -> bool:
        return user_name in self._users

    def __len__(self) -> int:
        return len(self._users)

    def load(self) -> None:
        """Read users from the file, creating an empty file if there is none."""
        logger.info("loading user data from %s", self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            logger.info("user data file missing, creating it")
            self.path.write_text("{\n}", encoding="utf-8")
            self.save()
            return

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as exc:
            raise UserDataFormatError(f"cannot parse {self.path}") from exc

        users = document.get(_USERS_KEY) if isinstance(document, dict) else None
        if not isinstance(users, list):
            raise UserDataFormatError(f"{self.path} holds no user list")

        for entry in users:
            if not isinstance(entry, dict) or not all(
                isinstance(entry.get(key), str) for key in (_NAME_KEY, _CREDENTIAL_KEY, _MONEY_KEY)
            ):
                raise UserDataFormatError(f"malformed user entry: {entry!r}")
            try:
                money = Money.from_decimal_string(entry[_MONEY_KEY])
            except MoneyFormatError as exc:
                raise UserDataFormatError(f"malformed balance: {entry[_MONEY_KEY]!r}") from exc
            self._users[entry[_NAME_KEY]] = UserData(entry[_CREDENTIAL_KEY], money)

    def save(self) -> None:
        """Write every user to the file."""
        document: dict[str, list[dict[str, str]]] = {}
        if self._users:
            document[_USERS_KEY] = [
                {_NAME_KEY: name, _CREDENTIAL_KEY: data.password, _MONEY_KEY: str(data.money)}
                for name, data in self._users.items()
            ]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, ensure_ascii=False, indent=4), encoding="utf-8")

    def add(self, user_name: str, user_data: UserData) -> None:
        """Add or replace a user and save."""
        self._users[user_name] = dataclasses.replace(user_data)
        self.save()

    def remove(self, user_name: str) -> None:
        """Remove a user and save; raise KeyError if there is no such user."""
        if user_name not in self._users:
            raise KeyError(user_name)
        del self._users[user_name]
        self.save()

    def exists(self, user_name: str) -> bool:
        """Tell whether a user is registered."""
        return user_name in self._users

    def get(self, user_name: str) -> UserData:
        """Return a copy of a user's data, or empty data for an unknown user."""
        data = self._users.get(user_name)
        if data is None:
            logger.warning("user %s does not exist", user_name)
            return UserData()
        return dataclasses.replace(data)

    def update(self, user_name: str, user_data: UserData) -> None:
        """Replace an existing user's data and save; raise KeyError if unknown."""
        if user_name not in self._users:
            raise KeyError(user_name)
        self._users[user_name] = dataclasses.replace(user_data)
        self.save()