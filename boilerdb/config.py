"""Driver configuration with typed, validating accessors."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from typing import Any

_INTEGER = re.compile(r"[+-]?[0-9]+")


class ConfigError(ValueError):
    """A required configuration value is missing or has the wrong type."""


def _coerce_int(value: Any) -> int | None:
    """Turn an int, float or decimal string into an int, or None if impossible."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        if _INTEGER.fullmatch(value) is None:
            return None
        return int(value)
    return None


class DriverConfig(dict):
    """A configuration mapping handed to drivers, with typed accessors."""

    def must_string(self, key: str) -> str:
        """Return a non-empty string stored under ``key`` or raise ConfigError."""
        if key not in self:
            raise ConfigError(f"failed to find key {key} in config")
        value = self[key]
        if not isinstance(value, str):
            raise ConfigError(
                f"found key {key} in config, but it was not a string "
                f"({type(value).__name__})"
            )
        if not value:
            raise ConfigError(f"found key {key} in config, but it was an empty string")
        return value

    def must_int(self, key: str) -> int:
        """Return a non-zero integer stored under ``key`` or raise ConfigError."""
        if key not in self:
            raise ConfigError(f"failed to find key {key} in config")
        value = self[key]
        if isinstance(value, str):
            integer = _coerce_int(value)
            if integer is None:
                raise ConfigError(f"failed to parse key {key} ({value}) to int")
        else:
            integer = _coerce_int(value)
            if integer is None:
                raise ConfigError(
                    f"found key {key} in config, but it was not an int "
                    f"({type(value).__name__})"
                )
        if integer == 0:
            raise ConfigError(f"found key {key} in config, but its value was 0")
        return integer

    def string(self, key: str) -> str | None:
        """Return the non-empty string under ``key``, or None."""
        value = self.get(key)
        if isinstance(value, str) and value:
            return value
        return None

    def default_string(self, key: str, default: str) -> str:
        """Return the non-empty string under ``key``, or ``default``."""
        value = self.string(key)
        return default if value is None else value

    def integer(self, key: str) -> int | None:
        """Return the non-zero integer under ``key``, or None.

        Floats are truncated and decimal strings are parsed.
        """
        if key not in self:
            return None
        integer = _coerce_int(self[key])
        if not integer:
            return None
        return integer

    def default_int(self, key: str, default: int) -> int:
        """Return the non-zero integer under ``key``, or ``default``."""
        value = self.integer(key)
        return default if value is None else value

    def string_list(self, key: str) -> list[str] | None:
        """Return the non-empty list of strings under ``key``, or None."""
        value = self.get(key)
        if not isinstance(value, (list, tuple)):
            return None
        result = []
        for index, item in enumerate(value):
            if not isinstance(item, str):
                raise ConfigError(
                    f"element {index} of key {key} in config was not a string ({item!r})"
                )
            result.append(item)
        return result or None


def default_env(key: str, default: str) -> str:
    """Return the environment variable ``key``, or ``default`` when unset or empty."""
    return os.environ.get(key) or default


def tables_from_list(items: Iterable[str] | None) -> list[str]:
    """Table names from a white- or blacklist: the entries without a dot."""
    return [item for item in items or () if "." not in item]


def columns_from_list(items: Iterable[str] | None, table_name: str) -> list[str]:
    """Column names listed as ``table.column`` for the given table."""
    columns = []
    for item in items or ():
        parts = item.split(".")
        if len(parts) == 2 and parts[0] == table_name:
            columns.append(parts[1])
    return columns