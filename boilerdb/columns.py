"""Database column metadata and helpers over lists of columns."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

_UPPERCASE_WORDS = frozenset(
    {
        "acl", "api", "ascii", "cpu", "eof", "guid", "id", "ip", "json", "ram",
        "sla", "udp", "ui", "uid", "uuid", "uri", "url", "utf8",
    }
)


def title_case(name: str) -> str:
    """Convert a snake_case identifier to TitleCase, upper-casing initialisms."""
    words = []
    for word in name.split("_"):
        if not word:
            continue
        lowered = word.lower()
        if lowered in _UPPERCASE_WORDS:
            words.append(lowered.upper())
        else:
            words.append(word[0].upper() + word[1:])
    return "".join(words)


@dataclass
class Column:
    """A database column; ``type`` holds the translated target-language type."""

    name: str = ""
    type: str = ""
    db_type: str = ""
    default: str = ""
    comment: str = ""
    nullable: bool = False
    unique: bool = False
    validated: bool = False
    arr_type: str | None = None
    udt_name: str = ""
    domain_name: str | None = None
    full_db_type: str = ""
    auto_generated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "db_type": self.db_type,
            "default": self.default,
            "comment": self.comment,
            "nullable": self.nullable,
            "unique": self.unique,
            "validated": self.validated,
            "arr_type": self.arr_type,
            "udt_name": self.udt_name,
            "domain_name": self.domain_name,
            "full_db_type": self.full_db_type,
            "auto_generated": self.auto_generated,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Column:
        return cls(
            name=data.get("name") or "",
            type=data.get("type") or "",
            db_type=data.get("db_type") or "",
            default=data.get("default") or "",
            comment=data.get("comment") or "",
            nullable=bool(data.get("nullable", False)),
            unique=bool(data.get("unique", False)),
            validated=bool(data.get("validated", False)),
            arr_type=data.get("arr_type"),
            udt_name=data.get("udt_name") or "",
            domain_name=data.get("domain_name"),
            full_db_type=data.get("full_db_type") or "",
            auto_generated=bool(data.get("auto_generated", False)),
        )


def column_names(columns: Iterable[Column]) -> list[str]:
    """Names of the columns, in order."""
    return [column.name for column in columns]


def column_db_types(columns: Iterable[Column]) -> dict[str, str]:
    """Map each column's TitleCase name to its database type."""
    return {title_case(column.name): column.db_type for column in columns}


def filter_columns_by_auto(auto: bool, columns: Iterable[Column]) -> list[Column]:
    """Columns whose auto-generated flag equals ``auto``."""
    return [column for column in columns if column.auto_generated == auto]


def filter_columns_by_default(defaults: bool, columns: Iterable[Column]) -> list[Column]:
    """Columns that have (or, if ``defaults`` is false, lack) a default value."""
    return [column for column in columns if bool(column.default) == defaults]


def filter_columns_by_enum(columns: Iterable[Column]) -> list[Column]:
    """Columns whose database type is an enum."""
    return [column for column in columns if column.db_type.startswith("enum")]