"""Primary and foreign key metadata, and SQL column definitions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from boilerdb.columns import Column


@dataclass
class PrimaryKey:
    """A primary key constraint."""

    name: str = ""
    columns: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PrimaryKey:
        return cls(name=data.get("name") or "", columns=list(data.get("columns") or []))


@dataclass
class ForeignKey:
    """A foreign key constraint."""

    table: str = ""
    name: str = ""
    column: str = ""
    nullable: bool = False
    unique: bool = False
    foreign_table: str = ""
    foreign_column: str = ""
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "name": self.name,
            "column": self.column,
            "nullable": self.nullable,
            "unique": self.unique,
            "foreign_table": self.foreign_table,
            "foreign_column": self.foreign_column,
            "foreign_column_nullable": self.foreign_column_nullable,
            "foreign_column_unique": self.foreign_column_unique,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ForeignKey:
        return cls(
            table=data.get("table") or "",
            name=data.get("name") or "",
            column=data.get("column") or "",
            nullable=bool(data.get("nullable", False)),
            unique=bool(data.get("unique", False)),
            foreign_table=data.get("foreign_table") or "",
            foreign_column=data.get("foreign_column") or "",
            foreign_column_nullable=bool(data.get("foreign_column_nullable", False)),
            foreign_column_unique=bool(data.get("foreign_column_unique", False)),
        )


@dataclass(frozen=True)
class SQLColumnDef:
    """A column name and type, formatted like an SQL column definition."""

    name: str = ""
    type: str = ""

    def __str__(self) -> str:
        return f"{self.name} {self.type}"


class SQLColumnDefs(list):
    """A list of SQLColumnDef with helpers to extract names and types."""

    def names(self) -> list[str]:
        return [definition.name for definition in self]

    def types(self) -> list[str]:
        return [definition.type for definition in self]


def sql_col_definitions(columns: Iterable[Column], names: Iterable[str]) -> SQLColumnDefs:
    """Build definitions for the named columns, in the order of ``names``.

    A name with no matching column yields an empty definition.
    """
    types_by_name = {column.name: column.type for column in columns}
    return SQLColumnDefs(
        SQLColumnDef(name=name, type=types_by_name[name])
        if name in types_by_name
        else SQLColumnDef()
        for name in names
    )