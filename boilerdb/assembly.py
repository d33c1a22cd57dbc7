"""Database information assembled by drivers, and the shared table-building logic."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import Any, Protocol

from boilerdb.columns import Column
from boilerdb.config import DriverConfig
from boilerdb.importers import Collection
from boilerdb.keys import ForeignKey, PrimaryKey
from boilerdb.schema import (
    Table,
    get_table,
    to_many_relationships,
    to_one_relationships,
)

_QUOTE_FIELDS = ("lq", "rq")


def _rune_to_str(value: Any) -> str:
    if value is None or value == 0:
        return ""
    if isinstance(value, int):
        return chr(value)
    return str(value)


@dataclass
class Dialect:
    """Quoting characters and SQL features a database supports."""

    lq: str = ""
    rq: str = ""
    use_index_placeholders: bool = False
    use_last_insert_id: bool = False
    use_schema: bool = False
    use_default_keyword: bool = False
    use_auto_columns: bool = False
    use_top_clause: bool = False
    use_output_clause: bool = False
    use_case_when_exists_clause: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        for name in _QUOTE_FIELDS:
            quote = getattr(self, name)
            result[name] = ord(quote) if quote else 0
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Dialect:
        data = data or {}
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name in _QUOTE_FIELDS:
                values[f.name] = _rune_to_str(data.get(f.name))
            else:
                values[f.name] = bool(data.get(f.name, False))
        return cls(**values)


@dataclass
class DBInfo:
    """The tables of a database together with its dialect."""

    schema: str = ""
    tables: list[Table] = field(default_factory=list)
    dialect: Dialect = field(default_factory=Dialect)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": self.schema,
            "tables": [table.to_dict() for table in self.tables],
            "dialect": self.dialect.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> DBInfo:
        data = data or {}
        return cls(
            schema=data.get("schema") or "",
            tables=[Table.from_dict(t) for t in data.get("tables") or []],
            dialect=Dialect.from_dict(data.get("dialect")),
        )


class Driver(Protocol):
    """Something that produces database information, templates and imports."""

    def assemble(self, config: DriverConfig) -> DBInfo:
        """Gather the database information."""

    def templates(self) -> dict[str, str]:
        """Templates to add or replace, base64 encoded by file name."""

    def imports(self) -> Collection:
        """Imports to merge into generation."""


class Constructor(Protocol):
    """The per-database queries needed to build the table list."""

    def table_names(
        self, schema: str, whitelist: list[str], blacklist: list[str]
    ) -> list[str]:
        """Names of the tables in ``schema``."""

    def columns(
        self, schema: str, table_name: str, whitelist: list[str], blacklist: list[str]
    ) -> list[Column]:
        """Columns of one table."""

    def primary_key_info(self, schema: str, table_name: str) -> PrimaryKey | None:
        """The primary key of one table, if it has one."""

    def foreign_key_info(self, schema: str, table_name: str) -> list[ForeignKey]:
        """Foreign keys of one table."""

    def translate_column_type(self, column: Column) -> Column:
        """Fill in the target-language type of a column."""


def tables(
    constructor: Constructor,
    schema: str,
    whitelist: Sequence[str] | None = None,
    blacklist: Sequence[str] | None = None,
) -> list[Table]:
    """Build sorted table metadata, with keys and relationships resolved."""
    whitelist = list(whitelist or [])
    blacklist = list(blacklist or [])

    try:
        names = constructor.table_names(schema, whitelist, blacklist)
    except Exception as err:
        raise RuntimeError(f"unable to get table names: {err}") from err

    result: list[Table] = []
    for name in sorted(names or []):
        table = Table(name=name)
        try:
            columns = constructor.columns(schema, name, whitelist, blacklist) or []
        except Exception as err:
            raise RuntimeError(f"unable to fetch table column info ({name}): {err}") from err
        table.columns = [constructor.translate_column_type(column) for column in columns]

        try:
            table.p_key = constructor.primary_key_info(schema, name)
        except Exception as err:
            raise RuntimeError(f"unable to fetch table pkey info ({name}): {err}") from err

        try:
            table.f_keys = list(constructor.foreign_key_info(schema, name) or [])
        except Exception as err:
            raise RuntimeError(f"unable to fetch table fkey info ({name}): {err}") from err

        filter_foreign_keys(table, whitelist, blacklist)
        set_is_join_table(table)
        result.append(table)

    # Relationships depend on foreign key nullability, so constraints come first.
    for table in result:
        set_foreign_key_constraints(table, result)
    for table in result:
        set_relationships(table, result)

    return result


def filter_foreign_keys(
    table: Table, whitelist: Sequence[str] | None, blacklist: Sequence[str] | None
) -> None:
    """Drop foreign keys whose target table is not whitelisted or is blacklisted."""
    table.f_keys = [
        fkey
        for fkey in table.f_keys
        if (not whitelist or fkey.foreign_table in whitelist)
        and (not blacklist or fkey.foreign_table not in blacklist)
    ]


def set_is_join_table(table: Table) -> None:
    """Mark the table as a join table when both of its two key columns are foreign keys."""
    pkey = table.p_key
    if (
        pkey is None
        or len(pkey.columns) != 2
        or len(table.f_keys) < 2
        or len(table.columns) > 2
    ):
        return

    fkey_columns = {fkey.column for fkey in table.f_keys}
    if all(column in fkey_columns for column in pkey.columns):
        table.is_join_table = True


def set_foreign_key_constraints(table: Table, tables: Sequence[Table]) -> None:
    """Copy nullability and uniqueness of both ends onto each foreign key."""
    for fkey in table.f_keys:
        local_column = table.get_column(fkey.column)
        foreign_column = get_table(tables, fkey.foreign_table).get_column(fkey.foreign_column)

        fkey.nullable = local_column.nullable
        fkey.unique = local_column.unique
        fkey.foreign_column_nullable = foreign_column.nullable
        fkey.foreign_column_unique = foreign_column.unique


def set_relationships(table: Table, tables: Sequence[Table]) -> None:
    """Compute the to-one and to-many relationships of ``table``."""
    table.to_one_relationships = to_one_relationships(table, tables)
    table.to_many_relationships = to_many_relationships(table, tables)