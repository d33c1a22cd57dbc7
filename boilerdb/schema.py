"""Table metadata and relationship discovery between tables."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import Any

from boilerdb.columns import Column
from boilerdb.keys import ForeignKey, PrimaryKey

_LAST_INSERT_ID_TYPES = frozenset(
    {"int", "int8", "int16", "int32", "int64", "uint", "uint8", "uint16", "uint32", "uint64"}
)


def _flat_to_dict(obj: Any) -> dict[str, Any]:
    return {f.name: getattr(obj, f.name) for f in fields(obj)}


def _flat_from_dict(cls: type, data: Mapping[str, Any]) -> Any:
    values = {}
    for f in fields(cls):
        value = data.get(f.name)
        if isinstance(f.default, bool):
            values[f.name] = bool(value)
        else:
            values[f.name] = value or ""
    return cls(**values)


@dataclass
class ToOneRelationship:
    """A one-to-one relationship where the foreign table references the local one."""

    name: str = ""
    table: str = ""
    column: str = ""
    nullable: bool = False
    unique: bool = False
    foreign_table: str = ""
    foreign_column: str = ""
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _flat_to_dict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToOneRelationship:
        return _flat_from_dict(cls, data)


@dataclass
class ToManyRelationship:
    """A one-to-many relationship, possibly through a join table."""

    name: str = ""
    table: str = ""
    column: str = ""
    nullable: bool = False
    unique: bool = False
    foreign_table: str = ""
    foreign_column: str = ""
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False
    to_join_table: bool = False
    join_table: str = ""
    join_local_fkey_name: str = ""
    join_local_column: str = ""
    join_local_column_nullable: bool = False
    join_local_column_unique: bool = False
    join_foreign_fkey_name: str = ""
    join_foreign_column: str = ""
    join_foreign_column_nullable: bool = False
    join_foreign_column_unique: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _flat_to_dict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToManyRelationship:
        return _flat_from_dict(cls, data)


@dataclass
class Table:
    """Metadata about one table of the database schema."""

    name: str = ""
    schema_name: str = ""
    columns: list[Column] = field(default_factory=list)
    p_key: PrimaryKey | None = None
    f_keys: list[ForeignKey] = field(default_factory=list)
    is_join_table: bool = False
    to_one_relationships: list[ToOneRelationship] = field(default_factory=list)
    to_many_relationships: list[ToManyRelationship] = field(default_factory=list)

    def get_column(self, name: str) -> Column:
        """Return the column called ``name``; raise KeyError if there is none."""
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(f"could not find column name: {name}")

    def can_last_insert_id(self) -> bool:
        """Whether a single integer primary key with a default allows last-insert-id."""
        if self.p_key is None or len(self.p_key.columns) != 1:
            return False
        column = self.get_column(self.p_key.columns[0])
        if not column.default:
            return False
        return column.type in _LAST_INSERT_ID_TYPES

    def can_soft_delete(self, delete_column: str = "") -> bool:
        """Whether the table has a nullable time column to mark deletions."""
        delete_column = delete_column or "deleted_at"
        return any(
            column.name == delete_column and column.type == "null.Time"
            for column in self.columns
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "schema_name": self.schema_name,
            "columns": [column.to_dict() for column in self.columns],
            "p_key": self.p_key.to_dict() if self.p_key is not None else None,
            "f_keys": [fkey.to_dict() for fkey in self.f_keys],
            "is_join_table": self.is_join_table,
            "to_one_relationships": [r.to_dict() for r in self.to_one_relationships],
            "to_many_relationships": [r.to_dict() for r in self.to_many_relationships],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Table:
        p_key = data.get("p_key")
        return cls(
            name=data.get("name") or "",
            schema_name=data.get("schema_name") or "",
            columns=[Column.from_dict(c) for c in data.get("columns") or []],
            p_key=PrimaryKey.from_dict(p_key) if p_key is not None else None,
            f_keys=[ForeignKey.from_dict(f) for f in data.get("f_keys") or []],
            is_join_table=bool(data.get("is_join_table", False)),
            to_one_relationships=[
                ToOneRelationship.from_dict(r) for r in data.get("to_one_relationships") or []
            ],
            to_many_relationships=[
                ToManyRelationship.from_dict(r) for r in data.get("to_many_relationships") or []
            ],
        )


def get_table(tables: Iterable[Table], name: str) -> Table:
    """Return the table called ``name``; raise KeyError if there is none."""
    for table in tables:
        if table.name == name:
            return table
    raise KeyError(f"could not find table name: {name}")


def _resolve(table: Table | str, tables: Sequence[Table]) -> Table:
    return table if isinstance(table, Table) else get_table(tables, table)


def to_one_relationships(
    table: Table | str, tables: Sequence[Table]
) -> list[ToOneRelationship]:
    """One-to-one relationships pointing at ``table`` (a Table or a table name)."""
    local = _resolve(table, tables)
    return [
        build_to_one_relationship(local, fkey, other)
        for other in tables
        for fkey in other.f_keys
        if fkey.foreign_table == local.name and not other.is_join_table and fkey.unique
    ]


def to_many_relationships(
    table: Table | str, tables: Sequence[Table]
) -> list[ToManyRelationship]:
    """One-to-many relationships pointing at ``table`` (a Table or a table name)."""
    local = _resolve(table, tables)
    return [
        build_to_many_relationship(local, fkey, other)
        for other in tables
        for fkey in other.f_keys
        if fkey.foreign_table == local.name and (other.is_join_table or not fkey.unique)
    ]


def build_to_one_relationship(
    local_table: Table, foreign_key: ForeignKey, foreign_table: Table
) -> ToOneRelationship:
    """Describe ``foreign_key`` of ``foreign_table`` as seen from ``local_table``."""
    return ToOneRelationship(
        name=foreign_key.name,
        table=local_table.name,
        column=foreign_key.foreign_column,
        nullable=foreign_key.foreign_column_nullable,
        unique=foreign_key.foreign_column_unique,
        foreign_table=foreign_table.name,
        foreign_column=foreign_key.column,
        foreign_column_nullable=foreign_key.nullable,
        foreign_column_unique=foreign_key.unique,
    )


def build_to_many_relationship(
    local_table: Table, foreign_key: ForeignKey, foreign_table: Table
) -> ToManyRelationship:
    """Describe ``foreign_key`` as a to-many relationship, resolving join tables."""
    if not foreign_table.is_join_table:
        return ToManyRelationship(
            name=foreign_key.name,
            table=local_table.name,
            column=foreign_key.foreign_column,
            nullable=foreign_key.foreign_column_nullable,
            unique=foreign_key.foreign_column_unique,
            foreign_table=foreign_table.name,
            foreign_column=foreign_key.column,
            foreign_column_nullable=foreign_key.nullable,
            foreign_column_unique=foreign_key.unique,
            to_join_table=False,
        )

    relationship = ToManyRelationship(
        table=local_table.name,
        column=foreign_key.foreign_column,
        nullable=foreign_key.foreign_column_nullable,
        unique=foreign_key.foreign_column_unique,
        to_join_table=True,
        join_table=foreign_table.name,
        join_local_fkey_name=foreign_key.name,
        join_local_column=foreign_key.column,
        join_local_column_nullable=foreign_key.nullable,
        join_local_column_unique=foreign_key.unique,
    )

    for fkey in foreign_table.f_keys:
        if fkey.name == foreign_key.name:
            continue
        relationship.join_foreign_fkey_name = fkey.name
        relationship.join_foreign_column = fkey.column
        relationship.join_foreign_column_nullable = fkey.nullable
        relationship.join_foreign_column_unique = fkey.unique
        relationship.foreign_table = fkey.foreign_table
        relationship.foreign_column = fkey.foreign_column
        relationship.foreign_column_nullable = fkey.foreign_column_nullable
        relationship.foreign_column_unique = fkey.foreign_column_unique

    return relationship