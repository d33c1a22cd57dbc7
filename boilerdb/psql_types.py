"""PostgreSQL connection strings, column type translation and imports."""

from __future__ import annotations

import dataclasses
import sys

from boilerdb.columns import Column
from boilerdb.importers import Collection, ImportSet

_NULL_PACKAGE = '"github.com/volatiletech/null/v8"'
_TYPES_PACKAGE = '"github.com/volatiletech/sqlboiler/v4/types"'
_PGEO_PACKAGE = '"github.com/volatiletech/sqlboiler/v4/types/pgeo"'

_STRING_TYPES = frozenset(
    {
        "bit", "interval", "bit varying", "character", "money", "character varying",
        "cidr", "inet", "macaddr", "text", "uuid", "xml",
    }
)
_TIME_TYPES = frozenset(
    {
        "date", "time", "timestamp without time zone", "timestamp with time zone",
        "time without time zone", "time with time zone",
    }
)
_GEOMETRY_TYPES = {
    "point": "Point",
    "line": "Line",
    "lseg": "Lseg",
    "box": "Box",
    "path": "Path",
    "polygon": "Polygon",
    "circle": "Circle",
}

# Database type -> (nullable type, non-nullable type).
_SCALAR_TYPES: dict[str, tuple[str, str]] = {
    "bigint": ("null.Int64", "int64"),
    "bigserial": ("null.Int64", "int64"),
    "integer": ("null.Int", "int"),
    "serial": ("null.Int", "int"),
    "oid": ("null.Uint32", "uint32"),
    "smallint": ("null.Int16", "int16"),
    "smallserial": ("null.Int16", "int16"),
    "decimal": ("types.NullDecimal", "types.Decimal"),
    "numeric": ("types.NullDecimal", "types.Decimal"),
    "double precision": ("null.Float64", "float64"),
    "real": ("null.Float32", "float32"),
    '"char"': ("null.Byte", "types.Byte"),
    "bytea": ("null.Bytes", "[]byte"),
    "json": ("null.JSON", "types.JSON"),
    "jsonb": ("null.JSON", "types.JSON"),
    "boolean": ("null.Bool", "bool"),
}
_SCALAR_TYPES.update({name: ("null.String", "string") for name in _STRING_TYPES})
_SCALAR_TYPES.update({name: ("null.Time", "time.Time") for name in _TIME_TYPES})
_SCALAR_TYPES.update(
    {name: (f"pgeo.Null{kind}", f"pgeo.{kind}") for name, kind in _GEOMETRY_TYPES.items()}
)

_ARRAY_ELEMENT_TYPES: dict[str, str] = {
    **{
        name: "types.Int64Array"
        for name in ("bigint", "bigserial", "integer", "serial", "smallint", "smallserial", "oid")
    },
    "bytea": "types.BytesArray",
    **{name: "types.StringArray" for name in _STRING_TYPES | {"uuint"}},
    "boolean": "types.BoolArray",
    "decimal": "types.DecimalArray",
    "numeric": "types.DecimalArray",
    "double precision": "types.Float64Array",
    "real": "types.Float64Array",
}

_ARRAY_UDT_TYPES: dict[str, str] = {
    "_int4": "types.Int64Array",
    "_int8": "types.Int64Array",
    "_bytea": "types.BytesArray",
    **{
        name: "types.StringArray"
        for name in (
            "_bit", "_interval", "_varbit", "_char", "_money", "_varchar", "_cidr",
            "_inet", "_macaddr", "_citext", "_text", "_uuid", "_xml",
        )
    },
    "_bool": "types.BoolArray",
    "_numeric": "types.DecimalArray",
    "_float4": "types.Float64Array",
    "_float8": "types.Float64Array",
}


def psql_build_query_string(
    user: str, password: str, dbname: str, host: str, port: int, sslmode: str
) -> str:
    """Build a libpq keyword/value connection string, leaving out empty parts."""
    parts = []
    if user:
        parts.append(f"user={user}")
    if password:
        parts.append(f"password={password}")
    if dbname:
        parts.append(f"dbname={dbname}")
    if host:
        parts.append(f"host={host}")
    if port:
        parts.append(f"port={port}")
    if sslmode:
        parts.append(f"sslmode={sslmode}")
    return " ".join(parts)


def get_array_type(column: Column) -> tuple[str, str]:
    """Return the array type and the element database type of an ARRAY column.

    The element type comes from ``arr_type`` when known; otherwise (for example
    for domains over arrays) it is taken from the underscore-prefixed UDT name.
    """
    if column.arr_type is not None:
        return (
            _ARRAY_ELEMENT_TYPES.get(column.arr_type, "types.StringArray"),
            column.arr_type,
        )
    return _ARRAY_UDT_TYPES.get(column.udt_name, "types.StringArray"), column.udt_name


def translate_column_type(column: Column) -> Column:
    """Return a copy of ``column`` with its target type filled in from its database type."""
    result = dataclasses.replace(column)
    nullable = result.nullable

    if result.db_type == "ARRAY":
        array_type, element_type = get_array_type(result)
        result.type = array_type
        # The element type is appended (e.g. ARRAYinteger) so random values can be built.
        result.db_type += element_type
    elif result.db_type == "USER-DEFINED":
        if result.udt_name == "hstore":
            result.type = "types.HStore"
            result.db_type = "hstore"
        elif result.udt_name == "citext":
            result.type = "null.String" if nullable else "string"
        else:
            result.type = "string"
            print(
                f"warning: incompatible data type detected: {result.udt_name}",
                file=sys.stderr,
            )
    elif result.db_type == "uuint" and not nullable:
        result.type = "string"
    else:
        null_type, plain_type = _SCALAR_TYPES.get(result.db_type, ("null.String", "string"))
        result.type = null_type if nullable else plain_type

    return result


def psql_imports() -> Collection:
    """Imports the PostgreSQL driver adds to generation."""
    null_types = (
        "null.Float32", "null.Float64", "null.Int", "null.Int8", "null.Int16",
        "null.Int32", "null.Int64", "null.Uint", "null.Uint8", "null.Uint16",
        "null.Uint32", "null.Uint64", "null.String", "null.Bool", "null.Time",
        "null.JSON", "null.Bytes",
    )
    sqlboiler_types = (
        "types.JSON", "types.Decimal", "types.BytesArray", "types.Int64Array",
        "types.Float64Array", "types.BoolArray", "types.StringArray",
        "types.DecimalArray", "types.HStore", "types.NullDecimal",
    )
    geometry_types = [f"pgeo.{kind}" for kind in _GEOMETRY_TYPES.values()]
    geometry_types += [f"pgeo.Null{kind}" for kind in _GEOMETRY_TYPES.values()]

    based_on_type: dict[str, ImportSet] = {}
    based_on_type.update({name: ImportSet(third_party=[_NULL_PACKAGE]) for name in null_types})
    based_on_type["time.Time"] = ImportSet(standard=['"time"'])
    based_on_type.update(
        {name: ImportSet(third_party=[_TYPES_PACKAGE]) for name in sqlboiler_types}
    )
    based_on_type.update(
        {name: ImportSet(third_party=[_PGEO_PACKAGE]) for name in geometry_types}
    )

    return Collection(
        all=ImportSet(standard=['"strconv"']),
        singleton={
            "psql_upsert": ImportSet(
                standard=['"fmt"', '"strings"'],
                third_party=[
                    '"github.com/volatiletech/strmangle"',
                    '"github.com/volatiletech/sqlboiler/v4/drivers"',
                ],
            ),
        },
        test_singleton={
            "psql_suites_test": ImportSet(standard=['"testing"']),
            "psql_main_test": ImportSet(
                standard=[
                    '"bytes"',
                    '"database/sql"',
                    '"fmt"',
                    '"io"',
                    '"io/ioutil"',
                    '"os"',
                    '"os/exec"',
                    '"regexp"',
                    '"strings"',
                ],
                third_party=[
                    '"github.com/kat-co/vala"',
                    '"github.com/friendsofgo/errors"',
                    '"github.com/spf13/viper"',
                    '"github.com/volatiletech/sqlboiler/v4/drivers/sqlboiler-psql/driver"',
                    '"github.com/volatiletech/randomize"',
                    '_ "github.com/lib/pq"',
                ],
            ),
        },
        based_on_type=based_on_type,
    )