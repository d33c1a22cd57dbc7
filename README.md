# boilerdb

`boilerdb` holds the schema model an ORM code generator works from: tables,
columns, primary keys and foreign keys as plain Python dataclasses. On top of
that model it works out join tables and to-one / to-many relationships, maps
PostgreSQL column types to target-language types, and keeps track of which
imports the generated code will need.

It has no runtime dependencies beyond the standard library.

## Modules

| Module | Contents |
| --- | --- |
| `boilerdb.importers` | `ImportSet`, `Collection`, `new_default_imports`, `add_type_imports`, `merge`, `merge_set`, `combine_string_slices`, `sort_imports`, `set_from_interface`, `map_from_interface` |
| `boilerdb.columns` | `Column`, `title_case`, `column_names`, `column_db_types`, `filter_columns_by_auto`, `filter_columns_by_default`, `filter_columns_by_enum` |
| `boilerdb.keys` | `PrimaryKey`, `ForeignKey`, `SQLColumnDef`, `SQLColumnDefs`, `sql_col_definitions` |
| `boilerdb.config` | `DriverConfig`, `ConfigError`, `default_env`, `tables_from_list`, `columns_from_list` |
| `boilerdb.schema` | `Table`, `ToOneRelationship`, `ToManyRelationship`, `get_table`, `to_one_relationships`, `to_many_relationships` and the relationship builders |
| `boilerdb.assembly` | `DBInfo`, `Dialect`, the `Driver` and `Constructor` protocols, `tables()` and the steps it runs |
| `boilerdb.psql_types` | `psql_build_query_string`, `translate_column_type`, `get_array_type`, `psql_imports` |

Every dataclass that crosses a process or file boundary has `to_dict()` and
`from_dict()` for JSON-friendly round trips.

## Driver configuration

`DriverConfig` is a `dict` with typed accessors. The `must_*` accessors raise
`ConfigError` for missing, empty or wrongly typed values; the others return
`None` and the `default_*` forms fall back to a default.

```python
from boilerdb.config import DriverConfig, ConfigError, tables_from_list, columns_from_list

cfg = DriverConfig({"user": "app", "port": 5432, "whitelist": ["users", "posts.title"]})

cfg.must_string("user")                    # "app"
cfg.default_int("port", 1)                 # 5432
cfg.default_string("sslmode", "require")   # "require"
cfg.string_list("whitelist")               # ["users", "posts.title"]

try:
    cfg.must_string("dbname")
except ConfigError as exc:
    print(exc)   # failed to find key dbname in config

tables_from_list(["users", "posts.title"])            # ["users"]
columns_from_list(["users", "posts.title"], "posts")  # ["title"]
```

Integer accessors accept ints, floats (truncated) and decimal strings, and
treat zero as absent. Whitelist and blacklist entries are either a table name
(`users`) or a `table.column` pair (`posts.title`).

## Building the table list

Anything that implements the `Constructor` protocol — `table_names`,
`columns`, `primary_key_info`, `foreign_key_info` and
`translate_column_type` — can hand the assembly of tables to `tables()`:

```python
from boilerdb.assembly import tables
from boilerdb.schema import get_table

all_tables = tables(my_constructor, "public", [], [])
pilots = get_table(all_tables, "pilots")

for rel in pilots.to_many_relationships:
    print(rel.foreign_table, rel.to_join_table)
```

`tables()` sorts the names, translates each column's type, drops foreign keys
pointing outside the whitelist or into the blacklist, copies nullability and
uniqueness of both ends onto each foreign key, and then computes
relationships. A failure in one of the constructor's calls is re-raised as
`RuntimeError` naming the step and table.

A table whose primary key has exactly two columns, both of them foreign keys,
with at least two foreign keys and no more than two columns, is marked as a
join table; relationships through it are reported as to-many with
`to_join_table` set. `get_table` and `Table.get_column` raise `KeyError` for
unknown names. `Table.can_last_insert_id()` and `Table.can_soft_delete()`
answer the usual generator questions about a table.

## PostgreSQL types

```python
from boilerdb.columns import Column
from boilerdb.psql_types import translate_column_type, psql_build_query_string

translate_column_type(Column(name="id", db_type="bigint")).type              # "int64"
translate_column_type(Column(name="n", db_type="integer", nullable=True)).type  # "null.Int"

arr = translate_column_type(Column(name="ids", db_type="ARRAY", arr_type="integer"))
arr.type, arr.db_type   # ("types.Int64Array", "ARRAYinteger")

psql_build_query_string("app", "", "shop", "localhost", 5432, "disable")
# "user=app dbname=shop host=localhost port=5432 sslmode=disable"
```

`translate_column_type` returns a copy and leaves its argument untouched.
Unknown `USER-DEFINED` types become `string` with a warning on standard error.
`psql_imports()` returns the `Collection` of imports these types require.

## Imports

```python
from boilerdb.importers import ImportSet, new_default_imports, add_type_imports, merge

defaults = new_default_imports()
extra = ImportSet(standard=['"fmt"'], third_party=['"github.com/friendsofgo/errors"'])
print(extra.format())

combined = merge(defaults, defaults)
needed = add_type_imports(defaults.all, {"time.Time": ImportSet(standard=['"time"'])}, ["time.Time"])
```

Import lists are de-duplicated and sorted ignoring any leading `_` or space,
so blank imports sort next to their named counterparts.
`set_from_interface` and `map_from_interface` build import sets from loosely
typed configuration data and raise `TypeError` when it has the wrong shape.

## What this package does not do

It does not connect to a database: there is no driver here that queries a
live PostgreSQL or MySQL server, and no MySQL type mapping. It does not run
external driver programs or keep a registry of drivers, and it has no
command-line tool and no template rendering. You supply a `Constructor` that
reads your schema; the package turns its answers into tables, relationships,
types and imports.

## Tests

Install the `test` extra and run `pytest`.