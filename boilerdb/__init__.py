"""Schema model, relationship discovery, PostgreSQL type mapping and import bookkeeping."""

__version__ = "0.1.0"

__all__ = [
    "assembly",
    "columns",
    "config",
    "importers",
    "keys",
    "psql_types",
    "schema",
]