"""Import collections used when rendering generated source files."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any


def _remove_duplicates(items: Iterable[str]) -> list[str]:
    """Drop repeated entries, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


def sort_imports(imports: Iterable[str]) -> list[str]:
    """Sort import lines, ignoring leading underscores and spaces."""
    return sorted(imports, key=lambda line: line.lstrip("_ "))


def _lookup(data: Mapping[str, Any], *names: str) -> Any:
    """Find a key in ``data`` ignoring case and underscores."""
    wanted = {name.replace("_", "").lower() for name in names}
    for key, value in data.items():
        if key.replace("_", "").lower() in wanted:
            return value
    return None


@dataclass
class ImportSet:
    """Standard-library and third-party imports for one generated file."""

    standard: list[str] = field(default_factory=list)
    third_party: list[str] = field(default_factory=list)

    def format(self) -> str:
        """Render the set as an import declaration."""
        total = len(self.standard) + len(self.third_party)
        if total == 0:
            return ""
        if total == 1:
            only = self.standard[0] if self.standard else self.third_party[0]
            return f"import {only}"

        parts = ["import ("]
        parts.extend(f"\n\t{line}" for line in self.standard)
        if self.standard and self.third_party:
            parts.append("\n")
        parts.extend(f"\n\t{line}" for line in self.third_party)
        parts.append("\n)\n")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {"Standard": list(self.standard), "ThirdParty": list(self.third_party)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ImportSet:
        if not data:
            return cls()
        standard = _lookup(data, "Standard") or []
        third_party = _lookup(data, "ThirdParty", "third_party") or []
        return cls(standard=list(standard), third_party=list(third_party))


ImportMap = dict[str, ImportSet]


@dataclass
class Collection:
    """All import sets used during generation."""

    all: ImportSet = field(default_factory=ImportSet)
    test: ImportSet = field(default_factory=ImportSet)
    singleton: ImportMap = field(default_factory=dict)
    test_singleton: ImportMap = field(default_factory=dict)
    based_on_type: ImportMap = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"all": self.all.to_dict(), "test": self.test.to_dict()}
        for key, mapping in (
            ("singleton", self.singleton),
            ("test_singleton", self.test_singleton),
            ("based_on_type", self.based_on_type),
        ):
            if mapping:
                result[key] = {name: s.to_dict() for name, s in mapping.items()}
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Collection:
        if not data:
            return cls()

        def load_map(key: str) -> ImportMap:
            raw = data.get(key) or {}
            return {name: ImportSet.from_dict(value) for name, value in raw.items()}

        return cls(
            all=ImportSet.from_dict(data.get("all")),
            test=ImportSet.from_dict(data.get("test")),
            singleton=load_map("singleton"),
            test_singleton=load_map("test_singleton"),
            based_on_type=load_map("based_on_type"),
        )


def _string_list(value: Any, kind: str) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"import set {kind} must be a list")
    result = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise TypeError(
                f"import set {kind} list element {index} ({item!r}) must be a string"
            )
        result.append(item)
    return result


def set_from_interface(intf: Any) -> ImportSet:
    """Build an ImportSet from loosely typed configuration data."""
    if not isinstance(intf, Mapping):
        raise TypeError("import set should be a mapping")

    result = ImportSet()
    if "standard" in intf:
        result.standard = _string_list(intf["standard"], "standard")
    if "third_party" in intf:
        result.third_party = _string_list(intf["third_party"], "third_party")
    return result


def map_from_interface(intf: Any) -> ImportMap:
    """Build an import map from a mapping or from a list of named mappings."""
    if isinstance(intf, Mapping):
        items = list(intf.items())
    elif isinstance(intf, (list, tuple)):
        items = []
        for entry in intf:
            if not isinstance(entry, Mapping):
                raise TypeError("import map list entries must be mappings")
            name = entry.get("name")
            if not isinstance(name, str):
                raise TypeError("import map list entries need a string 'name'")
            items.append((name, entry))
    else:
        raise TypeError("import map should be a mapping or a list of mappings")

    return {name: set_from_interface(value) for name, value in items}


def new_default_imports() -> Collection:
    """Return the default import collection."""
    return Collection(
        all=ImportSet(
            standard=[
                '"database/sql"',
                '"fmt"',
                '"reflect"',
                '"strings"',
                '"sync"',
                '"time"',
            ],
            third_party=[
                '"github.com/friendsofgo/errors"',
                '"github.com/volatiletech/sqlboiler/v4/boil"',
                '"github.com/volatiletech/sqlboiler/v4/queries"',
                '"github.com/volatiletech/sqlboiler/v4/queries/qm"',
                '"github.com/volatiletech/sqlboiler/v4/queries/qmhelper"',
                '"github.com/volatiletech/strmangle"',
            ],
        ),
        singleton={
            "boil_queries": ImportSet(
                third_party=[
                    '"github.com/volatiletech/sqlboiler/v4/drivers"',
                    '"github.com/volatiletech/sqlboiler/v4/queries"',
                    '"github.com/volatiletech/sqlboiler/v4/queries/qm"',
                ],
            ),
            "boil_types": ImportSet(
                standard=['"strconv"'],
                third_party=[
                    '"github.com/friendsofgo/errors"',
                    '"github.com/volatiletech/sqlboiler/v4/boil"',
                    '"github.com/volatiletech/strmangle"',
                ],
            ),
        },
        test=ImportSet(
            standard=['"bytes"', '"reflect"', '"testing"'],
            third_party=[
                '"github.com/volatiletech/sqlboiler/v4/boil"',
                '"github.com/volatiletech/sqlboiler/v4/queries"',
                '"github.com/volatiletech/randomize"',
                '"github.com/volatiletech/strmangle"',
            ],
        ),
        test_singleton={
            "boil_main_test": ImportSet(
                standard=[
                    '"database/sql"',
                    '"flag"',
                    '"fmt"',
                    '"math/rand"',
                    '"os"',
                    '"path/filepath"',
                    '"strings"',
                    '"testing"',
                    '"time"',
                ],
                third_party=[
                    '"github.com/spf13/viper"',
                    '"github.com/volatiletech/sqlboiler/v4/boil"',
                ],
            ),
            "boil_queries_test": ImportSet(
                standard=[
                    '"bytes"',
                    '"fmt"',
                    '"io"',
                    '"io/ioutil"',
                    '"math/rand"',
                    '"regexp"',
                ],
                third_party=['"github.com/volatiletech/sqlboiler/v4/boil"'],
            ),
            "boil_suites_test": ImportSet(standard=['"testing"']),
        },
    )


def add_type_imports(
    base: ImportSet, type_map: Mapping[str, ImportSet], column_types: Iterable[str]
) -> ImportSet:
    """Return ``base`` extended with the imports needed by the given column types."""
    standard = list(base.standard)
    third_party = list(base.third_party)

    for column_type in column_types:
        extra = type_map.get(column_type)
        if extra is not None:
            standard.extend(extra.standard)
            third_party.extend(extra.third_party)

    return ImportSet(
        standard=sort_imports(_remove_duplicates(standard)),
        third_party=sort_imports(_remove_duplicates(third_party)),
    )


def combine_string_slices(a: Iterable[str] | None, b: Iterable[str] | None) -> list[str]:
    """Concatenate two string sequences into a new list."""
    return [*(a or ()), *(b or ())]


def merge_set(a: ImportSet, b: ImportSet) -> ImportSet:
    """Merge two import sets, de-duplicated and sorted."""
    return ImportSet(
        standard=sort_imports(
            _remove_duplicates(combine_string_slices(a.standard, b.standard))
        ),
        third_party=sort_imports(
            _remove_duplicates(combine_string_slices(a.third_party, b.third_party))
        ),
    )


def _merge_map(a: Mapping[str, ImportSet], b: Mapping[str, ImportSet]) -> ImportMap:
    merged: ImportMap = dict(a)
    for key, to_merge in b.items():
        merged[key] = merge_set(merged.get(key, ImportSet()), to_merge)
    return merged


def merge(a: Collection, b: Collection) -> Collection:
    """Merge two collections into a new, de-duplicated one."""
    return Collection(
        all=merge_set(a.all, b.all),
        test=merge_set(a.test, b.test),
        singleton=_merge_map(a.singleton, b.singleton),
        test_singleton=_merge_map(a.test_singleton, b.test_singleton),
        based_on_type=_merge_map(a.based_on_type, b.based_on_type),
    )