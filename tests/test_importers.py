import pytest

from boilerdb.importers import (
    Collection,
    ImportSet,
    add_type_imports,
    combine_string_slices,
    map_from_interface,
    merge,
    merge_set,
    new_default_imports,
    set_from_interface,
    sort_imports,
)


def test_set_from_interface():
    result = set_from_interface(
        {"standard": ["hello", "there"], "third_party": ["there", "hello"]}
    )
    assert result.standard == ["hello", "there"]
    assert result.third_party == ["there", "hello"]


def test_set_from_interface_errors():
    with pytest.raises(TypeError):
        set_from_interface(["not", "a", "map"])
    with pytest.raises(TypeError):
        set_from_interface({"standard": "fmt"})
    with pytest.raises(TypeError):
        set_from_interface({"third_party": ["ok", 5]})


def test_map_from_interface():
    mapping = map_from_interface(
        {
            "test_main": {
                "standard": ["hello", "there"],
                "third_party": ["there", "hello"],
            }
        }
    )
    found = mapping["test_main"]
    assert found.standard == ["hello", "there"]
    assert found.third_party == ["there", "hello"]


def test_map_from_interface_alt_syntax():
    mapping = map_from_interface(
        [
            {
                "name": "test_main",
                "standard": ["hello", "there"],
                "third_party": ["there", "hello"],
            }
        ]
    )
    found = mapping["test_main"]
    assert found.standard == ["hello", "there"]
    assert found.third_party == ["there", "hello"]


def test_map_from_interface_bad_type():
    with pytest.raises(TypeError):
        map_from_interface("nope")


def test_imports_sort():
    assert sort_imports(['"fmt"', '"errors"']) == ['"errors"', '"fmt"']
    assert sort_imports(
        [
            '_ "github.com/lib/pq"',
            '_ "github.com/gorilla/n"',
            '"github.com/gorilla/mux"',
            '"github.com/gorilla/websocket"',
        ]
    ) == [
        '"github.com/gorilla/mux"',
        '_ "github.com/gorilla/n"',
        '"github.com/gorilla/websocket"',
        '_ "github.com/lib/pq"',
    ]


def test_add_type_imports():
    imports1 = ImportSet(
        standard=['"errors"', '"fmt"'],
        third_party=['"github.com/volatiletech/sqlboiler/v4/boil"'],
    )
    expected = ImportSet(
        standard=['"errors"', '"fmt"', '"time"'],
        third_party=[
            '"github.com/volatiletech/null/v8"',
            '"github.com/volatiletech/sqlboiler/v4/boil"',
        ],
    )
    types = ["null.Time", "null.Time", "time.Time"]
    imps = new_default_imports()
    imps.based_on_type = {
        "null.Time": ImportSet(third_party=['"github.com/volatiletech/null/v8"']),
        "time.Time": ImportSet(standard=['"time"']),
    }

    assert add_type_imports(imports1, imps.based_on_type, types) == expected

    imports2 = ImportSet(
        standard=['"errors"', '"fmt"', '"time"'],
        third_party=[
            '"github.com/volatiletech/null/v8"',
            '"github.com/volatiletech/sqlboiler/v4/boil"',
        ],
    )
    assert add_type_imports(imports2, imps.based_on_type, types) == expected


def test_add_type_imports_does_not_mutate_base():
    base = ImportSet(standard=['"fmt"'])
    add_type_imports(base, {"time.Time": ImportSet(standard=['"time"'])}, ["time.Time"])
    assert base.standard == ['"fmt"']


def test_merge_set():
    a = ImportSet(
        standard=["fmt"],
        third_party=["github.com/volatiletech/sqlboiler/v4", "github.com/volatiletech/null/v8"],
    )
    b = ImportSet(standard=["os"], third_party=["github.com/volatiletech/sqlboiler/v4"])
    c = merge_set(a, b)
    assert c.standard == ["fmt", "os"]
    assert c.third_party == [
        "github.com/volatiletech/null/v8",
        "github.com/volatiletech/sqlboiler/v4",
    ]


def test_combine_string_slices():
    assert combine_string_slices(None, None) == []
    a = ["1", "2"]
    assert combine_string_slices(a, None) == ["1", "2"]
    assert combine_string_slices(None, a) == ["1", "2"]
    assert combine_string_slices(a, ["3", "4"]) == ["1", "2", "3", "4"]


def test_merge():
    a = Collection(
        all=ImportSet(["aa"], ["aa"]),
        test=ImportSet(["at"], ["at"]),
        singleton={"a": ImportSet(["as"], ["as"]), "c": ImportSet(["as"], ["as"])},
        test_singleton={"a": ImportSet(["at"], ["at"]), "c": ImportSet(["at"], ["at"])},
        based_on_type={"a": ImportSet(["abot"], ["abot"]), "c": ImportSet(["abot"], ["abot"])},
    )
    b = Collection(
        all=ImportSet(["bb"], ["bb"]),
        test=ImportSet(["bt"], ["bt"]),
        singleton={"b": ImportSet(["bs"], ["bs"]), "c": ImportSet(["bs"], ["bs"])},
        test_singleton={"b": ImportSet(["bt"], ["bt"]), "c": ImportSet(["bt"], ["bt"])},
        based_on_type={"b": ImportSet(["bbot"], ["bbot"]), "c": ImportSet(["bbot"], ["bbot"])},
    )
    c = merge(a, b)

    def has(s, first, second):
        assert s.standard[:2] == [first, second]
        assert s.third_party[:2] == [first, second]

    has(c.all, "aa", "bb")
    has(c.test, "at", "bt")
    has(c.singleton["c"], "as", "bs")
    has(c.test_singleton["c"], "at", "bt")
    has(c.based_on_type["c"], "abot", "bbot")
    assert set(c.singleton) == {"a", "b", "c"}


def test_set_format():
    s = ImportSet(standard=['"fmt"'], third_party=['"github.com/friendsofgo/errors"'])
    expected = 'import (\n\t"fmt"\n\n\t"github.com/friendsofgo/errors"\n)'
    assert s.format().strip() == expected


def test_set_format_small():
    assert ImportSet().format() == ""
    assert ImportSet(third_party=['"x"']).format() == 'import "x"'


def test_collection_round_trip():
    original = new_default_imports()
    data = original.to_dict()
    assert "based_on_type" not in data
    assert Collection.from_dict(data) == original


def test_import_set_from_dict_keys():
    loaded = ImportSet.from_dict({"Standard": ['"a"'], "ThirdParty": None})
    assert loaded == ImportSet(standard=['"a"'], third_party=[])