import pytest

from boilerdb.columns import Column
from boilerdb.keys import ForeignKey, PrimaryKey
from boilerdb.schema import (
    Table,
    ToManyRelationship,
    ToOneRelationship,
    build_to_one_relationship,
    get_table,
    to_many_relationships,
    to_one_relationships,
)


def test_get_table():
    assert get_table([Table(name="one")], "one").name == "one"


def test_get_table_missing():
    with pytest.raises(KeyError):
        get_table([Table(name="one")], "missing")


def test_get_column():
    table = Table(columns=[Column(name="one")])
    assert table.get_column("one").name == "one"


def test_get_column_missing():
    table = Table(columns=[Column(name="one")])
    with pytest.raises(KeyError):
        table.get_column("missing")


@pytest.mark.parametrize(
    "can, pkeys",
    [
        (True, [Column(name="id", type="int64", default="a")]),
        (True, [Column(name="id", type="uint64", default="a")]),
        (True, [Column(name="id", type="int", default="a")]),
        (True, [Column(name="id", type="uint", default="a")]),
        (
            False,
            [
                Column(name="id", type="uint", default="a"),
                Column(name="id2", type="uint", default="a"),
            ],
        ),
        (False, [Column(name="id", type="string", default="a")]),
        (False, [Column(name="id", type="int", default="")]),
        (False, []),
    ],
)
def test_can_last_insert_id(can, pkeys):
    table = Table(columns=pkeys, p_key=PrimaryKey(columns=[c.name for c in pkeys]))
    assert table.can_last_insert_id() is can


def test_can_last_insert_id_without_primary_key():
    table = Table(columns=[Column(name="id", type="int", default="a")])
    assert table.can_last_insert_id() is False


@pytest.mark.parametrize(
    "can, columns",
    [
        (True, [Column(name="deleted_at", type="null.Time")]),
        (False, [Column(name="deleted_at", type="time.Time")]),
        (False, [Column(name="deleted_at", type="int")]),
        (False, []),
    ],
)
def test_can_soft_delete(can, columns):
    assert Table(columns=columns).can_soft_delete("deleted_at") is can


def test_can_soft_delete_default_column():
    table = Table(columns=[Column(name="deleted_at", type="null.Time")])
    assert table.can_soft_delete("") is True
    assert table.can_soft_delete("removed_at") is False


def _fk(name, column, foreign_table, **kwargs):
    return ForeignKey(
        name=name, column=column, foreign_table=foreign_table, foreign_column="id", **kwargs
    )


def _schema(**flags):
    def cols(*names):
        return [Column(name=n, **flags) for n in names]

    fk_flags = {}
    if flags.get("unique"):
        fk_flags["unique"] = True
    if flags.get("nullable"):
        fk_flags["nullable"] = True
        fk_flags["foreign_column_nullable"] = True
    return [
        Table(name="pilots", columns=cols("id", "name")),
        Table(name="airports", columns=cols("id", "size")),
        Table(
            name="jets",
            columns=cols("id", "pilot_id", "airport_id"),
            f_keys=[
                _fk("jets_pilot_id_fk", "pilot_id", "pilots", **fk_flags),
                _fk("jets_airport_id_fk", "airport_id", "airports", **fk_flags),
            ],
        ),
        Table(
            name="licenses",
            columns=cols("id", "pilot_id"),
            f_keys=[_fk("licenses_pilot_id_fk", "pilot_id", "pilots", **fk_flags)],
        ),
        Table(name="hangars", columns=cols("id", "name")),
        Table(name="languages", columns=cols("id", "language")),
        Table(
            name="pilot_languages",
            is_join_table=True,
            columns=cols("pilot_id", "language_id"),
            f_keys=[
                _fk("pilot_id_fk", "pilot_id", "pilots", **fk_flags),
                _fk("language_id_fk", "language_id", "languages", **fk_flags),
            ],
        ),
    ]


def test_to_one_relationships():
    relationships = to_one_relationships("pilots", _schema(unique=True))
    assert relationships == [
        ToOneRelationship(
            name="jets_pilot_id_fk",
            table="pilots",
            column="id",
            foreign_table="jets",
            foreign_column="pilot_id",
            foreign_column_unique=True,
        ),
        ToOneRelationship(
            name="licenses_pilot_id_fk",
            table="pilots",
            column="id",
            foreign_table="licenses",
            foreign_column="pilot_id",
            foreign_column_unique=True,
        ),
    ]


def _expected_to_many(nullable):
    return [
        ToManyRelationship(
            name="jets_pilot_id_fk",
            table="pilots",
            column="id",
            nullable=nullable,
            foreign_table="jets",
            foreign_column="pilot_id",
            foreign_column_nullable=nullable,
        ),
        ToManyRelationship(
            name="licenses_pilot_id_fk",
            table="pilots",
            column="id",
            nullable=nullable,
            foreign_table="licenses",
            foreign_column="pilot_id",
            foreign_column_nullable=nullable,
        ),
        ToManyRelationship(
            table="pilots",
            column="id",
            nullable=nullable,
            foreign_table="languages",
            foreign_column="id",
            foreign_column_nullable=nullable,
            to_join_table=True,
            join_table="pilot_languages",
            join_local_fkey_name="pilot_id_fk",
            join_local_column="pilot_id",
            join_local_column_nullable=nullable,
            join_foreign_fkey_name="language_id_fk",
            join_foreign_column="language_id",
            join_foreign_column_nullable=nullable,
        ),
    ]


def test_to_many_relationships():
    assert to_many_relationships("pilots", _schema()) == _expected_to_many(False)


def test_to_many_relationships_null():
    assert to_many_relationships("pilots", _schema(nullable=True)) == _expected_to_many(True)


def test_relationships_accept_table_object():
    tables = _schema()
    pilots = get_table(tables, "pilots")
    assert to_many_relationships(pilots, tables) == _expected_to_many(False)


def test_to_one_relationships_unknown_table():
    with pytest.raises(KeyError):
        to_one_relationships("nope", _schema())


def test_build_to_one_relationship_swaps_sides():
    fkey = ForeignKey(
        name="fk",
        column="pilot_id",
        nullable=True,
        foreign_table="pilots",
        foreign_column="id",
        foreign_column_unique=True,
    )
    rel = build_to_one_relationship(Table(name="pilots"), fkey, Table(name="jets"))
    assert rel.column == "id"
    assert rel.unique is True
    assert rel.foreign_column == "pilot_id"
    assert rel.foreign_column_nullable is True
    assert rel.foreign_table == "jets"


def test_table_dict_round_trip():
    table = Table(
        name="users",
        schema_name="dbo",
        columns=[Column(name="id", type="int", db_type="integer", unique=True)],
        p_key=PrimaryKey(name="pk_users", columns=["id"]),
        f_keys=[_fk("fk_users_profile", "profile_id", "profiles", unique=True)],
        to_one_relationships=[ToOneRelationship(name="r", table="users")],
        to_many_relationships=[ToManyRelationship(name="m", to_join_table=True)],
    )
    data = table.to_dict()
    assert data["p_key"] == {"name": "pk_users", "columns": ["id"]}
    assert Table.from_dict(data) == table


def test_table_from_dict_with_nulls():
    table = Table.from_dict({"name": "t", "p_key": None, "f_keys": None, "columns": None})
    assert table == Table(name="t")