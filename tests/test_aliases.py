"""Alias table resolution."""

import pytest

from flagmap import AliasCycle, AliasTable, InvalidArgument


def test_unaliased_key_resolves_to_itself():
    assert AliasTable().resolve("set") == "set"


def test_chain_collapses_to_terminal_key():
    table = AliasTable().alias("a", "b").alias("b", "c").alias("c", "d")

    assert table.resolve("a") == "d"
    assert table.resolve("b") == "d"
    assert table.resolve("d") == "d"
    assert table.chain("a") == ["a", "b", "c", "d"]


def test_realiasing_replaces_previous_target():
    table = AliasTable().alias("foo", "set").alias("foo", "get")
    assert table.resolve("foo") == "get"


def test_unalias_removes_entry():
    table = AliasTable().alias("foo", "set").unalias("foo")

    assert "foo" not in table
    assert table.resolve("foo") == "foo"


@pytest.mark.parametrize(
    "pairs, start",
    [
        ([("a", "a")], "a"),
        ([("a", "b"), ("b", "a")], "a"),
        ([("x", "a"), ("a", "b"), ("b", "c"), ("c", "a")], "x"),
    ],
)
def test_cycles_raise(pairs, start):
    table = AliasTable()
    for source, target in pairs:
        table.alias(source, target)

    with pytest.raises(AliasCycle) as excinfo:
        table.resolve(start)

    assert excinfo.value.key == start
    assert excinfo.value.chain[0] == start
    assert excinfo.value.chain[-1] in excinfo.value.chain[:-1]


def test_cycle_error_names_the_chain():
    table = AliasTable().alias("a", "b").alias("b", "a")

    with pytest.raises(AliasCycle, match="a -> b -> a"):
        table.resolve("a")


@pytest.mark.parametrize("source, target", [("", "set"), ("foo", ""), (None, "set"), ("foo", 3)])
def test_invalid_alias_arguments(source, target):
    with pytest.raises(InvalidArgument):
        AliasTable().alias(source, target)


def test_container_protocol():
    table = AliasTable().alias("a", "b").alias("c", "d")

    assert len(table) == 2
    assert list(table) == ["a", "c"]
    assert "a" in table
    assert "b" not in table
