"""Built-in keys installed by the default bootstrap and the notifications they cause."""

import os

import pytest

from flagmap import (
    ActionFailure,
    App,
    Mapper,
    UnresolvedAction,
    bind,
    config,
    data,
    options,
    store,
)
from flagmap.actions import ACTION_MAP, BuiltinAction
from flagmap.actions.utils import is_force, split_list


def test_action_map_contains_builtins():
    assert {"set", "get", "has", "del", "option", "data", "cwd", "use", "store"} <= set(
        ACTION_MAP
    )
    assert all(issubclass(cls, BuiltinAction) for cls in ACTION_MAP.values())


def test_bootstrap_installs_supported_builtins(app):
    installed = set(app.config.actions)
    assert {"set", "get", "has", "del", "option", "data", "cwd", "use", "store"} <= installed
    assert app.config.aliases.resolve("options") == "option"


def test_bootstrap_installs_every_builtin(bare_app):
    installed = set(bare_app.config.actions)
    assert set(ACTION_MAP) <= installed
    assert bare_app.config.aliases.resolve("options") == "option"


@pytest.mark.asyncio
async def test_builtin_without_capability_is_skipped(bare_app):
    outcomes = []
    await bare_app.config.process(
        {"data": {"a": "b"}, "option": {"a": "b"}}, outcomes.append
    )

    assert outcomes == [None]
    assert bare_app.cache == {}


@pytest.mark.asyncio
async def test_strict_builtin_without_capability_is_unresolved():
    app = App()
    bind(app, strict=True)

    with pytest.raises(UnresolvedAction) as excinfo:
        await app.config.process({"store": {"set": {"a": "b"}}})

    assert excinfo.value.key == "store"


def test_store_gets_its_own_mapper(app):
    assert isinstance(app.store.config, Mapper)
    assert app.store.config is not app.config
    assert app.store.config.aliases is not app.config.aliases
    assert {"set", "get", "has", "del"} <= set(app.store.config.actions)


def test_no_store_is_not_an_error():
    foo = App()
    foo.use(config())

    assert not foo.has_method("store")
    assert not hasattr(foo, "store")


def test_binding_twice_is_a_no_op(app):
    first = app.config
    assert bind(app) is first
    app.use(config())
    assert app.config is first


@pytest.mark.parametrize(
    "value, expected",
    [
        ("a", ["a"]),
        ("a,b,c", ["a", "b", "c"]),
        (" a , ,b ", ["a", "b"]),
        (["a", "b"], ["a", "b"]),
        (["a,b", "c"], ["a", "b", "c"]),
        ({"a": True, "b": True}, ["a", "b"]),
        (True, []),
        (None, []),
        (3, ["3"]),
    ],
)
def test_split_list(value, expected):
    assert split_list(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ({"force": True}, True),
        ({"force": "true"}, True),
        ({"force": "yes"}, True),
        ({"force": False}, False),
        ({"force": "false"}, False),
        ({"other": True}, False),
        ("force", False),
    ],
)
def test_is_force(value, expected):
    assert is_force(value) is expected


@pytest.mark.asyncio
async def test_set_event(app, recorder):
    events = recorder(app, "set")

    await app.config.process({"set": {"a": "b"}})

    assert events["set"] == [("a", "b")]
    assert app.lookup("a") == "b"


@pytest.mark.asyncio
async def test_set_and_get_together(app, recorder):
    events = recorder(app, "set", "get")
    app.config.map("foo", "set").map("bar", "get")

    await app.config.process({"set": {"a": "b"}, "get": "a"})

    assert events["set"] == [("a", "b")]
    assert events["get"] == [("a", "b")]


@pytest.mark.asyncio
async def test_get_event(app, recorder):
    app.set("a", "b")
    events = recorder(app, "get")

    await app.config.process({"get": "a"})

    assert events["get"] == [("a", "b")]


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["a,b,c", ["a", "b", "c"]])
async def test_multiple_get_events_in_order(app, recorder, value):
    app.set("a", "aaa").set("b", "bbb").set("c", "ccc")
    events = recorder(app, "get")

    await app.config.process({"get": value})

    assert events["get"] == [("a", "aaa"), ("b", "bbb"), ("c", "ccc")]


@pytest.mark.asyncio
async def test_has_events(app, recorder):
    app.set("a", "aaa").set("b", "bbb")
    events = recorder(app, "has")

    await app.config.process({"has": "a,b,missing"})

    assert events["has"] == [("a", True), ("b", True), ("missing", False)]


@pytest.mark.asyncio
async def test_del_event(app, recorder):
    app.set("a", "b")
    events = recorder(app, "del")

    await app.config.process({"del": "a"})

    assert events["del"] == [("a",)]
    assert app.lookup("a") is None


@pytest.mark.asyncio
async def test_del_list(app, recorder):
    app.set("a", 1).set("b", 2).set("c", 3)
    events = recorder(app, "del")

    await app.config.process({"del": ["a", "b"]})

    assert events["del"] == [("a",), ("b",)]
    assert app.lookup("c") == 3


@pytest.mark.asyncio
async def test_del_force_clears_app(app, recorder):
    app.set("a", 1).set("b", 2)
    events = recorder(app, "del")

    await app.config.process({"del": {"force": True}})

    assert sorted(events["del"]) == [("a",), ("b",)]
    assert app.cache == {}


@pytest.mark.asyncio
async def test_option_event(app, recorder):
    events = recorder(app, "option")

    await app.config.process({"option": {"a": "b"}})

    assert events["option"] == [("a", "b")]
    assert app.option("a") == "b"


@pytest.mark.asyncio
async def test_options_alias(app, recorder):
    events = recorder(app, "option")

    await app.config.process({"options": {"a": "b"}})

    assert events["option"] == [("a", "b")]


@pytest.mark.asyncio
async def test_data_event(app, recorder):
    events = recorder(app, "data")

    await app.config.process({"data": {"a": "b"}})

    assert len(events["data"]) == 1
    (args,) = events["data"][0]
    assert args == [{"a": "b"}]
    assert app.lookup("data.a") == "b"


@pytest.mark.asyncio
async def test_cwd_sets_option_on_host(bare_app, recorder):
    events = recorder(bare_app, "set")

    await bare_app.config.process({"cwd": os.getcwd()})

    assert events["set"] == [("options.cwd", os.getcwd())]


@pytest.mark.asyncio
async def test_cwd_uses_option_capability_when_present(app, recorder):
    events = recorder(app, "set", "option")

    await app.config.process({"cwd": "/somewhere"})

    assert events["option"] == [("cwd", "/somewhere")]
    assert events["set"] == [("options.cwd", "/somewhere")]


@pytest.mark.asyncio
async def test_store_set_event(app, recorder):
    events = recorder(app.store, "set")

    await app.config.process({"store": {"set": {"a": "b"}}})

    assert events["set"] == [("a", "b")]
    assert app.store.data["a"] == "b"


@pytest.mark.asyncio
async def test_store_get_event(app, recorder):
    app.store.set("a", "b")
    events = recorder(app.store, "get")

    await app.config.process({"store": {"get": "a"}})

    assert events["get"] == [("a", "b")]


@pytest.mark.asyncio
async def test_store_del_list(app, recorder):
    app.store.set("a", "aaa").set("b", "bbb").set("c", "ccc")
    events = recorder(app.store, "del")

    await app.config.process({"store": {"del": "a,b"}})

    assert events["del"] == [("a",), ("b",)]
    assert app.store.data == {"c": "ccc"}


@pytest.mark.asyncio
async def test_store_del_force_clears_store(app, recorder):
    app.store.set("a", "aaa").set("b", "bbb")
    events = recorder(app.store, "del")

    await app.config.process({"store": {"del": {"force": "true"}}})

    assert sorted(events["del"]) == [("a",), ("b",)]
    assert app.store.data == {}


@pytest.mark.asyncio
async def test_store_mapper_aliases(app, recorder):
    events = recorder(app.store, "set", "get")
    app.store.config.alias("foo", "set").alias("bar", "get")

    await app.store.config.process({"foo": {"a": "b"}, "bar": "a"})

    assert events["set"] == [("a", "b")]
    assert events["get"] == [("a", "b")]


@pytest.mark.asyncio
async def test_store_mapper_as_function(app, recorder):
    events = recorder(app.store, "set", "get")
    app.store.config({"foo": "set", "bar": "get"})

    await app.store.config.process({"foo": {"a": "b"}, "bar": "a"})

    assert events["set"] == [("a", "b")]
    assert events["get"] == [("a", "b")]


@pytest.mark.asyncio
async def test_store_value_must_be_object(app):
    with pytest.raises(ActionFailure, match="expected an object of keys"):
        await app.config.process({"store": "a"})


@pytest.mark.asyncio
async def test_store_attached_after_config(tmp_path, recorder):
    app = App()
    app.use(config()).use(store("late", directory=tmp_path))
    events = recorder(app.store, "set")
    outcomes = []

    await app.config.process({"store": {"set": {"a": "b"}}}, outcomes.append)

    assert outcomes == [None]
    assert events["set"] == [("a", "b")]
    assert isinstance(app.store.config, Mapper)
    assert app.store.config is not app.config
    app.store.close()


@pytest.mark.asyncio
async def test_late_store_reachable_through_mapped_key(tmp_path, recorder):
    app = App()
    app.use(options()).use(config())
    app.use(store("late", directory=tmp_path))
    events = recorder(app.store, "set")

    app.config.map("remember", "store")
    await app.config.process({"remember": {"set": {"a": "b"}}})

    assert events["set"] == [("a", "b")]
    app.store.close()


@pytest.mark.asyncio
async def test_data_attached_after_config_gets_whole_value(recorder):
    app = App()
    app.use(config()).use(data())
    events = recorder(app, "data")

    await app.config.process({"data": {"a": "b"}})

    assert events["data"] == [([{"a": "b"}],)]
    assert app.lookup("data.a") == "b"


@pytest.mark.asyncio
async def test_options_alias_works_when_options_attached_after_config(recorder):
    app = App()
    app.use(config()).use(options())
    events = recorder(app, "option")

    await app.config.process({"options": {"a": "b"}})

    assert events["option"] == [("a", "b")]
    assert app.option("a") == "b"
