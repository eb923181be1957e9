"""Store plugin backed by diskcache."""

import pytest

from flagmap import App, Store, store


@pytest.fixture
def db(tmp_path):
    s = Store(name="unit", directory=tmp_path)
    yield s
    s.close()


def test_set_get_has(db, recorder):
    events = recorder(db, "set", "get", "has")

    db.set("a", 1).set({"b": 2, "c": [3]})

    assert db.get("a") == 1
    assert db.get("missing") is None
    assert db.has("c") is True
    assert db.has("missing") is False
    assert events["set"] == [("a", 1), ("b", 2), ("c", [3])]
    assert events["get"] == [("a", 1), ("missing", None)]
    assert events["has"] == [("c", True), ("missing", False)]


def test_delete(db, recorder):
    db.set("a", 1).set("b", 2).set("c", 3)
    events = recorder(db, "del")

    db.delete("a")
    db.delete(["b"])

    assert events["del"] == [("a",), ("b",)]
    assert db.keys() == ["c"]


def test_force_delete_emits_per_key(db, recorder):
    db.set("a", 1).set("b", 2)
    events = recorder(db, "del")

    db.delete(force=True)

    assert sorted(events["del"]) == [("a",), ("b",)]
    assert db.data == {}


def test_del_capability_name(db):
    assert db.method("del") == db.delete


def test_values_persist_across_instances(tmp_path):
    first = Store(name="persist", directory=tmp_path)
    first.set("kept", {"x": 1})
    first.close()

    second = Store(name="persist", directory=tmp_path)
    try:
        assert second.data == {"kept": {"x": 1}}
    finally:
        second.close()


def test_store_directory_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("FLAGMAP_STORE_DIR", str(tmp_path))
    monkeypatch.setenv("FLAGMAP_STORE", "fromenv")

    app = App()
    app.use(store())
    try:
        assert app.store.name == "fromenv"
        assert app.store.path == tmp_path / "fromenv"
    finally:
        app.store.close()


def test_store_plugin_registers_once(tmp_path):
    app = App()
    app.use(store("one", directory=tmp_path))
    first = app.store
    app.use(store("two", directory=tmp_path))
    try:
        assert app.store is first
    finally:
        first.close()
