# tests/manager/test_manager_access.py
"""
Testes de leitura e escrita do ConfigManager.

Os testes asseguram que:
- getters tipados retornam `(valor, existe)` e nunca levantam exceção
- tipo incompatível é reportado como `exists=False`
- `set` valida chaves, normaliza caixa e grava agregado + expansão
- `set_default` nunca sobrescreve
- leituras compostas são cópias sintetizadas dos descendentes
- `all_keys`, `all_settings`, `snapshot` e `config_hash` refletem o store

Limites explícitos:
    - Carregamento de fontes e unmarshal têm módulos próprios
"""

from datetime import datetime, timedelta, timezone

import pytest

try:
    from atlas_config.core.errors import InvalidKeyError
    from atlas_config.core.model import FlattenOptions, ValueType
    from atlas_config.manager import ConfigManager, new_manager
except Exception as e:  # noqa: BLE001
    ConfigManager = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing manager. Implement:\n"
            "- src/atlas_config/manager.py (ConfigManager, new_manager)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.fixture
def manager(database_tree):
    _require_imports()
    return new_manager(initial=database_tree)


def test_new_manager_is_empty():
    _require_imports()
    m = new_manager()
    assert m.all_keys() == []
    assert m.get("anything") == (None, False)
    assert m.sources == []


def test_has_and_typed_getters(manager):
    assert manager.has("database.host")
    assert manager.has("DATABASE.HOST")
    assert manager.get_int("database.port") == (5432, True)
    assert manager.get_string("database.host") == ("localhost", True)


def test_type_mismatch_reports_not_found(manager):
    assert manager.get_string("database.port") == (None, False)
    assert manager.get_float("database.port") == (None, False)
    assert manager.get_bool("database.host") == (None, False)
    assert manager.get_slice("database") == (None, False)


def test_getters_never_raise_on_bad_keys(manager):
    assert manager.get_int(None) == (None, False)
    assert manager.get_map(123) == (None, False)
    assert manager.has(None) is False


def test_set_and_get_scalars():
    _require_imports()
    m = ConfigManager()
    m.set("App.Name", "atlas")
    m.set("app.ratio", 0.5)
    m.set("app.debug", True)

    assert m.get_string("app.name") == ("atlas", True)
    assert m.get_float("app.ratio") == (0.5, True)
    assert m.get_bool("APP.DEBUG") == (True, True)


def test_set_overwrites():
    _require_imports()
    m = ConfigManager()
    m.set("a", 1)
    m.set("a", "one")
    assert m.get_string("a") == ("one", True)
    assert m.get_int("a") == (None, False)


def test_set_composite_stores_aggregate_and_expansion():
    _require_imports()
    m = ConfigManager()
    m.set("db", {"host": "h", "ports": [1, 2]})

    assert m.get_string("db.host") == ("h", True)
    assert m.get_int("db.ports.1") == (2, True)
    assert m.get_map("db") == ({"host": "h", "ports": [1, 2]}, True)
    assert m.snapshot()["db"].type is ValueType.MAP


def test_set_none_stores_nil():
    _require_imports()
    m = ConfigManager()
    m.set("feature", None)
    assert m.has("feature")
    assert m.get("feature") == (None, True)
    assert m.snapshot()["feature"].type is ValueType.NIL


@pytest.mark.parametrize("key", ["", ".a", "a.", "a..b", None, 5])
def test_set_rejects_invalid_keys(key):
    _require_imports()
    with pytest.raises(InvalidKeyError):
        ConfigManager().set(key, 1)


def test_empty_key_allowed_with_handle_empty_key():
    _require_imports()
    m = ConfigManager(options=FlattenOptions(handle_empty_key=True))
    m.set("", "root")
    assert m.get_string("") == ("root", True)


def test_children_take_priority_over_stale_aggregate(manager):
    """
    Após `set` de um filho, a leitura composta do pai reflete o filho,
    mesmo que o agregado literal ainda guarde o valor antigo.
    """
    manager.set("database.host", "db.internal")
    value, found = manager.get_map("database")
    assert found
    assert value == {"host": "db.internal", "port": 5432}


def test_composite_reads_are_copies(manager):
    value, _ = manager.get_map("database")
    value["host"] = "mutated"
    assert manager.get_string("database.host") == ("localhost", True)
    assert manager.get_map("database")[0]["host"] == "localhost"


def test_slice_helpers():
    _require_imports()
    m = ConfigManager(initial={"ports": [80, "443"], "names": ["a", 1, True], "mixed": [{"a": 1}]})

    assert m.get_slice("ports") == ([80, "443"], True)
    assert m.get_int_slice("ports") == ([80, 443], True)
    assert m.get_string_slice("names") == (["a", "1", "true"], True)
    assert m.get_int_slice("names") == (None, False)
    assert m.get_string_slice("mixed") == (None, False)


def test_string_map_helpers():
    _require_imports()
    m = ConfigManager(
        initial={
            "labels": {"tier": "web", "replicas": 3},
            "groups": {"admins": ["ana", "bo"], "ops": ["cy"]},
        }
    )

    assert m.get_string_map_string("labels") == ({"tier": "web", "replicas": "3"}, True)
    assert m.get_string_map_string_slice("groups") == ({"admins": ["ana", "bo"], "ops": ["cy"]}, True)
    assert m.get_string_map_string_slice("labels") == (None, False)
    assert m.get_string_map_string("groups") == (None, False)


def test_duration_and_time():
    _require_imports()
    m = ConfigManager(
        initial={
            "timeout": "5s",
            "retry": 30,
            "window": "1h30m",
            "started": "2023-05-24T15:00:00Z",
            "bad": "soon",
        }
    )

    assert m.get_duration("timeout") == (timedelta(seconds=5), True)
    assert m.get_duration("retry") == (timedelta(seconds=30), True)
    assert m.get_duration("window") == (timedelta(minutes=90), True)
    assert m.get_duration("bad") == (None, False)
    assert m.get_time("started") == (datetime(2023, 5, 24, 15, 0, tzinfo=timezone.utc), True)
    assert m.get_time("bad") == (None, False)
    assert m.get_time("retry") == (None, False)


def test_set_default_never_overrides(manager):
    assert manager.set_default("database.port", 1) is False
    assert manager.set_default("database", {"host": "other"}) is False
    assert manager.set_default("cache.ttl", "1m") is True
    assert manager.get_int("database.port") == (5432, True)
    assert manager.get_duration("cache.ttl") == (timedelta(minutes=1), True)


def test_all_keys_is_sorted(manager):
    assert manager.all_keys() == ["database", "database.host", "database.port"]


def test_all_settings_rebuilds_tree(nested_tree):
    _require_imports()
    m = ConfigManager(initial=nested_tree)
    assert m.all_settings() == nested_tree


def test_snapshot_is_detached(manager):
    snap = manager.snapshot()
    snap.clear()
    assert manager.has("database.port")


def test_config_hash_tracks_content(manager, database_tree):
    _require_imports()
    same = new_manager(initial=database_tree)
    assert manager.config_hash() == same.config_hash()

    same.set("database.port", 5433)
    assert manager.config_hash() != same.config_hash()


def test_has_finds_parent_of_dotted_set():
    _require_imports()
    m = ConfigManager()
    m.set("db.host", "x")

    assert m.has("db")
    assert m.has("DB")
    assert m.get_map("db") == ({"host": "x"}, True)
    assert not m.has("d")
    assert not m.has("db.port")
