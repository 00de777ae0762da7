# tests/manager/test_manager_load.py
"""
Testes de carregamento de fontes pelo ConfigManager.

Os testes asseguram que:
- a fonte carregada por último vence por chave
- `load_sources` respeita a ordem de prioridade declarada
- erros de formatter propagam inalterados e não alteram o store
- `sources` registra os nomes das fontes na ordem de carregamento
- o exemplo canônico JSON → `has` / `get_int` funciona de ponta a ponta
"""

import pytest

try:
    from atlas_config.core.errors import ConfigFileNotFoundError, ParseFailedError
    from atlas_config.formatters import EnvFormatter, JsonFormatter, MappingFormatter, YamlFormatter
    from atlas_config.manager import new_manager
except Exception as e:  # noqa: BLE001
    new_manager = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing manager or formatters. Implement:\n"
            "- src/atlas_config/manager.py\n"
            "- src/atlas_config/formatters/\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_json_database_example(write_config):
    _require_imports()
    path = write_config("app.json", '{"database": {"host": "localhost", "port": 5432}}')
    m = new_manager()

    m.load(JsonFormatter(path))

    assert m.has("database.host")
    assert m.get_int("database.port") == (5432, True)
    assert m.sources == ["json:app.json"]


def test_layering_env_over_file_over_defaults(write_config):
    """
    Carregando defaults, depois arquivo, depois ambiente, cada camada
    sobrescreve apenas as chaves que define.
    """
    _require_imports()
    defaults = MappingFormatter(
        {"server": {"host": "0.0.0.0", "port": 8000, "workers": 1}},
        name="defaults",
    )
    file = YamlFormatter(write_config("app.yaml", "server:\n  port: 9000\n  workers: 4\n"))
    env = EnvFormatter("APP", environ={"APP_SERVER_WORKERS": "8"})

    m = new_manager()
    m.load(defaults)
    m.load(file)
    m.load(env)

    assert m.get_string("server.host") == ("0.0.0.0", True)
    assert m.get_int("server.port") == (9000, True)
    assert m.get_int("server.workers") == (8, True)
    assert m.sources == ["defaults", "yaml:app.yaml", "env"]


def test_load_sources_first_has_highest_priority(write_config):
    _require_imports()
    env = EnvFormatter("APP", environ={"APP_PORT": "1"})
    file = JsonFormatter(write_config("a.json", '{"port": 2, "host": "file"}'))
    defaults = MappingFormatter({"port": 3, "host": "default", "debug": False})

    m = new_manager()
    m.load_sources([env, file, defaults])

    assert m.get_int("port") == (1, True)
    assert m.get_string("host") == ("file", True)
    assert m.get_bool("debug") == (False, True)


def test_load_sources_wins_over_existing_store():
    _require_imports()
    m = new_manager(initial={"port": 1, "keep": True})
    m.load_sources([MappingFormatter({"port": 2})])
    assert m.get_int("port") == (2, True)
    assert m.get_bool("keep") == (True, True)


def test_missing_file_propagates_and_store_is_untouched(tmp_path):
    _require_imports()
    m = new_manager(initial={"a": 1})

    with pytest.raises(ConfigFileNotFoundError):
        m.load(JsonFormatter(tmp_path / "absent.json"))

    assert m.all_keys() == ["a"]
    assert m.sources == []


def test_parse_failure_in_batch_applies_nothing(write_config):
    _require_imports()
    good = MappingFormatter({"a": 2})
    bad = JsonFormatter(write_config("bad.json", "{nope"))
    m = new_manager(initial={"a": 1})

    with pytest.raises(ParseFailedError):
        m.load_sources([good, bad])

    assert m.get_int("a") == (1, True)


def test_empty_sources_load_cleanly(write_config):
    _require_imports()
    m = new_manager()
    m.load(JsonFormatter(write_config("empty.json", "{}")))
    m.load(EnvFormatter("", environ={"APP_X": "1"}))
    assert m.all_keys() == []


def test_reload_same_formatter(write_config):
    _require_imports()
    path = write_config("app.json", '{"level": "info"}')
    formatter = JsonFormatter(path)
    m = new_manager()

    m.load(formatter)
    path.write_text('{"level": "debug"}', encoding="utf-8")
    m.load(formatter)

    assert m.get_string("level") == ("debug", True)


def test_load_rejects_non_formatter():
    _require_imports()
    with pytest.raises(TypeError):
        new_manager().load({"a": 1})


def test_has_finds_env_sourced_parent_key():
    """
    Fontes env não gravam agregado no pai; `has` precisa concordar com
    `get_map` sobre a existência de `bar`.
    """
    _require_imports()
    m = new_manager()
    m.load(EnvFormatter("APP", environ={"APP_BAR_BAZ": "qux"}))

    assert m.get_map("bar") == ({"baz": "qux"}, True)
    assert m.has("bar")
    assert m.has("bar.baz")
    assert not m.has("ba")
