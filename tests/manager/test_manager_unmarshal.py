# tests/manager/test_manager_unmarshal.py
"""
Testes de unmarshal pelo ConfigManager.

Os testes asseguram que:
- o exemplo canônico `unmarshal("database", DBConfig())` funciona
- chave ausente → `KeyNotFoundError`
- alvo inválido → `InvalidTargetError`, antes mesmo da busca da chave
- chave vazia vincula o store inteiro
- coerção impossível → `TypeMismatchError`
"""

from dataclasses import dataclass, field
from typing import List

import pytest

try:
    from atlas_config.core.errors import (
        InvalidKeyError,
        InvalidTargetError,
        KeyNotFoundError,
        TypeMismatchError,
    )
    from atlas_config.formatters import JsonFormatter
    from atlas_config.manager import new_manager
except Exception as e:  # noqa: BLE001
    new_manager = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing manager (src/atlas_config/manager.py): {_IMPORT_ERR}")


@dataclass
class DBConfig:
    host: str = ""
    port: int = 0


@dataclass
class AppConfig:
    database: DBConfig = field(default_factory=DBConfig)
    replicas: List[DBConfig] = field(default_factory=list)
    service_name: str = field(default="", metadata={"config": "service"})


@pytest.fixture
def manager(database_tree):
    _require_imports()
    return new_manager(initial=database_tree)


def test_unmarshal_database_example(manager):
    target = DBConfig()
    manager.unmarshal("database", target)
    assert target.host == "localhost"
    assert target.port == 5432


def test_unmarshal_from_loaded_json(write_config):
    _require_imports()
    m = new_manager()
    m.load(JsonFormatter(write_config(
        "app.json",
        '{"service": "billing", "database": {"host": "db", "port": 5432},'
        ' "replicas": [{"host": "r1", "port": 1}, {"host": "r2", "port": 2}]}',
    )))

    target = AppConfig()
    m.unmarshal("", target)

    assert target.service_name == "billing"
    assert target.database == DBConfig("db", 5432)
    assert target.replicas == [DBConfig("r1", 1), DBConfig("r2", 2)]


def test_unmarshal_missing_key(manager):
    with pytest.raises(KeyNotFoundError):
        manager.unmarshal("missing", DBConfig())


def test_key_not_found_is_a_key_error(manager):
    with pytest.raises(KeyError):
        manager.unmarshal("missing", DBConfig())


@pytest.mark.parametrize("target", [None, DBConfig, {"host": "x"}])
def test_unmarshal_invalid_target(manager, target):
    with pytest.raises(InvalidTargetError):
        manager.unmarshal("database", target)


def test_invalid_target_checked_before_key(manager):
    with pytest.raises(InvalidTargetError):
        manager.unmarshal("missing", None)


def test_unmarshal_malformed_key(manager):
    with pytest.raises(InvalidKeyError):
        manager.unmarshal("database..host", DBConfig())


def test_unmarshal_type_mismatch(manager):
    manager.set("database.port", "five-four-three-two")
    with pytest.raises(TypeMismatchError) as exc:
        manager.unmarshal("database", DBConfig())
    assert "database.port" in str(exc.value)


def test_unmarshal_reflects_later_set(manager):
    manager.set("database.host", "db.internal")
    target = DBConfig()
    manager.unmarshal("database", target)
    assert target.host == "db.internal"


def test_unmarshal_is_case_insensitive_on_key(manager):
    target = DBConfig()
    manager.unmarshal("DATABASE", target)
    assert target.port == 5432


@dataclass
class ServersConfig:
    servers: List[str] = field(default_factory=list)


def test_unmarshal_list_extended_by_higher_priority_source():
    """
    Um índice adicional vindo de fonte mais prioritária aparece tanto em
    `get_slice` quanto na lista vinculada.
    """
    _require_imports()
    from atlas_config.formatters import EnvFormatter, MappingFormatter

    m = new_manager()
    m.load(MappingFormatter({"servers": ["a", "b"]}))
    m.load(EnvFormatter("APP", environ={"APP_SERVERS_2": "c"}))
    target = ServersConfig()

    m.unmarshal("", target)

    assert m.get_slice("servers") == (["a", "b", "c"], True)
    assert target.servers == ["a", "b", "c"]


def test_unmarshal_list_from_env_indices_only():
    _require_imports()
    from atlas_config.formatters import EnvFormatter

    m = new_manager()
    m.load(EnvFormatter("APP", environ={"APP_SERVERS_0": "a", "APP_SERVERS_1": "b"}))
    target = ServersConfig()

    m.unmarshal("", target)

    assert target.servers == ["a", "b"]
