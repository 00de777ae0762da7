# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Config.

Este módulo define fixtures reutilizáveis que fornecem:
- árvores de configuração determinísticas
- snapshots de ambiente injetáveis (sem tocar `os.environ`)
- uma fábrica de arquivos de configuração em `tmp_path`

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - O ambiente é sempre um dict injetado no `EnvFormatter`
    - I/O de arquivo restrito ao diretório temporário do pytest

Invariantes:
    - Nenhuma fixture muta estado global do processo
    - Dados retornados são novos a cada teste

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica de domínio
"""

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def database_tree() -> dict:
    """
    Árvore mínima usada nos exemplos canônicos de leitura e unmarshal.

    Returns:
        dict: `{"database": {"host": "localhost", "port": 5432}}`.
    """
    return {"database": {"host": "localhost", "port": 5432}}


@pytest.fixture
def nested_tree() -> dict:
    return {
        "app": {
            "name": "atlas",
            "debug": False,
            "ratio": 0.75,
            "tags": ["api", "worker"],
            "limits": {"cpu": 2, "memory": "512Mi"},
        },
        "servers": [
            {"host": "a.local", "port": 8001},
            {"host": "b.local", "port": 8002},
        ],
    }


@pytest.fixture
def app_environ() -> dict:
    """
    Snapshot de ambiente com variáveis do prefixo `APP` e ruído de outros prefixos.
    """
    return {
        "APP_FOO": "bar",
        "APP_BAR_BAZ": "qux",
        "APP_NUMBER": "123",
        "APP_BOOL_TRUE": "true",
        "APPLE_PIE": "yes",
        "PATH": "/usr/bin",
        "HOME": "/root",
    }


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str, str], Path]:
    """
    Fábrica que grava um arquivo de configuração no diretório temporário.

    Returns:
        Callable[[str, str], Path]: `write_config(nome, conteudo) -> caminho`.
    """

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
