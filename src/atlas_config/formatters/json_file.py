# src/atlas_config/formatters/json_file.py
"""
Formatter de arquivos JSON.

Este módulo implementa a leitura de configuração a partir de um arquivo
JSON (RFC 8259) e concentra o estágio de leitura de arquivo e o estágio
de flatten compartilhados pelos formatters baseados em arquivo.

Política de carregamento (v1):
    - caminho vazio               → `ConfigPathError`
    - arquivo inexistente         → `ConfigFileNotFoundError`
    - arquivo ilegível            → `IOFailureError`
    - documento vazio ou `{}`     → ConfigMap vazio, sem erro
    - JSON sintaticamente inválido → `ParseFailedError`
    - JSON válido com raiz não-objeto (lista, escalar, null)
                                  → ConfigMap vazio, sem erro

Decisões arquiteturais:
    - A assimetria inválido (erro) vs válido-não-objeto (vazio) é
      contrato explícito
    - O flatten é o motor compartilhado, garantindo semântica idêntica
      entre JSON e YAML

Limites explícitos:
    - Não interpreta comentários nem JSON5
    - Não escreve de volta no arquivo
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Union

from loguru import logger

from ..core.errors import ConfigFileNotFoundError, ConfigPathError, IOFailureError, ParseFailedError
from ..core.flatten import flatten as flatten_tree
from ..core.model import ConfigMap, FlattenOptions


class JsonFormatter:
    """
    Fonte de configuração baseada em arquivo JSON.

    Exemplo:
        >>> formatter = JsonFormatter("config/app.json")
        >>> formatter.name
        'json:app.json'
    """

    kind = "json"

    def __init__(self, path: Union[str, "os.PathLike[str]"]) -> None:
        self.path = os.fspath(path) if path else ""

    @property
    def name(self) -> str:
        return f"{self.kind}:{os.path.basename(self.path)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r})"

    def load(self) -> str:
        """
        Lê o arquivo inteiro como texto UTF-8.

        Raises:
            ConfigPathError: Se o caminho for vazio.
            ConfigFileNotFoundError: Se o arquivo não existir.
            IOFailureError: Se o arquivo não puder ser lido.
        """
        if not self.path:
            raise ConfigPathError("Caminho do arquivo de configuração vazio")

        path = Path(self.path)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigFileNotFoundError(
                f"Arquivo de configuração não encontrado: {self.path}"
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailureError(
                f"Falha ao ler arquivo de configuração {self.path}: {exc}"
            ) from exc

    def parse(self, raw: Any) -> Dict[str, Any]:
        if raw is None or not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ParseFailedError(self.path, str(exc)) from exc
        return self._root_mapping(data)

    def flatten(self, tree: Any, options: FlattenOptions) -> ConfigMap:
        return flatten_tree(tree, options)

    def _root_mapping(self, data: Any) -> Dict[str, Any]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.debug(
                "Raiz de {} não é um mapa ({}); documento ignorado",
                self.name,
                type(data).__name__,
            )
            return {}
        return data
