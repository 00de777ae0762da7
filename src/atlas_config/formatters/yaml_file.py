# src/atlas_config/formatters/yaml_file.py
"""
Formatter de arquivos YAML.

Mesmo contrato do `JsonFormatter`, trocando apenas o decoder: o parse usa
`yaml.safe_load` (PyYAML) e o flatten é herdado do formatter JSON, já que
a árvore pós-parse tem a mesma forma.

Particularidades:
    - documento vazio, só comentários ou `~` → ConfigMap vazio
    - datas/timestamps YAML são normalizados para strings ISO-8601
    - chaves não-string (ex.: `1: a`) são convertidas para string;
      chaves não conversíveis são descartadas pelo flatten
"""

from __future__ import annotations

from typing import Any, Dict

import yaml  # PyYAML

from ..core.errors import ParseFailedError
from .json_file import JsonFormatter


class YamlFormatter(JsonFormatter):
    """
    Fonte de configuração baseada em arquivo YAML.

    Exemplo:
        >>> YamlFormatter("/etc/app/config.yaml").name
        'yaml:config.yaml'
    """

    kind = "yaml"

    def parse(self, raw: Any) -> Dict[str, Any]:
        if raw is None or not raw.strip():
            return {}
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ParseFailedError(self.path, str(exc)) from exc
        return self._root_mapping(data)
