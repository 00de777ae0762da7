# src/atlas_config/formatters/env.py
"""
Formatter de variáveis de ambiente.

Este módulo converte variáveis `<PREFIXO>_<CAMINHO>` em chaves de
configuração dot-notation, com coerção oportunista de valores.

Exemplo (prefixo "APP"):
    APP_FOO=bar           → "foo": "bar"
    APP_BAR_BAZ=qux       → "bar.baz": "qux"
    APP_NUMBER=123        → "number": 123
    APP_BOOL_TRUE=true    → "bool.true": True

Política de carregamento (v1):
    - prefixo vazio → nada é carregado, em qualquer estado do ambiente
    - apenas variáveis `PREFIXO_...` são consideradas; prefixo e um
      separador `_` são removidos
    - `_` restantes viram o separador de chaves; chaves em minúsculas
      (exceto com `case_sensitive`)
    - valores vazios são descartados
    - caminhos com segmento vazio (`APP_FOO__BAR`, `APP_FOO_`) são
      descartados, exceto com `handle_empty_key`
    - coerção (case-insensitive): {"true","yes","1","on"} → True,
      {"false","no","0","off"} → False, depois inteiro, depois float,
      senão string

Decisões arquiteturais:
    - O ambiente é um snapshot injetado no construtor; sem snapshot,
      `load()` copia `os.environ` no momento da chamada
    - Parse filtra e converte valores; flatten monta as chaves com as
      opções do ciclo e tipa as entradas
    - O prefixo vazio é uma trava de segurança contra importar o
      ambiente inteiro do processo por engano

Limites explícitos:
    - Não gera agregados para prefixos intermediários (`bar` em `bar.baz`)
    - Não decodifica JSON embutido em valores
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from ..core.coerce import is_float_string, is_int_string
from ..core.model import DEFAULT_OPTIONS, ConfigMap, ConfigValue, FlattenOptions

ENV_SEPARATOR = "_"

_TRUE_VALUES = frozenset({"true", "yes", "1", "on"})
_FALSE_VALUES = frozenset({"false", "no", "0", "off"})


def coerce_env_value(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    text = value.strip()
    if is_int_string(text):
        return int(text)
    if is_float_string(text):
        return float(text)
    return value


class EnvFormatter:
    """
    Fonte de configuração baseada em variáveis de ambiente.

    Args:
        prefix (str): Prefixo obrigatório (ex.: "APP" ou "APP_").
        environ (Optional[Mapping[str, str]]): Snapshot do ambiente;
            padrão: cópia de `os.environ` a cada `load()`.
        options (Optional[FlattenOptions]): Opções próprias do formatter
            (separador de saída e regra de caixa). Quando omitidas, valem
            as opções recebidas em `flatten`.
    """

    def __init__(
        self,
        prefix: str,
        environ: Optional[Mapping[str, str]] = None,
        options: Optional[FlattenOptions] = None,
    ) -> None:
        self.prefix = prefix or ""
        self.environ = dict(environ) if environ is not None else None
        self.options = options

    @property
    def name(self) -> str:
        return "env"

    def __repr__(self) -> str:
        return f"EnvFormatter(prefix={self.prefix!r})"

    def with_options(self, options: FlattenOptions) -> "EnvFormatter":
        self.options = options
        return self

    def load(self) -> Dict[str, str]:
        if self.environ is not None:
            return dict(self.environ)
        return dict(os.environ)

    def _strip_prefix(self, var: str) -> Optional[str]:
        if not var.startswith(self.prefix):
            return None
        rest = var[len(self.prefix):]
        if not self.prefix.endswith(ENV_SEPARATOR):
            if not rest.startswith(ENV_SEPARATOR):
                return None
            rest = rest[len(ENV_SEPARATOR):]
        return rest or None

    def parse(self, raw: Mapping[str, str]) -> Dict[str, Any]:
        """
        Filtra as variáveis pelo prefixo e converte seus valores.

        Returns:
            Dict[str, Any]: `CAMINHO_SEM_PREFIXO -> valor convertido`.
        """
        if not self.prefix or not raw:
            return {}

        result: Dict[str, Any] = {}
        for var, value in raw.items():
            path = self._strip_prefix(var)
            if path is None or not value:
                continue
            result[path] = coerce_env_value(value)

        logger.debug("Prefixo {} selecionou {} variáveis de ambiente", self.prefix, len(result))
        return result

    def flatten(self, tree: Any, options: Optional[FlattenOptions] = None) -> ConfigMap:
        if not tree:
            return {}
        opts = self.options or options or DEFAULT_OPTIONS
        result: ConfigMap = {}
        for path, value in tree.items():
            segments = path.split(ENV_SEPARATOR)
            if not opts.handle_empty_key and "" in segments:
                logger.debug("Variável {}{} ignorada: segmento vazio", self.prefix, path)
                continue
            key = opts.normalize_key(opts.separator.join(segments))
            result[key] = ConfigValue.of(value)
        return result
