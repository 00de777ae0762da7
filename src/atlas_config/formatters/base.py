# src/atlas_config/formatters/base.py
"""
Contrato canônico de Formatter do Atlas Config.

Um Formatter é um adaptador de fonte de configuração (variáveis de
ambiente, arquivo JSON, arquivo YAML, mapa em memória, ...) que produz um
ConfigMap em três estágios:

    load()                 → dado cru (bytes, texto, snapshot de ambiente)
    parse(raw)             → árvore genérica (dict/list/escalares)
    flatten(tree, options) → ConfigMap plano em dot-notation

Princípios fundamentais:
    - Formatters não conhecem o Manager nem o store mesclado
    - Conformidade é garantida por duck typing (@runtime_checkable)
    - `name` é apenas diagnóstico (logs), nunca critério de prioridade

Invariantes:
    - Erros de I/O e parse são levantados como `IOFailureError` /
      `ParseFailedError` e propagam inalterados até quem chamou `load`
    - O mesmo formatter pode ser invocado repetidamente (recarga)

Limites explícitos:
    - Não realiza merge entre fontes
    - Não observa arquivos nem recarrega automaticamente

Este módulo existe para garantir desacoplamento entre fontes de
configuração e o motor que as combina.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from loguru import logger

from ..core.model import DEFAULT_OPTIONS, ConfigMap, FlattenOptions


@runtime_checkable
class Formatter(Protocol):
    """
    Contrato mínimo de uma fonte de configuração.

    Atributos:
        - name: identificador estável para diagnóstico
          (ex.: "json:app.json", "yaml:app.yaml", "env")

    Métodos:
        - load: adquire o dado cru da fonte
        - parse: decodifica o dado cru em uma árvore genérica
        - flatten: converte a árvore em ConfigMap
    """

    @property
    def name(self) -> str:
        ...

    def load(self) -> Any:
        ...

    def parse(self, raw: Any) -> Any:
        ...

    def flatten(self, tree: Any, options: FlattenOptions) -> ConfigMap:
        ...


def read_config_map(formatter: Formatter, options: Optional[FlattenOptions] = None) -> ConfigMap:
    """
    Executa o pipeline Load → Parse → Flatten de um formatter.

    Args:
        formatter (Formatter): Fonte de configuração.
        options (Optional[FlattenOptions]): Opções do ciclo.

    Returns:
        ConfigMap: Mapa plano produzido pela fonte.

    Raises:
        TypeError: Se o objeto não satisfizer o protocolo `Formatter`.
        IOFailureError / ParseFailedError: Propagados do formatter.
    """
    if not isinstance(formatter, Formatter):
        raise TypeError(
            f"Objeto não implementa o protocolo Formatter: {type(formatter).__name__}"
        )

    opts = options or DEFAULT_OPTIONS
    raw = formatter.load()
    tree = formatter.parse(raw)
    config_map = formatter.flatten(tree, opts)
    logger.debug("Formatter {} produziu {} chaves", formatter.name, len(config_map))
    return config_map
