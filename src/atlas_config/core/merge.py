# src/atlas_config/core/merge.py
"""
Merge canônico de ConfigMaps por prioridade.

Este módulo implementa a política oficial de combinação de ConfigMaps
produzidos por diferentes formatters em um único ConfigMap autoritativo.

Política de merge (v1):
    - os mapas são recebidos em ordem de prioridade (mais alta primeiro)
    - para cada chave, vence o valor do primeiro mapa que a define
    - sobrescrita plana por chave: não existe deep-merge de agregados
    - chaves presentes apenas em mapas de baixa prioridade sobrevivem

Exemplo:
    - alta:  {"database.host": "db.prod"}
    - baixa: {"database.host": "localhost", "database.port": 5432}
    - resultado: {"database.host": "db.prod", "database.port": 5432}

Princípios fundamentais:
    - O merge é determinístico, total e puramente funcional
    - Nenhum input é mutado durante o processo

Invariantes:
    - A mesma sequência de entrada sempre produz a mesma saída
    - Custo O(total de chaves de todas as fontes)

Limites explícitos:
    - Não carrega fontes
    - Não realiza coerção de tipos
    - Não resolve conflitos estruturais (escalar vs agregado coexistem)

Este módulo existe para garantir previsibilidade na resolução de
configuração vinda de múltiplas fontes.
"""

from __future__ import annotations

from typing import Iterable

from .model import ConfigMap


def merge_config_maps(maps: Iterable[ConfigMap]) -> ConfigMap:
    """
    Combina ConfigMaps ordenados da maior para a menor prioridade.

    Os mapas são aplicados do menos prioritário para o mais prioritário,
    de forma que a última escrita (a da fonte mais prioritária) prevaleça.

    Args:
        maps (Iterable[ConfigMap]): Mapas em ordem de prioridade decrescente.

    Returns:
        ConfigMap: Novo mapa resultante; entradas `ConfigValue` são
        imutáveis e podem ser compartilhadas com os inputs.
    """
    ordered = list(maps)
    result: ConfigMap = {}
    for config_map in reversed(ordered):
        result.update(config_map)
    return result
