# src/atlas_config/core/model.py
"""
Modelo de dados canônico do Atlas Config.

Este módulo define as estruturas fundamentais que representam valores
de configuração tipados e o espaço de chaves plano em dot-notation.

Estruturas:
    - ValueType      → discriminante do tipo de um valor
    - ConfigValue    → valor + tipo (união etiquetada)
    - ConfigMap      → mapa plano `chave.em.dot.notation -> ConfigValue`
    - FlattenOptions → opções imutáveis de um ciclo Load/Parse/Flatten

Princípios fundamentais:
    - O tipo declarado sempre corresponde ao formato dinâmico do valor
    - Consumidores verificam o tipo antes de interpretar o valor
    - Valores fora da união etiquetada são normalizados antes da tipagem

Invariantes:
    - Um ConfigValue com tipo divergente do valor nunca é construído
    - Chaves de ConfigMap são únicas e normalizadas (minúsculas por padrão)

Limites explícitos:
    - Não carrega fontes
    - Não realiza flatten, merge ou binding

Este módulo existe para garantir um vocabulário único e verificável
entre formatters, merge, manager e binding.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict


class ValueType(str, Enum):
    """
    Tipos possíveis de um valor de configuração.

    Os valores são strings para facilitar serialização, logs e hashing.
    """
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    MAP = "map"
    SLICE = "slice"
    NIL = "nil"


def normalize_scalar(value: Any) -> Any:
    """
    Converte valores fora da união etiquetada para um representante suportado.

    Regras:
        - tuple / set / frozenset → list
        - datetime / date / time  → string ISO-8601
        - Decimal                 → float
        - bytes                   → str (UTF-8)
        - demais objetos          → str(obj)

    Valores já suportados (str, int, float, bool, dict, list, None)
    são retornados sem alteração.
    """
    if value is None or isinstance(value, (str, bool, int, float, dict, list)):
        return value
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def determine_value_type(value: Any) -> ValueType:
    """
    Determina o ValueType correspondente ao formato dinâmico de `value`.

    `bool` é verificado antes de `int` porque, em Python, `bool` é subclasse
    de `int`.

    Raises:
        TypeError: Se o valor não pertencer à união etiquetada
            (normalize-o antes com `normalize_scalar`).
    """
    if value is None:
        return ValueType.NIL
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, int):
        return ValueType.INT
    if isinstance(value, float):
        return ValueType.FLOAT
    if isinstance(value, str):
        return ValueType.STRING
    if isinstance(value, dict):
        return ValueType.MAP
    if isinstance(value, list):
        return ValueType.SLICE
    raise TypeError(f"Valor de configuração sem tipo suportado: {type(value).__name__}")


@dataclass(frozen=True)
class ConfigValue:
    """
    Valor de configuração acompanhado de seu discriminante de tipo.

    Esta classe é a unidade armazenada em um ConfigMap. O tipo é validado
    na construção, garantindo que nenhum consumidor precise lidar com um
    par valor/tipo inconsistente.

    Decisões arquiteturais:
        - Imutável (frozen); atualizar significa substituir a entrada
        - Agregados (MAP/SLICE) guardam a subárvore normalizada completa
        - `ConfigValue.of` é o construtor preferencial (infere o tipo)

    Invariantes:
        - `type == determine_value_type(value)` sempre

    Limites explícitos:
        - Não copia o payload; quem expõe agregados para fora deve copiar
    """
    value: Any
    type: ValueType

    def __post_init__(self) -> None:
        actual = determine_value_type(self.value)
        if actual is not self.type:
            raise TypeError(
                f"ConfigValue inconsistente: tipo declarado '{self.type.value}', "
                f"valor do tipo '{actual.value}'"
            )

    @classmethod
    def of(cls, value: Any) -> "ConfigValue":
        value = normalize_scalar(value)
        return cls(value=value, type=determine_value_type(value))

    @property
    def is_composite(self) -> bool:
        return self.type in (ValueType.MAP, ValueType.SLICE)


ConfigMap = Dict[str, ConfigValue]


@dataclass(frozen=True)
class FlattenOptions:
    """
    Opções imutáveis que governam um ciclo Load/Parse/Flatten.

    Campos:
        - separator: separador de segmentos de chave (padrão ".")
        - skip_nil: descarta valores nulos em vez de armazená-los como NIL
        - handle_empty_key: aceita chaves/segmentos vazios
        - case_sensitive: preserva maiúsculas/minúsculas das chaves

    Invariantes:
        - `separator` nunca é vazio
    """
    separator: str = "."
    skip_nil: bool = True
    handle_empty_key: bool = False
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.separator, str) or not self.separator:
            raise ValueError("FlattenOptions.separator deve ser uma string não vazia")

    def normalize_key(self, key: str) -> str:
        return key if self.case_sensitive else key.lower()

    def join(self, prefix: str, key: str) -> str:
        if not prefix:
            return key
        return f"{prefix}{self.separator}{key}"


DEFAULT_OPTIONS = FlattenOptions()
