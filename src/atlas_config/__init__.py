# src/atlas_config/__init__.py
"""
Atlas Config: motor de configuração multi-fonte.

Este pacote raiz define o namespace público do Atlas Config: carregamento
de configuração a partir de fontes heterogêneas (ambiente, JSON, YAML,
mapas em memória), achatamento em chaves dot-notation, merge por
prioridade e acesso tipado com binding em dataclasses.

Arquitetura em alto nível:
    - core        → modelo de dados, flatten, merge, coerção, binding
    - formatters  → fontes plugáveis (Load → Parse → Flatten)
    - manager     → fachada thread-safe dona do store

Logging:
    O pacote emite registros via loguru, desabilitados por padrão.
    Aplicações habilitam com `logger.enable("atlas_config")`.

Limites explícitos:
    - Não observa arquivos nem recarrega automaticamente
    - Não gerencia segredos nem criptografia
"""

from loguru import logger

from .core.errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigPathError,
    InvalidKeyError,
    InvalidTargetError,
    IOFailureError,
    KeyNotFoundError,
    ParseFailedError,
    TypeMismatchError,
)
from .core.flatten import flatten, unflatten
from .core.merge import merge_config_maps
from .core.model import ConfigMap, ConfigValue, FlattenOptions, ValueType
from .formatters import (
    EnvFormatter,
    Formatter,
    JsonFormatter,
    MappingFormatter,
    YamlFormatter,
)
from .manager import ConfigManager, new_manager

logger.disable("atlas_config")

__all__ = [
    "ConfigManager",
    "new_manager",
    "ConfigMap",
    "ConfigValue",
    "FlattenOptions",
    "ValueType",
    "flatten",
    "unflatten",
    "merge_config_maps",
    "Formatter",
    "EnvFormatter",
    "JsonFormatter",
    "MappingFormatter",
    "YamlFormatter",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigPathError",
    "InvalidKeyError",
    "InvalidTargetError",
    "IOFailureError",
    "KeyNotFoundError",
    "ParseFailedError",
    "TypeMismatchError",
]
