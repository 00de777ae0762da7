# src/atlas_config/formatters/__init__.py
"""
Fontes de configuração do Atlas Config.

Cada formatter implementa o protocolo `Formatter` (load → parse → flatten)
e produz um ConfigMap independente; a combinação entre fontes é
responsabilidade do `ConfigManager`.

Formatters disponíveis:
    - `EnvFormatter`: variáveis de ambiente com prefixo obrigatório
    - `JsonFormatter`: arquivo JSON
    - `YamlFormatter`: arquivo YAML (PyYAML)
    - `MappingFormatter`: mapa em memória (defaults programáticos)
"""

from .base import Formatter, read_config_map
from .env import EnvFormatter
from .json_file import JsonFormatter
from .mapping import MappingFormatter
from .yaml_file import YamlFormatter

__all__ = [
    "Formatter",
    "read_config_map",
    "EnvFormatter",
    "JsonFormatter",
    "MappingFormatter",
    "YamlFormatter",
]
