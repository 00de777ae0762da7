# src/atlas_config/formatters/mapping.py
"""
Formatter de mapas em memória.

Permite registrar defaults declarados no próprio código (ou overrides
montados programaticamente) como uma fonte como qualquer outra, sujeita
às mesmas regras de flatten e de prioridade.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Mapping, Optional

from ..core.flatten import flatten as flatten_tree
from ..core.model import ConfigMap, FlattenOptions


class MappingFormatter:
    def __init__(self, data: Optional[Mapping[str, Any]] = None, name: str = "mapping") -> None:
        self.data = data or {}
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"MappingFormatter(name={self._name!r})"

    def load(self) -> Dict[str, Any]:
        return deepcopy(dict(self.data))

    def parse(self, raw: Any) -> Dict[str, Any]:
        return raw if isinstance(raw, dict) else {}

    def flatten(self, tree: Any, options: FlattenOptions) -> ConfigMap:
        return flatten_tree(tree, options)
