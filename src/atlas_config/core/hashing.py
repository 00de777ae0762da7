# src/atlas_config/core/hashing.py
"""
Hashing canônico de um ConfigMap.

O hash gerado representa a **identidade estrutural** da configuração
efetiva e serve para rastreabilidade: comparar execuções, registrar em
logs qual configuração estava ativa, detectar recargas sem mudança.

Política de hashing (v1):
    - cada entrada é serializada como `{"type": ..., "value": ...}`
    - JSON canônico: chaves ordenadas, separadores compactos, UTF-8
    - SHA-256 em hexadecimal

Invariantes:
    - Mapas com as mesmas entradas produzem o mesmo hash,
      independentemente da ordem de inserção
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres

Limites explícitos:
    - Não persiste o hash
    - Não carrega nem resolve configuração
"""

import hashlib
import json
from typing import Any, Dict

from .model import ConfigMap, ConfigValue


def compute_config_hash(config_map: ConfigMap) -> str:
    """
    Gera um hash SHA-256 determinístico de um ConfigMap.

    Args:
        config_map (ConfigMap): Mapa plano de configuração.

    Returns:
        str: Hash SHA-256 hexadecimal.

    Raises:
        TypeError: Se o objeto não for um dict de `ConfigValue`.
    """
    if not isinstance(config_map, dict):
        raise TypeError(
            f"ConfigMap para hashing deve ser dict, recebido: {type(config_map).__name__}"
        )

    canonical: Dict[str, Any] = {}
    for key, entry in config_map.items():
        if not isinstance(entry, ConfigValue):
            raise TypeError(
                f"Entrada '{key}' deve ser ConfigValue, recebido: {type(entry).__name__}"
            )
        canonical[key] = {"type": entry.type.value, "value": entry.value}

    canonical_json = json.dumps(
        canonical,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
