# src/atlas_config/core/flatten.py
"""
Motor de flatten/unflatten do Atlas Config.

Este módulo converte árvores de configuração aninhadas (mapas, listas e
escalares, como produzidos por `json.loads` ou `yaml.safe_load`) em um
ConfigMap plano com chaves em dot-notation, e o caminho inverso.

Política de flatten (v1):
    - mapa    → agregado MAP no prefixo atual (exceto na raiz) + recursão
                em cada filho com chave `prefixo + separador + chave`
    - lista   → agregado SLICE no prefixo atual + recursão com o índice
                decimal como sufixo
    - escalar → uma única entrada tipada
    - None    → descartado (`skip_nil`) ou armazenado como NIL
    - chave vazia → descartada, exceto com `handle_empty_key`
    - chave não conversível para string → descartada silenciosamente

Princípios fundamentais:
    - Agregado e expansão coexistem sob chaves diferentes
    - O payload do agregado é a subárvore normalizada, com as mesmas
      regras de chave e de nulos aplicadas à expansão
    - Nenhum input é mutado

Invariantes:
    - `unflatten(flatten(T)) == T` para árvores com chaves string minúsculas
    - flatten e unflatten nunca levantam exceção para input bem formado

Limites explícitos:
    - Não preserva a distinção mapa/objeto ordenado (ordem não é semântica)
    - Não carrega arquivos nem realiza merge entre fontes

Este módulo existe para garantir que todas as fontes produzam o mesmo
espaço de chaves, independentemente da sintaxe de origem.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Dict, List, Optional, Tuple

from .model import (
    DEFAULT_OPTIONS,
    ConfigMap,
    ConfigValue,
    FlattenOptions,
    ValueType,
    normalize_scalar,
)

_SEQUENCE_TYPES = (list, tuple, set, frozenset)
_KEY_TYPES = (str, int, float, bool)


def _coerce_key(key: Any) -> Optional[str]:
    if isinstance(key, _KEY_TYPES):
        return str(key)
    return None


def _flatten_node(
    result: ConfigMap,
    node: Any,
    prefix: str,
    opts: FlattenOptions,
) -> Tuple[bool, Any]:
    """
    Visita um nó, registrando suas entradas em `result`.

    Retorna `(mantido, normalizado)`: se o nó sobreviveu às regras de
    filtragem e sua forma normalizada, usada pelo agregado do nó pai.
    """
    if isinstance(node, Mapping):
        normalized: Dict[str, Any] = {}
        for raw_key, child in node.items():
            key = _coerce_key(raw_key)
            if key is None:
                continue
            if key == "" and not opts.handle_empty_key:
                continue
            key = opts.normalize_key(key)
            kept, value = _flatten_node(result, child, opts.join(prefix, key), opts)
            if kept:
                normalized[key] = value
        if prefix:
            result[prefix] = ConfigValue(value=normalized, type=ValueType.MAP)
        return True, normalized

    if isinstance(node, _SEQUENCE_TYPES):
        items: List[Any] = []
        for index, child in enumerate(node):
            _, value = _flatten_node(result, child, opts.join(prefix, str(index)), opts)
            # posições são preservadas mesmo para nulos descartados
            items.append(value)
        if prefix:
            result[prefix] = ConfigValue(value=items, type=ValueType.SLICE)
        return True, items

    value = normalize_scalar(node)
    if value is None and opts.skip_nil:
        return False, None
    if prefix or opts.handle_empty_key:
        result[prefix] = ConfigValue.of(value)
    return True, value


def flatten(
    tree: Any,
    options: Optional[FlattenOptions] = None,
    prefix: str = "",
) -> ConfigMap:
    """
    Converte uma árvore de configuração em um ConfigMap plano.

    Args:
        tree (Any): Árvore produzida por um parser (dict/list/escalares).
        options (Optional[FlattenOptions]): Opções do ciclo; padrão
            `FlattenOptions()`.
        prefix (str): Prefixo já normalizado sob o qual a árvore é
            registrada. Com prefixo não vazio, o agregado da raiz também
            é armazenado (usado por `ConfigManager.set`).

    Returns:
        ConfigMap: Novo mapa plano; O(n) inserções para n nós.

    Exemplo:
        >>> sorted(flatten({"database": {"host": "localhost", "port": 5432}}))
        ['database', 'database.host', 'database.port']
    """
    opts = options or DEFAULT_OPTIONS
    result: ConfigMap = {}
    _flatten_node(result, tree, prefix, opts)
    return result


# =====================================================
# Reconstrução
# =====================================================

def _unwrap(value: Any) -> Any:
    return value.value if isinstance(value, ConfigValue) else value


def _is_index(part: str) -> bool:
    return part.isascii() and part.isdigit()


def _get(node: Any, part: str) -> Any:
    if isinstance(node, dict):
        return node.get(part)
    if _is_index(part) and int(part) < len(node):
        return node[int(part)]
    return None


def _put(node: Any, part: str, value: Any) -> None:
    if isinstance(node, dict):
        node[part] = value
        return
    index = int(part)
    if index < len(node):
        node[index] = value
        return
    node.extend([None] * (index - len(node)))
    node.append(value)


def _assign(root: Dict[str, Any], parts: List[str], value: Any) -> None:
    node: Any = root
    last = len(parts) - 1
    for depth, part in enumerate(parts):
        if depth == last:
            _put(node, part, value)
            return
        child = _get(node, part)
        following = parts[depth + 1]
        if isinstance(child, list) and not _is_index(following):
            child = {str(i): item for i, item in enumerate(child)}
            _put(node, part, child)
        elif not isinstance(child, (dict, list)):
            child = {}
            _put(node, part, child)
        node = child


def _by_depth(items: Dict[str, Any], separator: str) -> List[Tuple[str, Any]]:
    # sort estável: mesma profundidade mantém a ordem de inserção
    return sorted(items.items(), key=lambda kv: kv[0].count(separator))


def unflatten(flat: Mapping, separator: str = ".") -> Dict[str, Any]:
    """
    Reconstrói uma árvore aninhada a partir de um mapa plano.

    Aceita tanto um ConfigMap quanto um dict plano de valores crus.
    Chaves são aplicadas em ordem crescente de profundidade; sub-mapas
    parciais do mesmo pai são mesclados chave a chave (última escrita
    vence por folha) e agregados de lista aceitam filhos indexados.

    Caso identidade: se nenhuma chave contém o separador, o mapa é
    devolvido inalterado (cópia dos valores desembrulhados).
    """
    items = {key: _unwrap(value) for key, value in flat.items()}
    if not any(separator in key for key in items):
        return deepcopy(items)

    tree: Dict[str, Any] = {}
    for key, value in _by_depth(items, separator):
        _assign(tree, key.split(separator), deepcopy(value))
    return tree


def subset(entries: Mapping, key: str, separator: str = ".") -> ConfigMap:
    """
    Seleciona a entrada em `key` e todas as entradas descendentes.
    """
    prefix = key + separator
    return {k: v for k, v in entries.items() if k == key or k.startswith(prefix)}


def rebuild(entries: Mapping, key: str, separator: str = ".") -> Tuple[Any, bool]:
    """
    Reconstrói o valor visto em `key` a partir do agregado e dos descendentes.

    Decisões arquiteturais:
        - Descendentes têm prioridade sobre um agregado literal desatualizado
        - O retorno é sempre uma cópia; o store nunca é exposto

    Returns:
        Tuple[Any, bool]: `(valor, existe)`.
    """
    prefix = key + separator
    children = {k[len(prefix):]: _unwrap(v) for k, v in entries.items() if k.startswith(prefix)}
    base = entries.get(key)
    if not children:
        if base is None:
            return None, False
        return deepcopy(_unwrap(base)), True

    holder: Dict[str, Any] = {"": deepcopy(_unwrap(base)) if base is not None else None}
    for rel, value in _by_depth(children, separator):
        _assign(holder, [""] + rel.split(separator), deepcopy(value))
    return holder[""], True
