# src/atlas_config/core/binding.py
"""
Binding de configuração em dataclasses (unmarshal).

Este módulo popula uma instância de dataclass a partir de um subconjunto
do ConfigMap, sem conhecer os tipos de destino antecipadamente: os tipos
são descobertos em runtime via `dataclasses.fields` e
`typing.get_type_hints`.

Resolução de chaves:
    - `field(metadata={"config": "nome"})` define a chave do campo
    - sem metadata, usa o nome do campo em minúsculas
    - `metadata={"config": "-"}` ignora o campo
    - a chave é sempre relativa ao prefixo corrente

Política por tipo de campo:
    - escalares (str/int/float/bool)  → coerção segura
    - timedelta / datetime / date / Enum / Path → coerção dedicada
    - dataclass                        → recursão com prefixo estendido
    - list / tuple / set               → índices `prefixo.0`, `prefixo.1`, ...
                                         até o primeiro índice ausente
    - dict                             → um nível de sub-chaves
    - Optional[T]                      → aceita NIL como None
    - Any / sem anotação               → valor cru reconstruído

Invariantes:
    - Campos sem chave correspondente preservam o valor atual
    - Toda falha de coerção vira `TypeMismatchError` com chave e campo
    - O ConfigMap de origem nunca é mutado

Limites explícitos:
    - Campos `init=False` não são populados
    - Tuplas heterogêneas (`Tuple[int, str]`) são tratadas elemento a elemento
    - Não valida regras de domínio do dataclass além de seu construtor

Este módulo existe para oferecer acesso tipado e estruturado à
configuração sem código de mapeamento manual.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing
from datetime import date, datetime, timedelta
from enum import Enum
from pathlib import PurePath
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .coerce import to_bool, to_datetime, to_duration, to_float, to_int, to_string
from .errors import InvalidTargetError, TypeMismatchError
from .flatten import rebuild
from .model import DEFAULT_OPTIONS, ConfigMap, FlattenOptions, ValueType

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES = (Union, types.UnionType)

_SCALAR_CONVERTERS: Dict[Any, Callable[[Any], Any]] = {
    str: to_string,
    int: to_int,
    float: to_float,
    bool: to_bool,
    timedelta: to_duration,
    datetime: to_datetime,
}

_MISSING = object()


def _type_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # anotações não resolvíveis (ex.: classes locais); usa o que houver
        return {
            f.name: (Any if isinstance(f.type, str) else f.type)
            for f in dataclasses.fields(cls)
        }


def _field_key(f: dataclasses.Field, opts: FlattenOptions) -> Optional[str]:
    tag = f.metadata.get("config") if f.metadata else None
    if tag == "-":
        return None
    if tag:
        return opts.normalize_key(tag)
    return f.name if opts.case_sensitive else f.name.lower()


class _Binder:
    def __init__(self, entries: ConfigMap, opts: FlattenOptions) -> None:
        self.entries = entries
        self.opts = opts
        self.sep = opts.separator

    def has_children(self, key: str) -> bool:
        prefix = key + self.sep
        return any(k.startswith(prefix) for k in self.entries)

    def exists(self, key: str) -> bool:
        return key in self.entries or self.has_children(key)

    def child_names(self, key: str) -> List[str]:
        prefix = key + self.sep
        names: Dict[str, None] = {}
        for k in self.entries:
            if k.startswith(prefix):
                names.setdefault(k[len(prefix):].split(self.sep, 1)[0], None)
        return list(names)

    # -------------------------------------------------
    # Dataclasses
    # -------------------------------------------------
    def collect(self, cls: type, prefix: str) -> Dict[str, Any]:
        hints = _type_hints(cls)
        values: Dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            name = _field_key(f, self.opts)
            if name is None:
                continue
            key = self.opts.join(prefix, name)
            value = self.resolve(key, hints.get(f.name, Any), f.name)
            if value is not _MISSING:
                values[f.name] = value
        return values

    def build(self, cls: type, key: str, field_name: str, current: Any) -> Any:
        entry = self.entries.get(key)
        if entry is not None and not entry.is_composite and not self.has_children(key):
            raise TypeMismatchError(
                key, field_name, f"valor '{entry.type.value}' não preenche {cls.__name__}"
            )
        values = self.collect(cls, key)
        try:
            if isinstance(current, cls):
                return dataclasses.replace(current, **values)
            return cls(**values)
        except (TypeError, ValueError) as exc:
            raise TypeMismatchError(key, field_name, str(exc)) from exc

    # -------------------------------------------------
    # Resolução por tipo
    # -------------------------------------------------
    def resolve(self, key: str, tp: Any, field_name: str, current: Any = None) -> Any:
        if not self.exists(key):
            return _MISSING

        origin = typing.get_origin(tp)
        args = typing.get_args(tp)

        if origin in _UNION_TYPES:
            entry = self.entries.get(key)
            if entry is not None and entry.type is ValueType.NIL:
                return None
            candidates = [a for a in args if a is not type(None)]
            if len(candidates) != 1:
                return self.raw(key)
            tp = candidates[0]
            origin = typing.get_origin(tp)
            args = typing.get_args(tp)

        if tp is Any or tp is object:
            return self.raw(key)

        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            return self.build(tp, key, field_name, current)

        if origin is collections.abc.Sequence:
            origin = list
        if origin in (list, tuple, set, frozenset) or tp in (list, tuple, set, frozenset):
            return self.sequence(key, origin or tp, args, field_name)

        if origin in (dict, collections.abc.Mapping) or tp is dict:
            value_tp = args[1] if len(args) == 2 else Any
            return self.mapping(key, value_tp, field_name)

        return self.scalar(key, tp, field_name)

    def raw(self, key: str) -> Any:
        value, found = rebuild(self.entries, key, self.sep)
        return value if found else _MISSING

    def sequence(self, key: str, container: Any, args: Tuple[Any, ...], field_name: str) -> Any:
        entry = self.entries.get(key)
        aggregate = entry is not None and entry.type is ValueType.SLICE
        # índices além do agregado estendem a lista
        length = len(entry.value) if aggregate else 0
        while self.exists(f"{key}{self.sep}{length}"):
            length += 1
        if length == 0 and not aggregate and entry is not None and entry.type is not ValueType.NIL:
            raise TypeMismatchError(
                key, field_name, f"esperado lista, encontrado '{entry.type.value}'"
            )

        items: List[Any] = []
        for index in range(length):
            if container is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
                item_tp = args[index] if index < len(args) else Any
            else:
                item_tp = args[0] if args else Any
            value = self.resolve(f"{key}{self.sep}{index}", item_tp, f"{field_name}[{index}]")
            items.append(None if value is _MISSING else value)

        if container is tuple:
            return tuple(items)
        if container in (set, frozenset):
            return container(items)
        return items

    def mapping(self, key: str, value_tp: Any, field_name: str) -> Any:
        names = self.child_names(key)
        if not names:
            entry = self.entries.get(key)
            if entry is not None and entry.type not in (ValueType.MAP, ValueType.NIL):
                raise TypeMismatchError(
                    key, field_name, f"esperado mapa, encontrado '{entry.type.value}'"
                )
            return {}
        result: Dict[str, Any] = {}
        for name in names:
            value = self.resolve(self.opts.join(key, name), value_tp, f"{field_name}[{name!r}]")
            if value is not _MISSING:
                result[name] = value
        return result

    def scalar(self, key: str, tp: Any, field_name: str) -> Any:
        entry = self.entries.get(key)
        if entry is None:
            # apenas descendentes: não há escalar para converter
            raise TypeMismatchError(key, field_name, "esperado escalar, encontrado estrutura")
        if entry.type is ValueType.NIL:
            return _MISSING
        if entry.is_composite:
            raise TypeMismatchError(
                key, field_name, f"esperado escalar, encontrado '{entry.type.value}'"
            )

        try:
            return self.convert(entry.value, tp)
        except (TypeError, ValueError, KeyError) as exc:
            raise TypeMismatchError(key, field_name, str(exc)) from exc

    @staticmethod
    def convert(value: Any, tp: Any) -> Any:
        converter = _SCALAR_CONVERTERS.get(tp)
        if converter is not None:
            return converter(value)
        if tp is date:
            return to_datetime(value).date()
        if isinstance(tp, type) and issubclass(tp, Enum):
            try:
                return tp(value)
            except ValueError:
                return tp[to_string(value)]
        if isinstance(tp, type) and issubclass(tp, PurePath):
            return tp(to_string(value))
        if isinstance(tp, type) and isinstance(value, tp):
            return value
        raise TypeError(f"tipo de campo não suportado: {getattr(tp, '__name__', tp)!r}")


def validate_target(target: Any) -> None:
    """
    Garante que `target` seja uma instância de dataclass mutável.

    Raises:
        InvalidTargetError: Para None, classes, objetos comuns ou
            dataclasses congelados.
    """
    if target is None or isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise InvalidTargetError(
            f"Alvo do unmarshal deve ser instância de dataclass, recebido: {type(target).__name__}"
        )
    params = getattr(type(target), "__dataclass_params__", None)
    if params is not None and params.frozen:
        raise InvalidTargetError(
            f"Alvo do unmarshal não pode ser dataclass congelado: {type(target).__name__}"
        )


def unmarshal_into(
    entries: ConfigMap,
    key: str,
    target: Any,
    options: Optional[FlattenOptions] = None,
) -> None:
    """
    Popula `target` (instância de dataclass) com as entradas sob `key`.

    Args:
        entries (ConfigMap): Subconjunto já selecionado do store.
        key (str): Prefixo relativo ao qual os campos são resolvidos
            ("" para a raiz).
        target (Any): Instância de dataclass não congelada.
        options (Optional[FlattenOptions]): Separador e regra de caixa.

    Raises:
        InvalidTargetError: Se `target` não for instância de dataclass
            mutável.
        TypeMismatchError: Se algum valor não puder ser convertido.
    """
    validate_target(target)

    opts = options or DEFAULT_OPTIONS
    binder = _Binder(entries, opts)
    cls = type(target)
    if key:
        entry = entries.get(key)
        if entry is not None and not entry.is_composite and not binder.has_children(key):
            raise TypeMismatchError(
                key, cls.__name__, f"valor '{entry.type.value}' não preenche {cls.__name__}"
            )

    hints = _type_hints(cls)
    for f in dataclasses.fields(target):
        if not f.init:
            continue
        name = _field_key(f, opts)
        if name is None:
            continue
        field_key = opts.join(key, name)
        value = binder.resolve(field_key, hints.get(f.name, Any), f.name, getattr(target, f.name, None))
        if value is not _MISSING:
            setattr(target, f.name, value)
