# src/atlas_config/manager.py
"""
ConfigManager: fachada thread-safe do Atlas Config.

O manager é dono de exatamente um ConfigMap (o store), alimentado por
formatters via `load` e por escrita direta via `set`. Leituras tipadas,
inspeção e binding em dataclasses operam sempre sobre esse store.

Política de carregamento (v1):
    - cada `load` mescla o mapa recém-lido *sobre* o store: a fonte
      carregada por último vence por chave
    - `load_sources` recebe fontes em ordem de prioridade (mais alta
      primeiro), mescla entre si e depois sobre o store
    - erros de formatter (IOFailure, ParseFailed) propagam inalterados;
      o store permanece intacto quando a leitura falha

Decisões arquiteturais:
    - Um único lock leitores-escritor protege o store inteiro
    - Getters e `has` nunca levantam exceção: ausência e tipo
      incompatível são reportados como `(None, False)`
    - `unmarshal` usa o lado exclusivo do lock durante toda a população
      do alvo, impedindo que um `set` concorrente intercale com ela
    - Leituras compostas (mapa/lista) são sintetizadas a partir dos
      descendentes, que têm prioridade sobre um agregado literal

Invariantes:
    - Métodos que já seguram o lock nunca o pedem novamente
    - Nenhum valor composto do store é exposto sem cópia

Limites explícitos:
    - Não observa arquivos nem recarrega automaticamente
    - Não persiste o store
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from loguru import logger

from .core.binding import unmarshal_into, validate_target
from .core.coerce import to_datetime, to_duration, to_int, to_string
from .core.errors import InvalidKeyError, KeyNotFoundError
from .core.flatten import flatten, rebuild, subset, unflatten
from .core.hashing import compute_config_hash
from .core.locking import ReadWriteLock
from .core.merge import merge_config_maps
from .core.model import DEFAULT_OPTIONS, ConfigMap, ConfigValue, FlattenOptions, ValueType
from .formatters.base import Formatter, read_config_map

_NOT_FOUND: Tuple[Any, bool] = (None, False)


class ConfigManager:
    """
    Store de configuração com acesso tipado e binding em dataclasses.

    Args:
        options (Optional[FlattenOptions]): Opções usadas em todos os
            ciclos de flatten e na normalização de chaves.
        initial (Optional[Mapping[str, Any]]): Árvore inicial do store
            (pré-seed), achatada com as mesmas opções.

    Exemplo:
        >>> manager = ConfigManager(initial={"database": {"port": 5432}})
        >>> manager.get_int("database.port")
        (5432, True)
    """

    def __init__(
        self,
        options: Optional[FlattenOptions] = None,
        initial: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._options = options or DEFAULT_OPTIONS
        self._lock = ReadWriteLock()
        self._store: ConfigMap = flatten(initial, self._options) if initial else {}
        self._sources: List[str] = []

    def __repr__(self) -> str:
        return f"ConfigManager(keys={len(self._store)}, sources={self._sources!r})"

    @property
    def options(self) -> FlattenOptions:
        return self._options

    @property
    def sources(self) -> List[str]:
        with self._lock.read_locked():
            return list(self._sources)

    # ------------------------------------------------------------------
    # Carregamento
    # ------------------------------------------------------------------

    def load(self, formatter: Formatter) -> None:
        """
        Lê uma fonte e a mescla sobre o store (a nova fonte vence).

        Raises:
            TypeError: Se `formatter` não implementar o protocolo.
            IOFailureError: Falha de leitura da fonte.
            ParseFailedError: Documento malformado.
        """
        with self._lock.write_locked():
            config_map = read_config_map(formatter, self._options)
            self._store = merge_config_maps([config_map, self._store])
            self._sources.append(formatter.name)
            total = len(self._store)

        logger.info(
            "Configuração carregada de {} ({} chaves, {} no store)",
            formatter.name,
            len(config_map),
            total,
        )

    def load_sources(self, formatters: Iterable[Formatter]) -> None:
        """
        Carrega várias fontes de uma vez, em ordem de prioridade.

        A primeira fonte da sequência vence as seguintes; o conjunto vence
        o que já estava no store. Se qualquer fonte falhar, nada é
        aplicado.
        """
        formatters = list(formatters)
        with self._lock.write_locked():
            maps = [read_config_map(f, self._options) for f in formatters]
            self._store = merge_config_maps(maps + [self._store])
            self._sources.extend(f.name for f in formatters)
            total = len(self._store)

        logger.info(
            "Configuração carregada de {} fontes ({} chaves no store)",
            len(formatters),
            total,
        )

    # ------------------------------------------------------------------
    # Chaves
    # ------------------------------------------------------------------

    def _normalize(self, key: str) -> str:
        return self._options.normalize_key(key)

    def _validate_key(self, key: Any) -> str:
        if not isinstance(key, str):
            raise InvalidKeyError(f"Chave de configuração deve ser str, recebido: {type(key).__name__}")
        if self._options.handle_empty_key:
            return self._normalize(key)
        if not key:
            raise InvalidKeyError("Chave de configuração vazia")
        if any(part == "" for part in key.split(self._options.separator)):
            raise InvalidKeyError(f"Chave de configuração malformada: '{key}'")
        return self._normalize(key)

    def _entry(self, key: Any) -> Optional[ConfigValue]:
        if not isinstance(key, str):
            return None
        return self._store.get(self._normalize(key))

    def _composite(self, key: Any) -> Tuple[Any, bool]:
        if not isinstance(key, str):
            return _NOT_FOUND
        return rebuild(self._store, self._normalize(key), self._options.separator)

    def _typed(self, key: Any, value_type: ValueType) -> Tuple[Any, bool]:
        with self._lock.read_locked():
            entry = self._entry(key)
        if entry is None or entry.type is not value_type:
            return _NOT_FOUND
        return entry.value, True

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------

    def get(self, key: str) -> Tuple[Any, bool]:
        """
        Retorna o valor cru em `key` como `(valor, existe)`.

        Escalares são retornados diretamente; mapas e listas são
        reconstruídos a partir do agregado e dos descendentes (cópia).
        """
        with self._lock.read_locked():
            entry = self._entry(key)
            if entry is not None and not entry.is_composite:
                return entry.value, True
            return self._composite(key)

    def get_string(self, key: str) -> Tuple[Optional[str], bool]:
        return self._typed(key, ValueType.STRING)

    def get_int(self, key: str) -> Tuple[Optional[int], bool]:
        return self._typed(key, ValueType.INT)

    def get_float(self, key: str) -> Tuple[Optional[float], bool]:
        return self._typed(key, ValueType.FLOAT)

    def get_bool(self, key: str) -> Tuple[Optional[bool], bool]:
        return self._typed(key, ValueType.BOOL)

    def get_slice(self, key: str) -> Tuple[Optional[List[Any]], bool]:
        with self._lock.read_locked():
            value, found = self._composite(key)
        if not found or not isinstance(value, list):
            return _NOT_FOUND
        return value, True

    def get_map(self, key: str) -> Tuple[Optional[Dict[str, Any]], bool]:
        with self._lock.read_locked():
            value, found = self._composite(key)
        if not found or not isinstance(value, dict):
            return _NOT_FOUND
        return value, True

    def get_string_slice(self, key: str) -> Tuple[Optional[List[str]], bool]:
        items, found = self.get_slice(key)
        if not found:
            return _NOT_FOUND
        try:
            return [to_string(item) for item in items], True
        except (TypeError, ValueError):
            return _NOT_FOUND

    def get_int_slice(self, key: str) -> Tuple[Optional[List[int]], bool]:
        items, found = self.get_slice(key)
        if not found:
            return _NOT_FOUND
        try:
            return [to_int(item) for item in items], True
        except (TypeError, ValueError):
            return _NOT_FOUND

    def get_string_map_string(self, key: str) -> Tuple[Optional[Dict[str, str]], bool]:
        mapping, found = self.get_map(key)
        if not found:
            return _NOT_FOUND
        try:
            return {k: to_string(v) for k, v in mapping.items()}, True
        except (TypeError, ValueError):
            return _NOT_FOUND

    def get_string_map_string_slice(self, key: str) -> Tuple[Optional[Dict[str, List[str]]], bool]:
        mapping, found = self.get_map(key)
        if not found:
            return _NOT_FOUND
        result: Dict[str, List[str]] = {}
        for k, v in mapping.items():
            if not isinstance(v, list):
                return _NOT_FOUND
            try:
                result[k] = [to_string(item) for item in v]
            except (TypeError, ValueError):
                return _NOT_FOUND
        return result, True

    def get_duration(self, key: str) -> Tuple[Optional[timedelta], bool]:
        """
        Interpreta o valor em `key` como duração.

        Aceita strings no formato `"1h30m"`, `"250ms"`, `"-1.5s"` ou números
        (segundos).
        """
        with self._lock.read_locked():
            entry = self._entry(key)
        if entry is None or entry.type not in (ValueType.STRING, ValueType.INT, ValueType.FLOAT):
            return _NOT_FOUND
        try:
            return to_duration(entry.value), True
        except (TypeError, ValueError):
            return _NOT_FOUND

    def get_time(self, key: str) -> Tuple[Optional[datetime], bool]:
        with self._lock.read_locked():
            entry = self._entry(key)
        if entry is None or entry.type is not ValueType.STRING:
            return _NOT_FOUND
        try:
            return to_datetime(entry.value), True
        except (TypeError, ValueError):
            return _NOT_FOUND

    def has(self, key: str) -> bool:
        """
        Indica se `key` existe como entrada própria ou como prefixo de descendentes.

        A busca exata é O(1); só quando ela falha o store é varrido em busca
        de chaves `key + separador + ...` (fontes env e `set` pontuado não
        gravam agregado no pai).
        """
        if not isinstance(key, str):
            return False
        normalized = self._normalize(key)
        prefix = normalized + self._options.separator
        with self._lock.read_locked():
            if normalized in self._store:
                return True
            return any(k.startswith(prefix) for k in self._store)

    def all_keys(self) -> List[str]:
        with self._lock.read_locked():
            return sorted(self._store)

    def all_settings(self) -> Dict[str, Any]:
        """Reconstrói a árvore aninhada completa a partir do store."""
        with self._lock.read_locked():
            return unflatten(self._store, self._options.separator)

    def snapshot(self) -> ConfigMap:
        with self._lock.read_locked():
            return dict(self._store)

    def config_hash(self) -> str:
        with self._lock.read_locked():
            return compute_config_hash(self._store)

    # ------------------------------------------------------------------
    # Escrita
    # ------------------------------------------------------------------

    def _entries_for(self, key: str, value: Any) -> ConfigMap:
        if value is None:
            return {key: ConfigValue(value=None, type=ValueType.NIL)}
        return flatten(value, self._options, prefix=key)

    def set(self, key: str, value: Any) -> None:
        """
        Define `key` com `value`, sobrescrevendo qualquer valor anterior.

        Valores compostos são gravados como agregado mais expansão, com o
        mesmo motor do flatten; `None` é gravado como NIL.

        Raises:
            InvalidKeyError: Chave não-str, vazia ou malformada.
        """
        normalized = self._validate_key(key)
        entries = self._entries_for(normalized, value)
        with self._lock.write_locked():
            self._store.update(entries)
        logger.debug("Chave {} definida ({} entradas)", normalized, len(entries))

    def set_default(self, key: str, value: Any) -> bool:
        """
        Define `key` apenas se ela (ou algum descendente) ainda não existir.

        Returns:
            bool: True se o default foi aplicado.
        """
        normalized = self._validate_key(key)
        entries = self._entries_for(normalized, value)
        prefix = normalized + self._options.separator
        with self._lock.write_locked():
            if normalized in self._store or any(k.startswith(prefix) for k in self._store):
                return False
            self._store.update(entries)
        return True

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def unmarshal(self, key: str, target: Any) -> None:
        """
        Popula a instância de dataclass `target` com a subárvore em `key`.

        Com chave vazia, o store inteiro é usado. Campos sem chave
        correspondente mantêm o valor atual.

        Raises:
            InvalidTargetError: `target` não é instância de dataclass mutável.
            InvalidKeyError: Chave não-str ou malformada.
            KeyNotFoundError: Nenhuma entrada em `key` ou abaixo dela.
            TypeMismatchError: Valor incompatível com o tipo de um campo.
        """
        validate_target(target)
        normalized = self._validate_key(key) if key != "" else ""

        with self._lock.write_locked():
            if normalized:
                selected = subset(self._store, normalized, self._options.separator)
                if not selected:
                    raise KeyNotFoundError(f"Chave '{key}' não encontrada na configuração")
            else:
                selected = dict(self._store)
            unmarshal_into(selected, normalized, target, self._options)


def new_manager(
    options: Optional[FlattenOptions] = None,
    initial: Optional[Mapping[str, Any]] = None,
) -> ConfigManager:
    """Cria um ConfigManager vazio (ou pré-populado com `initial`)."""
    return ConfigManager(options=options, initial=initial)
