# src/atlas_config/core/coerce.py
"""
Conversões seguras de valores escalares de configuração.

Funções usadas pelo binding de dataclasses e pelos getters derivados do
manager (`get_duration`, `get_time`, `get_int_slice`, ...).

Todas levantam `ValueError` ou `TypeError` quando a conversão não é
segura; quem chama decide se isso vira `TypeMismatchError` ou
`exists=False`.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Any

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_RE = re.compile(r"^[+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+$")

_TRUE_STRINGS = frozenset({"true", "yes", "1", "on", "t", "y"})
_FALSE_STRINGS = frozenset({"false", "no", "0", "off", "f", "n", ""})

# segundos por unidade
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def is_int_string(text: str) -> bool:
    return bool(_INT_RE.match(text))


def is_float_string(text: str) -> bool:
    return bool(_FLOAT_RE.match(text))


def to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise TypeError(f"não é possível converter {type(value).__name__} para string")


def to_int(value: Any) -> int:
    """
    Converte para int sem perda de informação.

    Floats só são aceitos quando integrais (`8080.0`); strings precisam
    representar um inteiro decimal.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"float não integral: {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if is_int_string(text):
            return int(text)
        if is_float_string(text) and float(text).is_integer():
            return int(float(text))
        raise ValueError(f"string não representa inteiro: {value!r}")
    raise TypeError(f"não é possível converter {type(value).__name__} para int")


def to_float(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if is_float_string(text):
            return float(text)
        raise ValueError(f"string não representa número: {value!r}")
    raise TypeError(f"não é possível converter {type(value).__name__} para float")


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"string não representa booleano: {value!r}")
    raise TypeError(f"não é possível converter {type(value).__name__} para bool")


def to_duration(value: Any) -> timedelta:
    """
    Converte para `timedelta`.

    Aceita:
        - timedelta (inalterado)
        - números (segundos)
        - strings no estilo `"300ms"`, `"1.5s"`, `"1h30m"`, `"-2m"`
        - strings numéricas simples (segundos)
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise TypeError("bool não representa duração")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise TypeError(f"não é possível converter {type(value).__name__} para duração")

    text = value.strip()
    if is_float_string(text):
        return timedelta(seconds=float(text))
    if not _DURATION_RE.match(text):
        raise ValueError(f"duração inválida: {value!r}")

    seconds = sum(
        float(amount) * _DURATION_UNITS[unit]
        for amount, unit in _DURATION_PART_RE.findall(text)
    )
    return timedelta(seconds=-seconds if text.startswith("-") else seconds)


def to_datetime(value: Any) -> datetime:
    """
    Converte para `datetime` a partir de strings ISO-8601 (sufixo `Z` aceito).
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise TypeError(f"não é possível converter {type(value).__name__} para datetime")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
