"""Coerce loosely typed patient fields into usable values.

Every helper returns either ``Parsed(value)`` or ``UNPARSEABLE`` instead of
raising, so callers can branch on the outcome without try/except.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")

_INT_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """A successfully coerced value."""

    value: T


class Unparseable:
    """Marker for a field that could not be coerced."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNPARSEABLE"

    def __bool__(self) -> bool:
        return False


UNPARSEABLE = Unparseable()

Coerced = Union[Parsed[T], Unparseable]


def _parse_int_literal(text: str) -> Coerced[int]:
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return UNPARSEABLE
    return Parsed(int(text))


def to_float(raw: Any) -> Coerced[float]:
    """Coerce a number or numeric string to a finite float.

    ``"nan"``, ``"inf"`` and their float equivalents are rejected even though
    ``float()`` accepts them, so a reading of ``"inf"`` is a data-quality
    issue rather than a high fever.
    """
    if isinstance(raw, bool):
        return UNPARSEABLE
    if not isinstance(raw, (int, float, str)):
        return UNPARSEABLE
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (ValueError, OverflowError):
        return UNPARSEABLE
    if not math.isfinite(value):
        return UNPARSEABLE
    return Parsed(value)


def to_int(raw: Any) -> Coerced[int]:
    """Coerce to an int, truncating floats.

    Strings must hold an integer literal; ``"45.5"`` is rejected.
    """
    if isinstance(raw, bool):
        return UNPARSEABLE
    if isinstance(raw, int):
        return Parsed(raw)
    if isinstance(raw, float):
        if not math.isfinite(raw):
            return UNPARSEABLE
        return Parsed(int(raw))
    if isinstance(raw, str):
        return _parse_int_literal(raw)
    return UNPARSEABLE


def split_blood_pressure(raw: Any) -> Coerced[tuple[int, int]]:
    """Parse ``"SYSTOLIC/DIASTOLIC"`` into two ints."""
    if not isinstance(raw, str):
        return UNPARSEABLE
    parts = raw.split("/")
    if len(parts) != 2:
        return UNPARSEABLE
    systolic = _parse_int_literal(parts[0])
    diastolic = _parse_int_literal(parts[1])
    if not (isinstance(systolic, Parsed) and isinstance(diastolic, Parsed)):
        return UNPARSEABLE
    return Parsed((systolic.value, diastolic.value))
