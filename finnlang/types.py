"""Type definitions and helpers for FinnLang.

This module defines the runtime value model used by the FinnLang
interpreter. Integers, booleans, strings and doubles are represented by
the corresponding Python objects; arrays are wrapped in `ArrayVal` so that
they behave as plain values (copied, never shared). Declared types are
kept as an enumeration but are advisory only: nothing here checks a value
against the type it was declared with.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple
import math


INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


class Type(Enum):
    """Primitive types that may annotate a declaration or parameter."""
    INT = 'int'
    BOOL = 'bool'
    STRING = 'string'
    DOUBLE = 'double'

    def __repr__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArrayVal:
    """Represents a FinnLang array value.

    Items are held in a tuple: an array is never mutated in place, indexed
    assignment builds a new array and rebinds the variable holding it.
    """
    items: Tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def replace(self, index: int, value: Any) -> 'ArrayVal':
        items = list(self.items)
        items[index] = value
        return ArrayVal(tuple(items))

    def __repr__(self) -> str:
        return f"Array({list(self.items)!r})"


@dataclass(frozen=True)
class ReturnSignal:
    """Control-flow signal produced by a `return` statement.

    It is returned (never raised) from statement execution so that loops
    and conditionals can stop and hand it outward unchanged. `value` is
    None for a bare `return;`.
    """
    value: Optional[Any] = None


def is_int(value: Any) -> bool:
    # bool is a subclass of int; keep them apart
    return isinstance(value, int) and not isinstance(value, bool)


def is_double(value: Any) -> bool:
    return isinstance(value, float)


def in_int_range(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def type_name(value: Any) -> str:
    """Return the FinnLang type name of a runtime value."""
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, int):
        return 'int'
    if isinstance(value, float):
        return 'double'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, ArrayVal):
        return 'array'
    return type(value).__name__


def format_double(value: float) -> str:
    """Render a double in plain decimal notation.

    The shortest round-trip digits are kept but never shown with an
    exponent, and integral values drop their fractional part, so `3.0`
    renders as `3` and `1e20` as `100000000000000000000`.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Convert a FinnLang value to its printed representation."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_double(value)
    if isinstance(value, str):
        return value
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    return str(value)


def equal_values(a: Any, b: Any) -> bool:
    """Structural equality; values of different variants never compare equal."""
    if type_name(a) != type_name(b):
        return False
    if isinstance(a, ArrayVal):
        if len(a) != len(b):
            return False
        return all(equal_values(x, y) for x, y in zip(a.items, b.items))
    return a == b
