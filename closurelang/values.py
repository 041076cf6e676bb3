"""Runtime values.

Program values are host Python values wherever one fits:

    number     -> int | float
    string     -> str
    boolean    -> bool
    null       -> None
    undefined  -> UNDEFINED (singleton)
    object     -> JSObject (dict of properties)
    array      -> JSArray (list)
    function   -> Closure | NativeFunction

`type_of` gives the tag each operation dispatches on. `to_display` renders a
value the way the console prints it, `to_string` the way string
concatenation and template literals coerce it.


File: values.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from closurelang.environment import Environment


MAX_SAFE_BOUND = 2 ** 53

_DECIMAL_LITERAL = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')
_HEX_LITERAL = re.compile(r'0[xX][0-9a-fA-F]+')


class _Undefined:
    """The absent value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True, eq=False)
class Closure:
    """A function definition paired with the environment it was defined in."""

    name: str | None
    params: tuple[str, ...]
    body: tuple
    env: Environment

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass(frozen=True, eq=False)
class NativeFunction:
    """A function implemented in Python.

    `func` is called as ``func(interpreter, args, line)``.
    """

    name: str
    func: Callable[..., Any]
    arity: int = 0


class JSObject(dict):
    """Record value; properties are dict items."""


class JSArray(list):
    """Ordered sequence value."""


FUNCTION_TYPES = (Closure, NativeFunction)


def is_callable(value) -> bool:
    return isinstance(value, FUNCTION_TYPES)


def is_runtime_value(value) -> bool:
    """Whether `value` is one of the host values programs operate on."""
    if value is UNDEFINED or value is None:
        return True
    return isinstance(value, (bool, int, float, str, JSObject, JSArray)) or is_callable(value)


def type_of(value) -> str:
    """
    Return the type tag of a runtime value.

    Parameters:
        value (Any): A runtime value.

    Returns:
        str: One of 'undefined', 'object', 'boolean', 'number', 'string', 'function'.
    """
    if value is UNDEFINED:
        return 'undefined'
    if value is None:
        return 'object'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if is_callable(value):
        return 'function'
    if isinstance(value, (JSObject, JSArray)):
        return 'object'
    raise TypeError(f"Not a runtime value: {value!r}")


def truthy(value) -> bool:
    """Truthiness: undefined, null, false, 0, NaN and '' are falsy."""
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (bool, int, float, str)):
        return bool(value)
    return True


def to_number(value):
    """Numeric coercion used by arithmetic and relational operators."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return normalize_number(value)
    if value is None:
        return 0
    if isinstance(value, str):
        return _parse_numeric_string(value)
    return math.nan


def _parse_numeric_string(value: str):
    text = value.strip()
    if text == '':
        return 0
    if _DECIMAL_LITERAL.fullmatch(text):
        return normalize_number(float(text))
    if _HEX_LITERAL.fullmatch(text):
        return normalize_number(int(text, 16))
    if text in ('Infinity', '+Infinity'):
        return math.inf
    if text == '-Infinity':
        return -math.inf
    return math.nan


def normalize_number(value):
    """
    Keep numbers within double precision.

    Integral floats collapse to int so `4 / 2` behaves like `2`. Ints at or
    beyond 2**53 become floats, the largest range in which every integer is
    exact.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value if abs(value) < MAX_SAFE_BOUND else float(value)
    if isinstance(value, float) and value.is_integer() and abs(value) < MAX_SAFE_BOUND:
        return int(value)
    return value


def format_number(value) -> str:
    """
    Render a number the way `String(n)` does.

    Decimal notation is used for magnitudes in [1e-6, 1e21), exponent
    notation (`1e+21`, `1.5e-7`) outside it.
    """
    if isinstance(value, int) and abs(value) < MAX_SAFE_BOUND:
        return str(value)
    value = float(value)
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == 0:
        return '0'

    # Shortest round-trip digits, as repr() chooses them.
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = ''.join(map(str, digit_tuple)).rstrip('0')
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k
    sign = '-' if value < 0 else ''

    if k <= n <= 21:
        return sign + digits + '0' * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + '.' + digits[n:]
    if -6 < n <= 0:
        return sign + '0.' + '0' * -n + digits
    e = n - 1
    mantissa = digits if k == 1 else digits[0] + '.' + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def _function_label(value) -> str:
    name = value.name
    return f"[Function: {name}]" if name else "[Function (anonymous)]"


def to_string(value) -> str:
    """String coercion used by `+` with a string operand and by templates."""
    if isinstance(value, str):
        return value
    if value is UNDEFINED:
        return 'undefined'
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, JSArray):
        return ','.join(
            '' if item is UNDEFINED or item is None else to_string(item)
            for item in value
        )
    if isinstance(value, JSObject):
        return '[object Object]'
    if is_callable(value):
        return f"function {value.name or ''}() {{ [code] }}"
    raise TypeError(f"Not a runtime value: {value!r}")


def to_display(value, nested: bool = False) -> str:
    """
    Render a value as the console prints it.

    Strings print raw at the top level and single-quoted inside arrays and
    objects. Arrays print as ``[ 1, 2 ]`` and objects as ``{ a: 1 }``.
    """
    if isinstance(value, str):
        return repr(value) if nested else value
    if isinstance(value, JSArray):
        if not value:
            return '[]'
        return '[ ' + ', '.join(to_display(item, True) for item in value) + ' ]'
    if isinstance(value, JSObject):
        if not value:
            return '{}'
        items = ', '.join(f"{key}: {to_display(item, True)}" for key, item in value.items())
        return '{ ' + items + ' }'
    if is_callable(value):
        return _function_label(value)
    return to_string(value)


def strict_equals(lhs, rhs) -> bool:
    """`===`: same type tag and same value; identity for objects and functions."""
    lhs_type, rhs_type = type_of(lhs), type_of(rhs)
    if lhs_type != rhs_type:
        return False
    if lhs_type in ('object', 'function'):
        return lhs is rhs
    return lhs == rhs


def loose_equals(lhs, rhs) -> bool:
    """`==`: null and undefined match each other; primitives compare numerically."""
    if (lhs is None or lhs is UNDEFINED) and (rhs is None or rhs is UNDEFINED):
        return True
    if lhs is None or lhs is UNDEFINED or rhs is None or rhs is UNDEFINED:
        return False
    if type_of(lhs) == type_of(rhs):
        return strict_equals(lhs, rhs)
    if type_of(lhs) in ('object', 'function') or type_of(rhs) in ('object', 'function'):
        return False
    return to_number(lhs) == to_number(rhs)
