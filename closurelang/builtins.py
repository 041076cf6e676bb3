"""Built-in globals and methods.

Provides the `console` and `Math` objects installed in every interpreter's
builtin environment, and the methods reachable through array values
(`push`, `map`). Each native function receives the running interpreter so
it can emit output or call back into program closures.


File: builtins.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import math

from closurelang.environment import DeclKind, Environment
from closurelang.values import (
    UNDEFINED,
    JSArray,
    JSObject,
    NativeFunction,
    normalize_number,
    to_display,
    to_number,
)


def _arg(args: list, index: int):
    return args[index] if index < len(args) else UNDEFINED


def _console_log(interpreter, args, line):
    interpreter.emit(' '.join(to_display(arg) for arg in args))
    return UNDEFINED


def _math_trunc(interpreter, args, line):
    value = to_number(_arg(args, 0))
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return value
    return normalize_number(math.trunc(value))


def _math_floor(interpreter, args, line):
    value = to_number(_arg(args, 0))
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return value
    return normalize_number(math.floor(value))


def _math_random(interpreter, args, line):
    return interpreter.random_source()


def install_globals(env: Environment) -> None:
    """
    Declare the builtin objects in `env`.

    Parameters:
        env (Environment): The root environment of an interpreter.
    """
    console = JSObject(log=NativeFunction('log', _console_log, 0))
    math_obj = JSObject(
        trunc=NativeFunction('trunc', _math_trunc, 1),
        floor=NativeFunction('floor', _math_floor, 1),
        random=NativeFunction('random', _math_random, 0),
    )
    env.declare('console', console, DeclKind.LET)
    env.declare('Math', math_obj, DeclKind.LET)


def array_method(array: JSArray, name: str):
    """
    Return `name` bound to `array`, or UNDEFINED if arrays have no such method.
    """
    if name == 'push':
        def push(interpreter, args, line):
            array.extend(args)
            return len(array)
        return NativeFunction('push', push, 1)

    if name == 'map':
        def map_(interpreter, args, line):
            callback = _arg(args, 0)
            return JSArray(
                interpreter.call_function(callback, [item, index, array], line)
                for index, item in enumerate(array)
            )
        return NativeFunction('map', map_, 1)

    return UNDEFINED
