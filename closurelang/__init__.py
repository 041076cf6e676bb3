"""closurelang.

A small closure evaluator for a JavaScript-flavoured language. Programs are
tokenized, parsed into a tuple AST and walked by :class:`Interpreter`; the
result of :func:`evaluate` is the list of lines printed with `console.log`.

Workflow:
1. The lexer tokenizes the source code into tokens.
2. The parser builds an AST following the language grammar.
3. The interpreter hoists `var` declarations, then evaluates statements in
   order, recording console output.

Set the ``CLOSURELANG_DEBUG`` environment variable to dump the tokens and
AST to stderr before evaluation.


File: __init__.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import os
import sys

from closurelang.environment import DeclKind
from closurelang.exceptions import ClosureLangError, NotCallableError, UnboundVariableError
from closurelang.interpreter import Interpreter
from closurelang.lexer import tokenize
from closurelang.parser import Parser
from closurelang.values import UNDEFINED, JSArray, JSObject, is_runtime_value

__version__ = "0.1.0"


def debug_print_tokens_ast(tokens, ast):
    """
    Print tokenized source and AST
    """
    print("\nTokens:\n", file=sys.stderr)
    print(tokens, file=sys.stderr)
    print("\nAST:\n", file=sys.stderr)
    print(ast, file=sys.stderr)
    print(" ", file=sys.stderr)


def parse(source: str, file: str = '<program>') -> list:
    """
    Tokenize and parse source text into a list of statement nodes.
    """
    tokens, token_map_literals = tokenize(source)
    ast = Parser(tokens, token_map_literals, file).parse()
    if os.environ.get('CLOSURELANG_DEBUG'):
        debug_print_tokens_ast(tokens, ast)
    return ast


def evaluate(program, *, globals=None, random_source=None, echo=False,
             file='<program>') -> list[str]:
    """
    Evaluate a program and return its output trace.

    Parameters:
        program (str | list): Source text, or statements already produced by `parse`.
        globals (dict): Extra top-level bindings, e.g. a namespace object
            owned by the caller and mutated by the program.
        random_source (callable): Zero-argument callable backing `Math.random`.
        echo (bool): Also print each output line to stdout.
        file (str): Program name used in error messages.

    Returns:
        list[str]: One entry per `console.log` call, in execution order.

    Raises:
        UnboundVariableError: If the program reads or writes an unbound name.
        NotCallableError: If the program calls a value that is not a function.
        ClosureLangError: If a `globals` value is not a program value.
    """
    ast = parse(program, file) if isinstance(program, str) else program
    interpreter = Interpreter(file, random_source=random_source, echo=echo)
    for name, value in (globals or {}).items():
        if not is_runtime_value(value):
            raise ClosureLangError(
                f"Global '{name}' has unsupported type {type(value).__name__}; "
                f"use JSObject or JSArray for objects and arrays",
                file=file,
            )
        interpreter.globals.declare(name, value, DeclKind.LET)
    interpreter.execute(ast)
    return interpreter.output


__all__ = [
    "evaluate",
    "parse",
    "Interpreter",
    "UnboundVariableError",
    "NotCallableError",
    "JSObject",
    "JSArray",
    "UNDEFINED",
]
