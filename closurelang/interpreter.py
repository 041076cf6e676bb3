"""Interpreter.

This is a tree-walk interpreter for evaluating AST nodes produced by the
parser. It supports nested functions and closures, block-scoped and hoisted
declarations, object and array literals, loops, and console output.

1. Execution Model
The interpreter evaluates an abstract syntax tree (AST) in a top-down,
recursive manner. Statements are executed via `exec_stmt()` and expressions
via `eval_expr()`. Both operate over tuples whose first element names the
node kind and whose last element is the source line. Evaluation is strictly
sequential and left to right.

2. Environment
`self.env` is the current :class:`Environment`. Blocks, loop iterations and
function activations replace it with a child environment and restore the
previous one afterwards. Closures capture `self.env` by reference when they
are created, so reads through a closure always see the latest value in the
captured cells.

3. Hoisting
Before a function body (or the whole program) runs, `_hoist_vars()` walks
its statements, stopping at nested functions, and allocates one cell per
`var` name in the function's environment. Function declarations are bound
when the block containing them is entered, so they can be called before
their textual position.

4. Loops
A `for` loop whose initializer is a `let` declaration copies its loop
bindings into a new environment at the start of every iteration, so each
iteration's closures capture a distinct cell. A `var` initializer binds the
hoisted cell, shared by every iteration.

5. Output
`console.log` appends one entry per call to `self.output`. With `echo`
enabled the entry is also printed.

6. Error Handling
Runtime errors are surfaced as typed exceptions carrying line numbers and
file context (`UnboundVariableError`, `NotCallableError`, ...). `return`
and `break` unwind through the `ReturnControlFlow` and `BreakLoop`
exceptions.


File: interpreter.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import math
import random
from typing import Callable

from closurelang.builtins import array_method, install_globals
from closurelang.environment import Cell, DeclKind, Environment
from closurelang.exceptions import (
    BreakLoop,
    ClosureLangError,
    ConstantAssignmentError,
    NotCallableError,
    PropertyAccessError,
    ReturnControlFlow,
    UnknownOperationError,
)
from closurelang.operations import Op
from closurelang.values import (
    UNDEFINED,
    Closure,
    JSArray,
    JSObject,
    NativeFunction,
    is_callable,
    loose_equals,
    normalize_number,
    strict_equals,
    to_display,
    to_number,
    to_string,
    truthy,
    type_of,
)


BINARY_OPS = (
    Op.ADD,
    Op.SUB,
    Op.MUL,
    Op.DIV,
    Op.MOD,
    Op.STRICT_EQ,
    Op.STRICT_NE,
    Op.EQ,
    Op.NE,
    Op.GT,
    Op.LT,
    Op.GE,
    Op.LE,
    Op.AND,
    Op.OR,
)


def _concatenates(value) -> bool:
    """Strings, objects, arrays and functions turn `+` into concatenation."""
    return isinstance(value, (str, JSObject, JSArray)) or is_callable(value)


class Interpreter:
    """Tree-walk interpreter for closurelang."""

    def __init__(self, file: str = '<program>', random_source: Callable[[], float] | None = None,
                 echo: bool = False):
        """
        Initialize the interpreter.

        Parameters:
            file (str): Program name used in error messages.
            random_source (callable): Zero-argument callable backing `Math.random`.
            echo (bool): Also print every console line to stdout.
        """
        self.file = file
        self.random_source = random_source if random_source is not None else random.random
        self.echo = echo
        self.output: list[str] = []

        self.builtins = Environment()
        install_globals(self.builtins)
        self.globals = self.builtins.child(function_scope=True)
        self.env = self.globals

    def emit(self, text: str) -> None:
        """
        Append a line to the output trace.
        """
        self.output.append(text)
        if self.echo:
            print(text)

    def _format_expr(self, node) -> str:
        """
        Convert AST back to a readable string for error messages.

        Args:
            node (tuple): An expression node.

        Returns:
            str: A string representation of the expression.
        """
        op = node[0]
        match op:
            case 'ident':
                return node[1]
            case 'number':
                return to_string(node[1])
            case 'string':
                return repr(node[1])
            case 'bool':
                return 'true' if node[1] else 'false'
            case 'null' | 'undefined':
                return op
            case 'array':
                return '[' + ', '.join(self._format_expr(e) for e in node[1]) + ']'
            case 'object':
                return '{' + ', '.join(k for k, _ in node[1]) + '}'
            case 'member':
                return f"{self._format_expr(node[1])}.{node[2]}"
            case 'index':
                return f"{self._format_expr(node[1])}[{self._format_expr(node[2])}]"
            case 'call':
                callee, args = node[1], node[2]
                return (
                    f"{self._format_expr(callee)}"
                    f"({', '.join(self._format_expr(arg) for arg in args)})"
                )
            case 'spread':
                return f"...{self._format_expr(node[1])}"
            case 'func_expr' | 'method':
                return f"function {node[1] or ''}"
            case _:
                name = op if isinstance(op, str) else op.value
                return f"<expr {name}>"

    # ------------------------------------------------------------------
    # Programs and statements
    # ------------------------------------------------------------------

    def execute(self, statements: list):
        """
        Run a parsed program in the global environment.

        `var` declarations anywhere in the program (outside functions) are
        hoisted into the global scope first.

        Parameters:
            statements (list): Top-level statement nodes.
        """
        self._hoist_vars(statements, self.globals)
        self.exec_statements(statements)

    def exec_statements(self, statements: list):
        """
        Execute a statement list in the current environment, binding its
        function declarations first.
        """
        for stmt in statements:
            if stmt[0] == 'func_decl':
                _, name, params, body, _ = stmt
                closure = Closure(name, tuple(params), body, self.env)
                cell = self.env.cells.get(name)
                if cell is None:
                    self.env.declare(name, closure, DeclKind.LET)
                else:
                    cell.value = closure
        for stmt in statements:
            self.exec_stmt(stmt)

    def _run_in(self, env: Environment, statements: list):
        saved_env = self.env
        self.env = env
        try:
            self.exec_statements(statements)
        finally:
            self.env = saved_env

    def _hoist_vars(self, statements: list, env: Environment):
        """
        Allocate cells for every `var` declared in `statements`, without
        descending into nested functions.
        """
        for stmt in statements:
            if stmt is None:
                continue
            kind = stmt[0]
            if kind == 'decl' and stmt[1] is DeclKind.VAR:
                for name, _ in stmt[2]:
                    env.declare(name, UNDEFINED, DeclKind.VAR)
            elif kind == 'block':
                self._hoist_vars(stmt[1], env)
            elif kind == 'if':
                self._hoist_vars([stmt[2], stmt[3]], env)
            elif kind == 'for':
                self._hoist_vars([stmt[1], stmt[4]], env)
            elif kind == 'while':
                self._hoist_vars([stmt[2]], env)

    def exec_stmt(self, stmt: tuple):
        """
        Execute a single statement.

        Parameters:
            stmt (tuple): One of the ('decl' | 'func_decl' | 'expr_stmt' |
                'return' | 'if' | 'block' | 'for' | 'while' | 'break' |
                'empty', ...) nodes.

        Raises:
            UnknownOperationError: For unknown statement types.
        """
        kind = stmt[0]
        line = stmt[-1]

        if kind == 'decl':
            _, decl_kind, declarators, _ = stmt
            for name, init in declarators:
                if decl_kind is DeclKind.VAR:
                    cell = self.env.declare(name, kind=DeclKind.VAR)
                    if init is not None:
                        cell.value = self.eval_expr(init)
                else:
                    value = self.eval_expr(init) if init is not None else UNDEFINED
                    self.env.declare(name, value, decl_kind, line, self.file)

        elif kind == 'func_decl':
            # Bound on block entry by exec_statements().
            pass

        elif kind == 'expr_stmt':
            self.eval_expr(stmt[1])

        elif kind == 'return':
            expr_node = stmt[1]
            value = self.eval_expr(expr_node) if expr_node is not None else UNDEFINED
            raise ReturnControlFlow(value)

        elif kind == 'if':
            _, cond_node, then_stmt, else_stmt, _ = stmt
            if truthy(self.eval_expr(cond_node)):
                self.exec_stmt(then_stmt)
            elif else_stmt is not None:
                self.exec_stmt(else_stmt)

        elif kind == 'block':
            self._run_in(self.env.child(), stmt[1])

        elif kind == 'for':
            self._exec_for(stmt)

        elif kind == 'while':
            _, cond_node, body, _ = stmt
            try:
                while truthy(self.eval_expr(cond_node)):
                    self.exec_stmt(body)
            except BreakLoop:
                pass

        elif kind == 'break':
            raise BreakLoop()

        elif kind == 'empty':
            pass

        else:
            raise UnknownOperationError(kind, line, self.file)

    def _exec_for(self, stmt: tuple):
        """
        Execute a three-clause `for` loop.

        The loop header gets its own environment. When the initializer
        declares `let`/`const` names, every iteration runs in a fresh copy of
        those bindings and the update clause runs in the next iteration's
        copy, so closures created in the body keep their iteration's value.
        """
        _, init, test, update, body, _ = stmt
        saved_env = self.env
        self.env = saved_env.child()
        try:
            per_iteration = []
            if init is not None:
                self.exec_stmt(init)
                if init[0] == 'decl' and init[1].block_scoped:
                    per_iteration = [name for name, _ in init[2]]
            if per_iteration:
                self.env = self.env.fork(per_iteration)
            try:
                while test is None or truthy(self.eval_expr(test)):
                    self.exec_stmt(body)
                    if per_iteration:
                        self.env = self.env.fork(per_iteration)
                    if update is not None:
                        self.eval_expr(update)
            except BreakLoop:
                pass
        finally:
            self.env = saved_env

    # ------------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------------

    def make_closure(self, name, params, body) -> Closure:
        """
        Create a closure over the current environment.
        """
        return Closure(name, tuple(params), body, self.env)

    def call_function(self, func, args: list, line=None, callee_node=None):
        """
        Invoke a function value.

        A closure runs in a new environment whose parent is the environment
        captured at definition time. Missing arguments bind to `undefined`
        and extra arguments are ignored.

        Parameters:
            func: The value being called.
            args (list): Evaluated arguments.
            line (int): Line of the call, for error messages.
            callee_node (tuple): Expression that produced `func`, for error messages.

        Returns:
            The function's return value, or `undefined` without a `return`.

        Raises:
            NotCallableError: If `func` is not a function.
        """
        if isinstance(func, NativeFunction):
            return func.func(self, args, line)
        if not isinstance(func, Closure):
            description = (
                self._format_expr(callee_node) if callee_node is not None else to_display(func)
            )
            raise NotCallableError(description, line, self.file)

        activation = func.env.child(function_scope=True)
        for index, param in enumerate(func.params):
            activation.cells[param] = Cell(args[index] if index < len(args) else UNDEFINED)

        statements = func.body[1]
        self._hoist_vars(statements, activation)
        try:
            self._run_in(activation, statements)
            result = UNDEFINED
        except ReturnControlFlow as ret:
            result = ret.value
        return result

    def _eval_args(self, arg_nodes: list) -> list:
        args = []
        for arg in arg_nodes:
            if arg[0] == 'spread':
                value = self.eval_expr(arg[1])
                if not isinstance(value, (JSArray, str)):
                    raise ClosureLangError(
                        f"{self._format_expr(arg[1])} is not iterable", arg[-1], self.file
                    )
                args.extend(value)
            else:
                args.append(self.eval_expr(arg))
        return args

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get_property(self, target, key, line=None):
        """
        Read `target[key]`. Missing properties read as `undefined`.

        Raises:
            PropertyAccessError: If `target` is `undefined` or `null`.
        """
        if target is UNDEFINED or target is None:
            raise PropertyAccessError(to_string(key), to_string(target), line, self.file)

        if isinstance(target, (JSArray, str)):
            if isinstance(key, (int, float)) and not isinstance(key, bool):
                index = normalize_number(key)
                if isinstance(index, int) and 0 <= index < len(target):
                    return target[index]
                return UNDEFINED
            if key == 'length':
                return len(target)
            if isinstance(target, JSArray):
                return array_method(target, key)
            return UNDEFINED

        if isinstance(target, JSObject):
            return target.get(to_string(key), UNDEFINED)

        if is_callable(target):
            if key == 'length':
                return target.arity
            if key == 'name':
                return target.name or ''
        return UNDEFINED

    def set_property(self, target, key, value, line=None):
        """
        Write `target[key] = value` on an object or array.

        Raises:
            PropertyAccessError: If `target` is not an object or array.
        """
        if isinstance(target, JSObject):
            target[to_string(key)] = value
            return value
        if isinstance(target, JSArray) and isinstance(key, (int, float)) and not isinstance(key, bool):
            index = normalize_number(key)
            if isinstance(index, int) and index >= 0:
                if index >= len(target):
                    target.extend([UNDEFINED] * (index + 1 - len(target)))
                target[index] = value
                return value
        raise PropertyAccessError(to_string(key), to_display(target), line, self.file)

    def _reference(self, target: tuple):
        """
        Resolve an assignment target to a (read, write) pair of callables.

        Identifiers resolve to their cell once, before the right-hand side is
        evaluated. Member and index targets evaluate their object (and key)
        first.
        """
        kind, line = target[0], target[-1]
        if kind == 'ident':
            name = target[1]
            cell = self.env.resolve(name, line, self.file)

            def write(value):
                if cell.constant:
                    raise ConstantAssignmentError(name, line, self.file)
                cell.value = value
                return value

            return (lambda: cell.value), write

        obj = self.eval_expr(target[1])
        key = target[2] if kind == 'member' else self.eval_expr(target[2])
        return (
            lambda: self.get_property(obj, key, line),
            lambda value: self.set_property(obj, key, value, line),
        )

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def eval_expr(self, node):
        """
        Recursively evaluate an expression node and return its computed value.

        Parameters:
            node (tuple): An expression node, structured as a tuple.
                The first element is the node kind (e.g. 'call', 'ident',
                Op.ADD), followed by operands and the line number.

        Returns:
            The evaluated runtime value.

        Raises:
            UnboundVariableError: If a name does not resolve.
            NotCallableError: If a non-function is called.
            UnknownOperationError: If the node kind is not recognised.
        """
        op = node[0]
        line = node[-1]

        # Literals
        if op in ('number', 'string', 'bool'):
            return node[1]
        elif op == 'null':
            return None
        elif op == 'undefined':
            return UNDEFINED
        elif op == 'template':
            return ''.join(
                part if isinstance(part, str) else to_string(self.eval_expr(part))
                for part in node[1]
            )
        elif op == 'array':
            return JSArray(self._eval_args(node[1]))
        elif op == 'object':
            obj = JSObject()
            for key, value_node in node[1]:
                obj[key] = self.eval_expr(value_node)
            return obj

        # Variables
        elif op == 'ident':
            return self.env.lookup(node[1], line, self.file)

        # Functions
        elif op == 'func_expr':
            _, name, params, body, _ = node
            if name is None:
                return self.make_closure(None, params, body)
            # A named function expression sees its own name in a scope of its own.
            saved_env = self.env
            self.env = saved_env.child()
            try:
                closure = self.make_closure(name, params, body)
                self.env.declare(name, closure, DeclKind.CONST)
            finally:
                self.env = saved_env
            return closure
        elif op == 'method':
            _, name, params, body, _ = node
            return self.make_closure(name, params, body)

        # Property access
        elif op == 'member':
            return self.get_property(self.eval_expr(node[1]), node[2], line)
        elif op == 'index':
            target = self.eval_expr(node[1])
            return self.get_property(target, self.eval_expr(node[2]), line)

        # Calls
        elif op == 'call':
            _, callee_node, arg_nodes, _ = node
            func = self.eval_expr(callee_node)
            args = self._eval_args(arg_nodes)
            return self.call_function(func, args, line, callee_node)
        elif op == 'new':
            _, callee_node, arg_nodes, _ = node
            func = self.eval_expr(callee_node)
            args = self._eval_args(arg_nodes)
            result = self.call_function(func, args, line, callee_node)
            if isinstance(result, (JSObject, JSArray)) or is_callable(result):
                return result
            return JSObject()

        # Assignment
        elif op == 'assign':
            _, target, value_node, _ = node
            _, write = self._reference(target)
            return write(self.eval_expr(value_node))
        elif op == 'compound_assign':
            _, bin_op, target, value_node, _ = node
            read, write = self._reference(target)
            current = read()
            return write(self._binary(bin_op, current, self.eval_expr(value_node), line))
        elif op == 'update':
            _, operator, prefix, target, _ = node
            read, write = self._reference(target)
            old = to_number(read())
            new = normalize_number(old + 1 if operator == '++' else old - 1)
            write(new)
            return new if prefix else old

        # Unary operators
        elif op == 'unary':
            _, operator, operand_node, _ = node
            if operator == Op.TYPEOF:
                if operand_node[0] == 'ident' and operand_node[1] not in self.env:
                    return 'undefined'
                return type_of(self.eval_expr(operand_node))
            operand = self.eval_expr(operand_node)
            match operator:
                case Op.NOT:
                    return not truthy(operand)
                case Op.NEG:
                    return normalize_number(-to_number(operand))
                case Op.POS:
                    return to_number(operand)
                case _:
                    raise UnknownOperationError(operator, line, self.file)

        # Binary operators
        elif op in BINARY_OPS:
            lhs = self.eval_expr(node[1])
            if op == Op.AND:
                return self.eval_expr(node[2]) if truthy(lhs) else lhs
            if op == Op.OR:
                return lhs if truthy(lhs) else self.eval_expr(node[2])
            rhs = self.eval_expr(node[2])
            return self._binary(op, lhs, rhs, line)

        raise UnknownOperationError(op, line, self.file)

    def _binary(self, op, lhs, rhs, line):
        """
        Apply a non-short-circuit binary operator to evaluated operands.
        """
        match op:
            # Arithmetic
            case Op.ADD:
                if _concatenates(lhs) or _concatenates(rhs):
                    return to_string(lhs) + to_string(rhs)
                return normalize_number(to_number(lhs) + to_number(rhs))
            case Op.SUB:
                return normalize_number(to_number(lhs) - to_number(rhs))
            case Op.MUL:
                return normalize_number(to_number(lhs) * to_number(rhs))
            case Op.DIV:
                dividend, divisor = to_number(lhs), to_number(rhs)
                if divisor == 0:
                    if dividend == 0 or math.isnan(dividend):
                        return math.nan
                    return math.copysign(math.inf, dividend) * math.copysign(1, divisor)
                return normalize_number(dividend / divisor)
            case Op.MOD:
                dividend, divisor = to_number(lhs), to_number(rhs)
                if divisor == 0 or math.isnan(divisor) or not math.isfinite(dividend):
                    return math.nan
                if math.isinf(divisor):
                    return dividend
                return normalize_number(math.fmod(dividend, divisor))
            # Comparison
            case Op.STRICT_EQ:
                return strict_equals(lhs, rhs)
            case Op.STRICT_NE:
                return not strict_equals(lhs, rhs)
            case Op.EQ:
                return loose_equals(lhs, rhs)
            case Op.NE:
                return not loose_equals(lhs, rhs)
            case Op.GT | Op.LT | Op.GE | Op.LE:
                if not (isinstance(lhs, str) and isinstance(rhs, str)):
                    lhs, rhs = to_number(lhs), to_number(rhs)
                match op:
                    case Op.GT:
                        return lhs > rhs
                    case Op.LT:
                        return lhs < rhs
                    case Op.GE:
                        return lhs >= rhs
                    case _:
                        return lhs <= rhs
            case _:
                raise UnknownOperationError(op, line, self.file)
