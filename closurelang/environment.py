"""Environments and storage cells.

An :class:`Environment` maps names to :class:`Cell` objects and links to an
optional parent. Closures hold a reference to the environment they were
defined in, never a copy, so every closure sharing an environment (or a
cell reached through it) observes the same writes.

Two allocation strategies exist, keyed by :class:`DeclKind`:

- ``LET``/``CONST`` allocate a fresh cell in the current block environment
  each time the block is entered.
- ``VAR`` allocates once, in the nearest environment flagged as a function
  scope. The interpreter performs that allocation in a hoisting pass before
  the function body runs.


File: environment.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from enum import Enum

from closurelang.exceptions import (
    ConstantAssignmentError,
    RedeclarationError,
    UnboundVariableError,
)
from closurelang.values import UNDEFINED


class DeclKind(str, Enum):
    """
    Declaration keywords and their binding discipline.
    """
    LET = "let"
    CONST = "const"
    VAR = "var"

    @property
    def block_scoped(self) -> bool:
        return self is not DeclKind.VAR


class Cell:
    """A single mutable storage location."""

    __slots__ = ('value', 'constant')

    def __init__(self, value=UNDEFINED, constant=False):
        self.value = value
        self.constant = constant

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"


class Environment:
    """Chained mapping from names to cells."""

    def __init__(self, parent: 'Environment | None' = None, function_scope: bool = False):
        """
        Initialize an environment.

        Parameters:
            parent (Environment | None): Enclosing environment, None at the root.
            function_scope (bool): True for function activations and the
                top level, where hoisted declarations are allocated.
        """
        self.cells: dict[str, Cell] = {}
        self.parent = parent
        self.function_scope = function_scope or parent is None

    def child(self, function_scope: bool = False) -> 'Environment':
        """Create a nested environment whose parent is this one."""
        return Environment(self, function_scope)

    def fork(self, names) -> 'Environment':
        """
        Create a sibling environment with fresh cells for `names`.

        Each new cell starts with the current value of the original, so
        closures holding the old cells keep seeing the old values. Used to
        give every `for` iteration its own copy of the loop's `let` bindings.
        """
        env = Environment(self.parent, self.function_scope)
        for name in names:
            cell = self.cells[name]
            env.cells[name] = Cell(cell.value, cell.constant)
        return env

    def nearest_function_scope(self) -> 'Environment':
        """Return the closest environment where `var` bindings live."""
        env = self
        while not env.function_scope:
            env = env.parent
        return env

    def declare(self, name: str, value=UNDEFINED, kind: DeclKind = DeclKind.LET,
                line=None, file=None) -> Cell:
        """
        Allocate a binding according to the declaration kind.

        Block-scoped kinds always get a new cell in this environment and may
        not redeclare a name already bound here. `var` reuses the cell in the
        nearest function scope when one exists and leaves its value alone.

        Returns:
            Cell: The cell now bound to `name`.

        Raises:
            RedeclarationError: If a block-scoped name is declared twice here.
        """
        if kind.block_scoped:
            if name in self.cells:
                raise RedeclarationError(name, line, file)
            cell = Cell(value, constant=kind is DeclKind.CONST)
            self.cells[name] = cell
            return cell

        scope = self.nearest_function_scope()
        cell = scope.cells.get(name)
        if cell is None:
            cell = Cell(value)
            scope.cells[name] = cell
        return cell

    def resolve(self, name: str, line=None, file=None) -> Cell:
        """
        Find the cell bound to `name`, walking outward through parents.

        Raises:
            UnboundVariableError: If no environment in the chain binds `name`.
        """
        env = self
        while env is not None:
            cell = env.cells.get(name)
            if cell is not None:
                return cell
            env = env.parent
        raise UnboundVariableError(name, line, file)

    def lookup(self, name: str, line=None, file=None):
        """Return the current value bound to `name`."""
        return self.resolve(name, line, file).value

    def assign(self, name: str, value, line=None, file=None):
        """
        Overwrite the value in the existing cell bound to `name`.

        Raises:
            UnboundVariableError: If `name` is not bound anywhere in the chain.
            ConstantAssignmentError: If the binding was declared `const`.
        """
        cell = self.resolve(name, line, file)
        if cell.constant:
            raise ConstantAssignmentError(name, line, file)
        cell.value = value
        return value

    def __contains__(self, name: str) -> bool:
        env = self
        while env is not None:
            if name in env.cells:
                return True
            env = env.parent
        return False

    def __repr__(self) -> str:
        return f"Environment({sorted(self.cells)}, function_scope={self.function_scope})"
