"""Shared definitions for AST operation identifiers.

The parser labels operator nodes with these names and the interpreter
dispatches on them, so both sides stay in step when an operator is added.


File: operations.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from enum import Enum


class Op(str, Enum):
    """
    Enumeration of supported AST operation names.
    """

    # Arithmetic
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"

    # Comparison
    STRICT_EQ = "strict_eq"
    STRICT_NE = "strict_ne"
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    GE = "ge"
    LE = "le"

    # Unary
    NOT = "not"
    NEG = "neg"
    POS = "pos"
    TYPEOF = "typeof"

    # Boolean
    AND = "and"
    OR = "or"

    def __str__(self) -> str:  # pragma: no cover - trivial
        """
        Return the underlying string value for nicer debug output.
        """
        return self.value


# Compound assignment operators mapped to the binary operation they apply.
COMPOUND_ASSIGN_OPS = {
    '+=': Op.ADD,
    '-=': Op.SUB,
    '*=': Op.MUL,
    '/=': Op.DIV,
    '%=': Op.MOD,
}


__all__ = ["Op", "COMPOUND_ASSIGN_OPS"]
