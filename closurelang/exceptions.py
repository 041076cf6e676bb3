"""Errors.

Runtime errors raised while evaluating a program, plus the exceptions used
internally to unwind `return` and `break`.


File: exceptions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""


class ClosureLangError(Exception):
    """
    Base class for runtime errors with source location.
    """
    def __init__(self, message, line=None, file=None):
        self.line = line
        self.file = file
        if line is not None:
            message += f" on line {line}"
        if file is not None:
            message += f" in {file}"
        super().__init__(message)


class UnboundVariableError(ClosureLangError):
    """
    Error for names that resolve in no reachable environment.
    """
    def __init__(self, varname, line=None, file=None):
        self.varname = varname
        super().__init__(f"Undefined variable '{varname}'", line, file)


class NotCallableError(ClosureLangError):
    """
    Error for invoking a value that is not a function.
    """
    def __init__(self, description, line=None, file=None):
        self.description = description
        super().__init__(f"{description} is not a function", line, file)


class ConstantAssignmentError(ClosureLangError):
    """
    Error for assigning to a `const` binding.
    """
    def __init__(self, varname, line=None, file=None):
        self.varname = varname
        super().__init__(f"Assignment to constant variable '{varname}'", line, file)


class RedeclarationError(ClosureLangError):
    """
    Error for declaring a block-scoped name twice in one scope.
    """
    def __init__(self, varname, line=None, file=None):
        self.varname = varname
        super().__init__(f"Identifier '{varname}' has already been declared", line, file)


class PropertyAccessError(ClosureLangError):
    """
    Error for reading or writing a property of `undefined` or `null`.
    """
    def __init__(self, prop, target, line=None, file=None):
        self.prop = prop
        super().__init__(f"Cannot access property '{prop}' of {target}", line, file)


class UnknownOperationError(ClosureLangError):
    """
    Error for unknown operations.
    """
    def __init__(self, op, line=None, file=None):
        self.op = op
        super().__init__(f"Unknown operation '{op}'", line, file)


class ReturnControlFlow(Exception):
    """
    Control flow handling for return statements.
    """
    def __init__(self, value):
        self.value = value


class BreakLoop(Exception):
    """
    Control flow handling for break statements.
    """
    pass
