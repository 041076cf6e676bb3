"""Main parser entry point for closurelang.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process. The actual parsing routines are split across
`closurelang.parser.expressions` and `closurelang.parser.statements`.


File: parser.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from closurelang.lexer import Token

from . import expressions as _expr
from . import statements as _stmt


class Parser:
    """closurelang parser."""

    def __init__(self, tokens: list, token_map_literals: dict[str, str], file: str):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): A list of Token instances ending with EOF.
            token_map_literals (dict): A dict of literals mapped to token types.
            file (str): The name of the program, used in error messages.
        """
        self.tokens = tokens
        self.token_map = token_map_literals
        self.reverse_token_map = {v: k for k, v in self.token_map.items()}
        self.position = 0
        self.curr_token = self.tokens[self.position]
        self.source_file = file
        # Nesting counters that decide where `return` and `break` are legal.
        self.function_depth = 0
        self.loop_depth = 0

    def eat(self, token_type: str) -> Token:
        """
        Consume the current token if it matches the expected type.

        Parameters:
            token_type (str): The expected token type.

        Returns:
            Token: The consumed token.

        Raises:
            SyntaxError: If the token does not match the expected type.
        """
        tok = self.curr_token
        if tok.type == token_type:
            if self.position + 1 < len(self.tokens):
                self.position += 1
            self.curr_token = self.tokens[self.position]
            return tok

        expd_value = self.reverse_token_map.get(token_type, token_type)
        act_value = tok.value
        act_type = tok.type
        mapped_type = self.token_map.get(act_value, None) if isinstance(act_value, str) else None
        mapped_hint = f" (which maps to {mapped_type})" if mapped_type else ""

        raise SyntaxError(
            f"Expected token '{expd_value}' of type {token_type}, "
            f"but got value '{act_value}' of type {act_type}{mapped_hint} "
            f"on line {tok.line} in {self.source_file}"
        )

    def peek(self, offset: int = 1) -> Token:
        """
        Return the token `offset` positions ahead without consuming anything.
        """
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def property_name(self) -> str:
        """
        Consume a property name after `.` or in an object literal.

        Keywords are valid property names, so any identifier-shaped token is
        accepted.
        """
        tok = self.curr_token
        if isinstance(tok.value, str) and tok.value.isidentifier() and tok.type != 'STRING':
            self.eat(tok.type)
            return tok.value
        raise SyntaxError(
            f"Expected property name but got '{tok.value}' "
            f"on line {tok.line} in {self.source_file}"
        )

    def end_statement(self) -> None:
        """
        Consume a statement terminator.

        A semicolon ends a statement. Without one, the statement must be
        followed by a line break, a closing brace, or the end of input.

        Raises:
            SyntaxError: If another token follows on the same line.
        """
        tok = self.curr_token
        if tok.type == 'SEMI':
            self.eat('SEMI')
            return
        if tok.type in ('RBRACE', 'EOF') or tok.newline_before:
            return
        raise SyntaxError(
            f"Unexpected token '{tok.value}' after statement "
            f"on line {tok.line} in {self.source_file}"
        )

    # Expression wrappers
    def primary(self) -> tuple:
        """
        Parse a literal, identifier, function expression or grouped expression.
        """
        return _expr.parse_primary(self)

    def call_member(self) -> tuple:
        """
        Parse calls, `new`, and member or index access chains.
        """
        return _expr.parse_call_member(self)

    def postfix(self) -> tuple:
        """
        Parse postfix increment and decrement.
        """
        return _expr.parse_postfix(self)

    def unary(self) -> tuple:
        """
        Parse prefix operators such as `!`, `-`, `typeof` and `++`.
        """
        return _expr.parse_unary(self)

    def term(self) -> tuple:
        """
        Parse multiplication, division and modulus.
        """
        return _expr.parse_term(self)

    def add_sub(self) -> tuple:
        """
        Parse addition and subtraction.
        """
        return _expr.parse_add_sub(self)

    def comparison(self) -> tuple:
        """
        Parse relational comparisons.
        """
        return _expr.parse_comparison(self)

    def equality(self) -> tuple:
        """
        Parse equality comparisons.
        """
        return _expr.parse_equality(self)

    def logical_and(self) -> tuple:
        """
        Parse a logical AND expression.
        """
        return _expr.parse_logical_and(self)

    def logical_or(self) -> tuple:
        """
        Parse a logical OR expression.
        """
        return _expr.parse_logical_or(self)

    def expr(self) -> tuple:
        """
        Parse a full expression, including assignment.
        """
        return _expr.parse_expr(self)

    def arguments(self) -> list:
        """
        Parse a parenthesised argument list.
        """
        return _expr.parse_arguments(self)

    def params(self) -> list:
        """
        Parse a parenthesised parameter list.
        """
        return _expr.parse_params(self)

    # Statement wrappers
    def block(self) -> tuple:
        """
        Parse a block of statements enclosed in braces.
        """
        return _stmt.parse_block(self)

    def statement(self) -> tuple:
        """
        Parse a single statement.
        """
        return _stmt.parse_statement(self)

    def substatement(self) -> tuple:
        """
        Parse the single-statement body of an `if`, `else` or loop.
        """
        return _stmt.parse_substatement(self)

    def function_body(self) -> tuple:
        """
        Parse a function body block.

        `return` is legal inside it, and loops enclosing the function are
        out of reach of its `break` statements.
        """
        saved_loop_depth = self.loop_depth
        self.function_depth += 1
        self.loop_depth = 0
        try:
            return self.block()
        finally:
            self.function_depth -= 1
            self.loop_depth = saved_loop_depth

    def loop_body(self) -> tuple:
        """
        Parse the body of a `for` or `while` loop.
        """
        self.loop_depth += 1
        try:
            return self.substatement()
        finally:
            self.loop_depth -= 1

    def parse_declaration(self, terminate: bool = True) -> tuple:
        """
        Parse a `let`, `const` or `var` declaration.
        """
        return _stmt.parse_declaration(self, terminate)

    def parse_func_decl(self) -> tuple:
        """
        Parse a function declaration statement.
        """
        return _stmt.parse_func_decl(self)

    def parse_return(self) -> tuple:
        """
        Parse a 'return' statement from within a function.
        """
        return _stmt.parse_return(self)

    def parse_if(self) -> tuple:
        """
        Parse an 'if' conditional statement.
        """
        return _stmt.parse_if(self)

    def parse_for(self) -> tuple:
        """
        Parse a three-clause 'for' loop.
        """
        return _stmt.parse_for(self)

    def parse_while(self) -> tuple:
        """
        Parse a 'while' loop.
        """
        return _stmt.parse_while(self)

    def parse_break(self) -> tuple:
        """
        Parse a 'break' statement for loop termination.
        """
        return _stmt.parse_break(self)

    def parse(self):
        """
        Parse the full input into a list of statements.
        """
        statements = []
        while self.curr_token.type != 'EOF':
            statements.append(self.statement())
        return statements
