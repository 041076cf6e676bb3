"""Expression parsing utilities for closurelang.

These functions operate on a `closurelang.parser.parser.Parser` instance
and implement the recursive descent logic for expressions, maintaining
operator precedence and associativity. From lowest to highest precedence:

    assignment (right associative)
    ||
    &&
    === !== == !=
    < > <= >=
    + -
    * / %
    prefix ! - + typeof ++ --
    postfix ++ --
    calls, new, member and index access
    literals, identifiers, function expressions, ( ... )


File: expressions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from closurelang.lexer import tokenize
from closurelang.operations import COMPOUND_ASSIGN_OPS, Op

if TYPE_CHECKING:
    from closurelang.parser import Parser


ASSIGNABLE = ('ident', 'member', 'index')


def _check_target(parser: 'Parser', target: tuple, tok) -> None:
    if target[0] not in ASSIGNABLE:
        raise SyntaxError(
            f"Invalid assignment target before '{tok.value}' "
            f"on line {tok.line} in {parser.source_file}"
        )


# ---- Lowest precedence ----

def parse_expr(parser: 'Parser') -> tuple:
    """Parse an expression, including plain and compound assignment."""
    target = parser.logical_or()
    tok = parser.curr_token
    if tok.type == 'ASSIGN':
        _check_target(parser, target, tok)
        parser.eat('ASSIGN')
        return ('assign', target, parser.expr(), tok.line)
    if tok.type == 'COMPOUND':
        _check_target(parser, target, tok)
        parser.eat('COMPOUND')
        op = COMPOUND_ASSIGN_OPS[tok.value]
        return ('compound_assign', op, target, parser.expr(), tok.line)
    return target


def parse_logical_or(parser: 'Parser') -> tuple:
    """Parse `||` chains."""
    result = parser.logical_and()
    while parser.curr_token.type == 'OR':
        tok = parser.eat('OR')
        result = (Op.OR, result, parser.logical_and(), tok.line)
    return result


def parse_logical_and(parser: 'Parser') -> tuple:
    """Parse `&&` chains."""
    result = parser.equality()
    while parser.curr_token.type == 'AND':
        tok = parser.eat('AND')
        result = (Op.AND, result, parser.equality(), tok.line)
    return result


def parse_equality(parser: 'Parser') -> tuple:
    """Parse strict and loose equality."""
    op_map = {
        'STRICT_EQ': Op.STRICT_EQ,
        'STRICT_NE': Op.STRICT_NE,
        'EQ': Op.EQ,
        'NE': Op.NE,
    }
    result = parser.comparison()
    while parser.curr_token.type in op_map:
        tok = parser.eat(parser.curr_token.type)
        result = (op_map[tok.type], result, parser.comparison(), tok.line)
    return result


def parse_comparison(parser: 'Parser') -> tuple:
    """Parse relational operators."""
    op_map = {
        'GT': Op.GT,
        'LT': Op.LT,
        'GE': Op.GE,
        'LE': Op.LE,
    }
    result = parser.add_sub()
    while parser.curr_token.type in op_map:
        tok = parser.eat(parser.curr_token.type)
        result = (op_map[tok.type], result, parser.add_sub(), tok.line)
    return result


def parse_add_sub(parser: 'Parser') -> tuple:
    """Parse addition and subtraction expressions."""
    op_map = {
        'PLUS': Op.ADD,
        'MINUS': Op.SUB,
    }
    result = parser.term()
    while parser.curr_token.type in op_map:
        tok = parser.eat(parser.curr_token.type)
        result = (op_map[tok.type], result, parser.term(), tok.line)
    return result


def parse_term(parser: 'Parser') -> tuple:
    """Parse multiplication, division, and modulus expressions."""
    op_map = {
        'MUL': Op.MUL,
        'DIV': Op.DIV,
        'MOD': Op.MOD,
    }
    result = parser.unary()
    while parser.curr_token.type in op_map:
        tok = parser.eat(parser.curr_token.type)
        result = (op_map[tok.type], result, parser.unary(), tok.line)
    return result


def parse_unary(parser: 'Parser') -> tuple:
    """Parse prefix operators."""
    tok = parser.curr_token
    op_map = {
        'NOT': Op.NOT,
        'MINUS': Op.NEG,
        'PLUS': Op.POS,
        'TYPEOF': Op.TYPEOF,
    }
    if tok.type in op_map:
        parser.eat(tok.type)
        return ('unary', op_map[tok.type], parser.unary(), tok.line)
    if tok.type in ('INCR', 'DECR'):
        parser.eat(tok.type)
        target = parser.unary()
        _check_target(parser, target, tok)
        return ('update', tok.value, True, target, tok.line)
    return parser.postfix()


def parse_postfix(parser: 'Parser') -> tuple:
    """Parse `x++` and `x--`. The operator must be on the operand's line."""
    node = parser.call_member()
    tok = parser.curr_token
    if tok.type in ('INCR', 'DECR') and not tok.newline_before:
        _check_target(parser, node, tok)
        parser.eat(tok.type)
        return ('update', tok.value, False, node, tok.line)
    return node


def parse_call_member(parser: 'Parser') -> tuple:
    """Parse `new`, calls, and `.name` / `[expr]` accessors."""
    tok = parser.curr_token
    if tok.type == 'NEW':
        parser.eat('NEW')
        callee = parser.primary()
        while parser.curr_token.type in ('DOT', 'LBRACKET'):
            callee = _parse_accessor(parser, callee)
        args = parser.arguments() if parser.curr_token.type == 'LPAREN' else []
        node = ('new', callee, args, tok.line)
    else:
        node = parser.primary()

    while True:
        if parser.curr_token.type in ('DOT', 'LBRACKET'):
            node = _parse_accessor(parser, node)
        elif parser.curr_token.type == 'LPAREN':
            line = parser.curr_token.line
            node = ('call', node, parser.arguments(), line)
        else:
            return node


def _parse_accessor(parser: 'Parser', node: tuple) -> tuple:
    tok = parser.curr_token
    if tok.type == 'DOT':
        parser.eat('DOT')
        return ('member', node, parser.property_name(), tok.line)
    parser.eat('LBRACKET')
    key = parser.expr()
    parser.eat('RBRACKET')
    return ('index', node, key, tok.line)


def parse_arguments(parser: 'Parser') -> list:
    """Parse `( arg, ...spread, ... )`."""
    parser.eat('LPAREN')
    args = _parse_elements(parser, 'RPAREN')
    parser.eat('RPAREN')
    return args


def _parse_elements(parser: 'Parser', closing: str) -> list:
    elements = []
    while parser.curr_token.type != closing:
        if parser.curr_token.type == 'ELLIPSIS':
            tok = parser.eat('ELLIPSIS')
            elements.append(('spread', parser.expr(), tok.line))
        else:
            elements.append(parser.expr())
        if parser.curr_token.type != 'COMMA':
            break
        parser.eat('COMMA')
    return elements


def parse_params(parser: 'Parser') -> list:
    """Parse a parameter list of plain identifiers."""
    parser.eat('LPAREN')
    params = []
    while parser.curr_token.type != 'RPAREN':
        params.append(parser.eat('ID').value)
        if parser.curr_token.type != 'COMMA':
            break
        parser.eat('COMMA')
    parser.eat('RPAREN')
    return params


# ---- Highest precedence ----

def parse_primary(parser: 'Parser') -> tuple:
    """Parse a literal, identifier, function expression, or parenthesized expression."""
    tok = parser.curr_token

    if tok.type == 'NUMBER':
        parser.eat('NUMBER')
        return ('number', tok.value, tok.line)

    if tok.type == 'STRING':
        parser.eat('STRING')
        return ('string', tok.value, tok.line)

    if tok.type == 'TEMPLATE':
        parser.eat('TEMPLATE')
        return _parse_template(parser, tok)

    if tok.type in ('TRUE', 'FALSE'):
        parser.eat(tok.type)
        return ('bool', tok.type == 'TRUE', tok.line)

    if tok.type == 'NULL':
        parser.eat('NULL')
        return ('null', tok.line)

    if tok.type == 'UNDEFINED':
        parser.eat('UNDEFINED')
        return ('undefined', tok.line)

    if tok.type == 'ID':
        parser.eat('ID')
        return ('ident', tok.value, tok.line)

    if tok.type == 'LBRACKET':
        parser.eat('LBRACKET')
        elements = _parse_elements(parser, 'RBRACKET')
        parser.eat('RBRACKET')
        return ('array', elements, tok.line)

    if tok.type == 'LBRACE':
        return _parse_object(parser)

    if tok.type == 'FUNC':
        parser.eat('FUNC')
        name = parser.eat('ID').value if parser.curr_token.type == 'ID' else None
        params = parser.params()
        body = parser.function_body()
        return ('func_expr', name, params, body, tok.line)

    if tok.type == 'LPAREN':
        parser.eat('LPAREN')
        node = parser.expr()
        parser.eat('RPAREN')
        return node

    raise SyntaxError(
        f"Unexpected token {tok.value} - ({tok.type}) "
        f"on line {tok.line} "
        f"in {parser.source_file}"
    )


def _parse_object(parser: 'Parser') -> tuple:
    """
    Parse an object literal.

    Members may be `key: value`, shorthand `key` (reads the variable of the
    same name) or methods `key(params) { ... }`.
    """
    start = parser.eat('LBRACE')
    props = []
    while parser.curr_token.type != 'RBRACE':
        key_tok = parser.curr_token
        if key_tok.type == 'STRING':
            parser.eat('STRING')
            key = key_tok.value
        elif key_tok.type == 'NUMBER':
            parser.eat('NUMBER')
            key = str(key_tok.value)
        else:
            key = parser.property_name()

        if parser.curr_token.type == 'LPAREN':
            params = parser.params()
            body = parser.function_body()
            value = ('method', key, params, body, key_tok.line)
        elif parser.curr_token.type == 'COLON':
            parser.eat('COLON')
            value = parser.expr()
        elif key_tok.type == 'ID':
            value = ('ident', key, key_tok.line)
        else:
            raise SyntaxError(
                f"Expected ':' after property '{key}' "
                f"on line {key_tok.line} in {parser.source_file}"
            )
        props.append((key, value))

        if parser.curr_token.type != 'COMMA':
            break
        parser.eat('COMMA')
    parser.eat('RBRACE')
    return ('object', props, start.line)


def _parse_template(parser: 'Parser', tok) -> tuple:
    """Parse each `${...}` substitution of a template literal token."""
    from closurelang.parser.parser import Parser

    parts = []
    for part in tok.value:
        if part[0] == 'text':
            parts.append(part[1])
            continue
        _, source, line = part
        tokens, token_map = tokenize(source)
        for sub_tok in tokens:
            sub_tok.line += line - 1
        sub_parser = Parser(tokens, token_map, parser.source_file)
        node = sub_parser.expr()
        if sub_parser.curr_token.type != 'EOF':
            raise SyntaxError(
                f"Unexpected token {sub_parser.curr_token.value} in template substitution "
                f"on line {line} in {parser.source_file}"
            )
        parts.append(node)
    return ('template', parts, tok.line)
