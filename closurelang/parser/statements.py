"""Statement parsing utilities for closurelang.

These functions operate on a `closurelang.parser.parser.Parser` instance and
handle the various statement forms in the language such as blocks,
declarations, conditionals, loops, and function declarations.


File: statements.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from closurelang.environment import DeclKind

if TYPE_CHECKING:
    from closurelang.parser import Parser


def parse_block(parser: 'Parser') -> tuple:
    """
    Parse a block of statements enclosed in braces.

    Syntax:
        { <statement>* }

    Args:
        parser: The parser instance.

    Returns:
        tuple: ('block', list_of_statements, line_number)
    """
    tok = parser.eat('LBRACE')
    statements = []
    while parser.curr_token.type not in ('RBRACE', 'EOF'):
        statements.append(parser.statement())
    parser.eat('RBRACE')
    return ('block', statements, tok.line)


def parse_statement(parser: 'Parser') -> tuple:
    """
    Parse a single statement.

    Args:
        parser: The parser instance.

    Returns:
        tuple: representing the AST node.
    """
    tok = parser.curr_token
    if tok.type == 'LBRACE':
        return parser.block()
    elif tok.type in ('LET', 'CONST', 'VAR'):
        return parser.parse_declaration()
    elif tok.type == 'FUNC' and parser.peek().type == 'ID':
        return parser.parse_func_decl()
    elif tok.type == 'RETURN':
        return parser.parse_return()
    elif tok.type == 'IF':
        return parser.parse_if()
    elif tok.type == 'FOR':
        return parser.parse_for()
    elif tok.type == 'WHILE':
        return parser.parse_while()
    elif tok.type == 'BREAK':
        return parser.parse_break()
    elif tok.type == 'SEMI':
        parser.eat('SEMI')
        return ('empty', tok.line)

    expr_node = parser.expr()
    parser.end_statement()
    return ('expr_stmt', expr_node, tok.line)


def parse_substatement(parser: 'Parser') -> tuple:
    """
    Parse the body of an `if`, `else` or loop that is not wrapped in braces.

    Declarations need a block of their own, so `let`, `const` and function
    declarations are rejected here.

    Args:
        parser: The parser instance.

    Returns:
        tuple: representing the AST node.

    Raises:
        SyntaxError: If the statement is a lexical or function declaration.
    """
    tok = parser.curr_token
    if tok.type in ('LET', 'CONST') or (tok.type == 'FUNC' and parser.peek().type == 'ID'):
        raise SyntaxError(
            f"'{tok.value}' declaration is not allowed as a single-statement body "
            f"on line {tok.line} in {parser.source_file}"
        )
    return parser.statement()


def parse_declaration(parser: 'Parser', terminate: bool = True) -> tuple:
    """
    Parse a variable declaration.

    Syntax:
        let|const|var <identifier> [= <expression>] [, ...]

    Args:
        parser: The parser instance.
        terminate: Consume a statement terminator afterwards. False inside
            a `for (...)` header.

    Returns:
        tuple: ('decl', DeclKind, [(name, expr_or_None), ...], line)
    """
    tok = parser.eat(parser.curr_token.type)
    kind = DeclKind(tok.value)
    declarators = []
    while True:
        id_tok = parser.curr_token
        if id_tok.type != 'ID':
            raise SyntaxError(
                f"Expected identifier after '{tok.value}' "
                f"on line {id_tok.line} "
                f"in {parser.source_file}"
            )
        parser.eat('ID')
        init = None
        if parser.curr_token.type == 'ASSIGN':
            parser.eat('ASSIGN')
            init = parser.expr()
        elif kind is DeclKind.CONST:
            raise SyntaxError(
                f"Missing initializer in const declaration "
                f"on line {id_tok.line} in {parser.source_file}"
            )
        declarators.append((id_tok.value, init))
        if parser.curr_token.type != 'COMMA':
            break
        parser.eat('COMMA')
    if terminate:
        parser.end_statement()
    return ('decl', kind, declarators, tok.line)


def parse_func_decl(parser: 'Parser') -> tuple:
    """
    Parse a function declaration.

    Syntax:
        function <name>(<params>) { <block> }

    Args:
        parser: The parser instance.

    Returns:
        tuple: ('func_decl', name, params, body, line)
    """
    start_tok = parser.eat('FUNC')
    func_name = parser.eat('ID').value
    params = parser.params()
    body = parser.function_body()
    return ('func_decl', func_name, params, body, start_tok.line)


def parse_return(parser: 'Parser') -> tuple:
    """
    Parse a 'return' statement. The value is optional and must start on
    the same line as the keyword.

    Syntax:
        return [<expression>]

    Args:
        parser: The parser instance.

    Returns:
        tuple: ('return', expression_or_None, line)

    Raises:
        SyntaxError: If the statement is not inside a function body.
    """
    tok = parser.curr_token
    if parser.function_depth == 0:
        raise SyntaxError(
            f"Illegal return statement on line {tok.line} in {parser.source_file}"
        )
    parser.eat('RETURN')
    nxt = parser.curr_token
    expr_node = None
    if nxt.type not in ('SEMI', 'RBRACE', 'EOF') and not nxt.newline_before:
        expr_node = parser.expr()
    parser.end_statement()
    return ('return', expr_node, tok.line)


def parse_if(parser: 'Parser') -> tuple:
    """
    Parse a conditional 'if' statement with an optional else branch.

    Syntax:
        if (<condition>) <statement> [else <statement>]

    Args:
        parser: The parser instance.

    Returns:
        tuple: ('if', condition, then_stmt, else_stmt_or_None, line)
    """
    tok = parser.eat('IF')
    parser.eat('LPAREN')
    condition = parser.expr()
    parser.eat('RPAREN')
    then_stmt = parser.substatement()
    else_stmt = None
    if parser.curr_token.type == 'ELSE':
        parser.eat('ELSE')
        else_stmt = parser.substatement()
    return ('if', condition, then_stmt, else_stmt, tok.line)


def parse_for(parser: 'Parser') -> tuple:
    """
    Parse a three-clause 'for' loop. Every clause is optional.

    Syntax:
        for (<init>; <test>; <update>) <statement>

    Args:
        parser: The parser instance.

    Returns:
        tuple: ('for', init_or_None, test_or_None, update_or_None, body, line)
    """
    tok = parser.eat('FOR')
    parser.eat('LPAREN')

    init = None
    if parser.curr_token.type in ('LET', 'CONST', 'VAR'):
        init = parser.parse_declaration(terminate=False)
    elif parser.curr_token.type != 'SEMI':
        init_tok = parser.curr_token
        init = ('expr_stmt', parser.expr(), init_tok.line)
    parser.eat('SEMI')

    test = parser.expr() if parser.curr_token.type != 'SEMI' else None
    parser.eat('SEMI')

    update = parser.expr() if parser.curr_token.type != 'RPAREN' else None
    parser.eat('RPAREN')

    body = parser.loop_body()
    return ('for', init, test, update, body, tok.line)


def parse_while(parser: 'Parser') -> tuple:
    """
    Parse a 'while' loop.

    Syntax:
        while (<condition>) <statement>

    Args:
        parser: The parser instance.

    Returns:
        tuple: ('while', condition, body, line)
    """
    tok = parser.eat('WHILE')
    parser.eat('LPAREN')
    condition = parser.expr()
    parser.eat('RPAREN')
    body = parser.loop_body()
    return ('while', condition, body, tok.line)


def parse_break(parser: 'Parser') -> tuple:
    """
    Parse a 'break' control statement.

    Syntax:
        break

    Args:
        parser: The parser instance.

    Returns:
        tuple: ('break', line)

    Raises:
        SyntaxError: If no loop encloses the statement within the current
            function.
    """
    tok = parser.curr_token
    if parser.loop_depth == 0:
        raise SyntaxError(
            f"Illegal break statement on line {tok.line} in {parser.source_file}"
        )
    parser.eat('BREAK')
    parser.end_statement()
    return ('break', tok.line)
