"""Lexer for closurelang.

This lexer performs a single pass over the source code using a combined
regular expression of named groups. Each match yields a :class:`Token`
containing its type, value and source line number.

Tokens cover literals (numbers, quoted strings, template literals),
keywords (``function``, ``let``, ``var`` …), operators and delimiters.
``//`` line comments and ``/* … */`` block comments are skipped during
tokenization so line numbers remain accurate.

Newlines are not emitted as tokens. Instead each token records whether a
line break preceded it (``newline_before``), which is all the parser needs
to terminate statements that omit a semicolon.

Template literals are split here into literal text and ``${…}`` expression
sources; the parser tokenizes and parses each embedded expression.


File: lexer.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import re

from closurelang.values import normalize_number


KEYWORDS = {
    'function': 'FUNC',
    'return': 'RETURN',
    'let': 'LET',
    'const': 'CONST',
    'var': 'VAR',
    'for': 'FOR',
    'while': 'WHILE',
    'if': 'IF',
    'else': 'ELSE',
    'break': 'BREAK',
    'new': 'NEW',
    'typeof': 'TYPEOF',
    'true': 'TRUE',
    'false': 'FALSE',
    'null': 'NULL',
    'undefined': 'UNDEFINED',
}


class Token:
    """
    Represents a lexical token with a type and value.
    """
    def __init__(self, type_, value, line, newline_before=False):
        """
        Initialize a new token.

        Parameters:
            type_ (str): The token type.
            value (Any): The token value.
            line (int): The source line the token starts on.
            newline_before (bool): Whether a line break precedes the token.
        """
        self.type = type_
        self.value = value
        self.line = line
        self.newline_before = newline_before

    def __repr__(self) -> str:
        """
        Return a string representation of the token.
        """
        return f"Token({self.type}, {self.value!r}, line={self.line})"


def _split_template(body: str, line: int) -> list[tuple]:
    """
    Split the inside of a template literal into text and expression parts.

    Parameters:
        body (str): Template text without the surrounding backticks.
        line (int): Line on which the template starts.

    Returns:
        list[tuple]: ('text', str) and ('expr', source, line) parts in order.

    Raises:
        RuntimeError: If a `${` substitution is never closed.
    """
    parts = []
    text = []
    i = 0
    while i < len(body):
        if body.startswith('${', i):
            if text:
                parts.append(('text', _unescape(''.join(text))))
                text = []
            depth = 1
            j = i + 2
            while j < len(body) and depth:
                if body[j] == '{':
                    depth += 1
                elif body[j] == '}':
                    depth -= 1
                j += 1
            if depth:
                raise RuntimeError(f'Unterminated template substitution on line {line}')
            expr_line = line + body.count('\n', 0, i)
            parts.append(('expr', body[i + 2:j - 1], expr_line))
            i = j
            continue
        if body[i] == '\\' and i + 1 < len(body):
            text.append(body[i:i + 2])
            i += 2
            continue
        text.append(body[i])
        i += 1
    if text:
        parts.append(('text', _unescape(''.join(text))))
    return parts


def _unescape(value: str) -> str:
    return value.encode('latin-1', 'backslashreplace').decode('unicode_escape')


def tokenize(code) -> tuple[list[Token], dict[str, str]]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        code (str): The source code to tokenize.

    Returns:
        list[Token]: A list of Token instances, terminated by an EOF token.
        dict[str, str]: A dict mapping operator literals to token types.

    Raises:
        RuntimeError: If an unexpected character is encountered.
    """
    token_specification: list[tuple[str, str]] = [
        # Comments
        ('LINE_COMMENT',  r'//[^\n]*'),
        ('BLOCK_COMMENT', r'/\*(?:.|\n)*?\*/'),

        # Literals
        ('NUMBER',    r'\d+(?:\.\d+)?'),
        ('STRING',    r'"(?:[^"\\\n]|\\.)*"|\'(?:[^\'\\\n]|\\.)*\''),
        ('TEMPLATE',  r'`(?:[^`\\]|\\.)*`'),

        # Identifiers and keywords
        ('ID',        r'[A-Za-z_$][A-Za-z0-9_$]*'),

        # Multi-character operators
        ('ELLIPSIS',  r'\.\.\.'),
        ('STRICT_EQ', r'==='),
        ('STRICT_NE', r'!=='),
        ('EQ',        r'=='),
        ('NE',        r'!='),
        ('GE',        r'>='),
        ('LE',        r'<='),
        ('AND',       r'&&'),
        ('OR',        r'\|\|'),
        ('INCR',      r'\+\+'),
        ('DECR',      r'--'),
        ('COMPOUND',  r'[+\-*/%]='),

        # Assignment
        ('ASSIGN',    r'='),

        # Delimiters
        ('LBRACE',    r'\{'),
        ('RBRACE',    r'\}'),
        ('LPAREN',    r'\('),
        ('RPAREN',    r'\)'),
        ('LBRACKET',  r'\['),
        ('RBRACKET',  r'\]'),
        ('COMMA',     r','),
        ('DOT',       r'\.'),
        ('SEMI',      r';'),
        ('COLON',     r':'),

        # Single-character operators
        ('PLUS',      r'\+'),
        ('MINUS',     r'-'),
        ('MUL',       r'\*'),
        ('DIV',       r'/'),
        ('MOD',       r'%'),
        ('GT',        r'>'),
        ('LT',        r'<'),
        ('NOT',       r'!'),

        # Miscellaneous
        ('NEWLINE',   r'\n'),
        ('SKIP',      r'[ \t\r]+'),
        ('MISMATCH',  r'.'),
    ]

    token_map_literals = {}
    for name, pattern in token_specification:
        if name in ('COMPOUND', 'MISMATCH'):
            continue
        if re.match(r'^(?:\\?[{}()\[\],.;:=<>!+\-*/%&|])+$', pattern):
            token_map_literals[re.sub(r'\\', '', pattern)] = name
    for keyword, name in KEYWORDS.items():
        token_map_literals[keyword] = name

    tok_regex = '|'.join(f'(?P<{name}>{pattern})' for name, pattern in token_specification)

    tokens = []
    line_num = 1
    newline_before = False

    for match_obj in re.finditer(tok_regex, code):
        kind = match_obj.lastgroup
        value = match_obj.group()

        if kind == 'NEWLINE':
            line_num += 1
            newline_before = True
            continue
        if kind == 'SKIP' or kind == 'LINE_COMMENT':
            continue
        if kind == 'BLOCK_COMMENT':
            if '\n' in value:
                line_num += value.count('\n')
                newline_before = True
            continue
        if kind == 'MISMATCH':
            raise RuntimeError(f'Unexpected character {value} on line {line_num}')

        if kind == 'NUMBER':
            number = normalize_number(float(value) if '.' in value else int(value))
            tokens.append(Token('NUMBER', number, line_num, newline_before))
        elif kind == 'STRING':
            tokens.append(Token('STRING', _unescape(value[1:-1]), line_num, newline_before))
        elif kind == 'TEMPLATE':
            parts = _split_template(value[1:-1], line_num)
            tokens.append(Token('TEMPLATE', parts, line_num, newline_before))
            line_num += value.count('\n')
        elif kind == 'ID':
            tokens.append(Token(KEYWORDS.get(value, 'ID'), value, line_num, newline_before))
        else:
            tokens.append(Token(kind, value, line_num, newline_before))
        newline_before = False

    tokens.append(Token('EOF', None, line_num, True))
    return tokens, token_map_literals
