"""
Utility functions shared across closurelang tests.
"""
from pathlib import Path
import sys

from closurelang.lexer import tokenize
from closurelang.parser import Parser
from closurelang.interpreter import Interpreter

# Ensure the project root is on the Python path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))


def parse_source(source: str):
    """
    Parse source code and return the AST.
    """
    tokens, token_map = tokenize(source)
    parser = Parser(tokens, token_map, "<test>")
    return parser.parse()


def run_source(source: str, **kwargs) -> Interpreter:
    """
    Run source code and return the interpreter instance after execution.
    """
    interpreter = Interpreter("<test>", **kwargs)
    interpreter.execute(parse_source(source))
    return interpreter
