"""
Tests for console output formatting and the output trace.
"""
from closurelang import evaluate
from closurelang.interpreter import Interpreter

from closurelang.tests.utils import parse_source


def test_console_log_formats_values():
    """
    Values print the way the console shows them.
    """
    source = (
        "console.log(1, 2.5, 'str', true, null, undefined)\n"
        "console.log([1, 'a', [2]], [])\n"
        "console.log({ a: 1, b: 'x' }, {})\n"
        "function named() {}\n"
        "console.log(named, function() {})\n"
        "console.log({ m() { return 1 } })\n"
        "console.log()\n"
    )
    assert evaluate(source) == [
        "1 2.5 str true null undefined",
        "[ 1, 'a', [ 2 ] ] []",
        "{ a: 1, b: 'x' } {}",
        "[Function: named] [Function (anonymous)]",
        "{ m: [Function: m] }",
        "",
    ]


def test_trace_preserves_evaluation_order():
    """
    Arguments are evaluated left to right before the call prints.
    """
    source = (
        "function say(v) { console.log('eval ' + v); return v }\n"
        "console.log(say(1), say(2))\n"
    )
    assert evaluate(source) == ['eval 1', 'eval 2', '1 2']


def test_echo_prints_to_stdout(capsys):
    """
    Test that echo mode also writes each line to stdout.
    """
    trace = evaluate("console.log('hi')\nconsole.log(40 + 2)\n", echo=True)
    captured = capsys.readouterr().out.strip().splitlines()
    assert captured == ['hi', '42']
    assert trace == captured


def test_no_stdout_without_echo(capsys):
    evaluate("console.log('quiet')\n")
    assert capsys.readouterr().out == ''


def test_debug_env_var_dumps_tokens_and_ast(monkeypatch, capsys):
    """
    Test that CLOSURELANG_DEBUG dumps tokens and AST to stderr.
    """
    monkeypatch.setenv('CLOSURELANG_DEBUG', '1')
    evaluate("let a = 1\n")
    err = capsys.readouterr().err
    assert 'Tokens:' in err
    assert 'AST:' in err
    assert "Token(LET, 'let', line=1)" in err


def test_accepts_parsed_program():
    """
    evaluate() takes an already-parsed statement list.
    """
    ast = parse_source("console.log(`${1 + 1} items`)\n")
    assert evaluate(ast) == ['2 items']


def test_interpreter_output_accumulates_across_executes():
    interpreter = Interpreter('<test>')
    interpreter.execute(parse_source("let n = 1\nconsole.log(n)\n"))
    interpreter.execute(parse_source("n++\nconsole.log(n)\n"))
    assert interpreter.output == ['1', '2']


def test_each_evaluate_starts_fresh():
    assert evaluate("var shared = 1\nconsole.log(shared)\n") == ['1']
    assert evaluate("console.log(typeof shared)\n") == ['undefined']
