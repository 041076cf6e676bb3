"""Tests for runtime and syntax errors."""

import pytest

from closurelang import UNDEFINED, JSArray, JSObject, evaluate
from closurelang.exceptions import (
    ClosureLangError,
    ConstantAssignmentError,
    NotCallableError,
    PropertyAccessError,
    RedeclarationError,
    UnboundVariableError,
)


def test_unbound_read_reports_name_line_and_file():
    with pytest.raises(UnboundVariableError) as exc_info:
        evaluate("let a = 1\nconsole.log(b)\n", file="snippet.js")
    err = exc_info.value
    assert err.varname == 'b'
    assert err.line == 2
    assert str(err) == "Undefined variable 'b' on line 2 in snippet.js"


def test_assignment_to_unbound_name_fails():
    with pytest.raises(UnboundVariableError):
        evaluate("missing = 3\n")


def test_calling_a_number_is_not_callable():
    with pytest.raises(NotCallableError) as exc_info:
        evaluate("const n = 5\nn()\n")
    assert str(exc_info.value).startswith("n is not a function")


def test_calling_missing_method_is_not_callable():
    with pytest.raises(NotCallableError):
        evaluate("const o = {}\no.run()\n")


def test_errors_abort_without_partial_result():
    """
    Output produced before the error is not returned.
    """
    with pytest.raises(NotCallableError):
        evaluate("console.log('before')\nconst x = 1\nx()\nconsole.log('after')\n")


def test_const_assignment_fails():
    with pytest.raises(ConstantAssignmentError):
        evaluate("const k = 1\nk = 2\n")
    with pytest.raises(ConstantAssignmentError):
        evaluate("const k = 1\nk++\n")


def test_const_object_contents_are_mutable():
    assert evaluate("const o = {}\no.v = 1\no.v += 1\nconsole.log(o.v)\n") == ['2']


def test_let_redeclaration_fails():
    with pytest.raises(RedeclarationError):
        evaluate("let a = 1\nlet a = 2\n")


def test_property_of_undefined_fails():
    with pytest.raises(PropertyAccessError):
        evaluate("let u\nconsole.log(u.field)\n")


def test_property_write_on_number_fails():
    with pytest.raises(PropertyAccessError):
        evaluate("let n = 1\nn.field = 2\n")


def test_spread_of_non_array_fails():
    with pytest.raises(ClosureLangError):
        evaluate("function f(a) { return a }\nf(...5)\n")


def test_runtime_errors_share_base_class():
    for cls in (
        UnboundVariableError,
        NotCallableError,
        ConstantAssignmentError,
        RedeclarationError,
        PropertyAccessError,
    ):
        assert issubclass(cls, ClosureLangError)


@pytest.mark.parametrize("source", [
    "let = 4\n",
    "const c\n",
    "let a = 1 let b = 2\n",
    "function f( {\n",
    "3 = x\n",
    "console.log(1\n",
])
def test_syntax_errors(source):
    with pytest.raises(SyntaxError):
        evaluate(source)


def test_unexpected_character():
    with pytest.raises(RuntimeError):
        evaluate("let a = 1 # 2\n")


def test_return_outside_function_is_syntax_error():
    with pytest.raises(SyntaxError) as exc_info:
        evaluate("console.log(1)\nreturn 5\n", file="top.js")
    assert "Illegal return statement on line 2 in top.js" in str(exc_info.value)


def test_break_outside_loop_is_syntax_error():
    with pytest.raises(SyntaxError) as exc_info:
        evaluate("break\n")
    assert "Illegal break statement" in str(exc_info.value)


def test_break_cannot_reach_loop_around_call():
    """
    A function body does not see the loops of the code that calls it.
    """
    source = (
        "function f() { break }\n"
        "for (let i = 0; i < 3; i++) { console.log(i); f() }\n"
        "console.log('done')\n"
    )
    with pytest.raises(SyntaxError):
        evaluate(source)
    with pytest.raises(SyntaxError):
        evaluate("while (true) { (function() { break })() }\n")


def test_return_and_break_allowed_in_place():
    source = (
        "function first(xs) {\n"
        "  for (let i = 0; i < xs.length; i++) {\n"
        "    if (xs[i] > 1) return xs[i]\n"
        "  }\n"
        "}\n"
        "let n = 0\n"
        "while (true) { if (n === 2) break; n++ }\n"
        "console.log(first([0, 1, 5, 7]), n)\n"
    )
    assert evaluate(source) == ["5 2"]


@pytest.mark.parametrize("source", [
    "if (true) function g() {}\n",
    "while (false) let x = 1\n",
    "if (true) {} else const c = 1\n",
    "for (;;) function h() {}\n",
])
def test_declaration_as_single_statement_body_is_syntax_error(source):
    with pytest.raises(SyntaxError):
        evaluate(source)


def test_declarations_in_braced_bodies_are_bound():
    source = (
        "if (true) { function g() { return 'g' } console.log(g()) }\n"
        "if (true) var v = 'v'\n"
        "console.log(v)\n"
    )
    assert evaluate(source) == ["g", "v"]


@pytest.mark.parametrize("value", [{}, [1, 2], (1,), object()])
def test_host_values_rejected_as_globals(value):
    with pytest.raises(ClosureLangError) as exc_info:
        evaluate("console.log(typeof ns)\n", globals={'ns': value})
    assert "Global 'ns'" in str(exc_info.value)


def test_program_values_accepted_as_globals():
    trace = evaluate(
        "console.log(typeof o, a.length, n, s, u, z)\n",
        globals={'o': JSObject(), 'a': JSArray([1]), 'n': 2.5, 's': 'x', 'u': UNDEFINED, 'z': None},
    )
    assert trace == ["object 1 2.5 x undefined null"]
