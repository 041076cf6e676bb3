"""
Tests for closure capture semantics.
"""
import pytest

from closurelang import evaluate
from closurelang.exceptions import UnboundVariableError
from closurelang.interpreter import Interpreter

from closurelang.tests.utils import parse_source


def test_closure_reads_live_value():
    """
    A closure observes a mutation made after it was created.
    """
    source = (
        "function foo() {\n"
        "  let x = 42\n"
        "  let inner = function() { console.log(x) }\n"
        "  x = x + 1\n"
        "  return inner\n"
        "}\n"
        "var f = foo()\n"
        "f()\n"
    )
    assert evaluate(source) == ['43']


def test_activations_are_independent():
    """
    Each call of the outer function creates new cells shared only by the
    methods returned from that call.
    """
    source = (
        "function createObject() {\n"
        "  let x = 42;\n"
        "  return {\n"
        "    log() { console.log(x) },\n"
        "    increment() { x++ },\n"
        "    update(value) { x = value }\n"
        "  }\n"
        "}\n"
        "const o = createObject()\n"
        "o.increment()\n"
        "o.log()\n"
        "o.update(5)\n"
        "o.log()\n"
        "const p = createObject()\n"
        "p.log()\n"
        "o.log()\n"
    )
    assert evaluate(source) == ['43', '5', '42', '5']


def test_methods_share_one_activation_in_call_order():
    """
    Invocation order decides what the sibling methods observe.
    """
    source = (
        "function counter() {\n"
        "  let n = 0\n"
        "  return {\n"
        "    read() { return n },\n"
        "    bump() { n += 10; return n }\n"
        "  }\n"
        "}\n"
        "const c = counter()\n"
        "console.log(c.read())\n"
        "console.log(c.bump())\n"
        "console.log(c.read())\n"
        "c.bump()\n"
        "console.log(c.read())\n"
    )
    assert evaluate(source) == ['0', '10', '10', '20']


def test_private_secret_only_reachable_through_closure():
    """
    The captured constant is printed by the closure but is unbound outside.
    """
    source = (
        "function foo() {\n"
        "  const secret = Math.trunc(Math.random()*100)\n"
        "  return function inner() {\n"
        "    console.log(`The secret number is ${secret}.`)\n"
        "  }\n"
        "}\n"
        "const f = foo()\n"
        "f()\n"
    )
    assert evaluate(source, random_source=lambda: 0.4213) == ['The secret number is 42.']

    with pytest.raises(UnboundVariableError) as exc_info:
        evaluate(source + "console.log(secret)\n", random_source=lambda: 0.5)
    assert exc_info.value.varname == 'secret'
    assert exc_info.value.line == 9


def test_private_instance_variables():
    """
    Object methods close over the constructor's parameters.
    """
    source = (
        "function Car(manufacturer, model, year, color) {\n"
        "  return {\n"
        "    toString() {\n"
        "      return `${manufacturer} ${model} (${year}, ${color})`\n"
        "    }\n"
        "  }\n"
        "}\n"
        "const car = new Car('Aston Martin','V8 Vantage','2012','Quantum Silver')\n"
        "console.log(car.toString())\n"
        "console.log(car.manufacturer)\n"
    )
    assert evaluate(source) == [
        'Aston Martin V8 Vantage (2012, Quantum Silver)',
        'undefined',
    ]


def test_nested_closures_resolve_outward():
    """
    Three levels of nesting read and write the outermost cell.
    """
    source = (
        "function outer() {\n"
        "  let total = 1\n"
        "  return function middle(a) {\n"
        "    return function inner(b) {\n"
        "      total = total * a * b\n"
        "      return total\n"
        "    }\n"
        "  }\n"
        "}\n"
        "const m = outer()\n"
        "console.log(m(2)(3))\n"
        "console.log(m(1)(5))\n"
    )
    assert evaluate(source) == ['6', '30']


def test_inner_block_shadows_only_inside_block():
    """
    A block-scoped redeclaration gets its own cell; the outer cell is untouched.
    """
    source = (
        "let x = 1\n"
        "let readers = []\n"
        "{\n"
        "  let x = 2\n"
        "  readers.push(function() { return x })\n"
        "  x = 3\n"
        "}\n"
        "readers.push(function() { return x })\n"
        "console.log(readers[0](), readers[1](), x)\n"
    )
    assert evaluate(source) == ['3 1 1']


def test_named_function_expression_sees_its_own_name():
    """
    The name of a function expression is bound inside it and nowhere else.
    """
    source = (
        "const fact = function f(n) { if (n <= 1) return 1; return n * f(n - 1) }\n"
        "console.log(fact(5))\n"
        "console.log(typeof f)\n"
    )
    assert evaluate(source) == ['120', 'undefined']


def test_closure_keeps_environment_after_outer_returns():
    """
    Environments live as long as a closure references them.
    """
    source = (
        "function make() {\n"
        "  let hits = 0\n"
        "  return function() { hits++; return hits }\n"
        "}\n"
        "let a = make()\n"
        "let b = make()\n"
        "a(); a()\n"
        "console.log(a(), b())\n"
    )
    assert evaluate(source) == ['3 1']


def test_closure_env_shared_by_identity():
    """
    Two closures from one activation hold the very same environment object.
    """
    ast = parse_source(
        "function pair() {\n"
        "  let v = 0\n"
        "  return [function() { return v }, function(n) { v = n }]\n"
        "}\n"
        "const fns = pair()\n"
    )
    interpreter = Interpreter('<test>')
    interpreter.execute(ast)
    getter, setter = interpreter.globals.lookup('fns')
    assert getter.env is setter.env
    interpreter.call_function(setter, [7])
    assert interpreter.call_function(getter, []) == 7
