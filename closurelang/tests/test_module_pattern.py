"""
Tests for the module pattern: an immediately-invoked function attaching
closures to a namespace object.
"""
import itertools

import pytest

from closurelang import JSObject, evaluate
from closurelang.exceptions import UnboundVariableError

from closurelang.tests.utils import run_source


COUNTER_MODULE = (
    "let namespace = {};\n"
    "\n"
    "(function foo(n) {\n"
    "  let numbers = []\n"
    "  function format(n) {\n"
    "    return Math.trunc(n)\n"
    "  }\n"
    "  function tick() {\n"
    "    numbers.push(Math.random() * 100)\n"
    "  }\n"
    "  function toString() {\n"
    "    return numbers.map(format)\n"
    "  }\n"
    "  n.counter = {\n"
    "    tick,\n"
    "    toString\n"
    "  }\n"
    "}(namespace))\n"
)


def _randoms(*values):
    return itertools.cycle(values).__next__


def test_counter_module_ticks():
    """
    The exposed closures mutate and read the same private list.
    """
    source = COUNTER_MODULE + (
        "const counter = namespace.counter\n"
        "counter.tick()\n"
        "counter.tick()\n"
        "console.log(counter.toString())\n"
    )
    assert evaluate(source, random_source=_randoms(0.125, 0.9999)) == ['[ 12, 99 ]']


def test_private_state_is_unreachable():
    """
    The module's private list has no binding outside the module function.
    """
    source = COUNTER_MODULE + "console.log(numbers)\n"
    with pytest.raises(UnboundVariableError):
        evaluate(source)

    source = COUNTER_MODULE + "console.log(namespace.counter.numbers)\n"
    assert evaluate(source) == ['undefined']


def test_externally_owned_namespace():
    """
    The namespace object belongs to the caller and outlives the evaluation.
    """
    namespace = JSObject()
    source = (
        "(function(n) {\n"
        "  let count = 0\n"
        "  n.increment = function() { count++; return count }\n"
        "})(namespace)\n"
        "namespace.increment()\n"
    )
    evaluate(source, globals={'namespace': namespace})
    assert set(namespace) == {'increment'}
    assert namespace['increment'].name is None


def test_namespace_closures_callable_after_module_runs():
    """
    Calling the attached closures later keeps sharing the private cells.
    """
    interpreter = run_source(
        COUNTER_MODULE + "const counter = namespace.counter\n",
        random_source=_randoms(0.5),
    )
    counter = interpreter.globals.lookup('counter')
    interpreter.call_function(counter['tick'], [])
    interpreter.call_function(counter['tick'], [])
    interpreter.call_function(counter['tick'], [])
    assert interpreter.call_function(counter['toString'], []) == [50, 50, 50]

    with pytest.raises(UnboundVariableError):
        interpreter.globals.lookup('numbers')


def test_module_initialises_once():
    """
    The module body runs exactly once; later use only goes through the closures.
    """
    source = (
        "let ns = {}\n"
        "let runs = 0\n"
        ";(function(target) {\n"
        "  runs++\n"
        "  let hidden = 'h'\n"
        "  target.reveal = function() { return hidden }\n"
        "})(ns)\n"
        "ns.reveal(); ns.reveal()\n"
        "console.log(runs, ns.reveal())\n"
    )
    assert evaluate(source) == ['1 h']
