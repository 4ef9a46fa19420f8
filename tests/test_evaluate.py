import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import math

import numpy as np
import pytest

from symbolic_calculus import (
    parse, evaluate, variable, constant, add, Expression,
    UndefinedVariable, DivisionByZero, DomainError, RecursionLimitExceeded
)
from symbolic_calculus.expression_tree import MAX_SYMPY_DEPTH


def test_evaluate_basic_expression():
    result = evaluate(parse("x * y + x"), {"x": 2.0, "y": 3.0})
    assert abs(result - 8.0) < 1e-6


def test_evaluate_functions():
    assert evaluate(parse("sin(0) + cos(0)"), {}) == pytest.approx(1.0)
    assert evaluate(parse("exp(ln(2))"), {}) == pytest.approx(2.0)
    assert evaluate(parse("2 ^ 10"), {}) == pytest.approx(1024.0)
    assert evaluate(parse("x ^ 0.5"), {"x": 9}) == pytest.approx(3.0)
    assert evaluate(parse("-x ^ 2"), {"x": 3}) == pytest.approx(-9.0)
    assert evaluate(parse("10 - 4 - 3"), {}) == pytest.approx(3.0)
    assert evaluate(parse("2 ^ 3 ^ 2"), {}) == pytest.approx(512.0)


def test_repeated_evaluation_is_independent():
    node = parse("x * x + y")
    assert evaluate(node, {"x": 2, "y": 1}) == pytest.approx(5.0)
    assert evaluate(node, {"x": -3, "y": 0}) == pytest.approx(9.0)
    assert evaluate(node, {"x": 2, "y": 1}) == pytest.approx(5.0)


def test_division_by_zero():
    with pytest.raises(DivisionByZero):
        evaluate(parse("1 / 0"), {})
    with pytest.raises(DivisionByZero):
        evaluate(parse("x / (y - y)"), {"x": 1.0, "y": 2.0})
    with pytest.raises(ZeroDivisionError):
        evaluate(parse("1 / -0"), {})


def test_ln_domain():
    with pytest.raises(DomainError):
        evaluate(parse("ln(0)"), {})
    with pytest.raises(DomainError):
        evaluate(parse("ln(-1)"), {})
    with pytest.raises(DomainError):
        evaluate(parse("ln(x - 2)"), {"x": 1.5})
    assert evaluate(parse("ln(1)"), {}) == 0.0


def test_undefined_variable():
    with pytest.raises(UndefinedVariable) as excinfo:
        evaluate(parse("x"), {})
    assert excinfo.value.name == "x"
    with pytest.raises(LookupError):
        evaluate(parse("x + y"), {"x": 1.0})


def test_power_follows_floating_point():
    assert math.isnan(evaluate(parse("-8 ^ (1 / 3)"), {}))
    assert evaluate(parse("0 ^ -1"), {}) == math.inf
    assert evaluate(parse("exp(1000)"), {}) == math.inf
    assert evaluate(parse("x ^ 2"), {"x": -3.0}) == pytest.approx(9.0)


def test_expression_facade():
    expression = Expression.from_string("x * y + x")
    assert expression.evaluate({"x": 2, "y": 3}) == pytest.approx(8.0)
    assert expression.to_string() == "((x * y) + x)"
    assert expression.variables() == ["x", "y"]
    assert expression.size() == 5
    assert expression.depth() == 3
    assert expression == Expression(parse("(x * y) + x"))
    assert str(expression) == "((x * y) + x)"


def test_deep_trees_evaluate_and_render():
    x = variable("x")
    node = x
    for _ in range(4999):
        node = add(node, x)
    assert node.depth() == 5000
    assert evaluate(node, {"x": 1.0}) == pytest.approx(5000.0)
    np.testing.assert_allclose(node.evaluate_array({"x": [1.0, 2.0]}), [5000.0, 10000.0])
    text = node.to_string()
    assert text.startswith("(" * 4999 + "x + x)")
    assert repr(node).startswith("BinaryOpNode('((")


def test_deep_tree_errors_keep_their_type():
    node = parse("ln(x)")
    for _ in range(3000):
        node = add(constant(1.0), node)
    with pytest.raises(DomainError):
        evaluate(node, {"x": -1.0})
    with pytest.raises(UndefinedVariable):
        evaluate(node, {})


def test_sympy_export_is_depth_limited():
    x = variable("x")
    node = x
    for _ in range(MAX_SYMPY_DEPTH):
        node = add(node, x)
    with pytest.raises(RecursionLimitExceeded):
        node.to_sympy()
    assert evaluate(node, {"x": 2.0}) == pytest.approx(2.0 * (MAX_SYMPY_DEPTH + 1))


def test_long_sum_parses_and_evaluates():
    node = parse(" + ".join(["x"] * 1000))
    assert node.depth() == 1000
    assert evaluate(node, {"x": 1.0}) == pytest.approx(1000.0)


def test_evaluate_array_matches_scalar():
    node = parse("sin(x) * exp(y) / (1 + x ^ 2) - ln(y)")
    xs = np.linspace(-2.0, 2.0, 9)
    ys = np.linspace(0.5, 3.0, 9)
    result = node.evaluate_array({"x": xs, "y": ys})
    expected = [evaluate(node, {"x": a, "y": b}) for a, b in zip(xs, ys)]
    np.testing.assert_allclose(result, expected, rtol=1e-12)


def test_evaluate_array_basic():
    node = parse("x * y + x")
    result = node.evaluate_array({"x": [1, 2, 3], "y": [4, 5, 6]})
    np.testing.assert_allclose(result, [5.0, 12.0, 21.0])


def test_evaluate_array_constants_and_sizes():
    np.testing.assert_allclose(parse("3").evaluate_array({}), [3.0])
    np.testing.assert_allclose(parse("2 * 3").evaluate_array({}, n_samples=4), [6.0] * 4)
    with pytest.raises(ValueError):
        parse("x + y").evaluate_array({"x": [1, 2], "y": [1, 2, 3]})
    with pytest.raises(ValueError):
        parse("x").evaluate_array({"x": [[1, 2], [3, 4]]})


def test_evaluate_array_does_not_alias_input():
    xs = np.array([1.0, 2.0])
    result = parse("x").evaluate_array({"x": xs})
    result[0] = 100.0
    assert xs[0] == 1.0


def test_evaluate_array_errors():
    with pytest.raises(DivisionByZero):
        parse("1 / x").evaluate_array({"x": [1.0, 0.0, 2.0]})
    with pytest.raises(DomainError) as excinfo:
        parse("ln(x)").evaluate_array({"x": [1.0, 2.0, -4.0]})
    assert excinfo.value.value == -4.0
    with pytest.raises(UndefinedVariable):
        parse("x + z").evaluate_array({"x": [1.0]})


def test_evaluate_array_power_nan():
    result = parse("x ^ 0.5").evaluate_array({"x": [4.0, -4.0]})
    assert result[0] == pytest.approx(2.0)
    assert np.isnan(result[1])


def test_constant_expression_value():
    assert evaluate(constant(3.25), {}) == 3.25
