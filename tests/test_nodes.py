import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from symbolic_calculus import (
    constant, variable, binary, unary, add, sub, mul, div, pow, sin, cos, ln, exp,
    render, parse, differentiate, NodeBuilder, get_global_builder, reset_global_builder,
    InvalidOperator, InvalidFunction, InvalidIdentifier, InvalidConstant, CalculusError,
    BinaryOpNode, UnaryOpNode, ConstantNode, VariableNode
)


def test_constant_renders_six_decimals():
    assert render(constant(5.8)) == "5.800000"
    assert render(constant(2)) == "2.000000"
    assert render(constant(-0.25)) == "-0.250000"
    assert render(constant(-0.0)) == "-0.000000"
    assert render(constant(1e-9)) == "0.000000"


def test_variable_renders_verbatim():
    assert render(variable("x")) == "x"
    assert render(variable("_rate_2")) == "_rate_2"


def test_binary_and_unary_rendering():
    x, y = variable("x"), variable("y")
    assert render(add(x, y)) == "(x + y)"
    assert render(sub(x, y)) == "(x - y)"
    assert render(mul(x, y)) == "(x * y)"
    assert render(div(x, y)) == "(x / y)"
    assert render(pow(x, y)) == "(x ^ y)"
    assert render(sin(x)) == "sin(x)"
    assert render(cos(x)) == "cos(x)"
    assert render(ln(x)) == "ln(x)"
    assert render(exp(add(x, constant(1)))) == "exp((x + 1.000000))"


def test_operator_sugar_on_parsed_nodes():
    x, y = parse("x"), parse("y")
    assert render(x + y) == "(x + y)"
    assert render(x - y) == "(x - y)"
    assert render(x * y) == "(x * y)"
    assert render(x / y) == "(x / y)"
    assert render(x ** y) == "(x ^ y)"
    assert render(-x) == "(0.000000 - x)"
    assert render(2 * x + 1) == "((2.000000 * x) + 1.000000)"
    assert render(1 / x) == "(1.000000 / x)"
    with pytest.raises(TypeError):
        x + "y"


def test_invalid_construction():
    x = variable("x")
    with pytest.raises(InvalidOperator):
        binary("%", x, x)
    with pytest.raises(InvalidOperator):
        binary("**", x, x)
    with pytest.raises(InvalidFunction):
        unary("tan", x)
    with pytest.raises(InvalidFunction):
        unary("log", x)
    for bad_name in ["", "1x", "a-b", "x y", "sin", None]:
        with pytest.raises(InvalidIdentifier):
            variable(bad_name)
    for bad_value in [float("nan"), float("inf"), "abc"]:
        with pytest.raises(InvalidConstant):
            constant(bad_value)
    with pytest.raises(TypeError):
        binary("+", x, 1.0)


def test_errors_share_base_and_builtin_types():
    with pytest.raises(CalculusError):
        unary("sqrt", variable("x"))
    with pytest.raises(ValueError):
        binary("?", variable("x"), variable("y"))


def test_nodes_are_immutable():
    node = add(variable("x"), variable("y"))
    with pytest.raises(AttributeError):
        node.left = variable("z")
    with pytest.raises(AttributeError):
        node.operator = "-"
    with pytest.raises(AttributeError):
        constant(1.0).value = 2.0
    with pytest.raises(AttributeError):
        del node.right


def test_builders_share_subtrees():
    x = variable("x")
    inner = sin(x)
    node = mul(inner, inner)
    assert node.left is inner
    assert node.right is inner


def test_leaves_are_interned():
    assert variable("x") is variable("x")
    assert constant(1.0) is constant(1.0)
    assert constant(0.0) is not constant(-0.0)
    assert constant(0.0) != constant(-0.0)


def test_pool_limit_bounds_interning():
    builder = NodeBuilder(pool_limit=1)
    a1, a2 = builder.variable("a"), builder.variable("a")
    b1, b2 = builder.variable("b"), builder.variable("b")
    assert a1 is a2
    assert b1 is not b2
    assert b1 == b2
    assert builder.get_stats()['variable_pool_size'] == 1
    builder.clear()
    assert builder.get_stats()['variable_pool_size'] == 0


def test_global_builder_is_reused_until_reset():
    first = get_global_builder()
    assert get_global_builder() is first
    reset_global_builder()
    assert get_global_builder() is not first


def test_structural_equality_and_hash():
    built = add(variable("x"), mul(constant(2), variable("y")))
    parsed = parse("x + 2 * y")
    assert built == parsed
    assert hash(built) == hash(parsed)
    assert parse("x + y") != parse("y + x")
    assert len({built, parsed, parse("y + x")}) == 2


def test_size_and_depth():
    node = parse("x * sin(x)")
    assert node.size() == 4
    assert node.depth() == 3
    assert constant(1).depth() == 1


def test_variant_types():
    node = parse("sin(x) + 2")
    assert isinstance(node, BinaryOpNode)
    assert isinstance(node.left, UnaryOpNode)
    assert isinstance(node.left.operand, VariableNode)
    assert isinstance(node.right, ConstantNode)
    assert node.children() == (node.left, node.right)
    assert node.right.children() == ()


def test_render_is_idempotent_through_parse():
    x, y = variable("x"), variable("y")
    trees = [
        constant(5.8),
        constant(-2.0),
        x,
        add(x, constant(-3.5)),
        sub(x, constant(-2.0)),
        pow(constant(-2.0), x),
        pow(x, pow(y, constant(2))),
        pow(pow(x, y), constant(2)),
        div(div(x, y), sub(x, sub(y, x))),
        exp(sin(cos(ln(mul(x, y))))),
        sin(constant(-1.0)),
        sub(constant(0.0), pow(x, constant(2))),
        differentiate(parse("x ^ x * ln(x) / exp(y)"), "x"),
    ]
    for tree in trees:
        text = render(tree)
        reparsed = parse(text)
        assert render(reparsed) == text
        assert reparsed == tree


def test_render_idempotent_for_inexact_constants():
    tree = mul(constant(1.0 / 3.0), variable("x"))
    once = render(parse(render(tree)))
    assert once == render(tree) == "(0.333333 * x)"


def test_full_pool_warns_once(capsys):
    from symbolic_calculus.logging_system import LogLevel, set_log_level
    set_log_level(LogLevel.MINIMAL)
    try:
        builder = NodeBuilder(pool_limit=0)
        builder.constant(1.0)
        builder.constant(2.0)
    finally:
        set_log_level(LogLevel.SILENT)
    err = capsys.readouterr().err
    assert err.count("constant pool full") == 1


def _deep_mixed_tree(levels):
    x, y = variable("x"), variable("y")
    node = x
    builders = [
        lambda n: add(n, y),
        lambda n: sub(constant(-1.5), n),
        lambda n: mul(n, x),
        lambda n: div(y, n),
        lambda n: pow(n, constant(2)),
        lambda n: sin(n),
        lambda n: exp(n),
        lambda n: pow(constant(-2.0), n),
    ]
    for i in range(levels):
        node = builders[i % len(builders)](node)
    return node


def test_render_is_idempotent_for_deep_builder_trees():
    for levels in [150, 500, 2000]:
        tree = _deep_mixed_tree(levels)
        assert tree.depth() == levels + 1
        text = render(tree)
        reparsed = parse(text)
        assert reparsed == tree
        assert render(reparsed) == text


def test_canonical_text_nests_one_group_per_interior_level():
    from symbolic_calculus.expression_tree import MAX_PARSE_DEPTH
    from symbolic_calculus import Parser, RecursionLimitExceeded
    tree = _deep_mixed_tree(40)
    assert render(Parser(render(tree), max_depth=40).parse()) == render(tree)
    with pytest.raises(RecursionLimitExceeded):
        Parser(render(tree), max_depth=39).parse()
    assert MAX_PARSE_DEPTH >= 2000
