"""
Symbolic Differentiation

Structural recursion over an expression tree producing a new tree for the
derivative with respect to one variable. Input trees are never modified;
operand subtrees are shared into the result as-is.

Rules, with f, g the operands and df, dg their derivatives:

    c            -> 0
    v            -> 1 if v is the target else 0
    f + g        -> df + dg
    f - g        -> df - dg
    f * g        -> f*dg + df*g
    f / g        -> (df*g - f*dg) / (g*g)
    f ^ g        -> g * f^(g - 1) * df               g free of the target
    f ^ g        -> f^g * (dg*ln(f) + g*(df/f))      otherwise
    sin(f)       -> cos(f) * df
    cos(f)       -> (0 - sin(f)) * df
    ln(f)        -> df / f
    exp(f)       -> exp(f) * df

A product with a derivative factor that is exactly the constant 1 (the
derivative of the target itself) is replaced by the other factor. No other
simplification is performed.

The traversal is a post-order fold with an explicit stack, so input depth is
bounded only by memory.
"""

from typing import Optional, Sequence

from .errors import InvalidIdentifier
from .expression_tree.builders import NodeBuilder, get_global_builder
from .expression_tree.core.node import Node, ConstantNode, VariableNode, BinaryOpNode, UnaryOpNode
from .expression_tree.core.operators import is_identifier
from .expression_tree.utils.tree_utils import references_variable
from .logging_system import log_debug, log_info


def _is_unit(node: Node) -> bool:
    return isinstance(node, ConstantNode) and node.value == 1.0


class Differentiator:
    """Differentiates expression trees with respect to a single variable"""

    def __init__(self, target: str, builder: Optional[NodeBuilder] = None):
        if not is_identifier(target):
            raise InvalidIdentifier(target)
        self.target = target
        self.builder = builder if builder is not None else get_global_builder()

    def run(self, node: Node) -> Node:
        result = node.fold(self._rule)
        log_info(f"d/d{self.target}: {node.size()} nodes in, {result.size()} nodes out")
        return result

    def _times_derivative(self, factor: Node, derivative: Node) -> Node:
        if _is_unit(derivative):
            return factor
        return self.builder.mul(factor, derivative)

    def _derivative_times(self, derivative: Node, factor: Node) -> Node:
        if _is_unit(derivative):
            return factor
        return self.builder.mul(derivative, factor)

    def _rule(self, node: Node, derivatives: Sequence[Node]) -> Node:
        if isinstance(node, ConstantNode):
            return self.builder.constant(0.0)
        if isinstance(node, VariableNode):
            return self.builder.constant(1.0 if node.name == self.target else 0.0)
        if isinstance(node, BinaryOpNode):
            return self._binary_rule(node, *derivatives)
        if isinstance(node, UnaryOpNode):
            return self._function_rule(node, derivatives[0])
        raise TypeError(f"cannot differentiate {type(node).__name__}")

    def _binary_rule(self, node: BinaryOpNode, df: Node, dg: Node) -> Node:
        b = self.builder
        f, g = node.left, node.right
        op = node.operator

        if op in ('+', '-'):
            log_debug(f"sum rule ({op})")
            return b.binary(op, df, dg)

        if op == '*':
            log_debug("product rule")
            return b.add(self._times_derivative(f, dg), self._derivative_times(df, g))

        if op == '/':
            log_debug("quotient rule")
            numerator = b.sub(self._derivative_times(df, g), self._times_derivative(f, dg))
            return b.div(numerator, b.mul(g, g))

        # op == '^'; dg is unused when the exponent is free of the target
        if not references_variable(g, self.target):
            log_debug("power rule")
            scaled = b.mul(g, b.pow(f, b.sub(g, b.constant(1.0))))
            return self._times_derivative(scaled, df)

        log_debug("generalized power rule")
        log_term = self._derivative_times(dg, b.ln(f))
        ratio_term = b.mul(g, b.div(df, f))
        return b.mul(node, b.add(log_term, ratio_term))

    def _function_rule(self, node: UnaryOpNode, df: Node) -> Node:
        b = self.builder
        f = node.operand
        log_debug(f"chain rule ({node.operator})")

        if node.operator == 'sin':
            return self._times_derivative(b.cos(f), df)
        if node.operator == 'cos':
            return self._times_derivative(b.sub(b.constant(0.0), b.sin(f)), df)
        if node.operator == 'ln':
            return b.div(df, f)
        # exp(f) reappears unchanged in its own derivative
        return self._times_derivative(node, df)


def differentiate(node: Node, target: str) -> Node:
    """Symbolic derivative of node with respect to the variable named target"""
    return Differentiator(target).run(node)
