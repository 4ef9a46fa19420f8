"""Symbolic Calculus Package

Expression trees over constants, variables, + - * / ^ and sin, cos, ln, exp,
with evaluation, symbolic differentiation, canonical rendering and parsing.
"""

from typing import Mapping

from .errors import (
  CalculusError, ParseError, InvalidOperator, InvalidFunction, InvalidIdentifier,
  InvalidConstant, UndefinedVariable, DivisionByZero, DomainError, RecursionLimitExceeded
)
from .expression_tree import (
  Expression, Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode,
  NodeBuilder, get_global_builder, reset_global_builder
)
from .expression_tree.builders import (
  constant, variable, binary, unary, add, sub, mul, div, pow, sin, cos, ln, exp
)
from .differentiation import Differentiator, differentiate
from .parser import Parser, Tokenizer, parse, tokenize
from .logging_system import LogLevel, configure_logging, get_logger


def evaluate(node: Node, bindings: Mapping[str, float]) -> float:
  """Numeric value of node under the given variable bindings"""
  return node.evaluate(bindings)


def render(node: Node) -> str:
  """Canonical, fully parenthesized text for node"""
  return node.to_string()


__version__ = "0.1.0"
__all__ = [
  "CalculusError", "ParseError", "InvalidOperator", "InvalidFunction", "InvalidIdentifier",
  "InvalidConstant", "UndefinedVariable", "DivisionByZero", "DomainError", "RecursionLimitExceeded",
  "Expression", "Node", "VariableNode", "ConstantNode", "BinaryOpNode", "UnaryOpNode",
  "NodeBuilder", "get_global_builder", "reset_global_builder",
  "constant", "variable", "binary", "unary", "add", "sub", "mul", "div", "pow",
  "sin", "cos", "ln", "exp",
  "evaluate", "differentiate", "render", "parse", "tokenize",
  "Differentiator", "Parser", "Tokenizer",
  "LogLevel", "configure_logging", "get_logger"
]
