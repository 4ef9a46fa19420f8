"""Core expression tree components."""

from .node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode
from .operators import (
    NodeType, OpType, BINARY_OP_MAP, UNARY_OP_MAP, BINARY_OPERATORS, UNARY_FUNCTIONS,
    MAX_PARSE_DEPTH, MAX_SYMPY_DEPTH, CONSTANT_DECIMALS, is_identifier,
    evaluate_binary_op, evaluate_unary_op, evaluate_binary_array, evaluate_unary_array
)

__all__ = [
    'Node', 'VariableNode', 'ConstantNode', 'BinaryOpNode', 'UnaryOpNode',
    'NodeType', 'OpType', 'BINARY_OP_MAP', 'UNARY_OP_MAP', 'BINARY_OPERATORS', 'UNARY_FUNCTIONS',
    'MAX_PARSE_DEPTH', 'MAX_SYMPY_DEPTH', 'CONSTANT_DECIMALS', 'is_identifier',
    'evaluate_binary_op', 'evaluate_unary_op', 'evaluate_binary_array', 'evaluate_unary_array'
]
