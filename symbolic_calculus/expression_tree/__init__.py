"""Expression Tree Module

Immutable expression nodes, the builders that create them, and the
Expression facade.
"""

from .expression import Expression
from .core.node import (
    Node,
    VariableNode,
    ConstantNode,
    BinaryOpNode,
    UnaryOpNode
)
from .core.operators import (
    NodeType,
    OpType,
    BINARY_OP_MAP,
    UNARY_OP_MAP,
    BINARY_OPERATORS,
    UNARY_FUNCTIONS,
    MAX_SYMPY_DEPTH,
    MAX_PARSE_DEPTH
)
from .builders import NodeBuilder, get_global_builder, reset_global_builder
from .utils import to_sympy, latex_representation, are_equivalent, references_variable

__all__ = [
    "Expression",
    "Node", "VariableNode", "ConstantNode", "BinaryOpNode", "UnaryOpNode",
    "NodeType", "OpType",
    "BINARY_OP_MAP", "UNARY_OP_MAP", "BINARY_OPERATORS", "UNARY_FUNCTIONS",
    "MAX_PARSE_DEPTH", "MAX_SYMPY_DEPTH",
    "NodeBuilder", "get_global_builder", "reset_global_builder",
    "to_sympy", "latex_representation", "are_equivalent", "references_variable"
]
