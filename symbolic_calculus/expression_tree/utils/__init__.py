"""Utilities for expression trees."""

from .sympy_utils import to_sympy, latex_representation, are_equivalent
from .tree_utils import (
    get_all_nodes, calculate_tree_depth, find_nodes_by_type, find_nodes_by_operator,
    references_variable, get_variable_names, get_constants, get_variables,
    get_binary_ops, get_unary_ops
)

__all__ = [
    'to_sympy', 'latex_representation', 'are_equivalent',
    'get_all_nodes', 'calculate_tree_depth', 'find_nodes_by_type', 'find_nodes_by_operator',
    'references_variable', 'get_variable_names', 'get_constants', 'get_variables',
    'get_binary_ops', 'get_unary_ops'
]
