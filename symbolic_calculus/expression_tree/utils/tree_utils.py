"""
Tree Utility Functions

Traversal and inspection helpers for expression trees. Everything here is
iterative, so arbitrarily deep trees are safe to inspect.
"""

from collections import deque
from typing import List, TypeVar, cast

from ..core.node import Node, BinaryOpNode, UnaryOpNode, ConstantNode, VariableNode

T = TypeVar('T', bound=Node)


def get_all_nodes(node: Node, traversal_order: str = 'breadth_first') -> List[Node]:
    """
    Get all nodes in the tree using specified traversal order.

    A subtree shared by several parents is listed once per reference.

    Args:
        node: Root node of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first' (pre-order)

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Node) -> List[Node]:
    nodes_to_visit = deque([node])
    all_nodes = []

    while nodes_to_visit:
        current_node = nodes_to_visit.popleft()
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.children())

    return all_nodes


def _depth_first_traversal(node: Node) -> List[Node]:
    stack = [node]
    all_nodes = []

    while stack:
        current_node = stack.pop()
        all_nodes.append(current_node)
        # reversed so the left child is visited first
        stack.extend(reversed(current_node.children()))

    return all_nodes


def calculate_tree_depth(node: Node) -> int:
    """Maximum depth of the tree (leaf nodes have depth 1)"""
    return node.depth()


def find_nodes_by_type(node: Node, node_type: type) -> List[Node]:
    """Find all nodes of a specific type, in depth-first order."""
    return [n for n in _depth_first_traversal(node) if isinstance(n, node_type)]


def find_nodes_by_operator(node: Node, operator: str) -> List[Node]:
    """Find all operator or function nodes carrying the given symbol."""
    return [n for n in _depth_first_traversal(node)
            if isinstance(n, (BinaryOpNode, UnaryOpNode)) and n.operator == operator]


def references_variable(node: Node, name: str) -> bool:
    """
    Structural scan for a Variable(name) leaf.

    No constant folding is attempted: ``x - x`` still references ``x``.
    """
    seen = set()
    stack = [node]
    while stack:
        current_node = stack.pop()
        if id(current_node) in seen:
            continue
        seen.add(id(current_node))
        if isinstance(current_node, VariableNode):
            if current_node.name == name:
                return True
        else:
            stack.extend(current_node.children())
    return False


def get_variable_names(node: Node) -> List[str]:
    """Sorted, de-duplicated names of the free variables in the tree."""
    return sorted({v.name for v in get_variables(node)})


# Convenience functions for common operations
def get_constants(node: Node) -> List[ConstantNode]:
    """Get all constant nodes in the tree."""
    return cast(List[ConstantNode], find_nodes_by_type(node, ConstantNode))


def get_variables(node: Node) -> List[VariableNode]:
    """Get all variable nodes in the tree."""
    return cast(List[VariableNode], find_nodes_by_type(node, VariableNode))


def get_binary_ops(node: Node) -> List[BinaryOpNode]:
    """Get all binary operation nodes in the tree."""
    return cast(List[BinaryOpNode], find_nodes_by_type(node, BinaryOpNode))


def get_unary_ops(node: Node) -> List[UnaryOpNode]:
    """Get all function application nodes in the tree."""
    return cast(List[UnaryOpNode], find_nodes_by_type(node, UnaryOpNode))
