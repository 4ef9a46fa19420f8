from typing import Dict, Optional, Set
import threading

from .core.node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode
from ..logging_system import log_warning

LEAF_POOL_LIMIT = 500


class NodeBuilder:
  """Factory for expression nodes.

  Leaves are interned: since nodes are immutable, every request for the
  same variable or constant can be served by one shared instance. Interior
  nodes always reference their children as given, never copies.
  """

  def __init__(self, pool_limit: int = LEAF_POOL_LIMIT):
    self.pool_limit = pool_limit
    self.variable_pool: Dict[str, VariableNode] = {}
    self.constant_pool: Dict[str, ConstantNode] = {}
    self._full_pools: Set[str] = set()

  def constant(self, value: float) -> ConstantNode:
    node = ConstantNode(value)
    key = node.value.hex()
    pooled = self.constant_pool.get(key)
    if pooled is not None:
      return pooled
    if len(self.constant_pool) < self.pool_limit:
      return self.constant_pool.setdefault(key, node)
    self._warn_full('constant')
    return node

  def variable(self, name: str) -> VariableNode:
    pooled = self.variable_pool.get(name) if isinstance(name, str) else None
    if pooled is not None:
      return pooled
    node = VariableNode(name)
    if len(self.variable_pool) < self.pool_limit:
      return self.variable_pool.setdefault(name, node)
    self._warn_full('variable')
    return node

  def _warn_full(self, kind: str):
    if kind not in self._full_pools:
      self._full_pools.add(kind)
      log_warning(f"{kind} pool full at {self.pool_limit} entries, further leaves are not interned")

  def binary(self, operator: str, left: Node, right: Node) -> BinaryOpNode:
    return BinaryOpNode(operator, left, right)

  def unary(self, function: str, operand: Node) -> UnaryOpNode:
    return UnaryOpNode(function, operand)

  def add(self, a: Node, b: Node) -> BinaryOpNode:
    return self.binary('+', a, b)

  def sub(self, a: Node, b: Node) -> BinaryOpNode:
    return self.binary('-', a, b)

  def mul(self, a: Node, b: Node) -> BinaryOpNode:
    return self.binary('*', a, b)

  def div(self, a: Node, b: Node) -> BinaryOpNode:
    return self.binary('/', a, b)

  def pow(self, a: Node, b: Node) -> BinaryOpNode:
    return self.binary('^', a, b)

  def sin(self, a: Node) -> UnaryOpNode:
    return self.unary('sin', a)

  def cos(self, a: Node) -> UnaryOpNode:
    return self.unary('cos', a)

  def ln(self, a: Node) -> UnaryOpNode:
    return self.unary('ln', a)

  def exp(self, a: Node) -> UnaryOpNode:
    return self.unary('exp', a)

  def get_stats(self) -> dict:
    """Get pool statistics"""
    return {
      'variable_pool_size': len(self.variable_pool),
      'constant_pool_size': len(self.constant_pool),
    }

  def clear(self):
    """Clear all pools"""
    self.variable_pool.clear()
    self.constant_pool.clear()
    self._full_pools.clear()


# Global instance, created lazily
_GLOBAL_BUILDER: Optional[NodeBuilder] = None
_BUILDER_LOCK = threading.Lock()


def get_global_builder() -> NodeBuilder:
  global _GLOBAL_BUILDER

  # Fast path - no locking needed once initialized
  builder = _GLOBAL_BUILDER
  if builder is not None:
    return builder

  with _BUILDER_LOCK:
    if _GLOBAL_BUILDER is None:
      _GLOBAL_BUILDER = NodeBuilder()
    return _GLOBAL_BUILDER


def reset_global_builder():
  global _GLOBAL_BUILDER
  with _BUILDER_LOCK:
    _GLOBAL_BUILDER = None


def constant(value: float) -> ConstantNode:
  return get_global_builder().constant(value)


def variable(name: str) -> VariableNode:
  return get_global_builder().variable(name)


def binary(operator: str, left: Node, right: Node) -> BinaryOpNode:
  return get_global_builder().binary(operator, left, right)


def unary(function: str, operand: Node) -> UnaryOpNode:
  return get_global_builder().unary(function, operand)


def add(a: Node, b: Node) -> BinaryOpNode:
  return get_global_builder().add(a, b)


def sub(a: Node, b: Node) -> BinaryOpNode:
  return get_global_builder().sub(a, b)


def mul(a: Node, b: Node) -> BinaryOpNode:
  return get_global_builder().mul(a, b)


def div(a: Node, b: Node) -> BinaryOpNode:
  return get_global_builder().div(a, b)


def pow(a: Node, b: Node) -> BinaryOpNode:
  return get_global_builder().pow(a, b)


def sin(a: Node) -> UnaryOpNode:
  return get_global_builder().sin(a)


def cos(a: Node) -> UnaryOpNode:
  return get_global_builder().cos(a)


def ln(a: Node) -> UnaryOpNode:
  return get_global_builder().ln(a)


def exp(a: Node) -> UnaryOpNode:
  return get_global_builder().exp(a)
