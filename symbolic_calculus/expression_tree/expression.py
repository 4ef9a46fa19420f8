import numpy as np
import sympy as sp
from typing import List, Mapping, Optional
from .core.node import Node


class Expression:
  """Expression wrapper with cached canonical rendering"""

  __slots__ = ('root', '_string_cache')

  def __init__(self, root: Node):
    if not isinstance(root, Node):
      raise TypeError("Expression root must be a Node")
    self.root = root
    self._string_cache: Optional[str] = None

  def evaluate(self, bindings: Mapping[str, float]) -> float:
    return self.root.evaluate(bindings)

  def evaluate_array(self, bindings: Mapping[str, object], n_samples: Optional[int] = None) -> np.ndarray:
    return self.root.evaluate_array(bindings, n_samples)

  def differentiate(self, target: str) -> 'Expression':
    from ..differentiation import differentiate
    return Expression(differentiate(self.root, target))

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self.root.to_string()
    return self._string_cache

  def size(self) -> int:
    """Node count"""
    return self.root.size()

  def depth(self) -> int:
    return self.root.depth()

  def variables(self) -> List[str]:
    from .utils.tree_utils import get_variable_names
    return get_variable_names(self.root)

  def to_sympy(self, exact: bool = False) -> sp.Expr:
    return self.root.to_sympy(exact=exact)

  def to_latex(self) -> str:
    from .utils.sympy_utils import latex_representation
    return latex_representation(self.root)

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"Expression({self.root!r})"

  def __hash__(self) -> int:
    return hash(self.root)

  def __eq__(self, other) -> bool:
    if not isinstance(other, Expression):
      return NotImplemented
    return self.root == other.root

  @classmethod
  def from_string(cls, expr_str: str) -> 'Expression':
    from ..parser import parse
    return cls(parse(expr_str))
