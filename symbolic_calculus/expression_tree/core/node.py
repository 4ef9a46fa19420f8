import numbers
import numpy as np
import sympy as sp
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple
from .operators import (
  NodeType, BINARY_OP_MAP, UNARY_OP_MAP, MAX_SYMPY_DEPTH, CONSTANT_DECIMALS,
  is_identifier, evaluate_binary_op, evaluate_unary_op,
  evaluate_constant, evaluate_binary_array, evaluate_unary_array,
  check_binary_array, check_unary_array
)
from ...errors import (
  InvalidOperator, InvalidFunction, InvalidIdentifier, InvalidConstant,
  UndefinedVariable, RecursionLimitExceeded
)


def _lift(other):
  """Turn a plain number into a constant node for operator sugar"""
  if isinstance(other, Node):
    return other
  if isinstance(other, numbers.Real) and not isinstance(other, bool):
    from ..builders import get_global_builder
    return get_global_builder().constant(other)
  return NotImplemented


class Node(ABC):
  """Immutable expression tree node with structural hash, size and depth computed at construction"""

  __slots__ = ('_hash', '_size', '_depth')

  def __setattr__(self, name, value):
    raise AttributeError(f"{type(self).__name__} is immutable")

  def __delattr__(self, name):
    raise AttributeError(f"{type(self).__name__} is immutable")

  def _init_fields(self, children: Tuple['Node', ...], label: tuple, **fields):
    for name, value in fields.items():
      object.__setattr__(self, name, value)
    object.__setattr__(self, '_size', 1 + sum(child._size for child in children))
    object.__setattr__(self, '_depth', 1 + max((child._depth for child in children), default=0))
    object.__setattr__(self, '_hash', hash(label + tuple(child._hash for child in children)))

  def fold(self, visit: Callable[['Node', Sequence[Any]], Any]) -> Any:
    """
    Post-order fold over the tree without recursion.

    visit(node, child_results) is called once per reference to a node, left
    subtree before right, so results for shared subtrees are recomputed.
    """
    results = []
    stack = [(self, False)]
    while stack:
      node, expanded = stack.pop()
      children = node.children()
      if not children:
        results.append(visit(node, ()))
      elif expanded:
        count = len(children)
        child_results = results[-count:]
        del results[-count:]
        results.append(visit(node, child_results))
      else:
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(children))
    return results[0]

  def evaluate(self, bindings: Mapping[str, float]) -> float:
    """Evaluate under a name -> value mapping"""
    return self.fold(lambda node, values: node._evaluate(bindings, values))

  def evaluate_array(self, bindings: Mapping[str, object], n_samples: Optional[int] = None) -> np.ndarray:
    """Evaluate over equally sized 1-D sample arrays, one per variable"""
    arrays: Dict[str, np.ndarray] = {}
    for name, values in bindings.items():
      arr = np.ascontiguousarray(np.atleast_1d(np.asarray(values, dtype=np.float64)))
      if arr.ndim != 1:
        raise ValueError(f"samples for '{name}' must be one-dimensional, got shape {arr.shape}")
      if n_samples is None:
        n_samples = arr.shape[0]
      elif arr.shape[0] != n_samples:
        raise ValueError(f"samples for '{name}' have length {arr.shape[0]}, expected {n_samples}")
      arrays[name] = arr
    if n_samples is None:
      n_samples = 1
    return self.fold(lambda node, values: node._evaluate_array(arrays, n_samples, values))

  def to_string(self) -> str:
    """Canonical, fully parenthesized rendering"""
    return self.fold(lambda node, texts: node._to_string(texts))

  def to_sympy(self, exact: bool = False) -> sp.Expr:
    if self._depth > MAX_SYMPY_DEPTH:
      raise RecursionLimitExceeded(MAX_SYMPY_DEPTH, "sympy export")
    return self.fold(lambda node, exprs: node._to_sympy(exact, exprs))

  def size(self) -> int:
    """Node count"""
    return self._size

  def depth(self) -> int:
    """Longest root-to-leaf path; leaves have depth 1"""
    return self._depth

  def children(self) -> Tuple['Node', ...]:
    return ()

  @abstractmethod
  def _label(self) -> tuple:
    pass

  @abstractmethod
  def _evaluate(self, bindings: Mapping[str, float], values: Sequence[float]) -> float:
    pass

  @abstractmethod
  def _evaluate_array(self, arrays: Dict[str, np.ndarray], n_samples: int,
                      values: Sequence[np.ndarray]) -> np.ndarray:
    pass

  @abstractmethod
  def _to_string(self, texts: Sequence[str]) -> str:
    pass

  @abstractmethod
  def _to_sympy(self, exact: bool, exprs: Sequence[sp.Expr]) -> sp.Expr:
    pass

  def __hash__(self) -> int:
    return self._hash

  def __eq__(self, other) -> bool:
    if not isinstance(other, Node):
      return NotImplemented
    pending = [(self, other)]
    while pending:
      a, b = pending.pop()
      if a is b:
        continue
      if a._hash != b._hash or a._label() != b._label():
        return False
      pending.extend(zip(a.children(), b.children()))
    return True

  def __repr__(self) -> str:
    return f"{type(self).__name__}({self.to_string()!r})"

  def __str__(self) -> str:
    return self.to_string()

  # Arithmetic sugar, all routed through the builders
  def _binary(self, operator: str, left, right):
    left, right = _lift(left), _lift(right)
    if left is NotImplemented or right is NotImplemented:
      return NotImplemented
    from ..builders import get_global_builder
    return get_global_builder().binary(operator, left, right)

  def __add__(self, other):
    return self._binary('+', self, other)

  def __radd__(self, other):
    return self._binary('+', other, self)

  def __sub__(self, other):
    return self._binary('-', self, other)

  def __rsub__(self, other):
    return self._binary('-', other, self)

  def __mul__(self, other):
    return self._binary('*', self, other)

  def __rmul__(self, other):
    return self._binary('*', other, self)

  def __truediv__(self, other):
    return self._binary('/', self, other)

  def __rtruediv__(self, other):
    return self._binary('/', other, self)

  def __pow__(self, other, modulo=None):
    if modulo is not None:
      return NotImplemented
    return self._binary('^', self, other)

  def __rpow__(self, other):
    return self._binary('^', other, self)

  def __neg__(self):
    return self._binary('-', 0.0, self)


class VariableNode(Node):
  __slots__ = ('name',)

  def __init__(self, name: str):
    if not is_identifier(name):
      raise InvalidIdentifier(name)
    self._init_fields((), (NodeType.VARIABLE, name), name=name)

  def _label(self) -> tuple:
    return (NodeType.VARIABLE, self.name)

  def _evaluate(self, bindings, values):
    try:
      return float(bindings[self.name])
    except KeyError:
      raise UndefinedVariable(self.name) from None

  def _evaluate_array(self, arrays, n_samples, values):
    try:
      return arrays[self.name].copy()
    except KeyError:
      raise UndefinedVariable(self.name) from None

  def _to_string(self, texts) -> str:
    return self.name

  def _to_sympy(self, exact, exprs):
    return sp.Symbol(self.name)


class ConstantNode(Node):
  __slots__ = ('value',)

  def __init__(self, value: float):
    try:
      value = float(value)
    except (TypeError, ValueError):
      raise InvalidConstant(value) from None
    if not np.isfinite(value):
      raise InvalidConstant(value)
    # hex() keeps 0.0 and -0.0 apart
    self._init_fields((), (NodeType.CONSTANT, value.hex()), value=value)

  def _label(self) -> tuple:
    return (NodeType.CONSTANT, self.value.hex())

  def _evaluate(self, bindings, values):
    return self.value

  def _evaluate_array(self, arrays, n_samples, values):
    return evaluate_constant(n_samples, self.value)

  def _to_string(self, texts) -> str:
    return f"{self.value:.{CONSTANT_DECIMALS}f}"

  def _to_sympy(self, exact, exprs):
    return sp.Rational(self.value) if exact else sp.Float(self.value)


class BinaryOpNode(Node):
  __slots__ = ('operator', 'op_type', 'left', 'right')

  def __init__(self, operator: str, left: Node, right: Node):
    if not isinstance(operator, str) or operator not in BINARY_OP_MAP:
      raise InvalidOperator(operator)
    if not isinstance(left, Node) or not isinstance(right, Node):
      raise TypeError("binary operands must be expression nodes")
    self._init_fields((left, right), (NodeType.BINARY_OP, operator),
                      operator=operator, op_type=BINARY_OP_MAP[operator], left=left, right=right)

  def children(self):
    return (self.left, self.right)

  def _label(self) -> tuple:
    return (NodeType.BINARY_OP, self.operator)

  def _evaluate(self, bindings, values):
    left_val, right_val = values
    return evaluate_binary_op(left_val, right_val, self.operator)

  def _evaluate_array(self, arrays, n_samples, values):
    left_val, right_val = values
    op_type = int(self.op_type)
    check_binary_array(right_val, op_type)
    return evaluate_binary_array(left_val, right_val, op_type)

  def _to_string(self, texts) -> str:
    left, right = texts
    return f"({left} {self.operator} {right})"

  def _to_sympy(self, exact, exprs):
    left, right = exprs
    if self.operator == '+':
      return sp.Add(left, right)
    elif self.operator == '-':
      return sp.Add(left, sp.Mul(-1, right))
    elif self.operator == '*':
      return sp.Mul(left, right)
    elif self.operator == '/':
      return sp.Mul(left, sp.Pow(right, -1))
    else:
      return sp.Pow(left, right)


class UnaryOpNode(Node):
  __slots__ = ('operator', 'op_type', 'operand')

  def __init__(self, operator: str, operand: Node):
    if not isinstance(operator, str) or operator not in UNARY_OP_MAP:
      raise InvalidFunction(operator)
    if not isinstance(operand, Node):
      raise TypeError("function argument must be an expression node")
    self._init_fields((operand,), (NodeType.UNARY_OP, operator),
                      operator=operator, op_type=UNARY_OP_MAP[operator], operand=operand)

  def children(self):
    return (self.operand,)

  def _label(self) -> tuple:
    return (NodeType.UNARY_OP, self.operator)

  def _evaluate(self, bindings, values):
    return evaluate_unary_op(values[0], self.operator)

  def _evaluate_array(self, arrays, n_samples, values):
    operand_val = values[0]
    op_type = int(self.op_type)
    check_unary_array(operand_val, op_type)
    return evaluate_unary_array(operand_val, op_type)

  def _to_string(self, texts) -> str:
    return f"{self.operator}({texts[0]})"

  def _to_sympy(self, exact, exprs):
    operand_sympy = exprs[0]
    if self.operator == 'sin':
      return sp.sin(operand_sympy)
    elif self.operator == 'cos':
      return sp.cos(operand_sympy)
    elif self.operator == 'exp':
      return sp.exp(operand_sympy)
    else:
      return sp.log(operand_sympy)
