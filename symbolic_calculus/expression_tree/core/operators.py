import re
import numpy as np
import numba
from enum import IntEnum

from ...errors import DivisionByZero, DomainError

# Open groups and prefix minus signs the parser accepts at once. Canonical
# text of a tree nests depth - 1 groups.
MAX_PARSE_DEPTH = 10000
# SymPy's printers and simplifier recurse several frames per level
MAX_SYMPY_DEPTH = 100

CONSTANT_DECIMALS = 6

IDENTIFIER_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*\Z')

class NodeType(IntEnum):
  VARIABLE = 0
  CONSTANT = 1
  BINARY_OP = 2
  UNARY_OP = 3

class OpType(IntEnum):
  # Binary ops
  ADD = 0
  SUB = 1
  MUL = 2
  DIV = 3
  POW = 4
  # Unary ops
  SIN = 5
  COS = 6
  EXP = 7
  LN = 8

# Mapping dictionaries
BINARY_OP_MAP = {'+': OpType.ADD, '-': OpType.SUB, '*': OpType.MUL, '/': OpType.DIV, '^': OpType.POW}
UNARY_OP_MAP = {'sin': OpType.SIN, 'cos': OpType.COS, 'exp': OpType.EXP, 'ln': OpType.LN}

BINARY_OPERATORS = frozenset(BINARY_OP_MAP)
UNARY_FUNCTIONS = frozenset(UNARY_OP_MAP)

# Plain ints so numba freezes them as compile-time constants
_ADD = int(OpType.ADD)
_SUB = int(OpType.SUB)
_MUL = int(OpType.MUL)
_DIV = int(OpType.DIV)
_POW = int(OpType.POW)
_SIN = int(OpType.SIN)
_COS = int(OpType.COS)
_EXP = int(OpType.EXP)
_LN = int(OpType.LN)


def is_identifier(name) -> bool:
  """True for names usable as variables: identifier syntax, not a function name"""
  return (isinstance(name, str) and IDENTIFIER_RE.match(name) is not None
          and name not in UNARY_FUNCTIONS)


def evaluate_binary_op(left_val: float, right_val: float, operator: str) -> float:
  if operator == '/' and right_val == 0.0:
    raise DivisionByZero()
  left = np.float64(left_val)
  right = np.float64(right_val)
  with np.errstate(all='ignore'):
    if operator == '+':
      result = left + right
    elif operator == '-':
      result = left - right
    elif operator == '*':
      result = left * right
    elif operator == '/':
      result = left / right
    else:
      # real power: negative base with fractional exponent is nan, not complex
      result = np.power(left, right)
  return float(result)


def evaluate_unary_op(operand_val: float, operator: str) -> float:
  if operator == 'ln' and operand_val <= 0.0:
    raise DomainError('ln', operand_val)
  value = np.float64(operand_val)
  with np.errstate(all='ignore'):
    if operator == 'sin':
      result = np.sin(value)
    elif operator == 'cos':
      result = np.cos(value)
    elif operator == 'exp':
      result = np.exp(value)
    else:
      result = np.log(value)
  return float(result)


def check_binary_array(right_val: np.ndarray, op_type: int):
  if op_type == _DIV and np.any(right_val == 0.0):
    raise DivisionByZero()


def check_unary_array(operand_val: np.ndarray, op_type: int):
  if op_type == _LN:
    bad = operand_val <= 0.0
    if np.any(bad):
      raise DomainError('ln', float(operand_val[np.argmax(bad)]))


@numba.njit(cache=True, inline='always')
def evaluate_constant(n_samples, value):
  return np.full(n_samples, value, dtype=np.float64)

@numba.njit(cache=True)
def evaluate_binary_array(left_val, right_val, op_type):
  if op_type == _ADD:
    return left_val + right_val
  elif op_type == _SUB:
    return left_val - right_val
  elif op_type == _MUL:
    return left_val * right_val
  elif op_type == _DIV:
    return left_val / right_val
  elif op_type == _POW:
    return np.power(left_val, right_val)
  return np.full_like(left_val, np.nan)

@numba.njit(cache=True)
def evaluate_unary_array(operand_val, op_type):
  if op_type == _SIN:
    return np.sin(operand_val)
  elif op_type == _COS:
    return np.cos(operand_val)
  elif op_type == _EXP:
    return np.exp(operand_val)
  elif op_type == _LN:
    return np.log(operand_val)
  return np.full_like(operand_val, np.nan)
