import sympy as sp

from ..core.node import Node


def to_sympy(node: Node, exact: bool = False) -> sp.Expr:
  """Convert a tree to a SymPy expression.

  With exact=True constants become Rationals, which keeps equivalence checks
  free of floating point residue.
  """
  return node.to_sympy(exact=exact)


def latex_representation(node: Node) -> str:
  """Get LaTeX representation of the expression"""
  return sp.latex(node.to_sympy())


def are_equivalent(a: Node, b: Node) -> bool:
  """True when a - b simplifies symbolically to zero"""
  difference = sp.simplify(a.to_sympy(exact=True) - b.to_sympy(exact=True))
  return difference == 0
