"""
Error Taxonomy for Symbolic Calculus

Every failure raised by the package derives from CalculusError and, where one
fits, from the matching builtin exception as well, so callers can catch either.
"""

from typing import Any


class CalculusError(Exception):
    """Base class for all symbolic calculus errors"""


class ParseError(CalculusError, ValueError):
    """Malformed expression text"""

    def __init__(self, position: int, reason: str):
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} at position {position}")


class InvalidOperator(CalculusError, ValueError):
    def __init__(self, operator: Any):
        self.operator = operator
        super().__init__(f"invalid binary operator: {operator!r}")


class InvalidFunction(CalculusError, ValueError):
    def __init__(self, function: Any):
        self.function = function
        super().__init__(f"invalid function: {function!r}")


class InvalidIdentifier(CalculusError, ValueError):
    def __init__(self, name: Any):
        self.name = name
        super().__init__(f"invalid identifier: {name!r}")


class InvalidConstant(CalculusError, ValueError):
    """Constants must be finite real numbers"""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"invalid constant: {value!r}")


class UndefinedVariable(CalculusError, LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"undefined variable: {name}")


class DivisionByZero(CalculusError, ZeroDivisionError):
    def __init__(self, message: str = "division by zero"):
        super().__init__(message)


class DomainError(CalculusError, ArithmeticError):
    """Argument outside the real domain of a function"""

    def __init__(self, function: str, value: Any):
        self.function = function
        self.value = value
        super().__init__(f"{function} domain error: argument {value} is not positive")


class RecursionLimitExceeded(CalculusError, RecursionError):
    def __init__(self, limit: int, what: str = "expression"):
        self.limit = limit
        super().__init__(f"{what} nesting exceeds maximum depth of {limit}")
