# SymKernel - Expression Builders
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Factory functions for constructing symbolic expressions.

Every builder accepts plain Python numbers wherever an expression is
expected, so `add(x, 1)` and `x + 1` build the same tree.

Example:
    >>> x = var('x')
    >>> expr = add(mul(x, x), const(1))  # x^2 + 1
"""

from __future__ import annotations
from typing import Optional
import math

from .expr import (
    ExprLike, Constant, Variable, BinaryOp, UnaryOp, FunctionCall,
    Derivative, Integral, Limit, Equation, Sum, Product,
    _to_expr,
)


# Constants and variables

def const(value: float, name: Optional[str] = None) -> Constant:
    """
    Create a numeric constant.

    Args:
        value: The numeric value (must be finite).
        name: Optional display name (e.g. 'pi', 'e').
    """
    return Constant(value, name)


def var(name: str) -> Variable:
    """Create a symbolic variable with the given name."""
    if not isinstance(name, str):
        raise TypeError(f"Variable name must be a string, got {type(name).__name__}")
    if not name:
        raise ValueError("Variable name cannot be empty")
    return Variable(name)


PI = const(math.pi, 'pi')
E = const(math.e, 'e')
PHI = const((1 + math.sqrt(5)) / 2, 'phi')
ZERO = const(0)
ONE = const(1)
NEG_ONE = const(-1)
TWO = const(2)
HALF = const(0.5)


# Arithmetic

def add(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp('+', _to_expr(left), _to_expr(right))


def sub(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp('-', _to_expr(left), _to_expr(right))


def mul(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp('*', _to_expr(left), _to_expr(right))


def div(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp('/', _to_expr(left), _to_expr(right))


def pow(base: ExprLike, exponent: ExprLike) -> BinaryOp:
    """Power: base ^ exponent."""
    return BinaryOp('^', _to_expr(base), _to_expr(exponent))


def neg(arg: ExprLike) -> UnaryOp:
    return UnaryOp('-', _to_expr(arg))


def abs_(arg: ExprLike) -> UnaryOp:
    """Absolute value."""
    return UnaryOp('abs', _to_expr(arg))


def sqrt(arg: ExprLike) -> UnaryOp:
    return UnaryOp('sqrt', _to_expr(arg))


def signum(arg: ExprLike) -> UnaryOp:
    """Sign function: -1, 0 or 1."""
    return UnaryOp('signum', _to_expr(arg))


# Elementary functions

def _fn(name: str, arg: ExprLike) -> FunctionCall:
    return FunctionCall(name, _to_expr(arg))


def sin(arg: ExprLike) -> FunctionCall:
    return _fn('sin', arg)


def cos(arg: ExprLike) -> FunctionCall:
    return _fn('cos', arg)


def tan(arg: ExprLike) -> FunctionCall:
    return _fn('tan', arg)


def asin(arg: ExprLike) -> FunctionCall:
    return _fn('asin', arg)


def acos(arg: ExprLike) -> FunctionCall:
    return _fn('acos', arg)


def atan(arg: ExprLike) -> FunctionCall:
    return _fn('atan', arg)


def sinh(arg: ExprLike) -> FunctionCall:
    return _fn('sinh', arg)


def cosh(arg: ExprLike) -> FunctionCall:
    return _fn('cosh', arg)


def tanh(arg: ExprLike) -> FunctionCall:
    return _fn('tanh', arg)


def exp(arg: ExprLike) -> FunctionCall:
    return _fn('exp', arg)


def ln(arg: ExprLike) -> FunctionCall:
    """Natural logarithm."""
    return _fn('ln', arg)


def log(arg: ExprLike) -> FunctionCall:
    """Natural logarithm (same as ln)."""
    return _fn('log', arg)


def log10(arg: ExprLike) -> FunctionCall:
    return _fn('log10', arg)


def log2(arg: ExprLike) -> FunctionCall:
    return _fn('log2', arg)


def floor(arg: ExprLike) -> FunctionCall:
    return _fn('floor', arg)


def ceil(arg: ExprLike) -> FunctionCall:
    return _fn('ceil', arg)


def round_(arg: ExprLike) -> FunctionCall:
    """Round to the nearest integer, halves upward."""
    return _fn('round', arg)


# Calculus and structural nodes

def derivative(expr: ExprLike, variable: str, order: int = 1) -> Derivative:
    """Create an unevaluated derivative. Use diff() to compute it."""
    if order < 1:
        raise ValueError(f"Derivative order must be positive, got {order}")
    return Derivative(_to_expr(expr), variable, order)


def integral(expr: ExprLike, variable: str) -> Integral:
    """Create an unevaluated integral. Use integrate() to compute it."""
    return Integral(_to_expr(expr), variable)


def limit(
    expr: ExprLike,
    variable: str,
    approaching: float,
    direction: str = 'both',
) -> Limit:
    """Create an unevaluated limit. Use compute_limit() to compute it."""
    return Limit(_to_expr(expr), variable, approaching, direction)


def equation(left: ExprLike, right: ExprLike) -> Equation:
    return Equation(_to_expr(left), _to_expr(right))


eq = equation


def summation(expr: ExprLike, variable: str, start: ExprLike, end: ExprLike) -> Sum:
    """Sum of expr for variable = start .. end (inclusive)."""
    return Sum(_to_expr(expr), variable, _to_expr(start), _to_expr(end))


def product(expr: ExprLike, variable: str, start: ExprLike, end: ExprLike) -> Product:
    """Product of expr for variable = start .. end (inclusive)."""
    return Product(_to_expr(expr), variable, _to_expr(start), _to_expr(end))


# Convenience

def square(arg: ExprLike) -> BinaryOp:
    return pow(arg, TWO)


def cube(arg: ExprLike) -> BinaryOp:
    return pow(arg, const(3))


def recip(arg: ExprLike) -> BinaryOp:
    """Reciprocal: 1 / arg."""
    return div(ONE, arg)
