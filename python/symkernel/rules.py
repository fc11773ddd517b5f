# SymKernel - Simplification Rules
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Built-in algebraic rewrite rules.

Each rule inspects a single node and returns the rewritten node, or None
when it does not apply. Rules never recurse; simplify() takes care of
visiting children first. The rules that would be unsound on literal
zeros or infinities (0^0, 0/0, 0 * (c/0)) refuse to fire on them.

Example:
    >>> x = var('x')
    >>> add_zero(x + 0)
    var('x')
    >>> add_zero(x + 1) is None
    True
"""

from __future__ import annotations
import math
from typing import Optional, List

from .expr import (
    Expr, Constant, BinaryOp, UnaryOp,
    is_zero, is_one, is_negative_one, is_integer_constant,
)
from .builders import const, add, mul, pow, neg, ZERO, ONE, TWO
from .config import SimplificationRule


def _binary(expr: Expr, op: str) -> bool:
    return isinstance(expr, BinaryOp) and expr.op == op


def _finite(value: float) -> Optional[Constant]:
    if math.isfinite(value):
        return const(value)
    return None


# Identity rules

def add_zero(expr: Expr) -> Optional[Expr]:
    """x + 0 = x, 0 + x = x"""
    if not _binary(expr, '+'):
        return None
    if is_zero(expr.left):
        return expr.right
    if is_zero(expr.right):
        return expr.left
    return None


def sub_zero(expr: Expr) -> Optional[Expr]:
    """x - 0 = x, 0 - x = -x"""
    if not _binary(expr, '-'):
        return None
    if is_zero(expr.right):
        return expr.left
    if is_zero(expr.left):
        return neg(expr.right)
    return None


def mul_one(expr: Expr) -> Optional[Expr]:
    """x * 1 = x, 1 * x = x"""
    if not _binary(expr, '*'):
        return None
    if is_one(expr.left):
        return expr.right
    if is_one(expr.right):
        return expr.left
    return None


def _is_potential_infinity(expr: Expr) -> bool:
    """A literal c/0 with c != 0."""
    return _binary(expr, '/') and is_zero(expr.right) and not is_zero(expr.left)


def mul_zero(expr: Expr) -> Optional[Expr]:
    """x * 0 = 0, 0 * x = 0, except next to a literal c/0."""
    if not _binary(expr, '*'):
        return None
    if is_zero(expr.left):
        return None if _is_potential_infinity(expr.right) else ZERO
    if is_zero(expr.right):
        return None if _is_potential_infinity(expr.left) else ZERO
    return None


def div_one(expr: Expr) -> Optional[Expr]:
    """x / 1 = x"""
    if _binary(expr, '/') and is_one(expr.right):
        return expr.left
    return None


def pow_one(expr: Expr) -> Optional[Expr]:
    """x^1 = x"""
    if _binary(expr, '^') and is_one(expr.right):
        return expr.left
    return None


def pow_zero(expr: Expr) -> Optional[Expr]:
    """
    x^0 = 1.

    A symbolic base is assumed non-zero; a literal 0^0 is left alone.
    """
    if _binary(expr, '^') and is_zero(expr.right):
        if is_zero(expr.left):
            return None
        return ONE
    return None


# Constant folding

def constant_folding(expr: Expr) -> Optional[Expr]:
    """
    Evaluate an operator applied to two constants.

    Division by zero, 0^0, domain errors and non-finite results are not
    folded.
    """
    if not isinstance(expr, BinaryOp):
        return None
    if not isinstance(expr.left, Constant) or not isinstance(expr.right, Constant):
        return None

    a, b = expr.left.value, expr.right.value
    if math.isnan(a) or math.isnan(b):
        return None

    if expr.op == '+':
        return _finite(a + b)
    if expr.op == '-':
        return _finite(a - b)
    if expr.op == '*':
        return _finite(a * b)
    if expr.op == '/':
        if b == 0:
            return None
        return _finite(a / b)
    if a == 0 and b == 0:
        return None
    try:
        return _finite(math.pow(a, b))
    except (ValueError, OverflowError, ZeroDivisionError):
        # Negative base with fractional exponent, 0 to a negative power, overflow
        return None


# Algebraic identities

def double_negation(expr: Expr) -> Optional[Expr]:
    """--x = x"""
    if isinstance(expr, UnaryOp) and expr.op == '-':
        if isinstance(expr.arg, UnaryOp) and expr.arg.op == '-':
            return expr.arg.arg
    return None


def sub_same(expr: Expr) -> Optional[Expr]:
    """x - x = 0"""
    if _binary(expr, '-') and expr.left == expr.right:
        return ZERO
    return None


def div_same(expr: Expr) -> Optional[Expr]:
    """x / x = 1, assuming x != 0; a literal 0/0 is left alone."""
    if _binary(expr, '/') and expr.left == expr.right:
        if is_zero(expr.left):
            return None
        return ONE
    return None


def mul_neg_one(expr: Expr) -> Optional[Expr]:
    """x * -1 = -x, -1 * x = -x"""
    if not _binary(expr, '*'):
        return None
    if is_negative_one(expr.left):
        return neg(expr.right)
    if is_negative_one(expr.right):
        return neg(expr.left)
    return None


# Combining constants

def combine_constants_add(expr: Expr) -> Optional[Expr]:
    """(a + x) + b = (a+b) + x, a + (b + x) = (a+b) + x"""
    if not _binary(expr, '+'):
        return None

    if (_binary(expr.left, '+') and isinstance(expr.left.left, Constant)
            and isinstance(expr.right, Constant)):
        a, b, rest = expr.left.left, expr.right, expr.left.right
    elif (isinstance(expr.left, Constant) and _binary(expr.right, '+')
            and isinstance(expr.right.left, Constant)):
        a, b, rest = expr.left, expr.right.left, expr.right.right
    else:
        return None

    total = _finite(a.value + b.value)
    if total is None:
        return None
    if is_zero(total):
        return rest
    return add(total, rest)


def combine_constants_mul(expr: Expr) -> Optional[Expr]:
    """(a * x) * b = (a*b) * x, a * (b * x) = (a*b) * x"""
    if not _binary(expr, '*'):
        return None

    if (_binary(expr.left, '*') and isinstance(expr.left.left, Constant)
            and isinstance(expr.right, Constant)):
        a, b, rest = expr.left.left, expr.right, expr.left.right
    elif (isinstance(expr.left, Constant) and _binary(expr.right, '*')
            and isinstance(expr.right.left, Constant)):
        a, b, rest = expr.left, expr.right.left, expr.right.right
    else:
        return None

    product = _finite(a.value * b.value)
    if product is None:
        return None
    if is_one(product):
        return rest
    if is_zero(product):
        return None if _is_potential_infinity(rest) else ZERO
    return mul(product, rest)


# Power rules

def power_of_power(expr: Expr) -> Optional[Expr]:
    """
    (x^a)^b = x^(a*b) for integer constants a and b.

    The identity fails for fractional exponents on negative bases:
    ((-1)^2)^0.5 = 1 but (-1)^1 = -1.
    """
    if not _binary(expr, '^') or not _binary(expr.left, '^'):
        return None
    inner, outer = expr.left.right, expr.right
    if not is_integer_constant(inner) or not is_integer_constant(outer):
        return None
    return pow(expr.left.left, mul(inner, outer))


def product_of_powers(expr: Expr) -> Optional[Expr]:
    """x * x = x^2, x^a * x^b = x^(a+b), x * x^a = x^(a+1), x^a * x = x^(a+1)"""
    if not _binary(expr, '*'):
        return None
    left, right = expr.left, expr.right

    if left == right:
        return pow(left, TWO)

    if _binary(left, '^') and _binary(right, '^') and left.left == right.left:
        return pow(left.left, add(left.right, right.right))

    if _binary(right, '^') and left == right.left:
        return pow(left, add(right.right, ONE))

    if _binary(left, '^') and left.left == right:
        return pow(right, add(left.right, ONE))

    return None


BUILTIN_RULES: List[SimplificationRule] = [
    # Identities
    add_zero,
    sub_zero,
    mul_one,
    mul_zero,
    div_one,
    pow_one,
    pow_zero,

    constant_folding,

    double_negation,
    sub_same,
    div_same,
    mul_neg_one,

    combine_constants_add,
    combine_constants_mul,

    power_of_power,
    product_of_powers,
]
