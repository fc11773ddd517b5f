# SymKernel - Symbolic Differentiation
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Symbolic differentiation using the standard rules.

Every combinator passes its result through a small set of local
simplifications (zero/one elimination, finite constant folding, negation
collapsing) so derivative trees stay small. These helpers are deliberately
narrower than simplify() and are always sound.

Example:
    >>> x = var('x')
    >>> diff(x * x, 'x')
    (var('x') + var('x'))
    >>> diff(sin(x), 'x')
    cos(var('x'))
"""

from __future__ import annotations
import math

from .expr import (
    Expr, Constant, Variable, BinaryOp, UnaryOp, FunctionCall,
    Derivative, Integral, Limit, Equation, Sum, Product,
    has_variable, is_zero, is_one,
)
from .builders import const, ZERO, ONE, TWO
from .exceptions import DifferentiationError


def diff(expr: Expr, variable: str) -> Expr:
    """
    Compute the symbolic derivative of an expression.

    Args:
        expr: The expression to differentiate.
        variable: The variable to differentiate with respect to.

    Returns:
        The derivative expression.

    Raises:
        DifferentiationError: If a Sum/Product is differentiated with respect
            to its own index variable, or an unknown function is met.
    """
    if isinstance(expr, Constant):
        return ZERO

    if isinstance(expr, Variable):
        return ONE if expr.name == variable else ZERO

    if isinstance(expr, BinaryOp):
        return _diff_binary(expr, variable)

    if isinstance(expr, UnaryOp):
        return _diff_unary(expr, variable)

    if isinstance(expr, FunctionCall):
        return _diff_function(expr, variable)

    if isinstance(expr, Derivative):
        return Derivative(diff(expr.expr, variable), expr.variable, expr.order)

    if isinstance(expr, Integral):
        return Integral(diff(expr.expr, variable), expr.variable)

    if isinstance(expr, Limit):
        return Limit(diff(expr.expr, variable), expr.variable, expr.approaching, expr.direction)

    if isinstance(expr, Equation):
        return Equation(diff(expr.left, variable), diff(expr.right, variable))

    if isinstance(expr, Sum):
        _check_index(expr, variable, 'sum')
        return Sum(diff(expr.expr, variable), expr.variable, expr.start, expr.end)

    if isinstance(expr, Product):
        _check_index(expr, variable, 'product')
        # d/dx prod f = prod f * sum (f' / f)
        d_body = diff(expr.expr, variable)
        if is_zero(d_body):
            return ZERO
        log_derivative = Sum(_div(d_body, expr.expr), expr.variable, expr.start, expr.end)
        return _mul(expr, log_derivative)

    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def nth_diff(expr: Expr, variable: str, n: int) -> Expr:
    """Compute the nth derivative. For n <= 0 the expression is returned unchanged."""
    result = expr
    for _ in range(n):
        result = diff(result, variable)
    return result


def _check_index(expr, variable: str, kind: str) -> None:
    if expr.variable == variable:
        raise DifferentiationError(
            f"Cannot differentiate {kind} with respect to its index variable '{variable}'",
            variable=variable,
        )


def _diff_binary(expr: BinaryOp, v: str) -> Expr:
    left, right = expr.left, expr.right

    if expr.op == '^':
        return _diff_power(left, right, v)

    d_left = diff(left, v)
    d_right = diff(right, v)

    if expr.op == '+':
        return _add(d_left, d_right)
    if expr.op == '-':
        return _sub(d_left, d_right)
    if expr.op == '*':
        return _add(_mul(d_left, right), _mul(left, d_right))
    if expr.op == '/':
        return _div(
            _sub(_mul(d_left, right), _mul(left, d_right)),
            _mul(right, right),
        )
    raise DifferentiationError(f"Unknown binary operator for differentiation: {expr.op}")


def _diff_power(base: Expr, exponent: Expr, v: str) -> Expr:
    base_has_var = has_variable(base, v)
    exp_has_var = has_variable(exponent, v)

    if not base_has_var and not exp_has_var:
        return ZERO

    if base_has_var and not exp_has_var:
        # Power rule: d/dx[f^n] = n * f^(n-1) * f'
        reduced = _sub(exponent, ONE)
        if is_zero(reduced):
            # f^0 is taken as 1, including at f = 0
            power = ONE
        elif is_one(reduced):
            power = base
        else:
            power = BinaryOp('^', base, reduced)
        return _mul(_mul(exponent, power), diff(base, v))

    if not base_has_var:
        # Exponential rule: d/dx[a^g] = a^g * ln(a) * g'
        return _mul(
            _mul(BinaryOp('^', base, exponent), FunctionCall('ln', base)),
            diff(exponent, v),
        )

    # Generalized rule, from exp(g * ln f): d/dx[f^g] = f^g * (g' * ln(f) + g * f'/f)
    return _mul(
        BinaryOp('^', base, exponent),
        _add(
            _mul(diff(exponent, v), FunctionCall('ln', base)),
            _mul(exponent, _div(diff(base, v), base)),
        ),
    )


def _diff_unary(expr: UnaryOp, v: str) -> Expr:
    arg = expr.arg

    if expr.op == 'signum':
        # Zero almost everywhere; the jump at 0 is ignored
        return ZERO

    d_arg = diff(arg, v)

    if expr.op == '-':
        return _neg(d_arg)
    if expr.op == 'abs':
        return _mul(d_arg, _div(arg, UnaryOp('abs', arg)))
    if expr.op == 'sqrt':
        return _div(d_arg, _mul(TWO, UnaryOp('sqrt', arg)))
    raise DifferentiationError(f"Unknown unary operator for differentiation: {expr.op}")


def _one_minus_square(arg: Expr) -> Expr:
    return _sub(ONE, _mul(arg, arg))


def _diff_function(expr: FunctionCall, v: str) -> Expr:
    fn, arg = expr.fn, expr.arg

    if fn in ('floor', 'ceil', 'round'):
        return ZERO

    if fn == 'sin':
        outer = FunctionCall('cos', arg)
    elif fn == 'cos':
        outer = _neg(FunctionCall('sin', arg))
    elif fn == 'tan':
        cos_arg = FunctionCall('cos', arg)
        outer = _div(ONE, _mul(cos_arg, cos_arg))
    elif fn == 'asin':
        outer = _div(ONE, UnaryOp('sqrt', _one_minus_square(arg)))
    elif fn == 'acos':
        outer = _neg(_div(ONE, UnaryOp('sqrt', _one_minus_square(arg))))
    elif fn == 'atan':
        outer = _div(ONE, _add(ONE, _mul(arg, arg)))
    elif fn == 'sinh':
        outer = FunctionCall('cosh', arg)
    elif fn == 'cosh':
        outer = FunctionCall('sinh', arg)
    elif fn == 'tanh':
        outer = _one_minus_square(FunctionCall('tanh', arg))
    elif fn == 'exp':
        outer = FunctionCall('exp', arg)
    elif fn in ('log', 'ln'):
        outer = _div(ONE, arg)
    elif fn == 'log10':
        outer = _div(ONE, _mul(arg, const(math.log(10))))
    elif fn == 'log2':
        outer = _div(ONE, _mul(arg, const(math.log(2))))
    else:
        raise DifferentiationError(
            f"Unknown function for differentiation: {fn}", variable=v, function=fn
        )

    # Chain rule
    return _mul(outer, diff(arg, v))


# Local simplification helpers

def _fold(value: float):
    """Return a constant for a finite value, or None."""
    if math.isfinite(value):
        return const(value)
    return None


def _add(a: Expr, b: Expr) -> Expr:
    if is_zero(a):
        return b
    if is_zero(b):
        return a
    if isinstance(a, Constant) and isinstance(b, Constant):
        folded = _fold(a.value + b.value)
        if folded is not None:
            return folded
    return BinaryOp('+', a, b)


def _sub(a: Expr, b: Expr) -> Expr:
    if is_zero(b):
        return a
    if is_zero(a):
        return _neg(b)
    if isinstance(a, Constant) and isinstance(b, Constant):
        folded = _fold(a.value - b.value)
        if folded is not None:
            return folded
    return BinaryOp('-', a, b)


def _mul(a: Expr, b: Expr) -> Expr:
    if is_zero(a) or is_zero(b):
        return ZERO
    if is_one(a):
        return b
    if is_one(b):
        return a
    if isinstance(a, Constant) and isinstance(b, Constant):
        folded = _fold(a.value * b.value)
        if folded is not None:
            return folded
    return BinaryOp('*', a, b)


def _div(a: Expr, b: Expr) -> Expr:
    if is_one(b):
        return a
    if is_zero(a) and not is_zero(b):
        return ZERO
    if isinstance(a, Constant) and isinstance(b, Constant) and b.value != 0:
        folded = _fold(a.value / b.value)
        if folded is not None:
            return folded
    return BinaryOp('/', a, b)


def _neg(a: Expr) -> Expr:
    if is_zero(a):
        return ZERO
    if isinstance(a, Constant):
        return const(-a.value)
    if isinstance(a, UnaryOp) and a.op == '-':
        return a.arg
    return UnaryOp('-', a)
