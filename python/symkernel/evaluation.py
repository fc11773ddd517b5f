# SymKernel - Numeric Evaluation
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Numeric evaluation of symbolic expressions.

Arithmetic follows IEEE-754 double semantics: division by zero, logarithms
of non-positive numbers, square roots of negatives and overflow produce
NaN or +/-inf instead of raising. The limit engine relies on seeing those
values, so they are never swallowed here.

Example:
    >>> x = var('x')
    >>> evaluate(x * x + 1, {'x': 3})
    10.0
    >>> evaluate(ln(x), {'x': 0})
    -inf
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from .expr import (
    Expr, Bindings, Constant, Variable, BinaryOp, UnaryOp, FunctionCall,
    Derivative, Integral, Limit, Equation, Sum, Product,
)
from .exceptions import EvaluationError


def _round_half_up(x):
    return np.floor(x + 0.5)


_BINARY = {
    '+': np.add,
    '-': np.subtract,
    '*': np.multiply,
    '/': np.divide,
    '^': np.power,
}

_UNARY = {
    '-': np.negative,
    'abs': np.abs,
    'sqrt': np.sqrt,
    'signum': np.sign,
}

_FUNCTIONS = {
    'sin': np.sin,
    'cos': np.cos,
    'tan': np.tan,
    'asin': np.arcsin,
    'acos': np.arccos,
    'atan': np.arctan,
    'sinh': np.sinh,
    'cosh': np.cosh,
    'tanh': np.tanh,
    'exp': np.exp,
    'log': np.log,
    'ln': np.log,
    'log10': np.log10,
    'log2': np.log2,
    'floor': np.floor,
    'ceil': np.ceil,
    'round': _round_half_up,
}

# Offset and agreement tolerance used when a Limit node is evaluated inline
_LIMIT_EPSILON = 1e-10
_LIMIT_TOLERANCE = _LIMIT_EPSILON * 100


def evaluate(
    expr: Expr,
    bindings: Optional[Bindings] = None,
    *,
    strict: bool = True,
    default_value: float = 0.0,
) -> float:
    """
    Evaluate an expression with the given variable bindings.

    Args:
        expr: The expression to evaluate.
        bindings: Mapping from variable names to values.
        strict: If True (default), an unbound variable raises EvaluationError.
        default_value: Value used for unbound variables when strict is False.

    Returns:
        The numeric result as a float (possibly NaN or +/-inf).

    Raises:
        EvaluationError: If a variable is unbound (in strict mode), a
            Derivative/Integral/Equation node is met, or a Sum/Product has
            non-finite bounds.
    """
    env = {name: np.float64(value) for name, value in (bindings or {}).items()}
    with np.errstate(all='ignore'):
        return float(_eval_node(expr, env, strict, np.float64(default_value)))


def _eval_node(expr: Expr, env: dict, strict: bool, default):
    if isinstance(expr, Constant):
        return np.float64(expr.value)

    if isinstance(expr, Variable):
        if expr.name in env:
            return env[expr.name]
        if strict:
            raise EvaluationError(f"Variable '{expr.name}' is not bound", variable=expr.name)
        return default

    if isinstance(expr, BinaryOp):
        left = _eval_node(expr.left, env, strict, default)
        right = _eval_node(expr.right, env, strict, default)
        return _BINARY[expr.op](left, right)

    if isinstance(expr, UnaryOp):
        return _UNARY[expr.op](_eval_node(expr.arg, env, strict, default))

    if isinstance(expr, FunctionCall):
        fn = _FUNCTIONS.get(expr.fn)
        if fn is None:
            raise EvaluationError(f"Unknown function: {expr.fn}")
        return fn(_eval_node(expr.arg, env, strict, default))

    if isinstance(expr, Derivative):
        raise EvaluationError(
            "Cannot evaluate unevaluated derivative. "
            "Use diff() to compute the derivative first."
        )

    if isinstance(expr, Integral):
        raise EvaluationError(
            "Cannot evaluate unevaluated integral. "
            "Use integrate() to compute the integral first."
        )

    if isinstance(expr, Equation):
        raise EvaluationError("Cannot evaluate an equation to a number.")

    if isinstance(expr, Limit):
        return _eval_limit(expr, env, strict, default)

    if isinstance(expr, (Sum, Product)):
        return _eval_range(expr, env, strict, default)

    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def _eval_limit(expr: Limit, env: dict, strict: bool, default):
    v = expr.variable
    a = np.float64(expr.approaching)

    direct = _eval_node(expr.expr, {**env, v: a}, strict, default)
    if np.isfinite(direct):
        return direct

    left = _eval_node(expr.expr, {**env, v: a - _LIMIT_EPSILON}, strict, default)
    right = _eval_node(expr.expr, {**env, v: a + _LIMIT_EPSILON}, strict, default)

    if expr.direction == 'left':
        return left
    if expr.direction == 'right':
        return right
    if abs(left - right) < _LIMIT_TOLERANCE:
        return (left + right) / 2
    raise EvaluationError(
        f"Limit does not exist: left limit ({float(left)}) != right limit ({float(right)})"
    )


def _eval_range(expr, env: dict, strict: bool, default):
    kind = 'Sum' if isinstance(expr, Sum) else 'Product'

    # Bounds are evaluated in the enclosing scope
    start = _eval_node(expr.start, env, strict, default)
    end = _eval_node(expr.end, env, strict, default)
    if not (np.isfinite(start) and np.isfinite(end)):
        raise EvaluationError(f"{kind} bounds must be finite integers")

    total = np.float64(0.0) if isinstance(expr, Sum) else np.float64(1.0)
    for i in range(int(_round_half_up(start)), int(_round_half_up(end)) + 1):
        value = _eval_node(expr.expr, {**env, expr.variable: np.float64(i)}, strict, default)
        if isinstance(expr, Sum):
            total = total + value
        else:
            total = total * value
    return total


def partial_evaluate(expr: Expr, bindings: Bindings) -> Expr:
    """
    Substitute bound variables and fold constant subtrees.

    Only finite folded values are turned into constants; a subtree whose
    value would be NaN or infinite is kept symbolic. Variables captured by
    a binder (or named by a Derivative/Integral) are left alone inside it.
    """
    with np.errstate(all='ignore'):
        return _partial(expr, dict(bindings))


def _finite_constant(value) -> Optional[Constant]:
    if np.isfinite(value):
        return Constant(float(value))
    return None


def _without(bindings: dict, name: str) -> dict:
    if name not in bindings:
        return bindings
    return {k: v for k, v in bindings.items() if k != name}


def _partial(expr: Expr, bindings: dict) -> Expr:
    if isinstance(expr, Constant):
        return expr

    if isinstance(expr, Variable):
        if expr.name in bindings:
            folded = _finite_constant(np.float64(bindings[expr.name]))
            if folded is not None:
                return folded
        return expr

    if isinstance(expr, BinaryOp):
        left = _partial(expr.left, bindings)
        right = _partial(expr.right, bindings)
        if isinstance(left, Constant) and isinstance(right, Constant):
            folded = _finite_constant(
                _BINARY[expr.op](np.float64(left.value), np.float64(right.value))
            )
            if folded is not None:
                return folded
        return BinaryOp(expr.op, left, right)

    if isinstance(expr, UnaryOp):
        arg = _partial(expr.arg, bindings)
        if isinstance(arg, Constant):
            folded = _finite_constant(_UNARY[expr.op](np.float64(arg.value)))
            if folded is not None:
                return folded
        return UnaryOp(expr.op, arg)

    if isinstance(expr, FunctionCall):
        arg = _partial(expr.arg, bindings)
        fn = _FUNCTIONS.get(expr.fn)
        if fn is not None and isinstance(arg, Constant):
            folded = _finite_constant(fn(np.float64(arg.value)))
            if folded is not None:
                return folded
        return FunctionCall(expr.fn, arg)

    if isinstance(expr, Derivative):
        inner = _partial(expr.expr, _without(bindings, expr.variable))
        return Derivative(inner, expr.variable, expr.order)

    if isinstance(expr, Integral):
        return Integral(_partial(expr.expr, _without(bindings, expr.variable)), expr.variable)

    if isinstance(expr, Limit):
        inner = _partial(expr.expr, _without(bindings, expr.variable))
        return Limit(inner, expr.variable, expr.approaching, expr.direction)

    if isinstance(expr, Equation):
        return Equation(_partial(expr.left, bindings), _partial(expr.right, bindings))

    if isinstance(expr, (Sum, Product)):
        return type(expr)(
            _partial(expr.expr, _without(bindings, expr.variable)),
            expr.variable,
            _partial(expr.start, bindings),
            _partial(expr.end, bindings),
        )

    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def can_evaluate(expr: Expr, bindings: Bindings) -> bool:
    """Check whether evaluate() would find every variable bound and every node reducible."""
    if isinstance(expr, Constant):
        return True
    if isinstance(expr, Variable):
        return expr.name in bindings
    if isinstance(expr, BinaryOp):
        return can_evaluate(expr.left, bindings) and can_evaluate(expr.right, bindings)
    if isinstance(expr, UnaryOp):
        return can_evaluate(expr.arg, bindings)
    if isinstance(expr, FunctionCall):
        return expr.fn in _FUNCTIONS and can_evaluate(expr.arg, bindings)
    if isinstance(expr, (Derivative, Integral, Equation)):
        return False
    if isinstance(expr, Limit):
        return can_evaluate(expr.expr, {**bindings, expr.variable: expr.approaching})
    if isinstance(expr, (Sum, Product)):
        if not can_evaluate(expr.start, bindings) or not can_evaluate(expr.end, bindings):
            return False
        # The body sees the index variable bound
        return can_evaluate(expr.expr, {**bindings, expr.variable: 0.0})
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")
