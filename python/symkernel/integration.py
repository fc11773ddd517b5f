# SymKernel - Symbolic Integration
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Heuristic symbolic integration.

The integrator recognizes a fixed catalogue of patterns: linearity,
constant factors, powers of the variable, exponentials, a handful of
elementary functions with linear arguments and 1/(x + c). Anything else is
reported as an explicit failure with a reason; an antiderivative is never
guessed.

Example:
    >>> x = var('x')
    >>> integrate(x ** 2, 'x')
    ((var('x') ^ const(3)) / const(3))
    >>> try_integrate(x * sin(x), 'x').success
    False
"""

from __future__ import annotations
import logging
import math
from typing import Optional

from .expr import (
    Expr, Bindings, Constant, Variable, BinaryOp, UnaryOp, FunctionCall,
    has_variable, kind_name,
)
from .builders import const, var, add, sub, mul, div, neg, ln, sin, cos, exp, sinh, cosh
from .builders import pow as power
from .evaluation import evaluate
from .exceptions import IntegrationError
from .result import IntegrationResult

logger = logging.getLogger(__name__)


def try_integrate(expr: Expr, variable: str) -> IntegrationResult:
    """
    Attempt to compute the indefinite integral of an expression.

    Never raises for an unsupported pattern; the failure reason is carried
    by the returned IntegrationResult.
    """
    try:
        return IntegrationResult.ok(_integrate(expr, variable))
    except IntegrationError as e:
        logger.debug("Integration of %s in '%s' failed: %s", expr, variable, e.reason)
        return IntegrationResult.failure(e.reason)


def integrate(expr: Expr, variable: str) -> Expr:
    """
    Compute the indefinite integral of an expression.

    Raises:
        IntegrationError: If no rule in the catalogue applies.
    """
    return try_integrate(expr, variable).unwrap()


def definite_integral(
    expr: Expr,
    variable: str,
    lower: float,
    upper: float,
    bindings: Optional[Bindings] = None,
) -> float:
    """
    Compute a definite integral as F(upper) - F(lower).

    Args:
        expr: The integrand.
        variable: The integration variable.
        lower: Lower bound.
        upper: Upper bound.
        bindings: Values for any other free variables of the integrand.

    Raises:
        IntegrationError: If no antiderivative is found.
        EvaluationError: If the antiderivative has unbound variables.
    """
    antiderivative = integrate(expr, variable)
    env = dict(bindings or {})
    upper_value = evaluate(antiderivative, {**env, variable: upper})
    lower_value = evaluate(antiderivative, {**env, variable: lower})
    return upper_value - lower_value


def _fail(reason: str):
    raise IntegrationError(reason)


def _is_var(expr: Expr, v: str) -> bool:
    return isinstance(expr, Variable) and expr.name == v


def _is_e(expr: Expr) -> bool:
    return isinstance(expr, Constant) and abs(expr.value - math.e) < 1e-10


def _linear_coefficient(expr: Expr, v: str) -> Optional[Constant]:
    """Return k when expr is k*v or v*k for a literal non-zero constant k."""
    if not isinstance(expr, BinaryOp) or expr.op != '*':
        return None
    if isinstance(expr.left, Constant) and _is_var(expr.right, v):
        k = expr.left
    elif isinstance(expr.right, Constant) and _is_var(expr.left, v):
        k = expr.right
    else:
        return None
    if k.value == 0:
        return None
    return k


def _integrate(expr: Expr, v: str) -> Expr:
    if not has_variable(expr, v):
        return mul(expr, var(v))

    if isinstance(expr, Variable):
        return div(power(var(v), const(2)), const(2))

    if isinstance(expr, BinaryOp):
        return _integrate_binary(expr, v)

    if isinstance(expr, UnaryOp):
        return _integrate_unary(expr, v)

    if isinstance(expr, FunctionCall):
        return _integrate_function(expr, v)

    # Derivative, Integral, Limit, Equation, Sum, Product
    _fail(f"Cannot integrate expression of kind '{kind_name(expr)}'")


def _integrate_binary(expr: BinaryOp, v: str) -> Expr:
    if expr.op == '+':
        return add(_integrate(expr.left, v), _integrate(expr.right, v))
    if expr.op == '-':
        return sub(_integrate(expr.left, v), _integrate(expr.right, v))
    if expr.op == '*':
        return _integrate_product(expr.left, expr.right, v)
    if expr.op == '/':
        return _integrate_division(expr.left, expr.right, v)
    return _integrate_power(expr.left, expr.right, v)


def _integrate_product(left: Expr, right: Expr, v: str) -> Expr:
    if not has_variable(left, v):
        return mul(left, _integrate(right, v))
    if not has_variable(right, v):
        return mul(right, _integrate(left, v))
    _fail(
        "Integration by parts not implemented. "
        "Cannot integrate product of expressions both containing the variable."
    )


def _is_linear_denominator(expr: Expr, v: str) -> bool:
    """v, v + c or c + v with c free of v."""
    if _is_var(expr, v):
        return True
    if isinstance(expr, BinaryOp) and expr.op == '+':
        if _is_var(expr.left, v) and not has_variable(expr.right, v):
            return True
        if _is_var(expr.right, v) and not has_variable(expr.left, v):
            return True
    return False


def _integrate_division(numerator: Expr, denominator: Expr, v: str) -> Expr:
    if not has_variable(denominator, v):
        return div(_integrate(numerator, v), denominator)

    if not has_variable(numerator, v) and _is_linear_denominator(denominator, v):
        return mul(numerator, ln(denominator))

    _fail("Cannot integrate this division. Partial fractions or substitution may be required.")


def _integrate_power(base: Expr, exponent: Expr, v: str) -> Expr:
    base_has_var = has_variable(base, v)
    exp_has_var = has_variable(exponent, v)

    if not base_has_var and not exp_has_var:
        return mul(power(base, exponent), var(v))

    if _is_var(base, v) and not exp_has_var:
        if not isinstance(exponent, Constant):
            _fail(
                f"Cannot integrate {v}^n for symbolic exponent {exponent}. "
                "The exponent must be a numeric constant."
            )
        if exponent.value == -1:
            return ln(var(v))
        raised = exponent.value + 1
        return div(power(var(v), const(raised)), const(raised))

    if _is_e(base) and _is_var(exponent, v):
        return power(base, exponent)

    if not base_has_var and _is_var(exponent, v):
        if isinstance(base, Constant) and (base.value <= 0 or base.value == 1):
            _fail(f"Cannot integrate {base.value}^{v}: the base must be positive and not 1.")
        return div(power(base, exponent), ln(base))

    if _is_e(base):
        k = _linear_coefficient(exponent, v)
        if k is not None:
            return div(power(base, exponent), k)

    _fail("Cannot integrate this power expression. Substitution may be required.")


def _integrate_unary(expr: UnaryOp, v: str) -> Expr:
    if expr.op == '-':
        return neg(_integrate(expr.arg, v))
    _fail(f"Cannot directly integrate {expr.op}(). Substitution may be required.")


_BASIC_INTEGRALS = {
    'sin': lambda u: neg(cos(u)),
    'cos': sin,
    'tan': lambda u: neg(ln(cos(u))),
    'exp': exp,
    'sinh': cosh,
    'cosh': sinh,
}


def _integrate_basic_function(fn: str, arg: Expr) -> Expr:
    rule = _BASIC_INTEGRALS.get(fn)
    if rule is None:
        _fail(f"No known integral for {fn}()")
    return rule(arg)


def _integrate_function(expr: FunctionCall, v: str) -> Expr:
    arg = expr.arg

    if _is_var(arg, v):
        return _integrate_basic_function(expr.fn, arg)

    k = _linear_coefficient(arg, v)
    if k is not None:
        return div(_integrate_basic_function(expr.fn, arg), k)

    _fail(f"Cannot integrate {expr.fn}() with complex argument. Substitution required.")
