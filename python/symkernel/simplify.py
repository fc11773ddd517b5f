# SymKernel - Symbolic Simplification
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Rule-based simplification, expansion and term collection.

simplify() rewrites bottom-up: children are simplified before their parent,
then the ordered rule list is run once over the parent. Passes repeat until
the tree stops changing or the iteration cap is hit.

Example:
    >>> x = var('x')
    >>> simplify(x * 1 + 0)
    var('x')
    >>> simplify(const(2) * 3)
    const(6)
    >>> collect_terms(x * 2 + x * 3 + 1, 'x')
    ((const(5) * var('x')) + const(1))
"""

from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional

from .expr import (
    Expr, Constant, Variable, BinaryOp, UnaryOp, FunctionCall,
    Derivative, Integral, Limit, Equation, Sum, Product,
    has_variable, is_zero, is_one, is_negative_one, kind_name,
)
from .builders import const, var, add, mul, div, pow, neg, ZERO, ONE, NEG_ONE
from .config import SimplifyOptions, SimplificationRule
from .exceptions import CollectTermsError
from .rules import BUILTIN_RULES

logger = logging.getLogger(__name__)


def simplify(expr: Expr, options: Optional[SimplifyOptions] = None) -> Expr:
    """
    Simplify an expression by repeatedly applying rewrite rules.

    Args:
        expr: Expression to simplify.
        options: Iteration cap and custom rules (default SimplifyOptions()).

    Returns:
        The simplified expression. If the cap is reached before a fixed
        point, the last pass's result is returned.
    """
    opts = options or SimplifyOptions()
    if opts.custom_only:
        rules = list(opts.custom_rules)
    else:
        rules = BUILTIN_RULES + list(opts.custom_rules)

    current = expr
    for _ in range(opts.max_iterations):
        simplified = _simplify_once(current, rules)
        if simplified == current:
            return current
        current = simplified

    logger.warning(
        "simplify() stopped after %d iterations without reaching a fixed point",
        opts.max_iterations,
    )
    return current


def _simplify_once(expr: Expr, rules: List[SimplificationRule]) -> Expr:
    node = _map_children(expr, lambda child: _simplify_once(child, rules))
    for rule in rules:
        rewritten = rule(node)
        if rewritten is not None:
            node = rewritten
    return node


def _map_children(expr: Expr, fn: Callable[[Expr], Expr]) -> Expr:
    """Rebuild a node with fn applied to each of its child expressions."""
    if isinstance(expr, (Constant, Variable)):
        return expr
    if isinstance(expr, BinaryOp):
        return BinaryOp(expr.op, fn(expr.left), fn(expr.right))
    if isinstance(expr, UnaryOp):
        return UnaryOp(expr.op, fn(expr.arg))
    if isinstance(expr, FunctionCall):
        return FunctionCall(expr.fn, fn(expr.arg))
    if isinstance(expr, Derivative):
        return Derivative(fn(expr.expr), expr.variable, expr.order)
    if isinstance(expr, Integral):
        return Integral(fn(expr.expr), expr.variable)
    if isinstance(expr, Limit):
        return Limit(fn(expr.expr), expr.variable, expr.approaching, expr.direction)
    if isinstance(expr, Equation):
        return Equation(fn(expr.left), fn(expr.right))
    if isinstance(expr, (Sum, Product)):
        return type(expr)(fn(expr.expr), expr.variable, fn(expr.start), fn(expr.end))
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def expand(expr: Expr) -> Expr:
    """
    Distribute multiplication over addition and subtraction.

    Applies a*(b+c) = a*b + a*c and (a+b)*c = a*c + b*c recursively through
    every node kind.
    """
    if isinstance(expr, BinaryOp):
        left = expand(expr.left)
        right = expand(expr.right)
        if expr.op == '*':
            if isinstance(right, BinaryOp) and right.op in ('+', '-'):
                return BinaryOp(
                    right.op,
                    expand(BinaryOp('*', left, right.left)),
                    expand(BinaryOp('*', left, right.right)),
                )
            if isinstance(left, BinaryOp) and left.op in ('+', '-'):
                return BinaryOp(
                    left.op,
                    expand(BinaryOp('*', left.left, right)),
                    expand(BinaryOp('*', left.right, right)),
                )
        return BinaryOp(expr.op, left, right)
    return _map_children(expr, expand)


# Term collection
# A polynomial in one variable maps each power to its (symbolic) coefficient

Polynomial = Dict[float, Expr]


def collect_terms(expr: Expr, variable: str) -> Expr:
    """
    Collect like terms of a polynomial in one variable.

    Subexpressions free of the variable are treated as coefficients, so
    a*x + b*x becomes (a + b)*x. The result lists powers in descending
    order, omitting zero coefficients.

    Raises:
        CollectTermsError: If the expression is not polynomial in the
            variable (division by it, a function of it, a symbolic exponent).
    """
    poly = _to_polynomial(expr, variable)
    return _from_polynomial(poly, variable)


def _negate(c: Expr) -> Expr:
    if isinstance(c, Constant):
        return const(-c.value)
    return mul(NEG_ONE, c)


def _add_poly(p1: Polynomial, p2: Polynomial) -> Polynomial:
    result = dict(p1)
    for p, c in p2.items():
        result[p] = add(result[p], c) if p in result else c
    return result


def _mul_poly(p1: Polynomial, p2: Polynomial) -> Polynomial:
    result: Polynomial = {}
    for e1, c1 in p1.items():
        for e2, c2 in p2.items():
            term = mul(c1, c2)
            p = e1 + e2
            result[p] = add(result[p], term) if p in result else term
    return result


def _to_polynomial(expr: Expr, v: str) -> Polynomial:
    if not has_variable(expr, v):
        return {0.0: expr}

    if isinstance(expr, Variable):
        return {1.0: ONE}

    if isinstance(expr, UnaryOp):
        if expr.op == '-':
            return {p: _negate(c) for p, c in _to_polynomial(expr.arg, v).items()}
        raise CollectTermsError(
            f"unsupported unary '{expr.op}' in polynomial for '{v}'", kind=expr.op
        )

    if isinstance(expr, FunctionCall):
        raise CollectTermsError(
            f"function '{expr.fn}' contains variable '{v}' (not a polynomial)", kind=expr.fn
        )

    if isinstance(expr, BinaryOp):
        return _binary_to_polynomial(expr, v)

    kind = kind_name(expr)
    raise CollectTermsError(f"unsupported expression kind '{kind}'", kind=kind)


def _binary_to_polynomial(expr: BinaryOp, v: str) -> Polynomial:
    if expr.op == '+':
        return _add_poly(_to_polynomial(expr.left, v), _to_polynomial(expr.right, v))

    if expr.op == '-':
        negated = {p: _negate(c) for p, c in _to_polynomial(expr.right, v).items()}
        return _add_poly(_to_polynomial(expr.left, v), negated)

    if expr.op == '*':
        return _mul_poly(_to_polynomial(expr.left, v), _to_polynomial(expr.right, v))

    if expr.op == '/':
        if has_variable(expr.right, v):
            raise CollectTermsError(f"variable '{v}' appears in denominator", kind='/')
        return {p: div(c, expr.right) for p, c in _to_polynomial(expr.left, v).items()}

    # '^'
    base, exponent = expr.left, expr.right
    if isinstance(base, Variable) and base.name == v and isinstance(exponent, Constant):
        return {exponent.value: ONE}
    if isinstance(exponent, Constant) and exponent.value.is_integer() and exponent.value >= 0:
        base_poly = _to_polynomial(base, v)
        result: Polynomial = {0.0: ONE}
        for _ in range(int(exponent.value)):
            result = _mul_poly(result, base_poly)
        return result
    raise CollectTermsError(f"non-polynomial power expression in variable '{v}'", kind='^')


def _from_polynomial(poly: Polynomial, v: str) -> Expr:
    terms = []
    for p in sorted(poly, reverse=True):
        coefficient = simplify(poly[p])
        if is_zero(coefficient):
            continue

        if p == 0:
            terms.append(coefficient)
            continue

        power = var(v) if p == 1 else pow(var(v), const(p))
        if is_one(coefficient):
            terms.append(power)
        elif is_negative_one(coefficient):
            terms.append(neg(power))
        else:
            terms.append(mul(coefficient, power))

    if not terms:
        return ZERO

    result = terms[0]
    for term in terms[1:]:
        result = add(result, term)
    return result
