# SymKernel - Expression Model
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Symbolic expression AST for SymKernel.

Expressions are immutable trees built from eleven node kinds. Every
algorithm in the kernel (evaluation, differentiation, integration, limits,
simplification) walks these trees and returns new ones; nothing is ever
mutated in place.

Variables are free unless captured by a binder. Sum and Product bind their
index variable inside their body only (the bounds live in the enclosing
scope); Limit binds its approached variable inside its body.

Example:
    >>> x = Variable('x')
    >>> expr = x * x + 1
    >>> expr.free_vars()
    frozenset({'x'})
    >>> depth(expr)
    3
"""

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass, field
from typing import Union, Optional, Mapping, FrozenSet, Set
import math


BINARY_OPS = ('+', '-', '*', '/', '^')
UNARY_OPS = ('-', 'abs', 'sqrt', 'signum')
DIRECTIONS = ('left', 'right', 'both')

# Type for variable bindings supplied by callers
Bindings = Mapping[str, float]

# Type alias for things that can be converted to expressions
ExprLike = Union['Expr', int, float]


class Expr(ABC):
    """
    Base class for symbolic expressions.

    Expressions are immutable and can be composed using Python operators.
    Equality is structural and nodes are hashable.
    """

    def free_vars(self) -> FrozenSet[str]:
        """Return the free variable names of this expression."""
        return get_variables(self)

    # Operator overloading for natural math syntax
    def __neg__(self) -> Expr:
        return UnaryOp('-', self)

    def __add__(self, other: ExprLike) -> Expr:
        return BinaryOp('+', self, _to_expr(other))

    def __radd__(self, other: ExprLike) -> Expr:
        return BinaryOp('+', _to_expr(other), self)

    def __sub__(self, other: ExprLike) -> Expr:
        return BinaryOp('-', self, _to_expr(other))

    def __rsub__(self, other: ExprLike) -> Expr:
        return BinaryOp('-', _to_expr(other), self)

    def __mul__(self, other: ExprLike) -> Expr:
        return BinaryOp('*', self, _to_expr(other))

    def __rmul__(self, other: ExprLike) -> Expr:
        return BinaryOp('*', _to_expr(other), self)

    def __truediv__(self, other: ExprLike) -> Expr:
        return BinaryOp('/', self, _to_expr(other))

    def __rtruediv__(self, other: ExprLike) -> Expr:
        return BinaryOp('/', _to_expr(other), self)

    def __pow__(self, other: ExprLike) -> Expr:
        return BinaryOp('^', self, _to_expr(other))

    def __rpow__(self, other: ExprLike) -> Expr:
        return BinaryOp('^', _to_expr(other), self)


def _to_expr(x: ExprLike) -> Expr:
    """Convert a value to an Expr."""
    if isinstance(x, Expr):
        return x
    elif isinstance(x, (int, float)):
        return Constant(x)
    else:
        raise TypeError(f"Cannot convert {type(x).__name__} to Expr")


@dataclass(frozen=True)
class Constant(Expr):
    """A finite numeric constant with an optional display name."""
    value: float
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        value = float(self.value)
        if math.isnan(value):
            raise ValueError("Cannot create a constant from NaN")
        if math.isinf(value):
            raise ValueError(f"Constants must be finite, got {value}")
        # Bypass frozen dataclass __setattr__
        object.__setattr__(self, 'value', value)

    def __repr__(self) -> str:
        if self.name:
            return self.name
        if self.value.is_integer():
            return f"const({int(self.value)})"
        return f"const({self.value})"


@dataclass(frozen=True)
class Variable(Expr):
    """A symbolic variable with a name."""
    name: str

    def __repr__(self) -> str:
        return f"var('{self.name}')"


@dataclass(frozen=True)
class BinaryOp(Expr):
    """Binary operation: left op right, with op one of + - * / ^."""
    op: str
    left: Expr
    right: Expr

    def __post_init__(self):
        if self.op not in BINARY_OPS:
            raise ValueError(f"Unknown binary operator: {self.op!r}")

    def __repr__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True)
class UnaryOp(Expr):
    """Unary operation: negation, abs, sqrt or signum."""
    op: str
    arg: Expr

    def __post_init__(self):
        if self.op not in UNARY_OPS:
            raise ValueError(f"Unknown unary operator: {self.op!r}")

    def __repr__(self) -> str:
        if self.op == '-':
            return f"(-{self.arg})"
        return f"{self.op}({self.arg})"


@dataclass(frozen=True)
class FunctionCall(Expr):
    """
    Application of a named elementary function.

    The name is not validated here; algorithms report unknown names when
    they meet them.
    """
    fn: str
    arg: Expr

    def __repr__(self) -> str:
        return f"{self.fn}({self.arg})"


@dataclass(frozen=True)
class Derivative(Expr):
    """Unevaluated derivative of expr with respect to variable."""
    expr: Expr
    variable: str
    order: int = 1

    def __repr__(self) -> str:
        return f"Derivative({self.expr}, '{self.variable}', {self.order})"


@dataclass(frozen=True)
class Integral(Expr):
    """Unevaluated indefinite integral of expr with respect to variable."""
    expr: Expr
    variable: str

    def __repr__(self) -> str:
        return f"Integral({self.expr}, '{self.variable}')"


@dataclass(frozen=True)
class Limit(Expr):
    """Limit of expr as variable approaches a value. Binds variable in expr."""
    expr: Expr
    variable: str
    approaching: float
    direction: str = 'both'

    def __post_init__(self):
        if self.direction not in DIRECTIONS:
            raise ValueError(
                f"Limit direction must be one of {DIRECTIONS}, got {self.direction!r}"
            )
        object.__setattr__(self, 'approaching', float(self.approaching))

    def __repr__(self) -> str:
        return (
            f"Limit({self.expr}, '{self.variable}' -> {self.approaching}, "
            f"{self.direction})"
        )


@dataclass(frozen=True)
class Equation(Expr):
    """Equality of two expressions: left = right."""
    left: Expr
    right: Expr

    def __repr__(self) -> str:
        return f"({self.left} = {self.right})"


@dataclass(frozen=True)
class Sum(Expr):
    """
    Summation of expr for variable = start .. end (inclusive).

    The index variable is bound inside expr only; start and end are
    evaluated in the enclosing scope.
    """
    expr: Expr
    variable: str
    start: Expr
    end: Expr

    def __repr__(self) -> str:
        return f"Sum({self.expr}, '{self.variable}', {self.start}, {self.end})"


@dataclass(frozen=True)
class Product(Expr):
    """
    Product of expr for variable = start .. end (inclusive).

    Same scoping as Sum.
    """
    expr: Expr
    variable: str
    start: Expr
    end: Expr

    def __repr__(self) -> str:
        return f"Product({self.expr}, '{self.variable}', {self.start}, {self.end})"


# Node kind names, used in error messages
def kind_name(expr: Expr) -> str:
    """Return the lower-case kind name of a node ('binary', 'sum', ...)."""
    names = {
        Constant: 'constant',
        Variable: 'variable',
        BinaryOp: 'binary',
        UnaryOp: 'unary',
        FunctionCall: 'function',
        Derivative: 'derivative',
        Integral: 'integral',
        Limit: 'limit',
        Equation: 'equation',
        Sum: 'sum',
        Product: 'product',
    }
    try:
        return names[type(expr)]
    except KeyError:
        raise TypeError(f"Unknown expression node: {type(expr).__name__}") from None


# Type guards

def is_constant(expr: Expr) -> bool:
    return isinstance(expr, Constant)


def is_variable(expr: Expr) -> bool:
    return isinstance(expr, Variable)


def is_binary_op(expr: Expr) -> bool:
    return isinstance(expr, BinaryOp)


def is_unary_op(expr: Expr) -> bool:
    return isinstance(expr, UnaryOp)


def is_function_call(expr: Expr) -> bool:
    return isinstance(expr, FunctionCall)


def is_derivative(expr: Expr) -> bool:
    return isinstance(expr, Derivative)


def is_integral(expr: Expr) -> bool:
    return isinstance(expr, Integral)


def is_limit(expr: Expr) -> bool:
    return isinstance(expr, Limit)


def is_equation(expr: Expr) -> bool:
    return isinstance(expr, Equation)


def is_sum(expr: Expr) -> bool:
    return isinstance(expr, Sum)


def is_product(expr: Expr) -> bool:
    return isinstance(expr, Product)


def is_constant_value(expr: Expr, value: float) -> bool:
    """Check if an expression is a constant with a specific value."""
    return isinstance(expr, Constant) and expr.value == value


def is_zero(expr: Expr) -> bool:
    return is_constant_value(expr, 0)


def is_one(expr: Expr) -> bool:
    return is_constant_value(expr, 1)


def is_negative_one(expr: Expr) -> bool:
    return is_constant_value(expr, -1)


def is_integer_constant(expr: Expr) -> bool:
    """Check if an expression is a constant with an integer value."""
    return isinstance(expr, Constant) and expr.value.is_integer()


# Scope-aware variable traversal

class _Scope:
    """
    Reference-counted set of bound names.

    A name stays bound while at least one enclosing binder introduces it,
    so nested binders that reuse the same name unwind correctly.
    """

    def __init__(self):
        self._counts: dict[str, int] = {}

    def enter(self, name: str) -> None:
        self._counts[name] = self._counts.get(name, 0) + 1

    def exit(self, name: str) -> None:
        count = self._counts[name] - 1
        if count == 0:
            del self._counts[name]
        else:
            self._counts[name] = count

    def is_bound(self, name: str) -> bool:
        return self._counts.get(name, 0) > 0


def _traverse_variables(expr: Expr, include_bound: bool) -> Set[str]:
    found: Set[str] = set()
    scope = None if include_bound else _Scope()

    def bound(name: str) -> bool:
        return scope is not None and scope.is_bound(name)

    def enter(name: str) -> None:
        if scope is not None:
            scope.enter(name)

    def leave(name: str) -> None:
        if scope is not None:
            scope.exit(name)

    def collect(e: Expr) -> None:
        if isinstance(e, Constant):
            return
        if isinstance(e, Variable):
            if not bound(e.name):
                found.add(e.name)
        elif isinstance(e, (BinaryOp, Equation)):
            collect(e.left)
            collect(e.right)
        elif isinstance(e, (UnaryOp, FunctionCall)):
            collect(e.arg)
        elif isinstance(e, (Derivative, Integral)):
            if include_bound:
                found.add(e.variable)
            collect(e.expr)
        elif isinstance(e, Limit):
            if include_bound:
                found.add(e.variable)
            enter(e.variable)
            collect(e.expr)
            leave(e.variable)
        elif isinstance(e, (Sum, Product)):
            if include_bound:
                found.add(e.variable)
            collect(e.start)
            collect(e.end)
            enter(e.variable)
            collect(e.expr)
            leave(e.variable)
        else:
            raise TypeError(f"Unknown expression node: {type(e).__name__}")

    collect(expr)
    return found


def get_variables(expr: Expr) -> FrozenSet[str]:
    """
    Get all free variable names in an expression.

    Index variables of Sum/Product and the approached variable of Limit are
    excluded inside their bodies. Nested binders that reuse a name are
    reference counted, so leaving an inner scope restores the outer state.
    """
    return frozenset(_traverse_variables(expr, include_bound=False))


def get_all_variables(expr: Expr) -> FrozenSet[str]:
    """
    Get ALL variable names, including bound index variables.

    Use get_variables() for free variables only (the common case).
    """
    return frozenset(_traverse_variables(expr, include_bound=True))


def _search_free(expr: Expr, matches) -> bool:
    """Short-circuiting search for a free variable satisfying `matches`."""
    scope = _Scope()

    def search(e: Expr) -> bool:
        if isinstance(e, Constant):
            return False
        if isinstance(e, Variable):
            return not scope.is_bound(e.name) and matches(e.name)
        if isinstance(e, (BinaryOp, Equation)):
            return search(e.left) or search(e.right)
        if isinstance(e, (UnaryOp, FunctionCall)):
            return search(e.arg)
        if isinstance(e, (Derivative, Integral)):
            return search(e.expr)
        if isinstance(e, Limit):
            scope.enter(e.variable)
            try:
                return search(e.expr)
            finally:
                scope.exit(e.variable)
        if isinstance(e, (Sum, Product)):
            # Bounds belong to the outer scope
            if search(e.start) or search(e.end):
                return True
            scope.enter(e.variable)
            try:
                return search(e.expr)
            finally:
                scope.exit(e.variable)
        raise TypeError(f"Unknown expression node: {type(e).__name__}")

    return search(expr)


def has_variable(expr: Expr, name: str) -> bool:
    """Check if an expression contains a specific free variable."""
    return _search_free(expr, lambda n: n == name)


def is_pure_constant(expr: Expr) -> bool:
    """Check if an expression contains no free variables at all."""
    return not _search_free(expr, lambda n: True)


def depth(expr: Expr) -> int:
    """Depth of the expression tree (a leaf has depth 1)."""
    if isinstance(expr, (Constant, Variable)):
        return 1
    if isinstance(expr, (BinaryOp, Equation)):
        return 1 + max(depth(expr.left), depth(expr.right))
    if isinstance(expr, (UnaryOp, FunctionCall)):
        return 1 + depth(expr.arg)
    if isinstance(expr, (Derivative, Integral, Limit)):
        return 1 + depth(expr.expr)
    if isinstance(expr, (Sum, Product)):
        return 1 + max(depth(expr.expr), depth(expr.start), depth(expr.end))
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def node_count(expr: Expr) -> int:
    """Number of nodes in the expression tree."""
    if isinstance(expr, (Constant, Variable)):
        return 1
    if isinstance(expr, (BinaryOp, Equation)):
        return 1 + node_count(expr.left) + node_count(expr.right)
    if isinstance(expr, (UnaryOp, FunctionCall)):
        return 1 + node_count(expr.arg)
    if isinstance(expr, (Derivative, Integral, Limit)):
        return 1 + node_count(expr.expr)
    if isinstance(expr, (Sum, Product)):
        return 1 + node_count(expr.expr) + node_count(expr.start) + node_count(expr.end)
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def substitute(expr: Expr, name: str, replacement: Expr) -> Expr:
    """
    Replace every free occurrence of a variable with another expression.

    Binders that capture `name` shield their body; Sum/Product bounds are
    still substituted since they live in the enclosing scope.
    """
    if isinstance(expr, Constant):
        return expr
    if isinstance(expr, Variable):
        return replacement if expr.name == name else expr
    if isinstance(expr, BinaryOp):
        return BinaryOp(
            expr.op,
            substitute(expr.left, name, replacement),
            substitute(expr.right, name, replacement),
        )
    if isinstance(expr, UnaryOp):
        return UnaryOp(expr.op, substitute(expr.arg, name, replacement))
    if isinstance(expr, FunctionCall):
        return FunctionCall(expr.fn, substitute(expr.arg, name, replacement))
    if isinstance(expr, Derivative):
        return Derivative(substitute(expr.expr, name, replacement), expr.variable, expr.order)
    if isinstance(expr, Integral):
        return Integral(substitute(expr.expr, name, replacement), expr.variable)
    if isinstance(expr, Limit):
        if expr.variable == name:
            return expr
        return Limit(
            substitute(expr.expr, name, replacement),
            expr.variable, expr.approaching, expr.direction,
        )
    if isinstance(expr, Equation):
        return Equation(
            substitute(expr.left, name, replacement),
            substitute(expr.right, name, replacement),
        )
    if isinstance(expr, (Sum, Product)):
        body = expr.expr
        if expr.variable != name:
            body = substitute(body, name, replacement)
        return type(expr)(
            body,
            expr.variable,
            substitute(expr.start, name, replacement),
            substitute(expr.end, name, replacement),
        )
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")
