# SymKernel - Limits
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Limits by direct substitution, L'Hopital's rule and one-sided sampling.

The engine is numeric at heart: it classifies indeterminate forms by
evaluating the operands of the top-level operator near the approached
point, and falls back to evaluating the expression just left and right of
it. The sampling offset and tolerances come from LimitConfig.

Example:
    >>> x = var('x')
    >>> compute_limit(sin(x) / x, 'x', 0)
    LimitResult(value=1.0)
    >>> limit_exists(1 / x, 'x', 0)
    False
"""

from __future__ import annotations
from enum import Enum
import logging
import math
from typing import Optional

from .expr import Expr, Bindings, BinaryOp, DIRECTIONS
from .builders import div
from .config import LimitConfig
from .differentiate import diff
from .evaluation import evaluate
from .exceptions import SymKernelError, EvaluationError, LimitError
from .result import LimitResult

logger = logging.getLogger(__name__)


class IndeterminateForm(Enum):
    """Classification of an operator's operands near the approached point."""
    ZERO_OVER_ZERO = '0/0'
    INF_OVER_INF = '∞/∞'
    ZERO_TIMES_INF = '0*∞'
    INF_MINUS_INF = '∞-∞'
    ZERO_POW_ZERO = '0^0'
    ONE_POW_INF = '1^∞'
    INF_POW_ZERO = '∞^0'
    DETERMINATE = 'determinate'

    def __str__(self) -> str:
        return self.value


def compute_limit(
    expr: Expr,
    variable: str,
    approaching: float,
    direction: str = 'both',
    bindings: Optional[Bindings] = None,
    config: Optional[LimitConfig] = None,
) -> LimitResult:
    """
    Compute the limit of an expression as a variable approaches a value.

    Args:
        expr: The expression.
        variable: The variable that approaches the point.
        approaching: The point being approached.
        direction: 'left', 'right' or 'both' (default).
        bindings: Values for any other free variables.
        config: Sampling configuration (default LimitConfig()).

    Returns:
        LimitResult holding the value (possibly +/-inf) or the reason the
        limit could not be determined.

    Raises:
        ValueError: If direction is not one of 'left', 'right', 'both'.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")

    engine = _LimitEngine(variable, float(approaching), direction, bindings, config or LimitConfig())
    try:
        return LimitResult.of(engine.compute(expr, 0))
    except SymKernelError as e:
        reason = e.reason if isinstance(e, LimitError) else str(e)
        logger.debug("Limit of %s as %s -> %s failed: %s", expr, variable, approaching, reason)
        return LimitResult.failure(reason)


def left_limit(
    expr: Expr,
    variable: str,
    approaching: float,
    bindings: Optional[Bindings] = None,
    config: Optional[LimitConfig] = None,
) -> LimitResult:
    """Compute the limit from below."""
    return compute_limit(expr, variable, approaching, 'left', bindings, config)


def right_limit(
    expr: Expr,
    variable: str,
    approaching: float,
    bindings: Optional[Bindings] = None,
    config: Optional[LimitConfig] = None,
) -> LimitResult:
    """Compute the limit from above."""
    return compute_limit(expr, variable, approaching, 'right', bindings, config)


def limit_exists(
    expr: Expr,
    variable: str,
    approaching: float,
    bindings: Optional[Bindings] = None,
) -> bool:
    """Check whether the two-sided limit exists."""
    return compute_limit(expr, variable, approaching, 'both', bindings).exists


class _LimitEngine:
    """Holds the fixed parameters of one limit computation."""

    def __init__(self, variable, approaching, direction, bindings, config):
        self.variable = variable
        self.approaching = approaching
        self.direction = direction
        self.bindings = dict(bindings or {})
        self.config = config

    def _sample(self, expr: Expr, at: float) -> Optional[float]:
        """Evaluate expr with the variable at the given point, or None."""
        try:
            return evaluate(expr, {**self.bindings, self.variable: at})
        except EvaluationError:
            return None

    def _is_zero(self, value: Optional[float]) -> bool:
        return value is not None and abs(value) < self.config.zero_tolerance

    def _is_one(self, value: Optional[float]) -> bool:
        return value is not None and abs(value - 1) < self.config.zero_tolerance

    @staticmethod
    def _is_infinite(value: Optional[float]) -> bool:
        return value is not None and math.isinf(value)

    def compute(self, expr: Expr, iteration: int) -> float:
        if iteration > self.config.max_lhopital_iterations:
            raise LimitError("L'Hôpital's rule did not converge")

        direct = self._sample(expr, self.approaching)
        if direct is not None and math.isfinite(direct):
            return direct

        form = self.detect_form(expr)
        logger.debug("Indeterminate form of %s: %s", expr, form)

        if form in (IndeterminateForm.ZERO_OVER_ZERO, IndeterminateForm.INF_OVER_INF):
            # Both forms are only detected on '/' nodes
            rewritten = div(diff(expr.left, self.variable), diff(expr.right, self.variable))
            logger.debug("L'Hôpital step %d: %s", iteration + 1, rewritten)
            return self.compute(rewritten, iteration + 1)

        if form in (IndeterminateForm.ZERO_TIMES_INF, IndeterminateForm.INF_MINUS_INF):
            raise LimitError(f"{form} form requires algebraic manipulation")

        if form is not IndeterminateForm.DETERMINATE:
            raise LimitError(f"{form} form requires logarithmic transformation")

        return self.numeric_fallback(expr)

    def detect_form(self, expr: Expr) -> IndeterminateForm:
        if not isinstance(expr, BinaryOp):
            return IndeterminateForm.DETERMINATE

        eps = self.config.epsilon
        if self.direction == 'left':
            at = self.approaching - eps
        elif self.direction == 'right':
            at = self.approaching + eps
        else:
            at = self.approaching

        left = self._sample(expr.left, at)
        right = self._sample(expr.right, at)

        if expr.op == '/':
            if self._is_zero(left) and self._is_zero(right):
                return IndeterminateForm.ZERO_OVER_ZERO
            if self._is_infinite(left) and self._is_infinite(right):
                return IndeterminateForm.INF_OVER_INF
        elif expr.op == '*':
            if ((self._is_zero(left) and self._is_infinite(right))
                    or (self._is_infinite(left) and self._is_zero(right))):
                return IndeterminateForm.ZERO_TIMES_INF
        elif expr.op == '-':
            if self._is_infinite(left) and self._is_infinite(right):
                return IndeterminateForm.INF_MINUS_INF
        elif expr.op == '^':
            if self._is_zero(left) and self._is_zero(right):
                return IndeterminateForm.ZERO_POW_ZERO
            if self._is_one(left) and self._is_infinite(right):
                return IndeterminateForm.ONE_POW_INF
            if self._is_infinite(left) and self._is_zero(right):
                return IndeterminateForm.INF_POW_ZERO

        return IndeterminateForm.DETERMINATE

    def numeric_fallback(self, expr: Expr) -> float:
        eps = self.config.epsilon
        left = right = None
        if self.direction in ('left', 'both'):
            left = self._sample(expr, self.approaching - eps)
        if self.direction in ('right', 'both'):
            right = self._sample(expr, self.approaching + eps)

        if self.direction == 'left':
            return _one_sided(left, 'Left')
        if self.direction == 'right':
            return _one_sided(right, 'Right')

        if left is None:
            raise LimitError("Could not determine limit: left side could not be evaluated")
        if right is None:
            raise LimitError("Could not determine limit: right side could not be evaluated")

        left_infinite = math.isinf(left)
        right_infinite = math.isinf(right)
        if left_infinite and right_infinite and (left > 0) == (right > 0):
            return left
        if not left_infinite and not right_infinite:
            if abs(left - right) < self.config.agreement_tolerance:
                return (left + right) / 2
        raise LimitError(f"Limit does not exist: left limit ({left}) ≠ right limit ({right})")


def _one_sided(value: Optional[float], side: str) -> float:
    if value is None or math.isnan(value):
        raise LimitError(f"{side} limit does not exist")
    if math.isfinite(value):
        return value
    return math.inf if value > 0 else -math.inf
