# SymKernel - Result Types
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Result types for SymKernel.

Integration and limit computation report unsupported patterns as values
rather than exceptions, so callers can fall back to another strategy
(e.g. numerical quadrature) without exception-driven control flow.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math

from .expr import Expr
from .exceptions import IntegrationError, LimitError


@dataclass(frozen=True)
class IntegrationResult:
    """
    Outcome of an integration attempt.

    Exactly one of `antiderivative` (on success) and `reason` (on failure)
    is set. The object is truthy when integration succeeded.
    """
    success: bool
    antiderivative: Optional[Expr] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, antiderivative: Expr) -> IntegrationResult:
        return cls(success=True, antiderivative=antiderivative)

    @classmethod
    def failure(cls, reason: str) -> IntegrationResult:
        return cls(success=False, reason=reason)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> Expr:
        """Return the antiderivative or raise IntegrationError with the reason."""
        if not self.success:
            raise IntegrationError(self.reason or "Unknown error")
        return self.antiderivative

    def __repr__(self) -> str:
        if self.success:
            return f"IntegrationResult(ok, {self.antiderivative})"
        return f"IntegrationResult(failed, reason={self.reason!r})"


@dataclass(frozen=True)
class LimitResult:
    """
    Outcome of a limit computation.

    When the limit exists, `value` holds it (possibly +inf or -inf);
    otherwise `reason` explains why it could not be determined.
    """
    exists: bool
    value: Optional[float] = None
    reason: Optional[str] = None

    @classmethod
    def of(cls, value: float) -> LimitResult:
        return cls(exists=True, value=float(value))

    @classmethod
    def failure(cls, reason: str) -> LimitResult:
        return cls(exists=False, reason=reason)

    def __bool__(self) -> bool:
        return self.exists

    @property
    def is_infinite(self) -> bool:
        """True for a limit of +inf or -inf."""
        return self.exists and math.isinf(self.value)

    def unwrap(self) -> float:
        """Return the limit value or raise LimitError with the reason."""
        if not self.exists:
            raise LimitError(self.reason or "Unknown error")
        return self.value

    def __repr__(self) -> str:
        if self.exists:
            return f"LimitResult(value={self.value})"
        return f"LimitResult(does not exist, reason={self.reason!r})"
