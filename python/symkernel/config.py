# SymKernel - Configuration
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""Configuration settings for SymKernel algorithms."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .expr import Expr


# A rewrite rule returns the rewritten expression, or None if it does not apply
SimplificationRule = Callable[['Expr'], Optional['Expr']]


@dataclass
class LimitConfig:
    """
    Configuration for limit computation.

    Attributes:
        epsilon: Offset from the approached value used for sampling.
        zero_tolerance: Magnitude below which a sample counts as zero
                        (and distance from 1 below which it counts as one).
        agreement_factor: Two-sided samples agree when they differ by less
                          than epsilon * agreement_factor.
        max_lhopital_iterations: Budget of L'Hopital applications.
    """
    epsilon: float = 1e-10
    zero_tolerance: float = 1e-10
    agreement_factor: float = 1000.0
    max_lhopital_iterations: int = 10

    def __post_init__(self):
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.max_lhopital_iterations < 0:
            raise ValueError("max_lhopital_iterations cannot be negative")

    @property
    def agreement_tolerance(self) -> float:
        """Maximum gap between finite one-sided samples of an existing limit."""
        return self.epsilon * self.agreement_factor

    @classmethod
    def low_precision(cls) -> LimitConfig:
        """Coarser sampling, tolerant of badly conditioned expressions."""
        return cls(epsilon=1e-7, zero_tolerance=1e-7)

    @classmethod
    def high_precision(cls) -> LimitConfig:
        """Finer sampling and a larger L'Hopital budget."""
        return cls(epsilon=1e-12, zero_tolerance=1e-12, max_lhopital_iterations=20)


@dataclass
class SimplifyOptions:
    """
    Options for simplify().

    Attributes:
        max_iterations: Cap on bottom-up passes before giving up on a fixed point.
        custom_rules: Extra rules applied after the built-in ones.
        custom_only: Use custom_rules only, ignoring the built-in rule set.
    """
    max_iterations: int = 100
    custom_rules: List[SimplificationRule] = field(default_factory=list)
    custom_only: bool = False

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")

    def __repr__(self) -> str:
        return (
            f"SimplifyOptions(max_iterations={self.max_iterations}, "
            f"custom_rules={len(self.custom_rules)}, "
            f"custom_only={self.custom_only})"
        )
