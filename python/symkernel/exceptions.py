# SymKernel - Exceptions
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""Exception hierarchy for SymKernel."""

from __future__ import annotations
from typing import Optional


# Functions understood by the evaluator and the differentiation table
SUPPORTED_FUNCTIONS = [
    'sin', 'cos', 'tan', 'asin', 'acos', 'atan',
    'sinh', 'cosh', 'tanh', 'exp', 'log', 'ln', 'log10', 'log2',
    'floor', 'ceil', 'round',
]


class SymKernelError(Exception):
    """Base class for all SymKernel exceptions."""
    pass


class EvaluationError(SymKernelError):
    """Raised when an expression cannot be reduced to a number."""

    def __init__(self, message: str, variable: Optional[str] = None):
        super().__init__(message)
        self.variable = variable


class DifferentiationError(SymKernelError):
    """Raised when a derivative cannot be formed."""

    def __init__(
        self,
        message: str,
        variable: Optional[str] = None,
        function: Optional[str] = None,
    ):
        full_message = message
        if function is not None:
            suggestion = _get_suggestion_for_function(function)
            if suggestion:
                full_message += f"\n  Suggestion: {suggestion}"
        super().__init__(full_message)
        self.variable = variable
        self.function = function


class IntegrationError(SymKernelError):
    """Raised by integrate() when no closed form is recognized."""

    def __init__(self, reason: str):
        super().__init__(f"Cannot integrate: {reason}")
        self.reason = reason


class LimitError(SymKernelError):
    """Raised when unwrapping a limit that could not be determined."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CollectTermsError(SymKernelError):
    """Raised when term collection meets a non-polynomial shape."""

    def __init__(self, message: str, kind: Optional[str] = None):
        super().__init__(f"Cannot collect terms: {message}")
        self.kind = kind


def _get_suggestion_for_function(name: str) -> Optional[str]:
    """Get a helpful suggestion for an unknown function name."""
    suggestions = {
        'sine': "Did you mean 'sin'?",
        'cosine': "Did you mean 'cos'?",
        'tangent': "Did you mean 'tan'?",
        'arcsin': "Did you mean 'asin'?",
        'arccos': "Did you mean 'acos'?",
        'arctan': "Did you mean 'atan'?",
        'asinh': "Inverse hyperbolic functions are not supported. Use ln(x + sqrt(x^2 + 1)).",
        'atanh': "Inverse hyperbolic functions are not supported. Use ln((1 + x)/(1 - x)) / 2.",
        'sqrt': "sqrt is a unary operator, not a function. Use sqrt(x) from builders.",
        'abs': "abs is a unary operator, not a function. Use abs_(x) from builders.",
        'exp2': "Use 2 ** x instead.",
        'sign': "Use signum(x) from builders.",
        'trunc': "trunc is not supported. Use floor or ceil.",
    }
    hint = suggestions.get(name.lower())
    if hint is None:
        return f"Supported functions: {', '.join(SUPPORTED_FUNCTIONS)}"
    return hint
