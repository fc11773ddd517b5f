# SymKernel
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
SymKernel - a small symbolic mathematics kernel.

Immutable expression trees with numeric evaluation, symbolic
differentiation, heuristic integration, limits and rule-based
simplification.

Example:
    >>> import symkernel as sk
    >>> x = sk.var('x')
    >>> sk.diff(x * x, 'x')
    (var('x') + var('x'))
    >>> sk.definite_integral(x ** 2, 'x', 0, 1)
    0.3333333333333333
    >>> sk.compute_limit(sk.sin(x) / x, 'x', 0).value
    1.0

Key Features:
    - Scope-aware variable handling for Sum, Product and Limit binders
    - Integration reports unsupported patterns instead of guessing
    - Limits via direct substitution, L'Hopital's rule and sampling
    - Extensible simplifier with user-supplied rewrite rules
"""

__version__ = "0.1.0"

# Core expression types and structural queries
from .expr import (
    Expr,
    Constant,
    Variable,
    BinaryOp,
    UnaryOp,
    FunctionCall,
    Derivative,
    Integral,
    Limit,
    Equation,
    Sum,
    Product,
    Bindings,
    kind_name,
    is_constant,
    is_variable,
    is_binary_op,
    is_unary_op,
    is_function_call,
    is_derivative,
    is_integral,
    is_limit,
    is_equation,
    is_sum,
    is_product,
    is_zero,
    is_one,
    is_negative_one,
    is_integer_constant,
    get_variables,
    get_all_variables,
    has_variable,
    is_pure_constant,
    depth,
    node_count,
    substitute,
)

# Constructors
from .builders import (
    const,
    var,
    add,
    sub,
    mul,
    div,
    pow,
    neg,
    abs_,
    sqrt,
    signum,
    sin,
    cos,
    tan,
    asin,
    acos,
    atan,
    sinh,
    cosh,
    tanh,
    exp,
    ln,
    log,
    log10,
    log2,
    floor,
    ceil,
    round_,
    derivative,
    integral,
    limit,
    equation,
    eq,
    summation,
    product,
    square,
    cube,
    recip,
    PI,
    E,
    PHI,
    ZERO,
    ONE,
    NEG_ONE,
    TWO,
    HALF,
)

# Algorithms
from .evaluation import evaluate, partial_evaluate, can_evaluate
from .differentiate import diff, nth_diff
from .integration import try_integrate, integrate, definite_integral
from .limits import (
    IndeterminateForm,
    compute_limit,
    left_limit,
    right_limit,
    limit_exists,
)
from .simplify import simplify, expand, collect_terms
from .rules import BUILTIN_RULES

# Configuration
from .config import LimitConfig, SimplifyOptions, SimplificationRule

# Result types
from .result import IntegrationResult, LimitResult

# Exceptions
from .exceptions import (
    SymKernelError,
    EvaluationError,
    DifferentiationError,
    IntegrationError,
    LimitError,
    CollectTermsError,
)

__all__ = [
    # Version
    "__version__",
    # Expression types
    "Expr",
    "Constant",
    "Variable",
    "BinaryOp",
    "UnaryOp",
    "FunctionCall",
    "Derivative",
    "Integral",
    "Limit",
    "Equation",
    "Sum",
    "Product",
    "Bindings",
    # Structural queries
    "kind_name",
    "is_constant",
    "is_variable",
    "is_binary_op",
    "is_unary_op",
    "is_function_call",
    "is_derivative",
    "is_integral",
    "is_limit",
    "is_equation",
    "is_sum",
    "is_product",
    "is_zero",
    "is_one",
    "is_negative_one",
    "is_integer_constant",
    "get_variables",
    "get_all_variables",
    "has_variable",
    "is_pure_constant",
    "depth",
    "node_count",
    "substitute",
    # Constructors
    "const",
    "var",
    "add",
    "sub",
    "mul",
    "div",
    "pow",
    "neg",
    "abs_",
    "sqrt",
    "signum",
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "exp",
    "ln",
    "log",
    "log10",
    "log2",
    "floor",
    "ceil",
    "round_",
    "derivative",
    "integral",
    "limit",
    "equation",
    "eq",
    "summation",
    "product",
    "square",
    "cube",
    "recip",
    "PI",
    "E",
    "PHI",
    "ZERO",
    "ONE",
    "NEG_ONE",
    "TWO",
    "HALF",
    # Algorithms
    "evaluate",
    "partial_evaluate",
    "can_evaluate",
    "diff",
    "nth_diff",
    "try_integrate",
    "integrate",
    "definite_integral",
    "IndeterminateForm",
    "compute_limit",
    "left_limit",
    "right_limit",
    "limit_exists",
    "simplify",
    "expand",
    "collect_terms",
    "BUILTIN_RULES",
    # Configuration
    "LimitConfig",
    "SimplifyOptions",
    "SimplificationRule",
    # Results
    "IntegrationResult",
    "LimitResult",
    # Exceptions
    "SymKernelError",
    "EvaluationError",
    "DifferentiationError",
    "IntegrationError",
    "LimitError",
    "CollectTermsError",
]
