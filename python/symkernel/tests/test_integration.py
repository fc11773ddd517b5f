# SymKernel - Integration Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for heuristic symbolic integration.
"""

import math

import numpy as np
import pytest

from symkernel import (
    var, const, sin, cos, tan, exp, sinh, cosh, ln, sqrt, abs_, atan,
    summation, derivative, E,
    try_integrate, integrate, definite_integral, diff, evaluate,
    IntegrationError, IntegrationResult,
)


def assert_round_trip(expr, points, variable='x'):
    """d/dx integrate(f) agrees with f on the sample points."""
    antiderivative = integrate(expr, variable)
    derivative_expr = diff(antiderivative, variable)
    for point in points:
        expected = evaluate(expr, {variable: point})
        assert evaluate(derivative_expr, {variable: point}) == pytest.approx(expected, rel=1e-9, abs=1e-12)


class TestIntegrate:
    """Test the supported patterns."""

    grid = np.linspace(0.25, 2.5, 10)

    def test_constant(self):
        x = var('x')
        assert integrate(const(3), 'x') == const(3) * x

    def test_variable(self):
        x = var('x')
        assert integrate(x, 'x') == x ** 2 / 2

    def test_power(self):
        x = var('x')
        assert integrate(x ** 2, 'x') == x ** const(3) / const(3)

    def test_reciprocal_power(self):
        x = var('x')
        assert integrate(x ** -1, 'x') == ln(x)

    def test_definite_x_squared(self):
        """The integral of x^2 over [0, 1] is 1/3."""
        x = var('x')
        assert abs(definite_integral(x ** 2, 'x', 0, 1) - 1 / 3) < 1e-9

    def test_definite_with_bindings(self):
        x, a = var('x'), var('a')
        assert definite_integral(a * x, 'x', 0, 2, {'a': 3}) == pytest.approx(6.0)

    def test_round_trip_polynomial(self):
        x = var('x')
        assert_round_trip(3 * x ** 3 - x ** 2 / 4 + 2 * x - 5, self.grid)

    def test_round_trip_functions(self):
        x = var('x')
        for f in (sin, cos, tan, exp, sinh, cosh):
            assert_round_trip(f(x), np.linspace(-1.2, 1.2, 7))

    def test_linear_argument(self):
        x = var('x')
        assert_round_trip(sin(3 * x), self.grid)
        assert_round_trip(exp(x * 0.5), self.grid)
        assert_round_trip(cos(-2 * x), self.grid)

    def test_exponential_rules(self):
        x = var('x')
        assert integrate(E ** x, 'x') == E ** x
        assert_round_trip(2 ** x, self.grid)
        assert_round_trip(E ** (2 * x), self.grid)

    def test_division(self):
        x = var('x')
        assert_round_trip((x ** 2 + 1) / 4, self.grid)
        assert_round_trip(3 / x, self.grid)
        assert_round_trip(1 / (x + 2), self.grid)
        assert_round_trip(1 / (2 + x), self.grid)

    def test_negation_and_linearity(self):
        x = var('x')
        assert_round_trip(-(x ** 3) + sin(x) - 4 * cos(x), self.grid)

    def test_other_variables_are_constants(self):
        x, y = var('x'), var('y')
        result = integrate(y * x, 'x')
        assert evaluate(diff(result, 'x'), {'x': 1.5, 'y': 2.0}) == pytest.approx(3.0)

    def test_bound_index_is_constant(self):
        """A sum over an index named x does not depend on x."""
        x = var('x')
        s = summation(x, 'x', 1, 3)
        assert integrate(s, 'x') == s * x


class TestFailures:
    """Unsupported patterns fail explicitly."""

    def test_product_of_variable_terms(self):
        x = var('x')
        result = try_integrate(x * sin(x), 'x')
        assert not result.success
        assert not result
        assert 'Integration by parts' in result.reason

    def test_integrate_raises(self):
        x = var('x')
        with pytest.raises(IntegrationError) as exc_info:
            integrate(x * exp(x), 'x')
        assert 'Integration by parts' in exc_info.value.reason
        assert str(exc_info.value).startswith('Cannot integrate:')

    def test_symbolic_exponent(self):
        x, n = var('x'), var('n')
        result = try_integrate(x ** n, 'x')
        assert not result.success
        assert 'numeric constant' in result.reason

    def test_invalid_exponential_base(self):
        x = var('x')
        assert not try_integrate(const(1) ** x, 'x').success
        assert not try_integrate(const(-2) ** x, 'x').success

    def test_nonlinear_denominator(self):
        x = var('x')
        assert not try_integrate(1 / (x * x + 1), 'x').success

    def test_unsupported_unary(self):
        x = var('x')
        for expr in (sqrt(x), abs_(x)):
            result = try_integrate(expr, 'x')
            assert not result.success
            assert 'Substitution' in result.reason

    def test_unknown_function(self):
        x = var('x')
        result = try_integrate(atan(x), 'x')
        assert result.reason == 'No known integral for atan()'

    def test_complex_argument(self):
        x = var('x')
        assert not try_integrate(sin(x * x), 'x').success
        assert not try_integrate(sin(x + 1), 'x').success

    def test_zero_linear_coefficient(self):
        """A zero factor on x is never used as a divisor."""
        x = var('x')
        result = try_integrate(sin(0 * x), 'x')
        assert not result.success
        assert 'complex argument' in result.reason

        result = try_integrate(E ** (x * 0), 'x')
        assert not result.success
        assert result.reason.startswith('Cannot integrate this power expression')

    def test_node_kind_named(self):
        x, i = var('x'), var('i')
        result = try_integrate(summation(i * x, 'i', 1, 3), 'x')
        assert result.reason == "Cannot integrate expression of kind 'sum'"
        result = try_integrate(derivative(x * x, 'x'), 'x')
        assert "'derivative'" in result.reason

    def test_definite_integral_propagates_failure(self):
        x = var('x')
        with pytest.raises(IntegrationError):
            definite_integral(x * sin(x), 'x', 0, math.pi)

    def test_result_type(self):
        x = var('x')
        assert isinstance(try_integrate(x, 'x'), IntegrationResult)
        assert try_integrate(x, 'x').antiderivative == x ** 2 / 2
