# SymKernel - Expression Model Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for the expression AST and scope-aware traversal.
"""

import math
import dataclasses

import pytest

from symkernel import (
    Constant, Variable, BinaryOp, UnaryOp, FunctionCall, Sum, Limit,
    var, const, sin, summation, product, limit, derivative, integral, eq,
    PI, ZERO,
    get_variables, get_all_variables, has_variable, is_pure_constant,
    depth, node_count, substitute, kind_name,
    is_zero, is_one, is_negative_one, is_integer_constant,
)


class TestNodes:
    """Test node construction and validation."""

    def test_constant_is_float(self):
        """Constants store their value as a float."""
        c = Constant(3)
        assert isinstance(c.value, float)
        assert c.value == 3.0

    def test_constant_rejects_nan(self):
        """NaN is not a valid constant."""
        with pytest.raises(ValueError):
            Constant(float('nan'))

    def test_constant_rejects_infinity(self):
        """Infinite constants are rejected."""
        with pytest.raises(ValueError):
            Constant(math.inf)
        with pytest.raises(ValueError):
            const(-math.inf)

    def test_named_constant_equality(self):
        """The display name does not take part in equality."""
        assert PI == const(math.pi)
        assert hash(PI) == hash(const(math.pi))
        assert repr(PI) == 'pi'

    def test_unknown_binary_operator(self):
        """Only + - * / ^ are binary operators."""
        with pytest.raises(ValueError):
            BinaryOp('%', var('x'), var('y'))

    def test_unknown_unary_operator(self):
        with pytest.raises(ValueError):
            UnaryOp('cbrt', var('x'))

    def test_limit_direction_validated(self):
        """Limit direction must be left, right or both."""
        with pytest.raises(ValueError):
            Limit(var('x'), 'x', 0, 'up')

    def test_nodes_are_immutable(self):
        x = var('x')
        with pytest.raises(dataclasses.FrozenInstanceError):
            x.name = 'y'

    def test_structural_equality_and_hashing(self):
        """Structurally equal trees are equal and hash alike."""
        x = var('x')
        assert x + 1 == var('x') + const(1)
        assert len({x * x, x * x, x + x}) == 2


class TestOperators:
    """Test Python operator overloading."""

    def test_arithmetic_operators(self):
        x = var('x')
        assert x + 1 == BinaryOp('+', x, Constant(1))
        assert 2 * x == BinaryOp('*', Constant(2), x)
        assert 1 - x == BinaryOp('-', Constant(1), x)
        assert x / 2 == BinaryOp('/', x, Constant(2))
        assert x ** 2 == BinaryOp('^', x, Constant(2))
        assert 2 ** x == BinaryOp('^', Constant(2), x)

    def test_negation(self):
        x = var('x')
        assert -x == UnaryOp('-', x)

    def test_non_numeric_operand(self):
        """Strings are not converted to expressions."""
        with pytest.raises(TypeError):
            var('x') + 'y'

    def test_repr(self):
        x = var('x')
        assert repr(x * x + 1) == "((var('x') * var('x')) + const(1))"
        assert repr(sin(x)) == "sin(var('x'))"
        assert repr(const(0.5)) == "const(0.5)"


class TestVariables:
    """Test scope-aware variable collection."""

    def test_free_variables(self):
        x, y = var('x'), var('y')
        assert get_variables(x * y + 1) == frozenset({'x', 'y'})
        assert (x * y).free_vars() == frozenset({'x', 'y'})

    def test_sum_binds_index_in_body(self):
        """The index is bound in the body but not in the bounds."""
        i, x, n = var('i'), var('x'), var('n')
        s = summation(i * x, 'i', 1, n)
        assert get_variables(s) == frozenset({'x', 'n'})
        assert not has_variable(s, 'i')

    def test_bound_in_outer_scope_for_bounds(self):
        """An index variable used in its own bound refers to the outer scope."""
        i = var('i')
        s = summation(i, 'i', 1, i)
        assert get_variables(s) == frozenset({'i'})
        assert has_variable(s, 'i')

    def test_nested_rebinding(self):
        """Leaving an inner binder keeps the outer binding of the same name."""
        i = var('i')
        inner = summation(i, 'i', 1, 3)
        outer = summation(inner + i, 'i', 1, 5)
        assert get_variables(outer) == frozenset()
        assert not has_variable(outer, 'i')
        assert is_pure_constant(outer)

    def test_scope_restored_after_binder(self):
        """A name is free again once its binders are left."""
        i = var('i')
        expr = summation(summation(i, 'i', 1, 3) + i, 'i', 1, 5) + i
        assert get_variables(expr) == frozenset({'i'})
        assert has_variable(expr, 'i')
        assert not is_pure_constant(expr)

    def test_product_binds_like_sum(self):
        k, x = var('k'), var('x')
        p = product(k + x, 'k', 1, 4)
        assert get_variables(p) == frozenset({'x'})

    def test_limit_binds_its_variable(self):
        x, y = var('x'), var('y')
        lim = limit(x * y, 'x', 0)
        assert get_variables(lim) == frozenset({'y'})
        assert not has_variable(lim, 'x')
        assert has_variable(lim, 'y')

    def test_derivative_and_integral_do_not_bind(self):
        x, y = var('x'), var('y')
        assert get_variables(derivative(x * y, 'x')) == frozenset({'x', 'y'})
        assert has_variable(integral(x, 'x'), 'x')

    def test_all_variables_includes_bound(self):
        i, x = var('i'), var('x')
        assert get_all_variables(summation(i * x, 'i', 1, 3)) == frozenset({'i', 'x'})
        assert get_all_variables(derivative(const(1), 'z')) == frozenset({'z'})

    def test_equation_variables(self):
        x, y = var('x'), var('y')
        assert get_variables(eq(x, y + 1)) == frozenset({'x', 'y'})

    def test_pure_constant(self):
        assert is_pure_constant(const(2) + 3)
        assert not is_pure_constant(var('x') + 1)


class TestStructure:
    """Test structural queries and substitution."""

    def test_depth(self):
        x = var('x')
        assert depth(x) == 1
        assert depth(x * x + 1) == 3
        assert depth(sin(x)) == 2

    def test_node_count(self):
        x = var('x')
        assert node_count(x * x + 1) == 5
        assert node_count(summation(x, 'i', 1, 3)) == 4

    def test_kind_name(self):
        x = var('x')
        assert kind_name(x) == 'variable'
        assert kind_name(x + 1) == 'binary'
        assert kind_name(sin(x)) == 'function'
        assert kind_name(summation(x, 'i', 1, 2)) == 'sum'
        assert kind_name(product(x, 'i', 1, 2)) == 'product'

    def test_substitute(self):
        x, y = var('x'), var('y')
        assert substitute(x * y, 'x', const(2)) == const(2) * y

    def test_substitute_respects_binders(self):
        """The body of a binder is shielded; its bounds are not."""
        x, y = var('x'), var('y')
        s = summation(x * y, 'x', 1, x)
        result = substitute(s, 'x', const(3))
        assert result == Sum(x * y, 'x', const(1), const(3))

    def test_substitute_limit_shadowing(self):
        x, y = var('x'), var('y')
        lim = limit(x + y, 'x', 1)
        assert substitute(lim, 'x', y) == lim
        assert substitute(lim, 'y', const(2)) == limit(x + 2, 'x', 1)

    def test_constant_predicates(self):
        assert is_zero(ZERO)
        assert is_one(const(1.0))
        assert is_negative_one(const(-1))
        assert is_integer_constant(const(4))
        assert not is_integer_constant(const(2.5))
        assert not is_zero(var('x'))

    def test_function_call_name_not_validated(self):
        """Unknown function names are accepted at construction time."""
        f = FunctionCall('gamma', var('x'))
        assert f.fn == 'gamma'
        assert isinstance(var('x'), Variable)
