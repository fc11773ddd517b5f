# Tests for result.py and exceptions.py - Result types and error hierarchy

import math

import pytest


class TestIntegrationResult:
    """Tests for IntegrationResult."""

    def test_ok(self):
        from symkernel import var
        from symkernel.result import IntegrationResult

        result = IntegrationResult.ok(var('x'))
        assert result.success
        assert result
        assert result.reason is None
        assert result.unwrap() == var('x')

    def test_failure(self):
        from symkernel.result import IntegrationResult
        from symkernel.exceptions import IntegrationError

        result = IntegrationResult.failure('no rule')
        assert not result
        assert result.antiderivative is None
        with pytest.raises(IntegrationError) as exc_info:
            result.unwrap()
        assert exc_info.value.reason == 'no rule'

    def test_repr(self):
        from symkernel import var
        from symkernel.result import IntegrationResult

        assert 'ok' in repr(IntegrationResult.ok(var('x')))
        assert "reason='no rule'" in repr(IntegrationResult.failure('no rule'))


class TestLimitResult:
    """Tests for LimitResult."""

    def test_of_converts_to_float(self):
        from symkernel.result import LimitResult

        result = LimitResult.of(2)
        assert result.exists
        assert isinstance(result.value, float)
        assert not result.is_infinite

    def test_infinite(self):
        from symkernel.result import LimitResult

        assert LimitResult.of(-math.inf).is_infinite

    def test_failure(self):
        from symkernel.result import LimitResult
        from symkernel.exceptions import LimitError

        result = LimitResult.failure('oscillates')
        assert not result
        assert not result.is_infinite
        with pytest.raises(LimitError, match='oscillates'):
            result.unwrap()


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        from symkernel.exceptions import (
            SymKernelError, EvaluationError, DifferentiationError,
            IntegrationError, LimitError, CollectTermsError,
        )

        for cls in (EvaluationError, DifferentiationError, IntegrationError,
                    LimitError, CollectTermsError):
            assert issubclass(cls, SymKernelError)

    def test_evaluation_error_context(self):
        from symkernel.exceptions import EvaluationError

        err = EvaluationError("Variable 'x' is not bound", variable='x')
        assert err.variable == 'x'

    def test_differentiation_suggestion(self):
        from symkernel.exceptions import DifferentiationError

        err = DifferentiationError('Unknown function: sine', function='sine')
        assert "Did you mean 'sin'?" in str(err)

    def test_differentiation_generic_suggestion(self):
        from symkernel.exceptions import DifferentiationError

        err = DifferentiationError('Unknown function: zeta', function='zeta')
        assert 'Supported functions' in str(err)

    def test_integration_error_message(self):
        from symkernel.exceptions import IntegrationError

        err = IntegrationError('no rule')
        assert str(err) == 'Cannot integrate: no rule'
        assert err.reason == 'no rule'
