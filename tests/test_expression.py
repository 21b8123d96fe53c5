"""Tests for the expression evaluator and coefficient-function binder.

Run with: pytest tests/test_expression.py -v
"""

import math

import pytest

from ellipfem import (
    EvaluationError,
    ExpressionEvaluator,
    InvalidParameterError,
    as_coefficient_function,
    evaluate,
    parse_function,
    safe_eval,
    zero_function,
)


class TestGrammar:
    """Precedence, associativity and unary signs."""

    def test_linear_combination(self):
        assert evaluate("2*x+3*y", 1, 2) == 8.0

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2+3*4", 14.0),
            ("(2+3)*4", 20.0),
            ("8/4/2", 1.0),
            ("10-4-3", 3.0),
            ("2*-3", -6.0),
            ("-(2+3)", -5.0),
            ("+3", 3.0),
            ("((1))", 1.0),
            ("0.5*4", 2.0),
            (".5+1.", 1.5),
        ],
    )
    def test_constant_expressions(self, text, expected):
        assert evaluate(text, 0, 0) == expected

    def test_variables(self):
        assert evaluate("x", 1.5, -2.0) == 1.5
        assert evaluate("-y", 1.5, -2.0) == 2.0
        assert evaluate("x*y - x/y", 3.0, 2.0) == 4.5

    def test_whitespace_is_ignored(self):
        assert evaluate("  2 * x +  1 ", 3, 0) == 7.0
        assert evaluate("sin( 0 ) + cos(x )", 0, 0) == 1.0

    def test_function_name_must_touch_parenthesis(self):
        with pytest.raises(EvaluationError):
            evaluate("sin (x)", 1.0, 0.0)
        assert safe_eval("sin (x)", 1.0, 0.0) == 0.0

    def test_evaluator_is_single_use_per_point(self):
        ev = ExpressionEvaluator("x+y", 1, 2)
        assert ev.evaluate() == 3.0
        # Re-evaluating restarts from the beginning of the text
        assert ev.evaluate() == 3.0


class TestFunctions:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("sin(pi/2)", 1.0),
            ("cos(0)", 1.0),
            ("tan(0)", 0.0),
            ("exp(0)", 1.0),
            ("log(1)", 0.0),
            ("sqrt(16)", 4.0),
            ("abs(-2.5)", 2.5),
            ("pi", math.pi),
        ],
    )
    def test_builtin_functions(self, text, expected):
        assert math.isclose(evaluate(text, 0, 0), expected, abs_tol=1e-15)

    def test_nested_calls(self):
        value = evaluate("sin(pi*x)*sin(pi*y)", 0.5, 0.5)
        assert math.isclose(value, 1.0)

    def test_function_of_expression(self):
        assert math.isclose(evaluate("exp(log(x)+log(y))", 2.0, 3.0), 6.0)


class TestEvaluationErrors:
    @pytest.mark.parametrize(
        "text",
        [
            "1/0",
            "1/(x-x)",
            "sqrt(-1)",
            "log(0)",
            "log(-2)",
            "exp(1000)",
            "foo(1)",
            "z",
            "2x",
            "xy",
            "1+",
            "(1+2",
            "sin x",
            "sin(1",
            "pi()",
            "--3",
            "1.2.3",
            ".",
            "",
            "2^3",
        ],
    )
    def test_raises(self, text):
        with pytest.raises(EvaluationError):
            evaluate(text, 0.0, 0.0)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            evaluate("1/0", 0, 0)


class TestBinder:
    """parse_function / safe_eval never let a failure escape."""

    def test_safe_eval(self):
        assert safe_eval("2*x+3*y", 1, 2) == 8.0
        assert safe_eval("1/0", 0, 0) == 0.0
        assert safe_eval("sqrt(-1)", 0, 0) == 0.0
        assert safe_eval("garbage((", 0, 0) == 0.0

    def test_non_finite_result_maps_to_zero(self):
        assert safe_eval("exp(700)*exp(700)", 0, 0) == 0.0

    def test_empty_text_is_zero_function(self):
        assert parse_function("") is zero_function
        assert parse_function("   ")(1.0, 2.0) == 0.0

    def test_bound_function(self):
        f = parse_function("1/x")
        assert f(2.0, 0.0) == 0.5
        assert f(0.0, 0.0) == 0.0
        assert f(4.0, 0.0) == 0.25

    def test_bound_function_is_reentrant(self):
        f = parse_function("sin(pi*x)*y")
        first = [f(0.1 * i, 0.3) for i in range(10)]
        second = [f(0.1 * i, 0.3) for i in range(10)]
        assert first == second

    def test_as_coefficient_function(self):
        assert as_coefficient_function(None)(1, 2) == 0.0
        assert as_coefficient_function("x+y")(1, 2) == 3.0
        assert as_coefficient_function(2.5)(1, 2) == 2.5
        assert as_coefficient_function(3)(1, 2) == 3.0

        g = lambda x, y: x * y
        assert as_coefficient_function(g) is g

    def test_as_coefficient_function_rejects_other_types(self):
        with pytest.raises(InvalidParameterError):
            as_coefficient_function(object())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
