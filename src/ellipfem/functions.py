"""Binding of expression text into coefficient functions f(x, y).

Coefficient functions built here never raise: malformed text or an undefined
operation (division by zero, sqrt of a negative number, ...) evaluates to 0.0.
This is the contract consumers of free-text input rely on.
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Callable

from .exceptions import InvalidParameterError
from .expression import ExpressionEvaluator

log = logging.getLogger(__name__)

CoefficientFunction = Callable[[float, float], float]


def zero_function(x: float, y: float) -> float:
    return 0.0


def constant_function(value: float) -> CoefficientFunction:
    """Return f(x, y) = value."""
    value = float(value)

    def f(x: float, y: float) -> float:
        return value

    return f


def safe_eval(text: str, x: float, y: float) -> float:
    """Evaluate ``text`` at ``(x, y)``, returning 0.0 on any failure."""
    try:
        value = ExpressionEvaluator(text, x, y).evaluate()
    except Exception as exc:
        log.debug(f"Expression {text!r} failed at ({x}, {y}): {exc}")
        return 0.0
    if not math.isfinite(value):
        log.debug(f"Expression {text!r} is not finite at ({x}, {y})")
        return 0.0
    return value


def parse_function(text: str) -> CoefficientFunction:
    """
    Bind expression text into a reusable coefficient function.

    Parameters
    ----------
    text : str
        Expression in ``x`` and ``y``. Empty text gives the zero function.

    Returns
    -------
    CoefficientFunction
        ``f(x, y)``; evaluates the text with a fresh evaluator on each call
        and maps every failure to 0.0.
    """
    if not text or not text.strip():
        return zero_function

    def f(x: float, y: float) -> float:
        return safe_eval(text, x, y)

    f.expression = text
    return f


def as_coefficient_function(value) -> CoefficientFunction:
    """Coerce None, text, a real number or a callable into a coefficient function."""
    if value is None:
        return zero_function
    if isinstance(value, str):
        return parse_function(value)
    if isinstance(value, Real):
        return constant_function(value)
    if callable(value):
        return value
    raise InvalidParameterError(
        f"Cannot use {value!r} ({type(value).__name__}) as a coefficient function"
    )
