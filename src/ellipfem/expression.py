"""Recursive-descent evaluator for scalar expressions in x and y.

Grammar (standard precedence, left-to-right, no implicit multiplication and
no exponent operator). Whitespace is allowed between tokens, except between
a function name and its opening parenthesis::

    expression := term (('+'|'-') term)*
    term       := factor (('*'|'/') factor)*
    factor     := ('+'|'-')? primary
    primary    := number | 'x' | 'y' | name '(' expression ')' | '(' expression ')'

Parsing and evaluation happen in a single pass, so an evaluator is built for
one (text, x, y) triple and thrown away afterwards.
"""

from __future__ import annotations

import math

from .exceptions import EvaluationError


def _sqrt(arg: float) -> float:
    if arg < 0:
        raise EvaluationError("Square root of negative number")
    return math.sqrt(arg)


def _log(arg: float) -> float:
    if arg <= 0:
        raise EvaluationError("Logarithm of non-positive number")
    return math.log(arg)


# One-argument functions
FUNCTIONS = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "exp": math.exp,
    "log": _log,
    "sqrt": _sqrt,
    "abs": abs,
}

# Zero-argument constants
CONSTANTS = {
    "pi": math.pi,
}


class ExpressionEvaluator:
    """Evaluate ``text`` at the point ``(x, y)``.

    Parameters
    ----------
    text : str
        Expression, e.g. ``"sin(pi*x)*y"``.
    x, y : float
        Values substituted for the free variables.
    """

    def __init__(self, text: str, x: float, y: float):
        self.text = text
        self.x = float(x)
        self.y = float(y)
        self.pos = 0

    # ------------------------------------------------------------------
    # Character stream
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        if self.pos >= len(self.text):
            return ""
        return self.text[self.pos]

    def _get(self) -> str:
        ch = self._peek()
        if ch:
            self.pos += 1
        return ch

    def _skip_whitespace(self) -> None:
        while self._peek().isspace():
            self.pos += 1

    def _expect(self, ch: str, message: str) -> None:
        self._skip_whitespace()
        if self._get() != ch:
            raise EvaluationError(message)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def evaluate(self) -> float:
        """Parse the whole text and return its value."""
        self.pos = 0
        result = self._parse_expression()
        self._skip_whitespace()
        if self.pos < len(self.text):
            raise EvaluationError(
                f"Unexpected character at end of expression: {self.text[self.pos:]!r}"
            )
        return result

    def _parse_expression(self) -> float:
        left = self._parse_term()
        while True:
            self._skip_whitespace()
            op = self._peek()
            if op not in ("+", "-"):
                return left
            self._get()
            right = self._parse_term()
            left = left + right if op == "+" else left - right

    def _parse_term(self) -> float:
        left = self._parse_factor()
        while True:
            self._skip_whitespace()
            op = self._peek()
            if op not in ("*", "/"):
                return left
            self._get()
            right = self._parse_factor()
            if op == "*":
                left = left * right
            else:
                if right == 0:
                    raise EvaluationError("Division by zero")
                left = left / right

    def _parse_factor(self) -> float:
        self._skip_whitespace()
        op = self._peek()
        if op in ("+", "-"):
            self._get()
            value = self._parse_primary()
            return -value if op == "-" else value
        return self._parse_primary()

    def _parse_primary(self) -> float:
        self._skip_whitespace()
        ch = self._peek()

        if ch.isdigit() or ch == ".":
            return self._parse_number()

        if ch == "x":
            self._get()
            return self.x
        if ch == "y":
            self._get()
            return self.y

        if ch == "(":
            self._get()
            value = self._parse_expression()
            self._expect(")", "Expected ')'")
            return value

        name = self._parse_name()
        if name in CONSTANTS:
            return CONSTANTS[name]
        if name in FUNCTIONS:
            if self._get() != "(":
                raise EvaluationError(f"Expected '(' after function name {name!r}")
            arg = self._parse_expression()
            self._expect(")", "Expected ')' after function argument")
            return self._apply(name, arg)

        if not name:
            found = repr(ch) if ch else "end of expression"
            raise EvaluationError(f"Unexpected {found} at position {self.pos}")
        raise EvaluationError(f"Unknown function or variable: {name}")

    def _parse_number(self) -> float:
        start = self.pos
        while self._peek().isdigit() or self._peek() == ".":
            self.pos += 1
        literal = self.text[start : self.pos]
        try:
            return float(literal)
        except ValueError:
            raise EvaluationError(f"Malformed number: {literal!r}") from None

    def _parse_name(self) -> str:
        start = self.pos
        while self._peek().isalpha() or self._peek() == "_":
            self.pos += 1
        return self.text[start : self.pos]

    @staticmethod
    def _apply(name: str, arg: float) -> float:
        try:
            return float(FUNCTIONS[name](arg))
        except (OverflowError, ValueError) as exc:
            if isinstance(exc, EvaluationError):
                raise
            raise EvaluationError(f"{name}({arg!r}) is undefined: {exc}") from exc


def evaluate(text: str, x: float, y: float) -> float:
    """Evaluate ``text`` at ``(x, y)``; raises EvaluationError on failure."""
    return ExpressionEvaluator(text, x, y).evaluate()
