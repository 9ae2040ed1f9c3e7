"""Bracket checking, shunting-yard conversion and postfix evaluation."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from drillbox.calc.stack import SliceStack, Stack

_CLOSERS = {")": "(", "]": "[", "}": "{", ">": "<"}
_OPENERS = frozenset("([{<")
_PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3}
_RIGHT_ASSOCIATIVE = frozenset({"^"})
_FUNCTIONS = {"sin": math.sin, "cos": math.cos}


class MismatchError(ValueError):
    """A bracket at ``position`` has no matching partner."""

    def __init__(self, position: int) -> None:
        super().__init__(f"invalid parentheses at position {position}")
        self.position = position


class ExpressionSyntaxError(ValueError):
    """The expression is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DivisionByZeroError(ZeroDivisionError):
    """A division by zero happened during evaluation."""

    def __init__(self) -> None:
        super().__init__("division by zero")


class MultiError(Exception):
    """Collects several errors and reports them together."""

    def __init__(self, errors: Optional[Iterable[BaseException]] = None) -> None:
        super().__init__()
        self.errors: list[BaseException] = list(errors or [])

    def add(self, err: Optional[BaseException]) -> None:
        if err is not None:
            self.errors.append(err)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def __str__(self) -> str:
        return "\n".join(str(err) for err in self.errors)


def validate_parentheses(text: str, stack: Stack[str]) -> bool:
    """Return True if every bracket in ``text`` is matched; raise MultiError otherwise.

    Positions are byte offsets into the UTF-8 encoding of ``text``.
    """
    positions: SliceStack[int] = SliceStack()
    errors = MultiError()
    offset = 0
    for char in text:
        if char in _OPENERS:
            stack.push(char)
            positions.push(offset)
        elif char in _CLOSERS:
            try:
                top: Optional[str] = stack.pop()
            except IndexError:
                top = None
            if top != _CLOSERS[char]:
                errors.add(MismatchError(offset))
            elif not positions.is_empty():
                positions.pop()
        offset += len(char.encode("utf-8"))

    while not positions.is_empty():
        errors.add(MismatchError(positions.pop()))

    if errors.has_errors():
        raise errors
    return True


def _shunting_yard(expr: str, operators: Stack[str]) -> tuple[list[str], MultiError]:
    output: list[str] = []
    errors = MultiError()

    for token in tokenize(expr):
        if is_number(token):
            output.append(token)
        elif token in _FUNCTIONS or token == "(":
            operators.push(token)
        elif token == ")":
            found = False
            while not operators.is_empty():
                op = operators.pop()
                if op == "(":
                    found = True
                    break
                output.append(op)
            if not found:
                errors.add(ExpressionSyntaxError("mismatched parentheses (extra ')')"))
            elif not operators.is_empty() and operators.peek() in _FUNCTIONS:
                output.append(operators.pop())
        elif token in _PRECEDENCE:
            p1 = _PRECEDENCE[token]
            while not operators.is_empty():
                top = operators.peek()
                if top == "(":
                    break
                p2 = _PRECEDENCE.get(top, 0)
                if p2 > p1 or (p2 == p1 and token not in _RIGHT_ASSOCIATIVE):
                    output.append(operators.pop())
                else:
                    break
            operators.push(token)
        else:
            errors.add(ExpressionSyntaxError(f"unknown operator: {token}"))

    while not operators.is_empty():
        op = operators.pop()
        if op == "(":
            errors.add(ExpressionSyntaxError("mismatched parentheses (extra '(')"))
            continue
        output.append(op)

    return output, errors


def infix_to_postfix(expr: str, operators: Stack[str]) -> list[str]:
    """Convert an infix expression to postfix tokens; raise MultiError on problems."""
    output, errors = _shunting_yard(expr, operators)
    if errors.has_errors():
        raise errors
    return output


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.inf if base == 0 else math.nan


def _apply_function(name: str, value: float) -> float:
    try:
        return _FUNCTIONS[name](value)
    except ValueError:
        return math.nan


def evaluate_postfix(tokens: Iterable[str], stack: Stack[float]) -> float:
    """Evaluate postfix tokens.

    Raises MultiError for operand or operator problems found on the way and
    ExpressionSyntaxError if the stack does not end with exactly one value.
    """
    errors = MultiError()

    for token in tokens:
        number = _parse_number(token)
        if number is not None:
            stack.push(number)
        elif token in _FUNCTIONS:
            try:
                value = stack.pop()
            except IndexError:
                errors.add(ExpressionSyntaxError(
                    f"invalid postfix expression: insufficient operands for {token}"))
                continue
            stack.push(_apply_function(token, value))
        else:
            try:
                b = stack.pop()
                a = stack.pop()
            except IndexError:
                errors.add(ExpressionSyntaxError(
                    f"invalid postfix expression: insufficient operands for {token}"))
                continue

            if token == "+":
                result = a + b
            elif token == "-":
                result = a - b
            elif token == "*":
                result = a * b
            elif token == "/":
                if b == 0:
                    errors.add(DivisionByZeroError())
                    result = 0.0
                else:
                    result = a / b
            elif token == "^":
                result = _pow(a, b)
            else:
                errors.add(ExpressionSyntaxError(f"unknown operator: {token}"))
                continue
            stack.push(result)

    if errors.has_errors():
        raise errors

    if stack.is_empty():
        raise ExpressionSyntaxError("invalid postfix expression (too many values or empty)")
    result = stack.pop()
    if not stack.is_empty():
        raise ExpressionSyntaxError("invalid postfix expression (too many values or empty)")
    return result


def tokenize(expr: str) -> list[str]:
    """Split an expression into numbers, words and single-character symbols."""
    tokens: list[str] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            tokens.append("".join(current))
            current.clear()

    for char in expr:
        if char.isspace():
            flush()
        elif char.isdecimal() or char == "." or char.isalpha():
            current.append(char)
        else:
            flush()
            tokens.append(char)
    flush()
    return tokens


def _parse_number(token: str) -> Optional[float]:
    if not token or "_" in token or token != token.strip():
        return None
    try:
        value = float(token)
    except ValueError:
        return None
    if math.isinf(value) and token.lstrip("+-").lower() not in ("inf", "infinity"):
        return None
    return value


def is_number(token: str) -> bool:
    """Tell whether ``token`` parses as a finite-range floating-point number."""
    return _parse_number(token) is not None


def calculate(expr: str) -> float:
    """Validate, convert and evaluate ``expr``; raise MultiError collecting every problem."""
    all_errors = MultiError()

    try:
        validate_parentheses(expr, SliceStack())
    except MultiError as err:
        all_errors.add(err)

    postfix, conversion_errors = _shunting_yard(expr, SliceStack())
    if conversion_errors.has_errors():
        all_errors.add(conversion_errors)

    result = 0.0
    try:
        result = evaluate_postfix(postfix, SliceStack())
    except (MultiError, ExpressionSyntaxError) as err:
        all_errors.add(err)

    if all_errors.has_errors():
        raise all_errors
    return result