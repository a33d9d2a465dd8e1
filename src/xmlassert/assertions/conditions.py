"""Comparison conditions applied to extracted values."""

from __future__ import annotations

import json
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable

from xmlassert.assertions.errors import CompareError, InvalidPatternError, NotNumericError
from xmlassert.assertions.path import Extracted


class Condition(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    REGEX = "regex"
    NOT_REGEX = "not_regex"
    GT = "gt"
    GT_OR_EQUALS = "gt_or_equals"
    LT = "lt"
    LT_OR_EQUALS = "lt_or_equals"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"
    LENGTH_EQUALS = "length_equals"
    LENGTH_NOT_EQUALS = "length_not_equals"
    LENGTH_GT = "length_gt"
    LENGTH_LT = "length_lt"
    NONE = "none"

    @classmethod
    def parse(cls, name: str | Condition) -> Condition:
        """Accept ``EQUALS``, ``equals`` and ``not-equals`` style names."""
        if isinstance(name, Condition):
            return name
        normalized = str(name).strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown condition: '{name}'") from None

    @property
    def needs_expected(self) -> bool:
        return self not in _UNARY


_UNARY = frozenset({Condition.EMPTY, Condition.NOT_EMPTY, Condition.NONE})


def render(value: Any) -> str:
    """String form used by text conditions and failure messages."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _to_decimal(raw: Any) -> Decimal:
    if isinstance(raw, (dict, list)) or raw is None:
        raise NotNumericError(f"'{render(raw)}' is not a number")
    try:
        number = Decimal(str(raw).strip())
    except InvalidOperation:
        raise NotNumericError(f"'{raw}' is not a number") from None
    if not number.is_finite():
        raise NotNumericError(f"'{raw}' is not a finite number")
    return number


def _length_of(extracted: Extracted) -> int:
    if not extracted.matched:
        return 0
    value = extracted.value
    if isinstance(value, (str, dict, list)):
        return len(value)
    return len(render(value))


def _is_empty(extracted: Extracted) -> bool:
    if not extracted.matched:
        return True
    value = extracted.value
    return isinstance(value, (str, dict, list)) and len(value) == 0


def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(f"invalid regular expression '{pattern}': {e}") from e


def _any_text(check: Callable[[str, str], bool]) -> Callable[[Extracted, str], bool]:
    def _apply(extracted: Extracted, expected: str) -> bool:
        return any(check(render(v), expected) for v in extracted.values)

    return _apply


def _any_number(check: Callable[[Decimal, Decimal], bool]) -> Callable[[Extracted, str], bool]:
    def _apply(extracted: Extracted, expected: str) -> bool:
        limit = _to_decimal(expected)
        # every operand is parsed first so a bad element is never masked
        numbers = [_to_decimal(v) for v in extracted.values]
        return any(check(n, limit) for n in numbers)

    return _apply


def _regex(negate: bool) -> Callable[[Extracted, str], bool]:
    def _apply(extracted: Extracted, expected: str) -> bool:
        pattern = _compile(expected)
        return any(
            (pattern.search(render(v)) is None) == negate for v in extracted.values
        )

    return _apply


def _length(check: Callable[[int, int], bool]) -> Callable[[Extracted, str], bool]:
    def _apply(extracted: Extracted, expected: str) -> bool:
        try:
            size = int(expected.strip())
        except ValueError:
            raise NotNumericError(f"expected length '{expected}' is not an integer") from None
        return check(_length_of(extracted), size)

    return _apply


_CHECKS: dict[Condition, Callable[[Extracted, str | None], bool]] = {
    Condition.EQUALS: _any_text(lambda a, e: a == e),
    Condition.NOT_EQUALS: _any_text(lambda a, e: a != e),
    Condition.CONTAINS: _any_text(lambda a, e: e in a),
    Condition.NOT_CONTAINS: _any_text(lambda a, e: e not in a),
    Condition.STARTS_WITH: _any_text(lambda a, e: a.startswith(e)),
    Condition.ENDS_WITH: _any_text(lambda a, e: a.endswith(e)),
    Condition.REGEX: _regex(negate=False),
    Condition.NOT_REGEX: _regex(negate=True),
    Condition.GT: _any_number(lambda a, e: a > e),
    Condition.GT_OR_EQUALS: _any_number(lambda a, e: a >= e),
    Condition.LT: _any_number(lambda a, e: a < e),
    Condition.LT_OR_EQUALS: _any_number(lambda a, e: a <= e),
    Condition.EMPTY: lambda extracted, _: _is_empty(extracted),
    Condition.NOT_EMPTY: lambda extracted, _: not _is_empty(extracted),
    Condition.LENGTH_EQUALS: _length(lambda a, e: a == e),
    Condition.LENGTH_NOT_EQUALS: _length(lambda a, e: a != e),
    Condition.LENGTH_GT: _length(lambda a, e: a > e),
    Condition.LENGTH_LT: _length(lambda a, e: a < e),
    Condition.NONE: lambda extracted, _: True,
}

_DESCRIPTIONS: dict[Condition, str] = {
    Condition.EQUALS: "be",
    Condition.NOT_EQUALS: "not be",
    Condition.CONTAINS: "contain",
    Condition.NOT_CONTAINS: "not contain",
    Condition.STARTS_WITH: "start with",
    Condition.ENDS_WITH: "end with",
    Condition.REGEX: "match",
    Condition.NOT_REGEX: "not match",
    Condition.GT: "be greater than",
    Condition.GT_OR_EQUALS: "be greater than or equal to",
    Condition.LT: "be less than",
    Condition.LT_OR_EQUALS: "be less than or equal to",
    Condition.EMPTY: "be empty",
    Condition.NOT_EMPTY: "not be empty",
    Condition.LENGTH_EQUALS: "have length",
    Condition.LENGTH_NOT_EQUALS: "not have length",
    Condition.LENGTH_GT: "have length greater than",
    Condition.LENGTH_LT: "have length less than",
    Condition.NONE: "exist",
}


def evaluate_condition(
    extracted: Extracted, condition: Condition, expected: str | None
) -> bool:
    """Apply ``condition`` to the extracted value.

    Raises:
        CompareError: the comparison itself is impossible (missing expected
            value, non-numeric operand, invalid pattern).
    """
    if condition.needs_expected and expected is None:
        raise CompareError(f"condition '{condition.value}' requires an expected value")
    return _CHECKS[condition](extracted, expected)


def describe_mismatch(
    expression: str, extracted: Extracted, condition: Condition, expected: str | None
) -> str:
    actual = render(extracted.value) if extracted.matched else "<no match>"
    if condition.needs_expected:
        return (
            f"Value at '{expression}' expected to {_DESCRIPTIONS[condition]} "
            f"'{expected}', but found '{actual}'"
        )
    return f"Value at '{expression}' expected to {_DESCRIPTIONS[condition]}, but found '{actual}'"
