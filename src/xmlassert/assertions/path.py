"""JSONPath extraction over canonical trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath
from jsonpath_ng.jsonpath import Child, DatumInContext, Fields, Index, JSONPath, Root, This

from xmlassert.assertions.canonical import CanonicalNode
from xmlassert.assertions.errors import IndefiniteExpressionError, PathSyntaxError


@dataclass(frozen=True)
class PathExpression:
    expression: str
    is_definite: bool
    parsed: JSONPath = field(compare=False, repr=False)


@dataclass(frozen=True)
class Extracted:
    """Matches for one expression, in document order.

    A definite expression yields at most one value; an indefinite one yields
    a list, possibly with a single element.
    """

    values: list[Any]
    definite: bool

    @property
    def matched(self) -> bool:
        return bool(self.values)

    @property
    def value(self) -> Any:
        if self.definite:
            return self.values[0] if self.values else None
        return list(self.values)


def _is_definite(node: JSONPath) -> bool:
    if isinstance(node, (Root, This)):
        return True
    if isinstance(node, Child):
        return _is_definite(node.left) and _is_definite(node.right)
    if isinstance(node, Fields):
        return len(node.fields) == 1 and node.fields[0] != "*"
    if isinstance(node, Index):
        # older jsonpath-ng releases only know single indices
        indices = getattr(node, "indices", None)
        return indices is None or len(indices) == 1
    # slices, wildcards, descendants, unions, filters
    return False


@lru_cache(maxsize=256)
def compile_path(expression: str) -> PathExpression:
    """Parse ``expression`` once; the result is reused across evaluations.

    Raises:
        PathSyntaxError: the expression is blank or malformed.
    """
    if not expression or not expression.strip():
        raise PathSyntaxError("path expression is empty")
    try:
        parsed = parse_jsonpath(expression.strip())
    except JSONPathError as e:
        raise PathSyntaxError(f"invalid path expression '{expression}': {e}") from e
    return PathExpression(
        expression=expression.strip(),
        is_definite=_is_definite(parsed),
        parsed=parsed,
    )


def require_definite(expression: PathExpression) -> None:
    if not expression.is_definite:
        raise IndefiniteExpressionError(
            f"path expression is not definite: {expression.expression}"
        )


def _indexes_into_text(match: DatumInContext) -> bool:
    return (
        isinstance(match.path, Index)
        and match.context is not None
        and isinstance(match.context.value, str)
    )


def extract(tree: CanonicalNode, expression: PathExpression) -> Extracted:
    """Evaluate ``expression`` against ``tree``.

    No match is not an error here: the empty result goes on to the condition,
    which decides what absence means.
    """
    matches = [m for m in expression.parsed.find(tree) if not _indexes_into_text(m)]
    return Extracted(values=[m.value for m in matches], definite=expression.is_definite)
