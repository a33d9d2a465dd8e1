"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

NULL_RESULT_MESSAGE = "null result"


@dataclass(frozen=True)
class AssertionOutcome:
    """Verdict of evaluating one assertion against one response.

    Attributes:
        name: Identifier of the assertion that produced the outcome.
        is_error: The assertion could not be evaluated (malformed body,
            bad configuration, comparison failure). Always implies
            ``is_failure``.
        is_failure: The response did not satisfy the assertion.
        message: Diagnostic text. Required whenever ``is_failure`` is set.
    """

    name: str
    is_error: bool = False
    is_failure: bool = False
    message: str | None = None

    def __post_init__(self) -> None:
        if self.is_error and not self.is_failure:
            raise ValueError("an error outcome must also be a failure")
        if self.is_failure and not self.message:
            raise ValueError("a failed outcome must carry a message")

    @property
    def passed(self) -> bool:
        return not self.is_failure

    @property
    def status(self) -> str:
        if self.is_error:
            return "ERROR"
        return "FAIL" if self.is_failure else "PASS"

    @classmethod
    def success(cls, name: str) -> AssertionOutcome:
        return cls(name=name)

    @classmethod
    def null_result(cls, name: str) -> AssertionOutcome:
        """Blank responses are vacuously satisfied."""
        return cls(name=name, message=NULL_RESULT_MESSAGE)

    @classmethod
    def failure(cls, name: str, message: str) -> AssertionOutcome:
        return cls(name=name, is_failure=True, message=message)

    @classmethod
    def error(cls, name: str, message: str) -> AssertionOutcome:
        return cls(name=name, is_error=True, is_failure=True, message=message)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
