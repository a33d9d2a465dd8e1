"""Errors raised by the individual assertion stages.

The coordinator turns every one of these into an error outcome; nothing here
is meant to escape ``XmlAssertion.evaluate``.
"""


class ParseError(ValueError):
    """The response body is malformed or contains disallowed markup."""


class PathSyntaxError(ValueError):
    """The path expression itself cannot be parsed."""


class IndefiniteExpressionError(ValueError):
    """A definite expression was required but the expression may match many nodes."""


class CompareError(ValueError):
    """The condition could not be evaluated against the extracted value."""


class NotNumericError(CompareError):
    pass


class InvalidPatternError(CompareError):
    pass
