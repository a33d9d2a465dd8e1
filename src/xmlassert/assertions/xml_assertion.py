"""XML response assertion: well-formedness, canonical tree, JSONPath, condition."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xmlassert.assertions.base import AssertionOutcome
from xmlassert.assertions.canonical import transcode
from xmlassert.assertions.conditions import describe_mismatch, evaluate_condition
from xmlassert.assertions.errors import (
    CompareError,
    IndefiniteExpressionError,
    ParseError,
    PathSyntaxError,
)
from xmlassert.assertions.path import compile_path, extract, require_definite
from xmlassert.assertions.pool import ValidatorPool, default_pool
from xmlassert.assertions.structure import validate_structure

if TYPE_CHECKING:
    from xmlassert.config import XmlAssertionConfig


class XmlAssertion:
    """Evaluates one configured assertion against response bodies.

    The instance is immutable configuration and may be shared by every worker;
    parser state lives in the pool, one handle per worker thread.
    """

    def __init__(
        self,
        config: XmlAssertionConfig,
        *,
        pool: ValidatorPool | None = None,
        logger: logging.Logger | None = None,
    ):
        self.config = config
        self.pool = pool if pool is not None else default_pool
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return self.config.name

    def evaluate(self, response_body: str | None) -> AssertionOutcome:
        logger = self.logger
        if response_body is None or not response_body.strip():
            logger.info(f"{self.name}: response body is empty")
            return AssertionOutcome.null_result(self.name)

        try:
            handle = self.pool.acquire()
        except Exception as e:
            logger.error(f"Error initializing XML reader for {self.name}: {e}")
            return AssertionOutcome.error(
                self.name, f"Cannot initialize XML reader in element: {self.name}"
            )

        try:
            document = validate_structure(response_body, handle, logger=logger)
            tree = transcode(document)
        except ParseError as e:
            return AssertionOutcome.error(self.name, str(e))

        config = self.config
        try:
            expression = compile_path(config.path)
            if config.definite_required:
                require_definite(expression)
            extracted = extract(tree, expression)
            logger.info(
                f"{self.name}: actual={extracted.value!r}, expected={config.expected!r}, "
                f"condition={config.condition.value}, path={expression.expression}"
            )
            satisfied = evaluate_condition(extracted, config.condition, config.expected)
        except (PathSyntaxError, IndefiniteExpressionError, CompareError) as e:
            logger.warning(f"{self.name}: {e}")
            return AssertionOutcome.error(self.name, str(e) or type(e).__name__)

        if satisfied:
            logger.info(f"{self.name}: passed")
            return AssertionOutcome.success(self.name)

        message = describe_mismatch(
            expression.expression, extracted, config.condition, config.expected
        )
        logger.info(f"{self.name}: {message}")
        return AssertionOutcome.failure(self.name, message)

    def thread_started(self) -> None:
        # the handle is created lazily by the first evaluate() on the worker
        pass

    def thread_finished(self) -> bool:
        """Drop this worker's reader. Returns whether there was one to drop."""
        released = self.pool.release()
        if released:
            self.logger.debug(f"{self.name}: released XML reader for worker")
        return released


def evaluate_xml_assertion(
    response_body: str | None,
    config: XmlAssertionConfig,
    *,
    pool: ValidatorPool | None = None,
    logger: logging.Logger | None = None,
) -> AssertionOutcome:
    """Evaluate ``config`` against one body without keeping an assertion object."""
    return XmlAssertion(config, pool=pool, logger=logger).evaluate(response_body)
