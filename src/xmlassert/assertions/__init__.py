"""Assertion system for evaluating XML response bodies."""

from xmlassert.assertions.base import AssertionOutcome
from xmlassert.assertions.conditions import Condition
from xmlassert.assertions.xml_assertion import XmlAssertion, evaluate_xml_assertion

__all__ = ["AssertionOutcome", "Condition", "XmlAssertion", "evaluate_xml_assertion"]
