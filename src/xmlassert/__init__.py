"""xmlassert: validate XML response bodies with JSONPath conditions."""

__version__ = "0.1.0"
