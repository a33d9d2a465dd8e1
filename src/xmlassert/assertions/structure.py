"""Well-formedness check for XML response bodies."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from xml.sax import SAXParseException
from xml.sax.handler import ErrorHandler
from xml.sax.xmlreader import InputSource, XMLReader

from defusedxml.common import DefusedXmlException
from defusedxml.expatreader import create_parser

from xmlassert.assertions.errors import ParseError

if TYPE_CHECKING:
    from xmlassert.assertions.pool import ValidatorHandle


@dataclass(frozen=True)
class ValidDocument:
    """Text that passed the structural check, plus any non-fatal diagnostics."""

    text: str
    diagnostics: tuple[str, ...] = ()


class _DiagnosticCollector(ErrorHandler):
    """Records recoverable problems; only fatal errors abort the parse."""

    def __init__(self) -> None:
        self.diagnostics: list[str] = []

    def warning(self, exception: SAXParseException) -> None:
        self.diagnostics.append(f"warning: {exception}")

    def error(self, exception: SAXParseException) -> None:
        self.diagnostics.append(f"error: {exception}")

    def fatalError(self, exception: SAXParseException) -> None:
        raise exception


def create_reader() -> XMLReader:
    """Build a hardened SAX reader.

    DTDs, entity declarations and external references are all refused.
    Namespace processing is on so that unbound prefixes are rejected here
    rather than later by the tree builder.
    """
    return create_parser(
        namespaceHandling=1,
        forbid_dtd=True,
        forbid_entities=True,
        forbid_external=True,
    )


def validate_structure(
    text: str,
    handle: ValidatorHandle,
    logger: logging.Logger | None = None,
) -> ValidDocument:
    """Parse ``text`` with the worker's reader and report whether it is well-formed.

    Raises:
        ParseError: the text is not well-formed XML or declares a doctype.
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    reader = handle.reader
    collector = _DiagnosticCollector()
    reader.setErrorHandler(collector)

    source = InputSource()
    source.setCharacterStream(io.StringIO(text))
    try:
        reader.parse(source)
    except DefusedXmlException as e:
        logger.warning(f"Rejected document type declaration: {e}")
        raise ParseError(f"Document type declarations are not allowed: {e}") from e
    except SAXParseException as e:
        logger.info(f"Response is not well-formed XML: {e}")
        raise ParseError(str(e)) from e
    finally:
        reader.setErrorHandler(ErrorHandler())
        handle.uses += 1

    for diagnostic in collector.diagnostics:
        logger.debug(f"XML diagnostic: {diagnostic}")
    return ValidDocument(text=text, diagnostics=tuple(collector.diagnostics))
