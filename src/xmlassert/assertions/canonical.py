"""Convert a validated XML document into a plain dict/list/str tree.

Example::

    <order id="7"><item>a</item><item>b</item><note/></order>

becomes::

    {"order": {"id": "7", "item": ["a", "b"], "note": ""}}
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Union

from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import fromstring as defused_fromstring

from xmlassert.assertions.errors import ParseError
from xmlassert.assertions.structure import ValidDocument

CanonicalNode = Union[str, dict[str, "CanonicalNode"], list["CanonicalNode"]]

# Key for text that sits next to attributes or child elements.
CONTENT_KEY = "content"


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` part ElementTree puts on qualified names."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def _put(node: dict[str, CanonicalNode], key: str, value: CanonicalNode) -> None:
    # converted elements are never lists, so a list here means an earlier fold
    if key not in node:
        node[key] = value
    elif isinstance(node[key], list):
        node[key].append(value)
    else:
        node[key] = [node[key], value]


def _fold(element: ET.Element, converted: dict[int, CanonicalNode]) -> CanonicalNode:
    children = list(element)
    if not children and not element.attrib:
        return (element.text or "").strip()

    node: dict[str, CanonicalNode] = {}
    for name, value in element.attrib.items():
        _put(node, local_name(name), value)

    text = (element.text or "").strip()
    if text:
        _put(node, CONTENT_KEY, text)

    for child in children:
        _put(node, local_name(child.tag), converted.pop(id(child)))
        tail = (child.tail or "").strip()
        if tail:
            _put(node, CONTENT_KEY, tail)
    return node


def transcode(document: ValidDocument) -> dict[str, CanonicalNode]:
    """Build the canonical tree for an already validated document.

    Raises:
        ParseError: the tree builder rejects text the structural check let through.
    """
    try:
        root = defused_fromstring(
            document.text, forbid_dtd=True, forbid_entities=True, forbid_external=True
        )
    except (ET.ParseError, DefusedXmlException) as e:
        raise ParseError(str(e)) from e

    # Post-order walk without recursion so deeply nested bodies still convert.
    converted: dict[int, CanonicalNode] = {}
    stack: list[tuple[ET.Element, bool]] = [(root, False)]
    while stack:
        element, children_done = stack.pop()
        if children_done:
            converted[id(element)] = _fold(element, converted)
            continue
        stack.append((element, True))
        stack.extend((child, False) for child in element)

    return {local_name(root.tag): converted[id(root)]}
