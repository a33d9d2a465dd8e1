"""Generate JSON Schema for the suite YAML format."""

from __future__ import annotations

import json
from collections.abc import Iterator
from graphlib import TopologicalSorter
from pathlib import Path

from xmlassert.config import SuiteConfig

_DEFS_PREFIX = "#/$defs/"


def _refs(node: object) -> Iterator[str]:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith(_DEFS_PREFIX):
            yield ref[len(_DEFS_PREFIX):]
        for value in node.values():
            yield from _refs(value)
    elif isinstance(node, list):
        for value in node:
            yield from _refs(value)


def generate_json_schema() -> dict:
    """Suite schema with ``$defs`` listed leaves first (Condition before XmlAssertionConfig)."""
    schema = SuiteConfig.model_json_schema()
    defs = schema.get("$defs")
    if defs:
        graph = {name: {r for r in _refs(body) if r in defs} for name, body in defs.items()}
        schema["$defs"] = {name: defs[name] for name in TopologicalSorter(graph).static_order()}
    return schema


def write_json_schema(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(generate_json_schema(), indent=2) + "\n")
