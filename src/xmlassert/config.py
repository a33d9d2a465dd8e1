from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from xmlassert.assertions.conditions import Condition


class XmlAssertionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    name: str = "xml_assertion"
    path: str
    expected: str | None = None
    condition: Condition = Condition.EQUALS
    definite_required: bool = False

    @field_validator("condition", mode="before")
    @classmethod
    def normalize_condition(cls, v: Any) -> Condition:
        return Condition.parse(v)

    @field_validator("expected", mode="before")
    @classmethod
    def stringify_expected(cls, v: Any) -> str | None:
        # YAML turns `expected: 200` into an int
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return str(v).lower()
        return str(v)


class CaseConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    body: str | None = None
    body_file: str | None = None
    variables: dict[str, str] = {}
    assertions: list[XmlAssertionConfig]

    @field_validator("assertions")
    @classmethod
    def assertions_must_not_be_empty(
        cls, v: list[XmlAssertionConfig]
    ) -> list[XmlAssertionConfig]:
        if not v:
            raise ValueError("assertions must not be empty")
        return v

    @model_validator(mode="after")
    def exactly_one_body_source(self) -> CaseConfig:
        if (self.body is None) == (self.body_file is None):
            raise ValueError(
                f"case '{self.name}' must set exactly one of 'body' or 'body_file'"
            )
        return self

    def read_body(self) -> str:
        if self.body is not None:
            return self.body
        return Path(self.body_file).read_text(encoding="utf-8")


class SuiteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    cases: list[CaseConfig]

    @field_validator("cases")
    @classmethod
    def cases_must_be_unique(cls, v: list[CaseConfig]) -> list[CaseConfig]:
        if not v:
            raise ValueError("cases must not be empty")
        seen: set[str] = set()
        for case in v:
            if case.name in seen:
                raise ValueError(f"Duplicate case name '{case.name}'")
            seen.add(case.name)
        return v


def load_config(path: Path) -> SuiteConfig:
    """Load and validate an assertion suite from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{path} does not contain a mapping")

    config = SuiteConfig(**raw)

    # Resolve relative body files relative to config file location
    for case in config.cases:
        if case.body_file is None:
            continue
        body_path = Path(case.body_file)
        if not body_path.is_absolute():
            case.body_file = str((config_dir / body_path).resolve())

    return config
