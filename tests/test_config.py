"""Tests for suite loading and validation."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from xmlassert.assertions.conditions import Condition
from xmlassert.config import SuiteConfig, XmlAssertionConfig, load_config


def _example_configs() -> list[Path]:
    repo_root = Path(__file__).resolve().parents[1]
    examples_dir = repo_root / "examples"
    return sorted(p for p in examples_dir.glob("*.yaml") if p.is_file())


@pytest.fixture()
def tmp_yaml(tmp_path):
    """Helper that writes YAML content to a temp file and returns its path."""

    def _write(content: str) -> Path:
        p = tmp_path / "suite.yaml"
        p.write_text(textwrap.dedent(content))
        return p

    return _write


def test_load_minimal_config(tmp_yaml):
    path = tmp_yaml("""\
        cases:
          - name: status
            body: "<r><code>200</code></r>"
            assertions:
              - path: r.code
                expected: 200
    """)
    cfg = load_config(path)
    assert len(cfg.cases) == 1
    case = cfg.cases[0]
    assert case.name == "status"
    assert case.variables == {}
    assertion = case.assertions[0]
    assert assertion.path == "r.code"
    assert assertion.expected == "200"
    assert assertion.condition is Condition.EQUALS
    assert assertion.definite_required is False


def test_condition_names_are_normalized(tmp_yaml):
    path = tmp_yaml("""\
        cases:
          - name: status
            body: "<r/>"
            assertions:
              - path: r.code
                condition: NOT-EQUALS
                expected: "500"
              - path: r.code
                condition: EMPTY
    """)
    cfg = load_config(path)
    conditions = [a.condition for a in cfg.cases[0].assertions]
    assert conditions == [Condition.NOT_EQUALS, Condition.EMPTY]


def test_body_file_is_resolved_relative_to_config(tmp_yaml, tmp_path):
    (tmp_path / "bodies").mkdir()
    (tmp_path / "bodies" / "ok.xml").write_text("<r><code>200</code></r>")
    path = tmp_yaml("""\
        cases:
          - name: from-file
            body_file: bodies/ok.xml
            assertions:
              - path: r.code
                expected: "200"
    """)
    cfg = load_config(path)
    case = cfg.cases[0]
    assert Path(case.body_file).is_absolute()
    assert case.read_body() == "<r><code>200</code></r>"


def test_unknown_condition_is_rejected():
    with pytest.raises(ValidationError, match="Unknown condition"):
        XmlAssertionConfig(path="r.code", condition="roughly")


def test_unknown_assertion_field_is_rejected():
    with pytest.raises(ValidationError):
        XmlAssertionConfig(path="r.code", jsonpath="r.code")


def test_case_needs_exactly_one_body_source():
    with pytest.raises(ValidationError, match="exactly one"):
        SuiteConfig(
            cases=[
                {
                    "name": "both",
                    "body": "<r/>",
                    "body_file": "r.xml",
                    "assertions": [{"path": "r"}],
                }
            ]
        )
    with pytest.raises(ValidationError, match="exactly one"):
        SuiteConfig(cases=[{"name": "neither", "assertions": [{"path": "r"}]}])


def test_empty_assertions_are_rejected():
    with pytest.raises(ValidationError, match="assertions must not be empty"):
        SuiteConfig(cases=[{"name": "x", "body": "<r/>", "assertions": []}])


def test_empty_and_duplicate_cases_are_rejected():
    with pytest.raises(ValidationError, match="cases must not be empty"):
        SuiteConfig(cases=[])
    case = {"name": "dup", "body": "<r/>", "assertions": [{"path": "r"}]}
    with pytest.raises(ValidationError, match="Duplicate case name"):
        SuiteConfig(cases=[case, case])


def test_non_mapping_yaml_is_rejected(tmp_yaml):
    with pytest.raises(ValueError, match="mapping"):
        load_config(tmp_yaml("- just\n- a list\n"))


@pytest.mark.parametrize("path", _example_configs(), ids=lambda p: p.name)
def test_example_configs_load(path):
    cfg = load_config(path)
    assert cfg.cases
