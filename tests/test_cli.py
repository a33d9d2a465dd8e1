import json
import logging

from typer.testing import CliRunner

from xmlassert.cli import app

runner = CliRunner()

BODY = "<r><code>200</code></r>"


def _body(tmp_path, text=BODY):
    path = tmp_path / "body.xml"
    path.write_text(text)
    return str(path)


def test_check_pass(tmp_path):
    result = runner.invoke(
        app, ["check", _body(tmp_path), "--path", "r.code", "--expected", "200"]
    )
    assert result.exit_code == 0
    assert result.output.startswith("PASS")


def test_check_failure_exits_1(tmp_path):
    result = runner.invoke(
        app, ["check", _body(tmp_path), "-p", "r.code", "-e", "404"]
    )
    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert "404" in result.output


def test_check_error_exits_2(tmp_path):
    body = _body(tmp_path, "<r><code>200</r>")
    result = runner.invoke(app, ["check", body, "-p", "r.code", "-e", "200"])
    assert result.exit_code == 2
    assert "ERROR" in result.output


def test_check_definite_flag(tmp_path):
    result = runner.invoke(
        app, ["check", _body(tmp_path), "-p", "r.code[*]", "-e", "200", "--definite"]
    )
    assert result.exit_code == 2
    assert "not definite" in result.output


def test_check_reads_stdin():
    result = runner.invoke(
        app,
        ["check", "-", "-p", "r.code", "-c", "gt", "-e", "199.5"],
        input=BODY,
    )
    assert result.exit_code == 0


def test_check_missing_body_file():
    result = runner.invoke(app, ["check", "nonexistent.xml", "-p", "r.code"])
    assert result.exit_code == 2


def test_check_unknown_condition(tmp_path):
    result = runner.invoke(
        app, ["check", _body(tmp_path), "-p", "r.code", "-c", "roughly"]
    )
    assert result.exit_code == 2


def test_run_missing_config():
    result = runner.invoke(app, ["run", "nonexistent.yaml"])
    assert result.exit_code != 0


def test_run_invalid_config(tmp_path):
    config = tmp_path / "suite.yaml"
    config.write_text("cases: []\n")
    result = runner.invoke(app, ["run", str(config)])
    assert result.exit_code == 1
    assert "invalid suite" in result.output


def test_run_suite(tmp_path):
    config = tmp_path / "suite.yaml"
    config.write_text("""
cases:
  - name: ok
    body: "<r><code>200</code></r>"
    assertions:
      - path: r.code
        expected: 200
""")
    result = runner.invoke(
        app, ["run", str(config), "--output-dir", str(tmp_path / "runs")]
    )
    assert result.exit_code == 0
    assert "Run complete" in result.output
    assert "PASS" in result.output


def test_run_suite_with_failures_exits_1(tmp_path):
    config = tmp_path / "suite.yaml"
    config.write_text("""
cases:
  - name: bad
    body: "<r><code>500</code></r>"
    assertions:
      - path: r.code
        expected: 200
""")
    result = runner.invoke(
        app, ["run", str(config), "--output-dir", str(tmp_path / "runs")]
    )
    assert result.exit_code == 1
    assert "FAIL" in result.output


def test_mock_command():
    result = runner.invoke(app, ["mock", "id-@integer(3,3)"])
    assert result.exit_code == 0
    assert result.output.strip() == "id-3"


def test_mock_command_bad_arguments():
    result = runner.invoke(app, ["mock", "@integer(a,b)"])
    assert result.exit_code == 1


def test_schema_command_writes_file(tmp_path):
    out = tmp_path / "schema.json"
    result = runner.invoke(app, ["schema", "--out", str(out)])
    assert result.exit_code == 0
    schema = json.loads(out.read_text())
    assert "cases" in schema["properties"]


def test_check_verbose_does_not_leave_handlers(tmp_path):
    body = _body(tmp_path)
    for _ in range(3):
        result = runner.invoke(
            app, ["check", body, "-p", "r.code", "-e", "200", "--verbose"]
        )
        assert result.exit_code == 0
    assert logging.getLogger("xmlassert.cli").handlers == []
