from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

app = typer.Typer(name="xmlassert", help="Assert on XML response bodies with JSONPath")


@app.command()
def check(
    body: str = typer.Argument(help="Path to the response body, or - to read stdin"),
    path: str = typer.Option(..., "--path", "-p", help="JSONPath expression, e.g. r.code"),
    condition: str = typer.Option("equals", "--condition", "-c", help="Condition name"),
    expected: str | None = typer.Option(None, "--expected", "-e", help="Expected value"),
    definite: bool = typer.Option(
        False, "--definite", help="Fail with an error if the path may match several nodes"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Evaluate one assertion against one response body.

    Exit code 0 when it passes, 1 when it fails, 2 when it cannot be evaluated.
    """
    from pydantic import ValidationError

    from xmlassert.assertions import evaluate_xml_assertion
    from xmlassert.config import XmlAssertionConfig

    try:
        config = XmlAssertionConfig(
            name="check",
            path=path,
            condition=condition,
            expected=expected,
            definite_required=definite,
        )
    except ValidationError as e:
        typer.echo(f"Error: invalid assertion: {e}", err=True)
        raise typer.Exit(2)

    if body == "-":
        text = sys.stdin.read()
    else:
        body_path = Path(body)
        if not body_path.exists():
            typer.echo(f"Error: body file not found: {body}", err=True)
            raise typer.Exit(2)
        text = body_path.read_text(encoding="utf-8")

    logger = logging.getLogger("xmlassert.cli")
    handler = None
    if verbose:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    try:
        outcome = evaluate_xml_assertion(text, config, logger=logger)
    finally:
        if handler is not None:
            logger.removeHandler(handler)
            handler.close()

    line = outcome.status
    if outcome.message:
        line = f"{line}: {outcome.message}"
    typer.echo(line)

    if outcome.is_error:
        raise typer.Exit(2)
    if outcome.is_failure:
        raise typer.Exit(1)


@app.command()
def run(
    config: str = typer.Argument(help="Path to assertion suite YAML"),
    output_dir: str = typer.Option("runs", help="Output directory for run results"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    parallel: int = typer.Option(
        1, "--parallel", "-p", min=1, max=100, help="Number of worker threads"
    ),
):
    """Run every case of an assertion suite."""
    import yaml
    from pydantic import ValidationError

    from xmlassert.config import load_config
    from xmlassert.runner import Runner

    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(1)

    try:
        suite = load_config(config_path)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"Error: invalid suite {config}: {e}", err=True)
        raise typer.Exit(1)

    runner = Runner(
        config=suite,
        output_dir=Path(output_dir),
        verbose=verbose,
        parallel=parallel,
    )
    run_dir = runner.execute()

    typer.echo(f"Run complete: {run_dir}")
    typer.echo(f"Results: {run_dir / 'results.yaml'}")
    if not verbose:
        typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    if not runner.all_passed:
        raise typer.Exit(1)


@app.command()
def mock(
    spec: str = typer.Argument(help="Mock spec, e.g. 'order-@integer(1,99)'"),
):
    """Print a value synthesized from a mock spec."""
    from xmlassert.mock import synthesize

    try:
        typer.echo(synthesize(spec))
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def schema(
    out: str = typer.Option(
        "xmlassert.schema.json", "--out", help="Path to write the suite JSON Schema"
    ),
):
    """Write the JSON Schema for suite YAML files."""
    from xmlassert.schema import write_json_schema

    out_path = Path(out)
    write_json_schema(out_path)
    typer.echo(f"Schema written: {out_path}")


if __name__ == "__main__":
    app()
