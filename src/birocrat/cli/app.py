"""CLI main module for Birocrat."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from loguru import logger

from birocrat.cli.interactive import FormRunner
from birocrat.cli.render import Renderer
from birocrat.config import get_settings
from birocrat.errors import BirocratError, ConfigurationError
from birocrat.form.session import FormSession
from birocrat.logging_utils import configure_logging
from birocrat.runtime.script import ScriptDriver

app = typer.Typer(
    name="birocrat",
    help="Run branching forms driven by Python scripts in your terminal.",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback() -> None:
    """Birocrat form runner."""


def _parse_param_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def load_params(params: list[str], params_file: Path | None) -> dict[str, Any]:
    """Merge form parameters from a JSON file and ``key=value`` options."""
    merged: dict[str, Any] = {}
    if params_file is not None:
        try:
            loaded = json.loads(params_file.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigurationError(f"failed to read JSON parameters from '{params_file}'") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"failed to parse JSON parameters from '{params_file}'") from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"JSON parameters in '{params_file}' must be an object")
        merged.update(loaded)

    for item in params:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(f"invalid parameter '{item}' (expected key=value)")
        merged[key] = _parse_param_value(value)
    return merged


@app.command()
def run(
    script: Path = typer.Argument(..., help="Path to a Python script defining main(state, answer, params)"),  # noqa: B008
    param: list[str] = typer.Option([], "--param", "-p", help="Form parameter as key=value"),  # noqa: B008
    params_file: Path | None = typer.Option(None, "--params-file", help="JSON object of form parameters"),  # noqa: B008
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the result JSON here"),  # noqa: B008
) -> None:
    """Fill in a form interactively and print its result."""
    settings = get_settings()
    configure_logging(profile=settings.log_profile, level=settings.log_level)
    renderer = Renderer()

    try:
        driver = ScriptDriver.from_file(script, load_params(param, params_file))
        session = FormSession(driver)
        logger.info("Running form {} as session {}", script, session.session_id)
        result = FormRunner(session, renderer, settings).run()
    except BirocratError as exc:
        renderer.error(str(exc))
        raise typer.Exit(1) from exc
    except (KeyboardInterrupt, EOFError) as exc:
        renderer.info("\nForm abandoned.")
        raise typer.Exit(1) from exc

    if output is None:
        renderer.result(result, indent=settings.json_indent)
        return
    try:
        output.write_text(json.dumps(result, indent=settings.json_indent, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        renderer.error(f"failed to write form output to '{output}'")
        raise typer.Exit(1) from exc
    renderer.info(f"[dim]Result written to {output}[/dim]")
