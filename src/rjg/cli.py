"""Typer-based command line interface for the generator.

The ``generate`` command compiles a JSON template once, resolves it for
iterations ``0..count-1`` and writes every result as one line of a JSON Lines
file, echoing each line to stdout as it goes.  The first resolution error
aborts the run; lines already written are kept.

Exit codes
----------
0 success
3 I/O error (unreadable template file, unwritable output)
4 configuration error (invalid config file, malformed ``--var``)
5 generation error (bad directive parameters, undefined variable, ...)
6 invalid template (not JSON, ambiguous directive object)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from .config import ConfigModel, load_config
from .engine import Generator, VariableStore, all_directives, load_template, parse_assignments
from .engine.rng import random_source
from .io import JsonlWriter, read_template_file
from .runner import run_generation
from .utils.errors import GenerationError, TemplateError
from .utils.logging import configure_logging

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")
    os.environ.setdefault("RICH_DISABLE_NO_COLOR", "1")

app = typer.Typer(
    name="rjg",
    help="Generate JSON values from a template. Use 'rjg generate' to produce documents.",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> None:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _apply_overrides(
    cfg: ConfigModel,
    *,
    count: int | None,
    out_path: Path | None,
    echo: bool | None,
    seed: str | None,
    prefix: str | None,
) -> ConfigModel:
    """Return a copy of ``cfg`` with CLI overrides applied."""

    new_cfg = cfg.model_copy(deep=True)
    if count is not None:
        new_cfg.generation.count = count
    if prefix is not None:
        new_cfg.generation.prefix = prefix
    if out_path is not None:
        new_cfg.output.path = str(out_path)
    if echo is not None:
        new_cfg.output.echo = echo
    if seed is not None:
        new_cfg.seed.value = seed
    return new_cfg


@app.callback()
def main() -> None:
    """Entry point for the rjg command group."""
    pass


@app.command()
def generate(  # noqa: PLR0913
    template: Optional[str] = typer.Argument(  # noqa: B008
        None, help="JSON template, e.g. '{\"id\": \"$i\"}'"
    ),
    template_file: Optional[Path] = typer.Option(  # noqa: B008
        None, "--template-file", "-f", help="Read the JSON template from a file"
    ),
    count: Optional[int] = typer.Option(  # noqa: B008
        None, "--count", "-c", min=0, help="Number of JSON values to generate"
    ),
    variables: Optional[list[str]] = typer.Option(  # noqa: B008
        None, "--var", "-v", help="Variable as key=value; the value is parsed as JSON"
    ),
    out_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--out", "-o", help="JSON Lines output file"
    ),
    echo: bool | None = typer.Option(  # noqa: B008
        None, "--echo/--no-echo", help="Also print each generated line to stdout"
    ),
    seed: Optional[str] = typer.Option(  # noqa: B008
        None, "--seed", help="Seed for reproducible output"
    ),
    prefix: Optional[str] = typer.Option(  # noqa: B008
        None, "--prefix", help="Marker for directives and variables (default '$')"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", help="Emit progress and debug messages to stderr"
    ),
) -> None:
    """Generate JSON documents from TEMPLATE."""

    configure_logging(verbose)

    try:
        cfg = load_config(config_path)
    except (ValidationError, yaml.YAMLError, OSError, ValueError) as exc:
        _safe_exit(4, str(exc).splitlines()[0])
    try:
        cfg = _apply_overrides(
            cfg, count=count, out_path=out_path, echo=echo, seed=seed, prefix=prefix
        )
        cfg = ConfigModel.model_validate(cfg.model_dump())
    except ValidationError as exc:
        _safe_exit(4, str(exc).splitlines()[0])

    try:
        pairs = parse_assignments(variables or [])
    except ValueError as exc:
        _safe_exit(4, str(exc))

    if (template is None) == (template_file is None):
        _safe_exit(2, "Provide exactly one of TEMPLATE or --template-file")
    if template_file is not None:
        try:
            template = read_template_file(template_file)
        except OSError as exc:
            _safe_exit(3, str(exc))
    assert template is not None

    prefix_value = cfg.generation.prefix
    try:
        node = load_template(template, prefix=prefix_value)
        store = VariableStore.from_text(pairs, prefix=prefix_value)
    except TemplateError as exc:
        _safe_exit(6, f"Invalid template: {exc}")
    if verbose:
        typer.echo(f"Compiled template with {len(store)} variable(s)", err=True)

    generator = Generator(store, rng=random_source(cfg.seed.value), prefix=prefix_value)
    echo_fn = typer.echo if cfg.output.echo else None
    try:
        with JsonlWriter(
            cfg.output.path,
            encoding=cfg.output.encoding,
            sort_keys=cfg.output.sort_keys,
        ) as writer:
            try:
                run_generation(generator, node, cfg.generation.count, writer, echo=echo_fn)
            finally:
                written = writer.count
    except GenerationError as exc:
        _safe_exit(5, f"Error during generating (iteration {written}): {exc}")
    except OSError as exc:
        _safe_exit(3, str(exc))
    if verbose:
        typer.echo(f"Wrote {written} document(s) to {cfg.output.path}", err=True)


@app.command()
def directives() -> None:
    """List the available directives."""

    for spec in all_directives():
        typer.echo(f"${spec.name:<7} {spec.params.value:<14} {spec.description}")


__all__ = ["app", "generate", "directives"]
