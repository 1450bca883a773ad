"""CLI entry point for ParseBox."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from parsebox.config import DEFAULT_CONFIG_TEMPLATE, ParseBoxConfig, load_config
from parsebox.converter import ConversionSession
from parsebox.detector import detect
from parsebox.formats import AUTO, FORMATS, LABELS, resolve_tag
from parsebox.logging_config import configure_logging

app = typer.Typer(
    name="parsebox",
    help="Convert data between JSON, YAML, TOML, XML, CSV and a dozen other text formats.",
)

config_app = typer.Typer(help="Manage ParseBox configuration.")
app.add_typer(config_app, name="config")

# Stats and diagnostics go to stderr so converted text on stdout stays pipeable
err_console = Console(stderr=True)

# Global state
_config: ParseBoxConfig | None = None


def _get_config() -> ParseBoxConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to parsebox.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def _format_size(n_bytes: int) -> str:
    """Human-readable byte count with at most two decimals, e.g. ``1.5 KB``."""
    if n_bytes <= 0:
        return "0 Bytes"
    value = float(n_bytes)
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[exponent]}"


def _read_input(file: str) -> str:
    if file == "-":
        return sys.stdin.read()
    return Path(file).read_text(encoding="utf-8")


def _check_tag(name: str, allow_auto: bool) -> str:
    """Validate a --from/--to value; exits with a red message on unknown tags."""
    if allow_auto and name.strip().lower() == AUTO:
        return AUTO
    try:
        return resolve_tag(name).value
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _emit(text: str) -> None:
    """Write converted text verbatim; rich markup would eat [brackets]."""
    typer.echo(text, nl=not text.endswith("\n"))


@app.command()
def convert(
    file: str = typer.Argument("-", help="Input file, or - for stdin"),
    source: Annotated[
        str | None, typer.Option("--from", "-f", help="Source format tag, or auto")
    ] = None,
    target: Annotated[
        str | None, typer.Option("--to", "-t", help="Target format tag (default: follow source)")
    ] = None,
    output: str | None = typer.Option(None, "--output", "-o", help="Write result to file"),
    minify: bool = typer.Option(False, "--minify", help="Emit the parsed value as compact JSON"),
    beautify: bool = typer.Option(False, "--beautify", help="Emit the parsed value as indented JSON"),
    stats: bool = typer.Option(False, "--stats", help="Show detected format and output size"),
) -> None:
    """Convert text from one format to another."""
    if minify and beautify:
        rprint("[red]Error:[/red] --minify and --beautify are mutually exclusive")
        raise typer.Exit(1)

    cfg = _get_config()
    source_tag = _check_tag(source or cfg.conversion.default_source, allow_auto=True)
    target_name = target or cfg.conversion.default_target

    try:
        text = _read_input(file)
    except OSError as e:
        rprint(f"[red]Error:[/red] Could not read '{escape(file)}': {escape(str(e))}")
        raise typer.Exit(1)

    session = ConversionSession(source_tag, options=cfg.conversion.options())
    if target_name is not None and target_name.strip().lower() != AUTO:
        session.set_target_format(_check_tag(target_name, allow_auto=False))

    result = session.convert(text)
    if not result.ok:
        rprint(f"[red]Conversion failed:[/red] {escape(result.output_text)}")
        raise typer.Exit(1)

    rendered = result.output_text
    if minify:
        rendered = session.minify()
    elif beautify:
        rendered = session.beautify()

    if output:
        try:
            Path(output).write_text(rendered, encoding="utf-8")
        except OSError as e:
            rprint(f"[red]Error:[/red] Could not write '{escape(output)}': {escape(str(e))}")
            raise typer.Exit(1)
        err_console.print(f"[green]Written to[/green] {escape(output)}")
    else:
        _emit(rendered)

    if stats:
        detected = result.detected_label or LABELS[resolve_tag(result.source_format)]
        err_console.print(
            Panel(
                f"[dim]Detected:[/dim]  {detected}\n"
                f"[dim]Source:[/dim]    {result.source_format}\n"
                f"[dim]Target:[/dim]    {result.target_format}\n"
                f"[dim]Chars:[/dim]     {len(rendered)}\n"
                f"[dim]Size:[/dim]      {_format_size(len(rendered.encode('utf-8')))}",
                title="Conversion Result",
                border_style="green",
            )
        )


@app.command("detect")
def detect_cmd(
    file: str = typer.Argument("-", help="Input file, or - for stdin"),
    format: Annotated[
        str, typer.Option("--format", help="Output format: table or json")
    ] = "table",
) -> None:
    """Guess the format of the input text."""
    if format not in ("table", "json"):
        rprint(f"[red]Error:[/red] Invalid format '{escape(format)}'. Choose table or json.")
        raise typer.Exit(1)

    try:
        text = _read_input(file)
    except OSError as e:
        rprint(f"[red]Error:[/red] Could not read '{escape(file)}': {escape(str(e))}")
        raise typer.Exit(1)

    detection = detect(text)
    if format == "json":
        typer.echo(json.dumps({"tag": detection.tag.value, "label": detection.label}))
        return

    table = Table(title="Detected Format")
    table.add_column("Tag", style="cyan")
    table.add_column("Label", style="green")
    table.add_row(detection.tag.value, detection.label)
    rprint(table)


@app.command()
def formats() -> None:
    """List supported format tags."""
    table = Table(title=f"Formats ({len(FORMATS)})")
    table.add_column("Tag", style="cyan")
    table.add_column("Label", style="green")
    for tag, codec in FORMATS.items():
        table.add_row(tag.value, codec.label)
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.safe_dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    path: str = typer.Option("parsebox.yaml", "--path", help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create a default parsebox.yaml."""
    target = Path(path)
    if target.exists() and not force:
        rprint(f"[yellow]{escape(str(target))} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    rprint(f"[green]Created[/green] {escape(str(target))}")
