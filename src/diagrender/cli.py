from __future__ import annotations

import logging
from enum import Enum
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from diagrender.config import (
    ColorMode,
    RenderOptions,
    default_render_options,
    get_program_name,
    load_render_options,
    resolve_render_options,
    set_program_name,
)
from diagrender.diag.cli_diagnostics import config_load_error, unresolved_source_line
from diagrender.diag.diagnostic import Diagnostic, Severity
from diagrender.diag.hint import LazyMessage
from diagrender.diag.reporter import DiagnosticRenderer, DiagnosticReporter
from diagrender.diag.source import Position

app = typer.Typer(
    help="Render structured diagnostics as terminal reports",
    no_args_is_help=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

LOGGER = logging.getLogger(__name__)


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"


class SeverityName(str, Enum):
    error = "error"
    warning = "warning"
    info = "info"
    talkative = "talkative"
    chatty = "chatty"
    debug = "debug"
    vomit = "vomit"


_SEVERITIES: dict[SeverityName, Severity] = {
    SeverityName.error: Severity.ERROR,
    SeverityName.warning: Severity.WARN,
    SeverityName.info: Severity.INFO,
    SeverityName.talkative: Severity.TALKATIVE,
    SeverityName.chatty: Severity.CHATTY,
    SeverityName.debug: Severity.DEBUG,
    SeverityName.vomit: Severity.VOMIT,
}


@app.callback(invoke_without_command=True)
def root_callback(
    ctx: typer.Context,
    program_name: str | None = typer.Option(
        None, "--program-name", "-p", help="Program name shown at the end of every header."
    ),
) -> None:
    if program_name is not None:
        set_program_name(program_name)
    if ctx.invoked_subcommand is not None:
        return

    console = Console()
    try:
        diagrender_version = version("diagrender")
    except PackageNotFoundError:
        diagrender_version = "unknown"

    console.print(
        Panel(
            f"[bold cyan]diagrender v{diagrender_version}[/bold cyan]\n\n"
            "[white]Render diagnostics with source context and caret markers.[/white]",
            title="[bold green]diagrender[/bold green]",
            border_style="bright_blue",
            expand=False,
        )
    )

    quickstart = Table(title="Quick Start", show_header=True, header_style="bold magenta")
    quickstart.add_column("Workflow", style="bold yellow")
    quickstart.add_column("Command", style="green")
    quickstart.add_row(
        "Render a diagnostic",
        'diagrender render -s error -N eval-error -d "unexpected token" -f f.nix -L 5 -c 3',
    )
    quickstart.add_row("Show source lines", "diagrender excerpt f.nix 5 --column 3")
    console.print(quickstart)
    console.print("[dim]Use `diagrender --help` for full command documentation.[/dim]")


def _configure_logging(level: LogLevel) -> None:
    resolved_level = getattr(logging, level.value.upper())

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.setLevel(resolved_level)
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved_level)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)


def _print_diags(console: Console, diagnostics: list[Diagnostic]) -> None:
    reporter = DiagnosticReporter(
        console=console,
        renderer=DiagnosticRenderer(default_render_options()),
    )
    reporter.print(diagnostics)


def _resolve_options(
    console: Console,
    *,
    config: Path | None,
    color: bool | None,
) -> RenderOptions:
    base = RenderOptions()
    color_mode = ColorMode.auto
    if config is not None:
        try:
            base, color_mode = load_render_options(config)
        except (OSError, ValueError) as exc:
            _print_diags(console, [config_load_error(config, exc)])
            raise typer.Exit(code=1) from None
        LOGGER.info("Loaded render config from %s", config)

    return resolve_render_options(
        base,
        cli_program_name=get_program_name(),
        cli_color=color,
        color_mode=color_mode,
        is_terminal=console.is_terminal,
    )


@app.command("render", help="Render a diagnostic built from command-line fields.")
def render(
    description: str = typer.Option("", "--description", "-d", help="Free-text description."),
    severity: SeverityName = typer.Option(
        SeverityName.error, "--severity", "-s", help="Diagnostic severity."
    ),
    name: str = typer.Option("", "--name", "-N", help="Short diagnostic name."),
    file: str | None = typer.Option(None, "--file", "-f", help="Source file of the position."),
    line: int | None = typer.Option(None, "--line", "-L", help="1-based line number."),
    column: int | None = typer.Option(None, "--column", "-c", help="1-based column number."),
    hint: str | None = typer.Option(None, "--hint", help="Hint shown after the source lines."),
    config: Path | None = typer.Option(
        None, "--config", "-C", help="Render config TOML (schema_version = \"1\")."
    ),
    color: bool | None = typer.Option(
        None, "--color/--no-color", help="Force or disable ANSI color output."
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.warning,
        "--log-level",
        "-l",
        help="Set CLI log verbosity.",
    ),
) -> None:
    console = Console(no_color=color is False)
    _configure_logging(log_level)
    options = _resolve_options(console, config=config, color=color)

    position: Position | None = None
    if file is not None or line is not None or column is not None:
        position = Position(file=file or "", line=line or 0, column=column or 0)

    diag = Diagnostic(
        severity=_SEVERITIES[severity],
        name=name,
        description=description,
        position=position,
        hint=LazyMessage(hint) if hint is not None else None,
    )
    LOGGER.debug("Rendering %s", diag)
    typer.echo(DiagnosticRenderer(options).render(diag), color=options.color)


@app.command("excerpt", help="Print the source lines around a position.")
def excerpt(
    file: Path = typer.Argument(..., help="Path to the source file."),
    line: int = typer.Argument(..., help="1-based line number."),
    column: int = typer.Option(0, "--column", "-c", help="Column to mark with a caret."),
    config: Path | None = typer.Option(
        None, "--config", "-C", help="Render config TOML (schema_version = \"1\")."
    ),
    color: bool | None = typer.Option(
        None, "--color/--no-color", help="Force or disable ANSI color output."
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.warning,
        "--log-level",
        "-l",
        help="Set CLI log verbosity.",
    ),
) -> None:
    console = Console(no_color=color is False)
    _configure_logging(log_level)
    options = _resolve_options(console, config=config, color=color)

    renderer = DiagnosticRenderer(options)
    context = renderer.loader.load(Position(file=str(file), line=line, column=column))
    if not context.resolved:
        _print_diags(console, [unresolved_source_line(file, line)])
        raise typer.Exit(code=1) from None

    typer.echo(renderer.export(renderer.render_context(context)), color=options.color)
