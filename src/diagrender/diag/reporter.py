from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from rich.cells import cell_len
from rich.console import Console
from rich.text import Text

from diagrender.config.program import default_render_options
from diagrender.config.types import RenderOptions
from diagrender.diag.diagnostic import Diagnostic, Severity, severity_label
from diagrender.diag.hint import LazyMessage
from diagrender.diag.source import (
    Position,
    SourceContext,
    SourceContextLoader,
    format_position_suffix,
)

if TYPE_CHECKING:
    from diagrender.diag.errors import ReportableError

LOGGER = logging.getLogger(__name__)

STRUCTURE_STYLE = "blue"
CARET_STYLE = "red"
MIN_DASHES = 3
COMMAND_LINE_ORIGIN = "from command line argument"

# Errors str.format can raise for a template that does not match its arguments.
_HINT_FORMAT_ERRORS = (AttributeError, IndexError, KeyError, TypeError, ValueError)


class DiagnosticRenderer:
    """Turns a :class:`Diagnostic` into the multi-line report text.

    Sections are emitted in a fixed order (header, location, description,
    source lines, hint), separated by a blank line. Source lines are read
    from disk on every call.
    """

    GUTTER_WIDTH = 5

    def __init__(
        self,
        options: RenderOptions | None = None,
        *,
        loader: SourceContextLoader | None = None,
    ) -> None:
        self.options = options if options is not None else default_render_options()
        self.loader = loader or _make_loader(self.options.encoding)

    def render(self, diag: Diagnostic) -> str:
        return self.export(self.render_text(diag))

    def export(self, text: Text) -> str:
        if not self.options.color:
            return text.plain
        return _to_ansi(text)

    def render_text(self, diag: Diagnostic) -> Text:
        sections = [self._header(diag)]
        if diag.position is not None:
            sections.append(self._location(diag.position))
        if diag.description:
            sections.append(Text(diag.description))
        if diag.position is not None:
            context = self.loader.load(diag.position)
            if context.resolved:
                sections.append(self.render_context(context))
            else:
                LOGGER.debug("No source context for %s", diag.position)
        if diag.hint is not None:
            sections.append(Text(self._resolve_hint(diag.hint)))
        return Text("\n\n").join(sections)

    def render_context(self, context: SourceContext) -> Text:
        position = context.position
        rows: list[Text] = []
        for number, line in context.numbered_lines():
            rows.append(Text(f" {number:>{self.GUTTER_WIDTH}}| {line}"))
            if number == position.line and position.has_column:
                marker = Text(" " * (self.GUTTER_WIDTH + 1) + "|" + " " * position.column)
                marker.append("^", style=CARET_STYLE)
                rows.append(marker)
        return Text("\n").join(rows)

    def dash_count(self, *fixed_parts: str) -> int:
        fixed = sum(cell_len(part) for part in fixed_parts)
        return max(MIN_DASHES, self.options.width - fixed)

    def _header(self, diag: Diagnostic) -> Text:
        label, style = severity_label(diag.severity)
        lead = f" --- {diag.name} " if diag.name else " -----"
        program = self.options.program_name
        tail = f" {program}" if program else ""
        dashes = "-" * self.dash_count(label, lead, tail)

        header = Text()
        header.append(label, style=style or "")
        header.append(f"{lead}{dashes}{tail}", style=STRUCTURE_STYLE)
        return header

    def _location(self, position: Position) -> Text:
        if not position.file:
            return Text(COMMAND_LINE_ORIGIN)
        suffix = format_position_suffix(position)
        location = Text("in file: ")
        location.append(position.file, style=STRUCTURE_STYLE)
        if suffix:
            location.append(f" {suffix}", style=STRUCTURE_STYLE)
        return location

    def _resolve_hint(self, hint: LazyMessage) -> str:
        try:
            return hint.resolve()
        except _HINT_FORMAT_ERRORS as exc:
            LOGGER.warning("could not format hint %r: %s", hint.template, exc)
            return hint.template


def _make_loader(encoding: str) -> SourceContextLoader:
    try:
        return SourceContextLoader(encoding=encoding)
    except LookupError:
        LOGGER.warning("unknown source encoding %r, reading source files as utf-8", encoding)
        return SourceContextLoader()


def render_diagnostic(
    diag: Diagnostic,
    *,
    options: RenderOptions | None = None,
    loader: SourceContextLoader | None = None,
) -> str:
    return DiagnosticRenderer(options, loader=loader).render(diag)


def _to_ansi(text: Text) -> str:
    console = Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="standard",
        soft_wrap=True,
        highlight=False,
        markup=False,
        emoji=False,
    )
    with console.capture() as capture:
        console.print(text, end="")
    return capture.get()


class DiagnosticReporter:
    def __init__(
        self,
        console: Console | None = None,
        *,
        renderer: DiagnosticRenderer | None = None,
    ) -> None:
        self.console = console or Console(stderr=True)
        self.renderer = renderer or DiagnosticRenderer()

    def print(self, diagnostics: Iterable[Diagnostic]) -> None:
        ordered = list(diagnostics)
        for diag in ordered:
            self.console.print(self.renderer.render_text(diag), soft_wrap=True, highlight=False)
            self.console.print()
        if ordered:
            self.console.print(self.render_summary(ordered), highlight=False)

    def report_error(self, error: ReportableError) -> None:
        self.console.print(Text.from_ansi(error.message()), soft_wrap=True, highlight=False)
        self.console.print()

    def render_summary(self, diagnostics: list[Diagnostic]) -> str:
        errors = sum(1 for d in diagnostics if d.severity == Severity.ERROR)
        warnings = sum(1 for d in diagnostics if d.severity == Severity.WARN)
        if errors:
            return f"aborting due to {errors} error(s), {warnings} warning(s)"
        return f"finished with {errors} error(s), {warnings} warning(s)"
