from diagrender.config import (
    ColorMode,
    RenderOptions,
    default_render_options,
    get_program_name,
    load_render_options,
    set_program_name,
)
from diagrender.diag.diagnostic import Diagnostic, Severity, severity_label
from diagrender.diag.errors import MessageAlreadyRenderedError, ReportableError
from diagrender.diag.hint import LazyMessage, hint_fmt
from diagrender.diag.reporter import DiagnosticRenderer, DiagnosticReporter, render_diagnostic
from diagrender.diag.source import (
    IN_MEMORY_SOURCE,
    Position,
    SourceContext,
    SourceContextLoader,
)

__all__ = [
    "IN_MEMORY_SOURCE",
    "ColorMode",
    "Diagnostic",
    "DiagnosticRenderer",
    "DiagnosticReporter",
    "LazyMessage",
    "MessageAlreadyRenderedError",
    "Position",
    "RenderOptions",
    "ReportableError",
    "Severity",
    "SourceContext",
    "SourceContextLoader",
    "default_render_options",
    "get_program_name",
    "hint_fmt",
    "load_render_options",
    "render_diagnostic",
    "set_program_name",
    "severity_label",
]
