from __future__ import annotations

from pathlib import Path

from diagrender.diag.diagnostic import Diagnostic, Severity
from diagrender.diag.hint import LazyMessage
from diagrender.diag.source import Position


def config_load_error(path: Path, exc: Exception) -> Diagnostic:
    return Diagnostic(
        severity=Severity.ERROR,
        name="config-error",
        description=f"failed to load render config: {path}\n{exc}",
        position=Position(
            file=str(path),
            line=getattr(exc, "lineno", 0) or 0,
            column=getattr(exc, "colno", 0) or 0,
        ),
        hint=LazyMessage(
            'Render configs are TOML with `schema_version = "1"` and an optional `[render]` table.'
        ),
    )


def unresolved_source_line(path: Path, line: int) -> Diagnostic:
    return Diagnostic(
        severity=Severity.WARN,
        name="no-source-context",
        description=f"line {line} could not be read from {path}",
        position=Position(file=str(path), line=line),
        hint=LazyMessage(
            "Check that {0} exists, is readable and has at least {1} line(s).", path, line
        ),
    )
