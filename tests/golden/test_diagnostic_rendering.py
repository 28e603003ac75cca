from __future__ import annotations

import io
import re
from pathlib import Path

import pytest
from rich.cells import cell_len
from rich.console import Console

from diagrender.config.types import RenderOptions
from diagrender.diag.diagnostic import Diagnostic, Severity
from diagrender.diag.errors import ReportableError
from diagrender.diag.hint import LazyMessage
from diagrender.diag.reporter import DiagnosticRenderer, DiagnosticReporter, render_diagnostic
from diagrender.diag.source import IN_MEMORY_SOURCE, Position


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _write_lines(path: Path, count: int = 10) -> Path:
    path.write_text("".join(f"line {n}\n" for n in range(1, count + 1)), encoding="utf-8")
    return path


def _diag(position: Position | None, **overrides: object) -> Diagnostic:
    fields: dict[str, object] = {
        "severity": Severity.ERROR,
        "name": "eval-error",
        "description": "unexpected token",
        "position": position,
    }
    fields.update(overrides)
    return Diagnostic(**fields)  # type: ignore[arg-type]


def _render(diag: Diagnostic, **options: object) -> str:
    return render_diagnostic(diag, options=RenderOptions(**options))  # type: ignore[arg-type]


def test_render_includes_header_location_and_caret(tmp_path: Path) -> None:
    source = _write_lines(tmp_path / "f.nix")
    rendered = _render(_diag(Position(file=str(source), line=5, column=3)))

    assert rendered.split("\n") == [
        "error: --- eval-error " + "-" * 58,
        "",
        f"in file: {source} (5:3)",
        "",
        "unexpected token",
        "",
        "     4| line 4",
        "     5| line 5",
        "      |   ^",
        "     6| line 6",
    ]


def test_caret_offset_matches_column(tmp_path: Path) -> None:
    source = _write_lines(tmp_path / "f.nix")
    lines = _render(_diag(Position(file=str(source), line=2, column=7))).split("\n")

    at_index = lines.index("     2| line 2")
    marker = lines[at_index + 1]
    gutter, _, offset = marker.partition("|")
    assert gutter == " " * 6
    assert offset == " " * 7 + "^"
    assert lines[at_index + 2] == "     3| line 3"


def test_caret_is_omitted_without_column(tmp_path: Path) -> None:
    source = _write_lines(tmp_path / "f.nix")
    rendered = _render(_diag(Position(file=str(source), line=5)))

    assert f"in file: {source} (5)" in rendered
    assert "^" not in rendered
    assert "     5| line 5\n     6| line 6" in rendered


def test_missing_file_keeps_location_but_drops_context(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    missing = tmp_path / "missing.nix"
    with caplog.at_level("WARNING"):
        rendered = _render(_diag(Position(file=str(missing), line=5, column=3)))

    assert rendered.split("\n") == [
        "error: --- eval-error " + "-" * 58,
        "",
        f"in file: {missing} (5:3)",
        "",
        "unexpected token",
    ]
    assert "error reading source file" in caplog.text


def test_without_position_only_header_description_and_hint() -> None:
    rendered = _render(_diag(None, hint=LazyMessage("try {0}", "`--show-trace`")))

    assert rendered.split("\n") == [
        "error: --- eval-error " + "-" * 58,
        "",
        "unexpected token",
        "",
        "try `--show-trace`",
    ]


def test_position_without_file_renders_command_line_origin() -> None:
    rendered = _render(_diag(Position(file="", line=3, column=1)))

    assert "from command line argument" in rendered
    assert "in file:" not in rendered
    assert "|" not in rendered


def test_in_memory_source_has_no_context() -> None:
    rendered = _render(_diag(Position(file=IN_MEMORY_SOURCE, line=1, column=1)))

    assert "in file: (string) (1:1)" in rendered
    assert "^" not in rendered


def test_context_is_skipped_when_line_is_past_end_of_file(tmp_path: Path) -> None:
    source = _write_lines(tmp_path / "short.nix", count=3)
    rendered = _render(_diag(Position(file=str(source), line=4, column=1)))

    assert "line 3" not in rendered
    assert rendered.endswith("unexpected token")


def test_first_and_last_lines_have_partial_context(tmp_path: Path) -> None:
    source = _write_lines(tmp_path / "three.nix", count=3)

    first = _render(_diag(Position(file=str(source), line=1)))
    assert first.endswith("     1| line 1\n     2| line 2")

    last = _render(_diag(Position(file=str(source), line=3, column=1)))
    assert last.endswith("     2| line 2\n     3| line 3\n      | ^")


def test_header_without_name_uses_long_separator() -> None:
    header = _render(_diag(None, name="")).split("\n")[0]

    assert header == "error: -----" + "-" * 68
    assert len(header) == 80


def test_header_includes_program_name_and_keeps_width() -> None:
    header = _render(_diag(None), program_name="nix").split("\n")[0]

    assert header.startswith("error: --- eval-error ---")
    assert header.endswith("- nix")
    assert len(header) == 80


def test_header_dashes_clamp_to_minimum() -> None:
    long_name = "n" * 120
    header = _render(_diag(None, name=long_name)).split("\n")[0]

    assert header == f"error: --- {long_name} ---"


def test_header_width_counts_display_cells() -> None:
    wide_name = "\u8a55\u4fa1\u30a8\u30e9\u30fc"
    header = _render(_diag(None, name=wide_name), program_name="nix").split("\n")[0]

    assert cell_len(header) == 80
    assert len(header) == 75


def test_file_name_whitespace_is_preserved() -> None:
    rendered = _render(_diag(Position(file="a ", line=0, column=0)))

    assert "in file: a \n" in rendered


def test_header_respects_configured_width() -> None:
    header = _render(_diag(None), width=40).split("\n")[0]

    assert len(header) == 40


@pytest.mark.parametrize(
    ("severity", "label"),
    [
        (Severity.ERROR, "error:"),
        (Severity.WARN, "warning:"),
        (Severity.INFO, "info:"),
        (Severity.TALKATIVE, "talk:"),
        (Severity.CHATTY, "chat:"),
        (Severity.DEBUG, "debug:"),
        (Severity.VOMIT, "vomit:"),
    ],
)
def test_severity_labels(severity: Severity, label: str) -> None:
    header = _render(_diag(None, severity=severity)).split("\n")[0]

    assert header.startswith(f"{label} --- eval-error ")
    assert len(header) == 80


def test_out_of_range_severity_renders_invalid_level() -> None:
    rendered = _render(_diag(None, severity=42))

    assert rendered.startswith("invalid error level: 42 --- eval-error ")
    assert "unexpected token" in rendered


def test_empty_description_is_skipped() -> None:
    rendered = _render(_diag(Position(file="", line=0), description=""))

    assert rendered.split("\n") == [
        "error: --- eval-error " + "-" * 58,
        "",
        "from command line argument",
    ]


def test_malformed_hint_falls_back_to_template(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        rendered = _render(_diag(None, hint=LazyMessage("use {0} and {1}", "x")))

    assert rendered.endswith("use {0} and {1}")
    assert "could not format hint" in caplog.text


def test_rerender_observes_changed_file(tmp_path: Path) -> None:
    source = _write_lines(tmp_path / "f.nix")
    diag = _diag(Position(file=str(source), line=2, column=1))
    renderer = DiagnosticRenderer(RenderOptions())

    before = renderer.render(diag)
    source.write_text("alpha\nbeta\ngamma\n", encoding="utf-8")
    after = renderer.render(diag)

    assert "     2| line 2" in before
    assert "     2| beta" in after


def test_color_output_wraps_plain_text_in_ansi(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    source = _write_lines(tmp_path / "f.nix")
    diag = _diag(Position(file=str(source), line=5, column=3))

    plain = _render(diag)
    colored = _render(diag, color=True)

    assert "\x1b[" in colored
    assert _strip_ansi(colored) == plain


def test_reporter_prints_diagnostics_and_summary(tmp_path: Path) -> None:
    source = _write_lines(tmp_path / "f.nix")
    stream = io.StringIO()
    reporter = DiagnosticReporter(
        console=Console(file=stream, force_terminal=False, color_system=None),
        renderer=DiagnosticRenderer(RenderOptions()),
    )
    reporter.print(
        [
            _diag(Position(file=str(source), line=5, column=3)),
            _diag(None, severity=Severity.WARN, name="deprecated", description="old syntax"),
        ]
    )

    output = stream.getvalue()
    assert "error: --- eval-error " + "-" * 58 in output
    assert "warning: --- deprecated" in output
    assert "      |   ^" in output
    assert "aborting due to 1 error(s), 1 warning(s)" in output


def test_reporter_summary_without_errors() -> None:
    reporter = DiagnosticReporter(
        console=Console(file=io.StringIO(), force_terminal=False, color_system=None),
        renderer=DiagnosticRenderer(RenderOptions()),
    )

    summary = reporter.render_summary([_diag(None, severity=Severity.INFO)])
    assert summary == "finished with 0 error(s), 0 warning(s)"


def test_reporter_prints_reportable_error() -> None:
    stream = io.StringIO()
    reporter = DiagnosticReporter(
        console=Console(file=stream, force_terminal=False, color_system=None)
    )
    error = ReportableError("attribute missing", options=RenderOptions(program_name="nix"))

    reporter.report_error(error)

    output = stream.getvalue()
    assert "error: --- ReportableError" in output
    assert "attribute missing" in output
