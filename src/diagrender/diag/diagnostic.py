from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from diagrender.diag.hint import LazyMessage
from diagrender.diag.source import Position


class Severity(IntEnum):
    ERROR = 0
    WARN = 1
    INFO = 2
    TALKATIVE = 3
    CHATTY = 4
    DEBUG = 5
    VOMIT = 6


_SEVERITY_DISPLAY: dict[Severity, tuple[str, str]] = {
    Severity.ERROR: ("error:", "red"),
    Severity.WARN: ("warning:", "yellow"),
    Severity.INFO: ("info:", "green"),
    Severity.TALKATIVE: ("talk:", "green"),
    Severity.CHATTY: ("chat:", "green"),
    Severity.DEBUG: ("debug:", "yellow"),
    Severity.VOMIT: ("vomit:", "green"),
}


def severity_label(severity: Severity | int) -> tuple[str, str | None]:
    """Return the display label and style for a severity.

    Values outside the enum yield an unstyled ``invalid error level`` label so
    the diagnostic still shows up.
    """
    try:
        return _SEVERITY_DISPLAY[Severity(severity)]
    except ValueError:
        return f"invalid error level: {severity}", None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity | int
    name: str = ""
    description: str = ""
    position: Position | None = None
    hint: LazyMessage | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR
