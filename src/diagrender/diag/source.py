from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass

LOGGER = logging.getLogger(__name__)

# Filename used for sources that only exist in memory.
IN_MEMORY_SOURCE = "(string)"


@dataclass(frozen=True, slots=True)
class Position:
    file: str = ""
    line: int = 0
    column: int = 0

    @property
    def has_line(self) -> bool:
        return self.line > 0

    @property
    def has_column(self) -> bool:
        return self.column > 0


@dataclass(frozen=True, slots=True)
class SourceContext:
    position: Position
    before: str | None = None
    at: str | None = None
    after: str | None = None

    @property
    def resolved(self) -> bool:
        return self.at is not None

    def numbered_lines(self) -> list[tuple[int, str]]:
        line = self.position.line
        rows = [(line - 1, self.before), (line, self.at), (line + 1, self.after)]
        return [(number, text) for number, text in rows if text is not None]


def format_position_suffix(position: Position) -> str:
    if not position.has_line:
        return ""
    if position.has_column:
        return f"({position.line}:{position.column})"
    return f"({position.line})"


class SourceContextLoader:
    """Reads the lines around a position straight from disk.

    Nothing is cached, so every call observes the current file contents.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        codecs.lookup(encoding)
        self.encoding = encoding

    def load(self, position: Position) -> SourceContext:
        if not position.has_line or position.file == IN_MEMORY_SOURCE or not position.file:
            return SourceContext(position=position)

        target = position.line
        captured: dict[int, str] = {}
        try:
            with open(position.file, "rb") as handle:
                for count, raw in enumerate(handle, start=1):
                    if count < target - 1:
                        continue
                    captured[count] = self._decode(raw)
                    if count >= target + 1:
                        break
        except (OSError, ValueError) as exc:
            LOGGER.warning("error reading source file: %s\n%s", position.file, exc)

        return SourceContext(
            position=position,
            before=captured.get(target - 1),
            at=captured.get(target),
            after=captured.get(target + 1),
        )

    def _decode(self, raw: bytes) -> str:
        text = raw.decode(self.encoding, errors="replace")
        if text.endswith("\n"):
            text = text[:-1]
        return text.rstrip("\r")
