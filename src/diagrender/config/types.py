from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_WIDTH = 80


class ColorMode(str, Enum):
    auto = "auto"
    always = "always"
    never = "never"


@dataclass(frozen=True, slots=True)
class RenderOptions:
    program_name: str | None = None
    width: int = DEFAULT_WIDTH
    color: bool = False
    encoding: str = "utf-8"
