"""Process-wide program name shown at the end of every diagnostic header.

The name is written once during startup, before any rendering thread runs,
and is read-only afterwards. Rendering itself never consults this module:
callers turn it into :class:`RenderOptions` through
:func:`default_render_options` and pass those along explicitly.
"""

from __future__ import annotations

import threading
from dataclasses import replace

from diagrender.config.types import RenderOptions


class ProgramNameRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._name: str | None = None

    def set(self, name: str) -> None:
        with self._lock:
            if self._name is None:
                self._name = name
                return
            if self._name != name:
                raise RuntimeError(
                    f"program name is already set to `{self._name}`; cannot change it to `{name}`"
                )

    def get(self) -> str | None:
        return self._name

    @property
    def is_set(self) -> bool:
        return self._name is not None


PROGRAM_NAME = ProgramNameRegistry()


def set_program_name(name: str) -> None:
    PROGRAM_NAME.set(name)


def get_program_name() -> str | None:
    return PROGRAM_NAME.get()


def default_render_options(base: RenderOptions | None = None) -> RenderOptions:
    options = base or RenderOptions()
    if options.program_name is None and PROGRAM_NAME.is_set:
        return replace(options, program_name=PROGRAM_NAME.get())
    return options
