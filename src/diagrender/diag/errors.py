from __future__ import annotations

import threading
from dataclasses import replace
from typing import ClassVar

from diagrender.config.program import default_render_options
from diagrender.config.types import RenderOptions
from diagrender.diag.diagnostic import Diagnostic, Severity
from diagrender.diag.hint import LazyMessage
from diagrender.diag.reporter import render_diagnostic
from diagrender.diag.source import Position


class MessageAlreadyRenderedError(RuntimeError):
    pass


class ReportableError(Exception):
    """Exception that carries a :class:`Diagnostic` and renders it lazily.

    The report is built on the first call to :meth:`message` (or ``str()``)
    and frozen from then on, including the source lines read at that moment.
    Subclasses name themselves in the header through ``kind``, falling back
    to the class name.
    """

    kind: ClassVar[str | None] = None

    def __init__(
        self,
        description: str = "",
        *args: object,
        severity: Severity | int = Severity.ERROR,
        position: Position | None = None,
        hint: LazyMessage | str | None = None,
        options: RenderOptions | None = None,
    ) -> None:
        text = description.format(*args) if args else description
        super().__init__(text)
        if isinstance(hint, str):
            hint = LazyMessage(hint)
        self._diagnostic = Diagnostic(
            severity=severity,
            description=text,
            position=position,
            hint=hint,
        )
        self._options = options
        self._rendered: str | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_diagnostic(
        cls, diag: Diagnostic, *, options: RenderOptions | None = None
    ) -> ReportableError:
        error = cls(
            diag.description,
            severity=diag.severity,
            position=diag.position,
            hint=diag.hint,
            options=options,
        )
        error._diagnostic = diag
        return error

    @classmethod
    def kind_name(cls) -> str:
        return cls.kind or cls.__name__

    @property
    def diagnostic(self) -> Diagnostic:
        return self._diagnostic

    @property
    def description(self) -> str:
        return self._diagnostic.description

    @property
    def is_rendered(self) -> bool:
        return self._rendered is not None

    def add_description_prefix(self, prefix: str) -> ReportableError:
        with self._lock:
            if self._rendered is not None:
                raise MessageAlreadyRenderedError(
                    "cannot prefix the description of an error whose message was already rendered"
                )
            description = prefix + self._diagnostic.description
            self._diagnostic = replace(self._diagnostic, description=description)
            self.args = (description,)
        return self

    def message(self) -> str:
        with self._lock:
            if self._rendered is None:
                self._diagnostic = replace(self._diagnostic, name=self.kind_name())
                self._rendered = render_diagnostic(
                    self._diagnostic,
                    options=default_render_options(self._options),
                )
            return self._rendered

    def __str__(self) -> str:
        return self.message()

    def __reduce__(
        self,
    ) -> tuple[type[ReportableError], tuple[object, ...], dict[str, object]]:
        state = {key: value for key, value in self.__dict__.items() if key != "_lock"}
        return type(self), self.args, state

    def __setstate__(self, state: dict[str, object]) -> None:
        self.__dict__.update(state)
        self._lock = threading.Lock()
