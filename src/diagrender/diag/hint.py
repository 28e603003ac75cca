from __future__ import annotations


class LazyMessage:
    """A format template with its arguments bound but not yet applied.

    Building one costs only the capture, so diagnostics that are never shown
    never pay for formatting. ``resolve()`` formats on every call; callers that
    need a stable string cache it themselves.
    """

    __slots__ = ("template", "args", "kwargs")

    def __init__(self, template: str, *args: object, **kwargs: object) -> None:
        self.template = template
        self.args = args
        self.kwargs = kwargs

    @property
    def has_arguments(self) -> bool:
        return bool(self.args or self.kwargs)

    def resolve(self) -> str:
        if not self.has_arguments:
            return self.template
        return self.template.format(*self.args, **self.kwargs)

    def __str__(self) -> str:
        return self.resolve()

    def __repr__(self) -> str:
        return f"LazyMessage({self.template!r}, args={self.args!r}, kwargs={self.kwargs!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LazyMessage):
            return NotImplemented
        return (self.template, self.args, self.kwargs) == (
            other.template,
            other.args,
            other.kwargs,
        )

    def __hash__(self) -> int:
        return hash((self.template, self.args, tuple(sorted(self.kwargs.items()))))


def hint_fmt(template: str, *args: object, **kwargs: object) -> LazyMessage:
    return LazyMessage(template, *args, **kwargs)
