from __future__ import annotations

import codecs
import tomllib
from collections.abc import Mapping
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import TypeVar, cast

from diagrender.config.types import DEFAULT_WIDTH, ColorMode, RenderOptions

E = TypeVar("E", bound=Enum)

_RENDER_KEYS = frozenset({"program_name", "width", "color", "encoding"})


def load_render_options(path: str | Path) -> tuple[RenderOptions, ColorMode]:
    config_path = Path(path)
    with config_path.open("rb") as f:
        payload = tomllib.load(f)

    root = cast(Mapping[str, object], payload)
    schema_version = _require_str(root, "schema_version")
    if schema_version != "1":
        raise ValueError('`schema_version` must be "1"')

    render = _require_mapping(root.get("render", {}), "render")
    unknown = sorted(str(key) for key in render if key not in _RENDER_KEYS)
    if unknown:
        raise ValueError(f"`render` has unknown key(s): {', '.join(unknown)}")

    program_name = _parse_optional_non_empty_str(
        render.get("program_name"), path="render.program_name"
    )
    width_raw = render.get("width")
    width = (
        DEFAULT_WIDTH
        if width_raw is None
        else _parse_positive_int(width_raw, path="render.width")
    )
    color_raw = render.get("color")
    color_mode = (
        ColorMode.auto
        if color_raw is None
        else _parse_enum(color_raw, enum_cls=ColorMode, path="render.color")
    )
    encoding = _parse_encoding(render.get("encoding"), path="render.encoding")

    options = RenderOptions(
        program_name=program_name,
        width=width,
        color=color_mode is ColorMode.always,
        encoding=encoding,
    )
    return options, color_mode


def resolve_render_options(
    base: RenderOptions,
    *,
    cli_program_name: str | None = None,
    cli_color: bool | None = None,
    color_mode: ColorMode = ColorMode.auto,
    is_terminal: bool = False,
) -> RenderOptions:
    program_name = cli_program_name if cli_program_name is not None else base.program_name
    if cli_color is not None:
        color = cli_color
    elif color_mode is ColorMode.auto:
        color = is_terminal
    else:
        color = color_mode is ColorMode.always
    return replace(base, program_name=program_name, color=color)


def _require_mapping(raw: object, path: str) -> Mapping[str, object]:
    if not isinstance(raw, Mapping):
        raise ValueError(f"`{path}` must be a TOML table/object")
    return cast(Mapping[str, object], raw)


def _require_str(table: Mapping[str, object], key: str) -> str:
    raw = table.get(key)
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"`{key}` must be a non-empty string")
    return raw.strip()


def _parse_optional_non_empty_str(raw: object, *, path: str) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"`{path}` must be a non-empty string when provided")
    return raw.strip()


def _parse_positive_int(raw: object, *, path: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"`{path}` must be an integer")
    if raw < 1:
        raise ValueError(f"`{path}` must be >= 1")
    return raw


def _parse_enum(raw: object, *, enum_cls: type[E], path: str) -> E:
    if not isinstance(raw, str):
        raise ValueError(f"`{path}` must be a string")
    try:
        return enum_cls(raw)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"`{path}` must be one of: {allowed}") from exc


def _parse_encoding(raw: object, *, path: str) -> str:
    encoding = _parse_optional_non_empty_str(raw, path=path)
    if encoding is None:
        return "utf-8"
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise ValueError(f"`{path}` names an unknown encoding: {encoding}") from exc
    return encoding
