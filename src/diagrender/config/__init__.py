from diagrender.config.loader import load_render_options, resolve_render_options
from diagrender.config.program import (
    PROGRAM_NAME,
    ProgramNameRegistry,
    default_render_options,
    get_program_name,
    set_program_name,
)
from diagrender.config.types import DEFAULT_WIDTH, ColorMode, RenderOptions

__all__ = [
    "DEFAULT_WIDTH",
    "PROGRAM_NAME",
    "ColorMode",
    "ProgramNameRegistry",
    "RenderOptions",
    "default_render_options",
    "get_program_name",
    "load_render_options",
    "resolve_render_options",
    "set_program_name",
]
