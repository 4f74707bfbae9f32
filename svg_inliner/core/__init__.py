"""GUI-agnostic inlining engine.

Front-ends (CLI, build pipelines) should only depend on the names exported
here rather than importing internal modules directly.
"""

from .engine import transform
from .exceptions import (
    ConfigurationError,
    LoadError,
    StreamNotSupportedError,
    SvgInlineError,
    UnresolvedReferenceError,
)
from .options import InlineOptions, resolve_options

__all__: list[str] = [
    "transform",
    "resolve_options",
    "InlineOptions",
    "SvgInlineError",
    "ConfigurationError",
    "UnresolvedReferenceError",
    "LoadError",
    "StreamNotSupportedError",
]
