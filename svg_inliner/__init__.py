"""Top-level package for svg-inliner.

Inlines SVG files referenced from HTML documents and optionally folds them
into a deduplicated ``<symbol>`` sprite sheet. Front-ends should only depend
on the public API re-exported here.
"""

from .core import (  # re-export for convenience
    ConfigurationError,
    InlineOptions,
    LoadError,
    StreamNotSupportedError,
    SvgInlineError,
    UnresolvedReferenceError,
    resolve_options,
    transform,
)
from .core.services import InlineService

__all__: list[str] = [
    "transform",
    "resolve_options",
    "InlineOptions",
    "InlineService",
    "SvgInlineError",
    "ConfigurationError",
    "UnresolvedReferenceError",
    "LoadError",
    "StreamNotSupportedError",
]
