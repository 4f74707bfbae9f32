from __future__ import annotations

"""Exception classes raised by the inlining engine.

Every error is terminal for the document being transformed: the engine never
retries and never returns partially inlined output. Each exception carries
enough context (option name, raw reference or file path) to diagnose the
failure without re-running.
"""

from pathlib import Path
from typing import Optional

__all__ = [
    "SvgInlineError",
    "ConfigurationError",
    "UnresolvedReferenceError",
    "LoadError",
    "StreamNotSupportedError",
]


class SvgInlineError(Exception):
    """Base exception for all inlining errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigurationError(SvgInlineError):
    """Raised when an option has an invalid value or type.

    Reported before any element of the document is processed.
    """

    def __init__(self, option: str, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Invalid option: {option} {message}", cause)
        self.option = option


class UnresolvedReferenceError(SvgInlineError):
    """Raised when a matched element does not reference an existing file.

    Covers a missing or empty reference attribute as well as a path that does
    not resolve to a regular file under the configured root.
    """

    def __init__(self, raw_path: Optional[str], resolved_path: Optional[Path] = None) -> None:
        super().__init__(f"Invalid source path: {raw_path}")
        self.raw_path = raw_path
        self.resolved_path = resolved_path


class LoadError(SvgInlineError):
    """Raised when a referenced file exists but cannot be read or parsed."""

    def __init__(self, path: Path, cause: Optional[Exception] = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not load SVG file {path}{detail}", cause)
        self.path = path


class StreamNotSupportedError(SvgInlineError):
    """Raised by the host adapter when handed a stream instead of a buffer."""

    def __init__(self) -> None:
        super().__init__("Streams are not supported.")
