from __future__ import annotations

"""High-level service feeding file buffers through the inlining engine.

Entry-point for any front-end (CLI, build pipeline, API) that holds files
rather than strings. It mirrors the contract of a build-pipeline plugin:
empty (``None``) buffers pass through untouched, streams are rejected, and
buffers come back in the type they went in.
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from svg_inliner.core.engine import transform
from svg_inliner.core.exceptions import StreamNotSupportedError
from svg_inliner.core.options import InlineOptions, resolve_options

logger = logging.getLogger(__name__)

__all__ = ["InlineService"]

Buffer = Union[str, bytes]


class InlineService:
    """Business-logic façade over :func:`transform` with file handling."""

    def __init__(
        self,
        options: Optional[Union[InlineOptions, Mapping[str, Any]]] = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        # Resolved once; ConfigurationError surfaces here, before any file
        self.options = options if isinstance(options, InlineOptions) else resolve_options(options)
        self.encoding = encoding
        self.logger = logger

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def process_buffer(self, contents: Optional[Buffer]) -> Optional[Buffer]:
        """Transform one in-memory document.

        ``None`` is returned as-is; ``bytes`` are decoded with the service
        encoding and the result encoded back; ``str`` stays ``str``.

        Raises:
            StreamNotSupportedError: If *contents* is a file-like object
            TypeError: For any other unsupported type
        """
        if contents is None:
            return None
        if hasattr(contents, "read"):
            self.logger.error("Refusing streamed input %r", type(contents).__name__)
            raise StreamNotSupportedError()
        if isinstance(contents, bytes):
            return transform(contents.decode(self.encoding), self.options).encode(self.encoding)
        if isinstance(contents, str):
            return transform(contents, self.options)
        raise TypeError(f"Unsupported buffer type: {type(contents).__name__}")

    def process_file(self, source: Union[str, Path], destination: Optional[Union[str, Path]] = None) -> Path:
        """Transform the document at *source* and write the result.

        Args:
            source: HTML file to read
            destination: Output path; defaults to *source*, which is only
                rewritten when the transformation changed something

        Returns:
            The path holding the transformed document

        Raises:
            FileNotFoundError: If *source* does not exist
            SvgInlineError: If the transformation fails (nothing is written)
        """
        source = Path(source)
        if not source.is_file():
            raise FileNotFoundError(f"Input file not found: {source}")

        self.logger.debug("Inlining SVG references in %s", source)
        original = source.read_text(encoding=self.encoding)
        result = transform(original, self.options)

        target = Path(destination) if destination is not None else source
        if target == source and result == original:
            self.logger.debug("No change for %s", source)
            return target

        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            target.write_text(result, encoding=self.encoding)
        except OSError:
            self.logger.error("I/O FAIL: write HTML path=%s", target, exc_info=True)
            raise
        self.logger.info("Wrote %s", target)
        return target
