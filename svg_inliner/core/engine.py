from __future__ import annotations

"""Document transformation entry point.

:func:`transform` is a pure function from document text to document text. It
keeps no state between calls: each call parses its own tree, and the tree is
only serialized once every step has succeeded, so a failure never yields a
partially inlined document.
"""

import logging
from typing import Any, Mapping, Optional, Union

from svg_inliner.core.inliner import inline_references
from svg_inliner.core.locator import locate_references
from svg_inliner.core.options import InlineOptions, resolve_options
from svg_inliner.core.serializer import extract_doctype, parse_document, serialize_document
from svg_inliner.core.spritesheet import build_spritesheet

__all__ = ["transform"]

logger = logging.getLogger(__name__)


def transform(
    document_text: str,
    options: Optional[Union[InlineOptions, Mapping[str, Any]]] = None,
) -> str:
    """Inline the SVG files referenced by *document_text*.

    Parameters
    ----------
    document_text
        One complete HTML document.
    options
        A resolved :class:`InlineOptions`, or a mapping of overrides resolved
        against the packaged defaults.

    Returns
    -------
    str
        The transformed document, or *document_text* itself, unchanged, when
        no element matched.

    Raises
    ------
    ConfigurationError
        When *options* is invalid (raised before the document is parsed).
    UnresolvedReferenceError
        When a matched element does not point at an existing file.
    LoadError
        When a referenced file cannot be read or parsed.
    """
    if not isinstance(options, InlineOptions):
        options = resolve_options(options)

    if not document_text.strip():
        return document_text

    document = parse_document(document_text)
    references = locate_references(document, options)
    if not references:
        logger.debug("No SVG reference matched; passing document through")
        return document_text

    inlined = inline_references(document, references, options)
    if options.create_spritesheet:
        build_spritesheet(document, inlined, options)

    logger.info("Inlined %d SVG reference(s)", len(inlined))
    return serialize_document(
        document,
        decode_entities=options.decode_entities,
        doctype=extract_doctype(document_text),
    )
