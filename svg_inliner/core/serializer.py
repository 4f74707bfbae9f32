from __future__ import annotations

"""Parse/serialize adapter over ``lxml.html``.

The rest of the engine only sees an lxml element tree; this module owns the
conversions between that tree and markup text.
"""

import logging
import re
from typing import Optional

import lxml.html
from lxml import etree as ET

__all__ = ["parse_document", "serialize_document", "extract_doctype"]

logger = logging.getLogger(__name__)

# libxml2 injects an HTML 4 doctype when the source has none, so the doctype
# is taken from the source text instead of the parsed tree.
_DOCTYPE = re.compile(r"\A\s*(?:<!--.*?-->\s*)*(<!DOCTYPE[^>]*>)", re.IGNORECASE | re.DOTALL)


def parse_document(text: str) -> ET._Element:
    """Parse *text* into a mutable HTML tree and return its ``<html>`` root.

    Missing ``<html>``/``<body>`` wrappers are added by the parser.
    """
    return lxml.html.document_fromstring(text)


def extract_doctype(text: str) -> Optional[str]:
    """Return the doctype declaration written at the top of *text*, if any."""
    match = _DOCTYPE.match(text)
    return match.group(1) if match else None


def serialize_document(
    document: ET._Element,
    *,
    decode_entities: bool = False,
    doctype: Optional[str] = None,
) -> str:
    """Render *document* back to HTML text.

    With *decode_entities* False, characters outside ASCII are written as
    numeric character references; with True they are written as decoded
    characters. The tree keeps no trace of how a character was spelled in the
    source, so named entities are not preserved in either mode:
    ``&nbsp;`` comes back as ``&#160;`` when not decoding. Markup characters
    (``<``, ``&``) stay escaped. *doctype* is emitted verbatim before the
    root element.
    """
    if decode_entities:
        html = lxml.html.tostring(document, encoding="unicode")
    else:
        html = lxml.html.tostring(document, encoding="us-ascii").decode("ascii")
    if doctype:
        html = f"{doctype}\n{html}"
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Serialized document chars=%d decode_entities=%s", len(html), decode_entities)
    return html
