from __future__ import annotations

"""Locate the elements of a document that reference an external SVG file."""

import logging
import os
from pathlib import Path
from typing import List

from lxml import etree as ET

from svg_inliner.core.exceptions import UnresolvedReferenceError
from svg_inliner.core.models import SvgReference
from svg_inliner.core.options import InlineOptions

__all__ = ["locate_references", "resolve_reference", "REFERENCE_ATTRIBUTE"]

logger = logging.getLogger(__name__)

REFERENCE_ATTRIBUTE = "src"


def resolve_reference(raw_path: str, root: Path) -> Path:
    """Join *raw_path* onto *root* and return the absolute result.

    Follows plain filesystem rules; nothing prevents ``..`` from leaving
    *root*.
    """
    return Path(os.path.abspath(os.path.join(root, raw_path)))


def locate_references(document: ET._Element, options: InlineOptions) -> List[SvgReference]:
    """Return the references of *document* matched by the configured selectors.

    Elements come back in document order, each once even when several
    selectors match it. Every reference is resolved before returning, so a
    single bad one fails the whole document before any file is read.

    Raises
    ------
    UnresolvedReferenceError
        When a matched element has no usable ``src`` or the resolved path is
        not an existing regular file.
    """
    references: List[SvgReference] = []
    for element in options.selector(document):
        raw_path = element.get(REFERENCE_ATTRIBUTE)
        if not raw_path:
            logger.error("Matched <%s> has no %s attribute", element.tag, REFERENCE_ATTRIBUTE)
            raise UnresolvedReferenceError(raw_path)

        resolved = resolve_reference(raw_path, options.root)
        if not resolved.is_file():
            logger.error("Invalid source path: %s (resolved to %s)", raw_path, resolved)
            raise UnresolvedReferenceError(raw_path, resolved)

        references.append(SvgReference(element=element, raw_path=raw_path, resolved_path=resolved))

    logger.debug("Located %d SVG reference(s)", len(references))
    return references
