from __future__ import annotations

"""Replace referencing elements with the SVG markup they point at."""

import logging
from typing import List, Sequence

from lxml import etree as ET

from svg_inliner.core.exceptions import SvgInlineError
from svg_inliner.core.loader import load_svg
from svg_inliner.core.models import InlinedSvg, SvgReference
from svg_inliner.core.options import InlineOptions

__all__ = ["inline_references", "merge_attributes", "replace_element"]

logger = logging.getLogger(__name__)


def merge_attributes(source: ET._Element, target: ET._Element, options: InlineOptions) -> None:
    """Copy the attributes of *source* retained by ``options.attrs`` onto *target*.

    Retained attributes overwrite same-named attributes already on *target*.
    """
    for name, value in source.attrib.items():
        if options.retains(name):
            target.set(name, value)


def replace_element(old: ET._Element, new: ET._Element) -> None:
    """Put *new* exactly where *old* stands, keeping the text that follows *old*.

    lxml moves an element's tail along with it, so the tail is handed over
    first; siblings are neither dropped nor duplicated.
    """
    parent = old.getparent()
    if parent is None:
        raise SvgInlineError(f"Cannot replace the document root <{old.tag}>")
    new.tail = old.tail
    parent.replace(old, new)


def _is_attached(element: ET._Element, document: ET._Element) -> bool:
    # unlinked nodes stay in the same lxml document, so walk up to the root
    return any(ancestor is document for ancestor in element.iterancestors())


def inline_references(
    document: ET._Element,
    references: Sequence[SvgReference],
    options: InlineOptions,
) -> List[InlinedSvg]:
    """Inline every reference, in order, and return what was spliced in.

    A load failure propagates immediately and no later reference is
    processed. The caller owns *document* and discards it on failure.
    """
    inlined: List[InlinedSvg] = []
    for reference in references:
        element = reference.element
        if not _is_attached(element, document):
            # nested inside a reference that was already replaced
            logger.debug("Skipping detached reference %s", reference.raw_path)
            continue

        fragment = load_svg(reference, document)
        source_attrib = dict(fragment.attrib)
        merge_attributes(element, fragment, options)
        replace_element(element, fragment)

        logger.debug("Inlined %s into <%s>", reference.resolved_path, fragment.tag)
        inlined.append(InlinedSvg(reference=reference, element=fragment, source_attrib=source_attrib))

    return inlined
