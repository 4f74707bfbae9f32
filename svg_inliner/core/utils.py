from __future__ import annotations

"""Simple reusable tree helpers.

These helpers are side-effect-free apart from the element they are handed and
contain no disk I/O; they are shared by the loader and the sprite builder.
"""

import logging
import re
from typing import Dict, Iterator, Set

from lxml import etree as ET

__all__ = [
    "SVG_NS",
    "XLINK_NS",
    "local_name",
    "iter_elements",
    "structural_key",
    "rewrite_references",
    "collect_ids",
    "unique_id",
]

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

_URL_REF = re.compile(r"url\(\s*(['\"]?)#([^)'\"\s]+)\1\s*\)")
_HREF_ATTRS = ("href", "xlink:href")


def local_name(tag) -> str:
    """Return the tag name without its ``{namespace}`` part.

    Comments and processing instructions (whose ``tag`` is a factory function)
    yield an empty string.
    """
    if not isinstance(tag, str):
        return ""
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def iter_elements(root: ET._Element) -> Iterator[ET._Element]:
    """Iterate *root* and its descendants, skipping comments and PIs."""
    for el in root.iter():
        if isinstance(el.tag, str):
            yield el


def structural_key(element: ET._Element, *, ignore_id: bool = True) -> tuple:
    """Return a hashable key equal for structurally equal subtrees.

    The key covers the tag name, the attribute set and values, the stripped
    text and, recursively, every element child in order. The element's own
    ``id`` is left out when *ignore_id* is True: it names the definition, it
    is not part of what it draws. Descendant ids are kept.
    """
    attrib = sorted(
        (name, value) for name, value in element.attrib.items()
        if not (ignore_id and name == "id")
    )
    children = tuple(
        structural_key(child, ignore_id=False)
        for child in element
        if isinstance(child.tag, str)
    )
    tails = tuple((child.tail or "").strip() for child in element if isinstance(child.tag, str))
    return (element.tag, tuple(attrib), (element.text or "").strip(), tails, children)


def rewrite_references(root: ET._Element, id_map: Dict[str, str]) -> int:
    """Point every internal reference below *root* through *id_map*.

    Handles ``url(#id)`` in any attribute (``fill``, ``stroke``, ``style`` …)
    and in ``<style>`` text, plus ``href``/``xlink:href`` values of the form
    ``#id``. Returns the number of values changed.
    """
    if not id_map:
        return 0

    def _sub(match: "re.Match[str]") -> str:
        old = match.group(2)
        new = id_map.get(old)
        if new is None or new == old:
            return match.group(0)
        return f"url({match.group(1)}#{new}{match.group(1)})"

    changed = 0
    for el in iter_elements(root):
        for name, value in el.attrib.items():
            if name in _HREF_ATTRS and value.startswith("#"):
                new = id_map.get(value[1:])
                if new is not None and new != value[1:]:
                    el.set(name, f"#{new}")
                    changed += 1
            elif "url(" in value:
                new_value = _URL_REF.sub(_sub, value)
                if new_value != value:
                    el.set(name, new_value)
                    changed += 1
        if local_name(el.tag) == "style" and el.text and "url(" in el.text:
            new_text = _URL_REF.sub(_sub, el.text)
            if new_text != el.text:
                el.text = new_text
                changed += 1

    if changed and logger.isEnabledFor(logging.DEBUG):
        logger.debug("Rewrote %d internal reference(s)", changed)
    return changed


def collect_ids(root: ET._Element) -> Set[str]:
    """Collect the ``id`` values of *root* and its descendants."""
    return {el.get("id") for el in iter_elements(root) if el.get("id")}


def unique_id(base: str, taken: Set[str]) -> str:
    """Return *base* or the first ``base-N`` (N = 1, 2 …) not in *taken*."""
    if base not in taken:
        return base
    n = 1
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"
