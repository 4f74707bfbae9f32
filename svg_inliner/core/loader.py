from __future__ import annotations

"""SVG file loader.

Reads a referenced SVG file and turns it into a fragment owned by the host
HTML document. The file is parsed as XML (``lxml.etree``), which keeps the
case of SVG names (``viewBox``, ``linearGradient``) that an HTML parser
would fold. The XML tree is then rebuilt as plain elements of the host
document, in the form an HTML serializer writes them:

* SVG namespace URIs are dropped from tag names;
* other namespaced names keep their prefix (``xlink:href``, ``xml:space``,
  ``sodipodi:namedview``);
* namespace declarations are re-emitted as ``xmlns``/``xmlns:*`` attributes.

Nothing is cached: every call reads the file again and returns a new fragment,
so per-site mutations never alias across inlining sites.
"""

import logging
from typing import Dict, Optional

from lxml import etree as ET

from svg_inliner.core.exceptions import LoadError
from svg_inliner.core.models import SvgReference
from svg_inliner.core.utils import SVG_NS, XLINK_NS

__all__ = ["load_svg"]

logger = logging.getLogger(__name__)

_XML_NS = "http://www.w3.org/XML/1998/namespace"
_KNOWN_PREFIXES = {_XML_NS: "xml", XLINK_NS: "xlink"}


def _xml_parser() -> ET.XMLParser:
    return ET.XMLParser(
        recover=True,
        no_network=True,
        resolve_entities=False,
        remove_comments=False,
        huge_tree=False,
    )


def load_svg(reference: SvgReference, document: ET._Element) -> ET._Element:
    """Read *reference* from disk and return its root as a detached fragment.

    Parameters
    ----------
    reference
        The resolved reference to load.
    document
        Any element of the host document; the fragment is created in it.

    Raises
    ------
    LoadError
        When the file cannot be read or does not parse into an element.
    """
    path = reference.resolved_path
    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.error("I/O FAIL: read SVG path=%s", path)
        raise LoadError(path, exc) from exc

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("I/O: read SVG path=%s bytes=%d", path, len(data))

    try:
        svg_root = ET.fromstring(data, parser=_xml_parser())
    except ET.XMLSyntaxError as exc:
        logger.error("Could not parse SVG path=%s: %s", path, exc)
        raise LoadError(path, exc) from exc

    if svg_root is None:
        logger.error("Could not parse SVG path=%s: no root element", path)
        raise LoadError(path, ValueError("document has no root element"))

    try:
        return _import_tree(svg_root, document)
    except ValueError as exc:
        # names lxml refuses to create in the host document
        logger.error("Could not import SVG path=%s: %s", path, exc)
        raise LoadError(path, exc) from exc


# ---------------------------------------------------------------------------
# XML tree -> host document elements
# ---------------------------------------------------------------------------

def _qualified_name(name: str, nsmap: Dict[Optional[str], str]) -> str:
    """Map ``{uri}local`` to the name an HTML serializer should write."""
    if not name.startswith("{"):
        return name
    uri, local = name[1:].split("}", 1)
    if uri == SVG_NS:
        return local
    prefix = _KNOWN_PREFIXES.get(uri)
    if prefix is None:
        prefix = next((p for p, u in nsmap.items() if u == uri and p), None)
    return f"{prefix}:{local}" if prefix else local


def _namespace_declarations(node: ET._Element, inherited: Dict[Optional[str], str]) -> Dict[str, str]:
    declared = {}
    for prefix, uri in node.nsmap.items():
        if inherited.get(prefix) == uri or prefix == "xml":
            continue
        declared["xmlns" if prefix is None else f"xmlns:{prefix}"] = uri
    return declared


def _copy_node(source: ET._Element, target: ET._Element, inherited: Dict[Optional[str], str]) -> None:
    for name, value in _namespace_declarations(source, inherited).items():
        target.set(name, value)
    for name, value in source.attrib.items():
        target.set(_qualified_name(name, source.nsmap), value)
    target.text = source.text

    nsmap = dict(source.nsmap)
    for child in source:
        if isinstance(child.tag, str):
            new_child = ET.SubElement(target, _qualified_name(child.tag, child.nsmap))
            _copy_node(child, new_child, nsmap)
        elif child.tag is ET.Comment:
            new_child = ET.Comment(child.text)
            target.append(new_child)
        else:
            # processing instructions and entity references are dropped, their tail is kept
            if child.tail:
                if len(target):
                    target[-1].tail = (target[-1].tail or "") + child.tail
                else:
                    target.text = (target.text or "") + child.tail
            continue
        new_child.tail = child.tail


def _import_tree(svg_root: ET._Element, document: ET._Element) -> ET._Element:
    root = document.makeelement(_qualified_name(svg_root.tag, svg_root.nsmap))
    _copy_node(svg_root, root, {})
    return root
