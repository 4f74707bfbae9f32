from __future__ import annotations

"""Sprite sheet builder – consolidates inlined SVGs into ``<symbol>`` elements.

After inlining, every site holds a full copy of its SVG. This module turns
each distinct source file into one ``<symbol>`` of a single sprite container
appended to ``<body>``, and replaces every site with a thin
``<svg><use href="#symbol-id"/></svg>``.

Definitions (gradients, patterns, filters … the ``id``-bearing children of
``<defs>``) are pooled in one shared ``<defs>`` block. Two definitions are
merged only when their whole subtree is structurally equal; the same id in two
unrelated files is not enough. Ids that would collide are suffixed
deterministically (``-1``, ``-2`` … in first-seen order) and every internal
reference is rewritten to follow.

The module manipulates only the document it is handed and performs no I/O.

Example
-------
Two files each define ``<linearGradient id="g">`` with identical stops::

    <svg class="svg-spritesheet">
      <defs><linearGradient id="g">…</linearGradient></defs>
      <symbol id="svg-sprite-0" viewBox="0 0 24 24"><rect fill="url(#g)"/></symbol>
      <symbol id="svg-sprite-1" viewBox="0 0 24 24"><circle fill="url(#g)"/></symbol>
    </svg>
"""

import copy
import logging
from typing import Dict, List, Optional, Sequence

from lxml import etree as ET

from svg_inliner.core.exceptions import ConfigurationError
from svg_inliner.core.inliner import replace_element
from svg_inliner.core.models import InlinedSvg, SpriteRegistry, SpriteSymbol
from svg_inliner.core.options import InlineOptions
from svg_inliner.core.utils import (
    collect_ids,
    iter_elements,
    rewrite_references,
    structural_key,
    unique_id,
)

__all__ = ["build_spritesheet", "SYMBOL_ATTRIBUTES"]

logger = logging.getLogger(__name__)

# Root attributes of the source file carried over onto its <symbol>
SYMBOL_ATTRIBUTES = ("viewBox", "width", "height", "preserveAspectRatio")


def build_spritesheet(
    document: ET._Element,
    inlined: Sequence[InlinedSvg],
    options: InlineOptions,
) -> Optional[ET._Element]:
    """Move *inlined* SVGs into a sprite sheet and return its container.

    Returns None when nothing was inlined.
    """
    if not inlined:
        return None

    # 1. swap every site for its (still empty) <use> wrapper
    wrappers: List[ET._Element] = []
    for item in inlined:
        wrapper = document.makeelement("svg")
        for name, value in item.element.attrib.items():
            wrapper.set(name, value)
        replace_element(item.element, wrapper)
        wrappers.append(wrapper)

    registry = SpriteRegistry(taken_ids=collect_ids(document))
    shared_defs = document.makeelement("defs")
    duplicates = 0

    # 2. one symbol per distinct source file, in first-seen order
    for item, wrapper in zip(inlined, wrappers):
        key = str(item.reference.resolved_path)
        sprite = registry.symbol_for(key)
        if sprite is None:
            symbol_id = _assign_symbol_id(key, len(registry.symbols), registry, options)
            symbol = _make_symbol(document, item, symbol_id)
            duplicates += _consolidate_definitions(symbol, shared_defs, registry)
            sprite = SpriteSymbol(symbol_id=symbol_id, element=symbol)
            registry.symbols[key] = sprite
        use = ET.SubElement(wrapper, "use")
        use.set("href", f"#{sprite.symbol_id}")

    # 3. the container: shared definitions first, then the symbols
    container = document.makeelement("svg")
    container.set("class", options.spritesheet_class)
    container.append(shared_defs)
    for sprite in registry.ordered_symbols():
        container.append(sprite.element)

    body = document.find("body")
    if body is None:
        body = ET.SubElement(document, "body")
    body.append(container)

    logger.info(
        "Sprite sheet: %d symbol(s) for %d site(s), %d shared definition(s), %d duplicate(s) removed",
        len(registry.symbols), len(inlined), len(shared_defs), duplicates,
    )
    return container


# ---------------------------------------------------------------------------
# Helper utilities (internal)
# ---------------------------------------------------------------------------

def _assign_symbol_id(key: str, position: int, registry: SpriteRegistry, options: InlineOptions) -> str:
    if options.sprite_id_fn is not None:
        base = options.sprite_id_fn(key)
        if not isinstance(base, str) or not base:
            raise ConfigurationError("spriteIdFn", f"must return a non-empty string (got {base!r} for {key})")
    else:
        base = f"{options.sprite_id_prefix}{position}"

    symbol_id = unique_id(base, registry.taken_ids)
    if symbol_id != base:
        logger.warning("Symbol id %s already in use; %s uses %s", base, key, symbol_id)
    registry.taken_ids.add(symbol_id)
    return symbol_id


def _make_symbol(document: ET._Element, item: InlinedSvg, symbol_id: str) -> ET._Element:
    """Build a <symbol> from the interior of *item*'s fragment.

    The fragment is already detached from the document and owned by this
    site alone, so its children are moved, not copied.
    """
    symbol = document.makeelement("symbol")
    symbol.set("id", symbol_id)
    for name in SYMBOL_ATTRIBUTES:
        value = item.source_attrib.get(name)
        if value is not None:
            symbol.set(name, value)
    symbol.text = item.element.text
    for child in list(item.element):
        symbol.append(child)
    return symbol


def _remove_keep_tail(element: ET._Element) -> None:
    """Detach *element*, leaving its tail text in place."""
    parent = element.getparent()
    if element.tail:
        previous = element.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + element.tail
        else:
            parent.text = (parent.text or "") + element.tail
    parent.remove(element)


def _definition_key(definition: ET._Element, id_map: Dict[str, str]) -> tuple:
    if not id_map:
        return structural_key(definition)
    rewritten = copy.deepcopy(definition)
    rewrite_references(rewritten, id_map)
    return structural_key(rewritten)


def _consolidate_definitions(symbol: ET._Element, shared_defs: ET._Element, registry: SpriteRegistry) -> int:
    """Pool the definitions of *symbol* into *shared_defs*; return duplicates removed."""
    id_map: Dict[str, str] = {}
    promoted: List[ET._Element] = []
    duplicates = 0

    for defs in list(symbol.iter("defs")):
        for definition in list(defs):
            def_id = definition.get("id") if isinstance(definition.tag, str) else None
            if not def_id:
                continue

            # keyed as it will read once references to definitions seen earlier
            # in this symbol are rewritten; the definition itself is rewritten
            # only once, in the final pass
            key = _definition_key(definition, id_map)

            canonical = registry.definitions.get(key)
            if canonical is not None:
                id_map[def_id] = canonical
                _remove_keep_tail(definition)
                duplicates += 1
                logger.debug("Definition #%s merged into #%s", def_id, canonical)
                continue

            new_id = unique_id(def_id, registry.taken_ids)
            registry.taken_ids.add(new_id)
            if new_id != def_id:
                definition.set("id", new_id)
                id_map[def_id] = new_id
            registry.definitions[key] = new_id
            _remove_keep_tail(definition)
            shared_defs.append(definition)
            promoted.append(definition)

    # remaining ids of the symbol, including those nested in promoted definitions
    nested = [el for definition in promoted for el in definition.iterdescendants() if isinstance(el.tag, str)]
    for el in list(iter_elements(symbol))[1:] + nested:
        old = el.get("id")
        if not old or old in id_map:
            continue
        new = unique_id(old, registry.taken_ids)
        registry.taken_ids.add(new)
        if new != old:
            el.set("id", new)
            id_map[old] = new

    rewrite_references(symbol, id_map)
    for definition in promoted:
        rewrite_references(definition, id_map)

    for defs in list(symbol.iter("defs")):
        if not any(isinstance(child.tag, str) for child in defs) and not (defs.text or "").strip():
            _remove_keep_tail(defs)

    return duplicates
