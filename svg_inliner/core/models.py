from __future__ import annotations

"""Shared data structures used across the inlining engine.

This module is intentionally free of I/O so that the contained objects can be
reused in any context (unit-tests, CLI, build pipelines, etc.). All of them
live for exactly one ``transform()`` call.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

from lxml import etree as ET

__all__ = [
    "SvgReference",
    "InlinedSvg",
    "SpriteSymbol",
    "SpriteRegistry",
]


@dataclass(frozen=True)
class SvgReference:
    """An element of the host document pointing at an SVG file.

    Attributes
    ----------
    element
        The matched element (``<img>``, ``<svg src=…>`` …).
    raw_path
        The reference attribute value as written in the document.
    resolved_path
        Absolute path of the referenced file under the configured root.
    """

    element: ET._Element
    raw_path: str
    resolved_path: Path


@dataclass
class InlinedSvg:
    """An SVG fragment spliced into the document in place of a reference.

    ``source_attrib`` keeps the root attributes as read from the file, before
    the referencing element's attributes were merged in.
    """

    reference: SvgReference
    element: ET._Element
    source_attrib: Dict[str, str] = field(default_factory=dict)


@dataclass
class SpriteSymbol:
    symbol_id: str
    element: ET._Element


@dataclass
class SpriteRegistry:
    """Per-document bookkeeping of the sprite sheet builder.

    Attributes
    ----------
    symbols
        Sprite key (resolved source path) to its symbol, in first-seen order.
    definitions
        Structural key of a shared definition to its canonical id.
    taken_ids
        Every id already used in the document or assigned by the builder.
    """

    symbols: Dict[str, SpriteSymbol] = field(default_factory=dict)
    definitions: Dict[tuple, str] = field(default_factory=dict)
    taken_ids: Set[str] = field(default_factory=set)

    def symbol_for(self, key: str) -> Optional[SpriteSymbol]:
        return self.symbols.get(key)

    def ordered_symbols(self) -> List[SpriteSymbol]:
        return list(self.symbols.values())
