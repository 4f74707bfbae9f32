from __future__ import annotations

"""Option resolution for the inlining engine.

Callers hand in loosely typed options (strings or lists for selectors, strings
or compiled patterns for attrs, camelCase or snake_case names). They are
validated and normalized here, once, into an immutable :class:`InlineOptions`
so that downstream components never branch on the input shape.

Defaults come from the packaged ``default_options.yml`` and are combined with
the caller's overrides into a *new* value; neither input is modified.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Tuple

from cssselect import SelectorError
from lxml.cssselect import CSSSelector

from svg_inliner.config import ConfigManager
from svg_inliner.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ["InlineOptions", "resolve_options", "OPTION_ALIASES"]

# Public (camelCase) spelling -> internal name
OPTION_ALIASES = {
    "selectors": "selectors",
    "attrs": "attrs",
    "root": "root",
    "decodeEntities": "decode_entities",
    "createSpritesheet": "create_spritesheet",
    "spritesheetClass": "spritesheet_class",
    "spriteIdFn": "sprite_id_fn",
    "spriteIdPrefix": "sprite_id_prefix",
}

_KNOWN = frozenset(OPTION_ALIASES.values())


@dataclass(frozen=True)
class InlineOptions:
    """Validated, canonical configuration of one engine run.

    Attributes
    ----------
    selectors
        The selector strings, in the order given.
    selector
        All selectors compiled into one CSS selector (union, document order).
    attrs
        Pattern deciding which attributes of the referencing element are
        copied onto the inlined ``<svg>``; tested with ``search``.
    root
        Absolute directory relative references are resolved against.
    decode_entities
        Emit decoded characters instead of character references.
    create_spritesheet
        Consolidate inlined SVGs into one ``<symbol>`` sprite sheet.
    spritesheet_class
        CSS class of the generated sprite container.
    sprite_id_fn
        Optional callable mapping a resolved file path to a symbol id.
    sprite_id_prefix
        Prefix of positional symbol ids (``svg-sprite-0``, ``svg-sprite-1`` …).
    """

    selectors: Tuple[str, ...]
    selector: CSSSelector = field(compare=False, repr=False)
    attrs: "re.Pattern[str]"
    root: Path
    decode_entities: bool = False
    create_spritesheet: bool = False
    spritesheet_class: str = "svg-spritesheet"
    sprite_id_fn: Optional[Callable[[str], str]] = field(default=None, compare=False)
    sprite_id_prefix: str = "svg-sprite-"

    def retains(self, attribute: str) -> bool:
        """Return True when *attribute* should be copied onto the inlined root."""
        return self.attrs.search(attribute) is not None


def resolve_options(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    defaults: Optional[Mapping[str, Any]] = None,
) -> InlineOptions:
    """Combine *defaults* with *overrides* and validate the result.

    Parameters
    ----------
    overrides
        Caller options; keys in camelCase (``decodeEntities``) or snake_case
        (``decode_entities``).
    defaults
        Base values; the packaged defaults when omitted.

    Raises
    ------
    ConfigurationError
        On the first invalid option, naming it. Nothing is applied partially.
    """
    if defaults is None:
        defaults = ConfigManager().get_default_options()
    if overrides is not None and not isinstance(overrides, Mapping):
        raise ConfigurationError("options", "must be a mapping")

    merged = {**_canonical_keys(defaults), **_canonical_keys(overrides or {})}

    decode_entities = _require_bool(merged, "decode_entities", "decodeEntities")
    root = _resolve_root(merged.get("root"))
    attrs = _compile_attrs(merged.get("attrs"))
    selectors, selector = _compile_selectors(merged.get("selectors"))
    create_spritesheet = _require_bool(merged, "create_spritesheet", "createSpritesheet")

    spritesheet_class = merged.get("spritesheet_class", "svg-spritesheet")
    if not isinstance(spritesheet_class, str):
        raise ConfigurationError("spritesheetClass", "must be a string")

    sprite_id_fn = merged.get("sprite_id_fn")
    if sprite_id_fn is not None and not callable(sprite_id_fn):
        raise ConfigurationError("spriteIdFn", "must be a function")

    sprite_id_prefix = merged.get("sprite_id_prefix", "svg-sprite-")
    if not isinstance(sprite_id_prefix, str):
        raise ConfigurationError("spriteIdPrefix", "must be a string")

    options = InlineOptions(
        selectors=selectors,
        selector=selector,
        attrs=attrs,
        root=root,
        decode_entities=decode_entities,
        create_spritesheet=create_spritesheet,
        spritesheet_class=spritesheet_class,
        sprite_id_fn=sprite_id_fn,
        sprite_id_prefix=sprite_id_prefix,
    )
    logger.debug("Options resolved: selectors=%s root=%s spritesheet=%s",
                 ",".join(selectors), root, create_spritesheet)
    return options


# ---------------------------------------------------------------------------
# Normalization helpers
# ---------------------------------------------------------------------------

def _canonical_keys(values: Mapping[str, Any]) -> dict:
    result = {}
    for key, value in values.items():
        name = OPTION_ALIASES.get(key, key)
        if name not in _KNOWN:
            raise ConfigurationError(str(key), "is not a recognized option")
        result[name] = value
    return result


def _require_bool(merged: Mapping[str, Any], name: str, public_name: str) -> bool:
    value = merged.get(name, False)
    if not isinstance(value, bool):
        raise ConfigurationError(public_name, "must be a boolean")
    return value


def _resolve_root(value: Any) -> Path:
    if value is None or value == "":
        return Path(os.getcwd())
    if not isinstance(value, (str, os.PathLike)):
        raise ConfigurationError("root", "must be a string")
    root = Path(os.path.abspath(value))
    if not root.is_dir():
        raise ConfigurationError("root", f"path {value} does not exist")
    return root


def _compile_attrs(value: Any) -> "re.Pattern[str]":
    if isinstance(value, re.Pattern):
        return value
    if isinstance(value, str):
        try:
            return re.compile(value)
        except re.error as exc:
            raise ConfigurationError("attrs", f"is not a valid pattern: {exc}", exc) from exc
    raise ConfigurationError("attrs", "must be either a pattern or a string")


def _compile_selectors(value: Any) -> Tuple[Tuple[str, ...], CSSSelector]:
    if isinstance(value, str):
        selectors: Tuple[str, ...] = (value,)
    elif isinstance(value, (list, tuple)):
        # non-string entries are ignored
        selectors = tuple(s for s in value if isinstance(s, str))
    else:
        raise ConfigurationError("selectors", "must be either a string or a list of strings")

    selectors = tuple(s.strip() for s in selectors if s.strip())
    if not selectors:
        raise ConfigurationError("selectors", "must contain at least one selector")

    joined = ", ".join(selectors)
    try:
        return selectors, CSSSelector(joined, translator="html")
    except SelectorError as exc:
        raise ConfigurationError("selectors", f"could not be parsed ({joined}): {exc}", exc) from exc
