"""Property categories used to check declaration order inside a block.

Properties are grouped, in the order they should appear, as display,
position, box model, then color and typography. Anything not listed is
"other" and belongs last.
"""

from __future__ import annotations

import re
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class Category(IntEnum):
    DISPLAY = 0
    POSITION = 1
    BOX_MODEL = 2
    COLOR_TYPOGRAPHY = 3
    OTHER = 4

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Category.DISPLAY: "Display",
    Category.POSITION: "Position",
    Category.BOX_MODEL: "BoxModel",
    Category.COLOR_TYPOGRAPHY: "ColorTypography",
    Category.OTHER: "Other",
}

_GROUPS: dict[Category, tuple[str, ...]] = {
    Category.DISPLAY: (
        "display", "visibility", "float", "clear",
        "overflow", "overflow-x", "overflow-y", "clip",
        "flex", "flex-direction", "flex-wrap", "flex-flow",
        "flex-grow", "flex-shrink", "flex-basis", "order",
        "align-content", "align-items", "align-self",
        "justify-content", "justify-items", "justify-self",
        "grid", "grid-area", "grid-template", "grid-template-areas",
        "grid-template-columns", "grid-template-rows", "grid-auto-columns",
        "grid-auto-rows", "grid-auto-flow", "grid-column", "grid-column-start",
        "grid-column-end", "grid-row", "grid-row-start", "grid-row-end",
        "gap", "row-gap", "column-gap", "grid-gap",
    ),
    Category.POSITION: (
        "position", "inset", "top", "right", "bottom", "left", "z-index",
    ),
    Category.BOX_MODEL: (
        "box-sizing",
        "width", "min-width", "max-width",
        "height", "min-height", "max-height",
        "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
        "padding", "padding-top", "padding-right", "padding-bottom", "padding-left",
        "border", "border-width", "border-style", "border-color",
        "border-top", "border-right", "border-bottom", "border-left",
        "border-top-width", "border-right-width", "border-bottom-width", "border-left-width",
        "border-top-style", "border-right-style", "border-bottom-style", "border-left-style",
        "border-top-color", "border-right-color", "border-bottom-color", "border-left-color",
        "border-radius", "border-top-left-radius", "border-top-right-radius",
        "border-bottom-right-radius", "border-bottom-left-radius",
        "border-collapse", "border-spacing",
        "outline", "outline-width", "outline-style", "outline-color", "outline-offset",
    ),
    Category.COLOR_TYPOGRAPHY: (
        "color", "opacity",
        "background", "background-color", "background-image", "background-repeat",
        "background-position", "background-size", "background-attachment",
        "background-clip", "background-origin",
        "font", "font-family", "font-size", "font-style", "font-weight",
        "font-variant", "font-stretch", "line-height", "letter-spacing",
        "word-spacing", "white-space", "word-break", "word-wrap", "overflow-wrap",
        "text-align", "text-decoration", "text-indent", "text-overflow",
        "text-rendering", "text-shadow", "text-transform",
        "vertical-align", "list-style", "list-style-type",
        "list-style-position", "list-style-image",
    ),
}

PROPERTY_CATEGORIES: Mapping[str, Category] = MappingProxyType(
    {name: category for category, names in _GROUPS.items() for name in names}
)

_VENDOR_PREFIX_RE = re.compile(r"^-(?:webkit|moz|ms|o)-")


def category_of(prop: str) -> Category:
    """Category of a property name; unknown properties are ``OTHER``."""
    name = _VENDOR_PREFIX_RE.sub("", prop.strip().lower())
    return PROPERTY_CATEGORIES.get(name, Category.OTHER)
