"""Document model produced by the RTF parser."""

from rtfdoc.formatting.ir import (
    BLACKLISTED,
    CharacterSet,
    Colour,
    Color,
    ColourTheme,
    Document,
    Font,
    FontFamily,
    FontTheme,
    Pitch,
    Section,
    twips_to_points,
)
from rtfdoc.formatting.table import Table, Row, Cell

__all__ = [
    "BLACKLISTED",
    "CharacterSet",
    "Colour",
    "Color",
    "ColourTheme",
    "Document",
    "Font",
    "FontFamily",
    "FontTheme",
    "Pitch",
    "Section",
    "twips_to_points",
    "Table",
    "Row",
    "Cell",
]
