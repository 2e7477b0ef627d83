"""Colour table sub-parser ({\\colortbl ...})."""

import logging
from typing import Optional

from rtfdoc.formatting.ir import Colour, ColourTheme, Document
from rtfdoc.parsing.controls import parse_control

logger = logging.getLogger(__name__)

THEMES = {f"c{theme.value}": theme for theme in ColourTheme}

COMPONENTS = {
    "red": "red",
    "green": "green",
    "blue": "blue",
    "ctint": "tint",
    "cshade": "shade",
}


def parse_colour_table(src: str, pos: int, document: Document) -> int:
    """Parse ';' terminated colour entries until the group closes.

    An entry without any colour words stands for the reader's default
    colour and is stored with ``use_default`` set.

    Returns:
        Position of the closing brace of the colour table group
    """
    colour: Optional[Colour] = None
    length = len(src)

    while pos < length:
        char = src[pos]

        if char == "}":
            break

        if char == "\\":
            token = parse_control(src, pos + 1)
            pos = token.pos

            if token.name in COMPONENTS:
                colour = colour or Colour()
                setattr(colour, COMPONENTS[token.name], token.value or 0)
            elif token.name in THEMES:
                colour = colour or Colour()
                colour.theme = THEMES[token.name]
            else:
                logger.debug("Ignoring %r in colour table", token.name)
            continue

        if char == ";":
            if colour is None:
                colour = Colour(use_default=True)
            document.colour_table.append(colour)
            colour = None

        pos += 1

    logger.debug("Parsed colour table with %d entries", len(document.colour_table))
    return pos
