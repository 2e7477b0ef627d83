"""Font table sub-parser ({\\fonttbl ...})."""

import logging
from typing import Optional

from rtfdoc.formatting.ir import Document, Font, FontFamily, FontTheme, Pitch
from rtfdoc.parsing.controls import parse_control, skip_group

logger = logging.getLogger(__name__)

FAMILIES = {f"f{family.value}": family for family in FontFamily}
THEMES = {f"f{theme.value}": theme for theme in FontTheme}

# Destinations whose text goes into a field other than the font name
NAME_DESTINATIONS = {
    "falt": "alternate_name",
    "fname": "non_tagged_name",
    "panose": "panose",
}

LITERALS = {"{", "}", "\\"}


def parse_font_table(
    src: str,
    pos: int,
    document: Document,
    encoding: Optional[str] = None,
) -> int:
    """Parse font entries until the font table group closes.

    Entries are usually wrapped in their own group ({\\f0\\froman Times;})
    but may also follow each other directly, terminated by ';'.

    Args:
        src: The source text
        pos: Position just after \\fonttbl
        document: Document whose font table is filled
        encoding: Codec for hex escapes inside font names

    Returns:
        Position of the closing brace of the font table group
    """
    group = 1
    font: Optional[Font] = None
    target = "name"
    fallback = 0
    length = len(src)

    while pos < length:
        char = src[pos]

        if char == "{":
            group += 1
            target = "name"
            fallback = 0
            if group == 2:
                font = Font()

        elif char == "}":
            group -= 1
            target = "name"
            fallback = 0
            if group == 0:
                break
            if group == 1 and font is not None:
                _add_font(document, font)
                font = None

        elif char == "\\":
            start = pos
            token = parse_control(src, pos + 1, encoding)
            pos = token.pos

            if token.name in ("hex", "u") or token.name in LITERALS:
                text = _control_text(token.name, token.value)
                if token.name != "u" and fallback:
                    fallback -= 1
                elif text:
                    font = font or Font()
                    setattr(font, target, getattr(font, target) + text)
                if token.name == "u":
                    # One fallback character follows each \uN
                    fallback = 1
                continue

            target = "name"
            fallback = 0
            if token.name == "*":
                opens_group = src[start - 1 : start] == "{"
                if opens_group and _destination(src, pos) not in NAME_DESTINATIONS:
                    # Ignorable destination with no font field ({\*\fontemb ...})
                    pos = skip_group(src, pos) + 1
                    group -= 1
                continue

            font = font or Font()
            target = _apply_control(font, token.name, token.value, target)
            continue

        elif char in "\r\n":
            pass

        elif fallback:
            fallback -= 1

        elif char == ";" and group == 1:
            # End of an entry written without its own group
            if font is not None:
                _add_font(document, font)
                font = None

        elif font is not None or not char.isspace():
            font = font or Font()
            setattr(font, target, getattr(font, target) + char)

        pos += 1

    if font is not None:
        _add_font(document, font)

    logger.debug("Parsed font table with %d entries", len(document.font_table))
    return pos


def _apply_control(font: Font, name: str, value: Optional[int], target: str) -> str:
    """Apply one control word to a font, returning the text target."""
    if name == "f":
        font.number = value
    elif name == "fprq":
        font.pitch = Pitch.from_code(value or 0)
    elif name == "fcharset":
        font.character_set = value
    elif name in THEMES:
        font.theme = THEMES[name]
    elif name in FAMILIES:
        font.family_command = FAMILIES[name]
    elif name in NAME_DESTINATIONS:
        return NAME_DESTINATIONS[name]
    return target


def _control_text(name: str, value) -> str:
    if name == "hex":
        return value or ""
    if name == "u":
        if value is None:
            return ""
        return chr(value + 65536 if value < 0 else value)
    return name


def _add_font(document: Document, font: Font) -> None:
    font.cleanup_names()
    if font.number is None:
        logger.warning("Dropping font table entry without a number: %r", font.name)
        return
    document.font_table[font.number] = font


def _destination(src: str, pos: int) -> Optional[str]:
    """Name of the control word at pos, None when there is none."""
    if src[pos : pos + 1] != "\\":
        return None
    return parse_control(src, pos + 1).name
