"""Intermediate Representation for parsed RTF documents.

This module defines the data structures the parser fills in: the
document itself, its formatted sections, and the entries of the font and
colour tables. Renderers read these without touching the markup again.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rtfdoc.formatting.table import Table


def twips_to_points(value: float) -> float:
    """Convert a distance in twips (1/20 of a point) to points."""
    return value / 20.0


# Modifier keys that mark a single boundary event and are never inherited
BLACKLISTED = frozenset(
    {"paragraph", "newline", "tab", "lquote", "rquote", "ldblquote", "rdblquote"}
)


class CharacterSet(str, Enum):
    """Document character sets."""

    ANSI = "ansi"
    MAC = "mac"
    PC = "pc"
    PCA = "pca"


# =============================================================================
# Fonts
# =============================================================================

class FontFamily(str, Enum):
    """Font family commands (\\fnil, \\froman, ...)."""

    NIL = "nil"
    ROMAN = "roman"
    SWISS = "swiss"
    MODERN = "modern"
    SCRIPT = "script"
    DECOR = "decor"
    TECH = "tech"
    BIDI = "bidi"


class FontTheme(str, Enum):
    """Theme font slots (\\flomajor, \\fhiminor, ...)."""

    LOMAJOR = "lomajor"
    HIMAJOR = "himajor"
    DBMAJOR = "dbmajor"
    BIMAJOR = "bimajor"
    LOMINOR = "lominor"
    HIMINOR = "himinor"
    DBMINOR = "dbminor"
    BIMINOR = "biminor"


class Pitch(str, Enum):
    """Font pitch, decoded from the \\fprqN code."""

    DEFAULT = "default"
    FIXED = "fixed"
    VARIABLE = "variable"

    @classmethod
    def from_code(cls, code: int) -> Optional["Pitch"]:
        """Map a 0/1/2 pitch code to a Pitch, None when out of range."""
        members = list(cls)
        if 0 <= code < len(members):
            return members[code]
        return None


@dataclass
class Font:
    """A single font table entry.

    Attributes:
        number: The font index used by \\fN
        name: The primary font name
        alternate_name: Name from the {\\*\\falt ...} destination
        non_tagged_name: Name from the {\\*\\fname ...} destination
        panose: PANOSE string from the {\\*\\panose ...} destination
        theme: Theme font slot, if any
        pitch: Font pitch, if declared
        character_set: The \\fcharsetN value, if declared
        family_command: The font family (nil when not declared)
    """

    number: Optional[int] = None
    name: str = ""
    alternate_name: str = ""
    non_tagged_name: str = ""
    panose: str = ""
    theme: Optional[FontTheme] = None
    pitch: Optional[Pitch] = None
    character_set: Optional[int] = None
    family_command: FontFamily = FontFamily.NIL

    def cleanup_names(self) -> None:
        """Strip the trailing ';' terminators from every name field."""
        self.name = _cleanup_name(self.name)
        self.alternate_name = _cleanup_name(self.alternate_name)
        self.non_tagged_name = _cleanup_name(self.non_tagged_name)

    def __str__(self) -> str:
        return f"{self.number}: {self.name}"


_TRAILING_TERMINATORS = re.compile(r";+$")


def _cleanup_name(name: str) -> str:
    return _TRAILING_TERMINATORS.sub("", name)


# =============================================================================
# Colours
# =============================================================================

class ColourTheme(str, Enum):
    """Theme colour slots (\\cmaindarkone, \\caccentone, ...)."""

    MAINDARKONE = "maindarkone"
    MAINLIGHTONE = "mainlightone"
    MAINDARKTWO = "maindarktwo"
    MAINLIGHTTWO = "mainlighttwo"
    ACCENTONE = "accentone"
    ACCENTTWO = "accenttwo"
    ACCENTTHREE = "accentthree"
    ACCENTFOUR = "accentfour"
    ACCENTFIVE = "accentfive"
    ACCENTSIX = "accentsix"
    HYPERLINK = "hyperlink"
    FOLLOWEDHYPERLINK = "followedhyperlink"
    BACKGROUNDONE = "backgroundone"
    TEXTONE = "textone"
    BACKGROUNDTWO = "backgroundtwo"
    TEXTTWO = "texttwo"


@dataclass
class Colour:
    """A colour table entry.

    Attributes:
        red: Red value between 0 and 255
        green: Green value between 0 and 255
        blue: Blue value between 0 and 255
        tint: The \\ctintN value, if any
        shade: The \\cshadeN value, if any
        theme: Theme colour slot, if any
        use_default: True when the reader should use its default colour
    """

    red: int = 0
    green: int = 0
    blue: int = 0
    tint: Optional[int] = None
    shade: Optional[int] = None
    theme: Optional[ColourTheme] = None
    use_default: bool = False

    def __str__(self) -> str:
        if self.use_default:
            return "default"
        return f"[{self.red}, {self.green}, {self.blue}]"


Color = Colour


# =============================================================================
# Sections and the document
# =============================================================================

@dataclass
class Section:
    """A maximal run of text sharing one set of formatting modifiers.

    Attributes:
        text: The text content
        modifiers: Formatting in effect for the run (font_size, bold, ...)
    """

    text: str = ""
    modifiers: dict[str, Any] = field(default_factory=dict)

    @property
    def table(self) -> Optional["Table"]:
        """The table anchored at this section, if any."""
        return self.modifiers.get("table")

    def __str__(self) -> str:
        return self.text


@dataclass
class Document:
    """A parsed RTF document.

    Attributes:
        font_table: Fonts keyed by their \\fN index (sparse)
        colour_table: Colours in declaration order, addressed by index
        default_font: The \\deffN font index
        character_set: The document character set
        code_page: The \\ansicpgN code page, if declared
        sections: Formatted sections in document order
    """

    font_table: dict[int, Font] = field(default_factory=dict)
    colour_table: list[Colour] = field(default_factory=list)
    default_font: int = 0
    character_set: CharacterSet = CharacterSet.ANSI
    code_page: Optional[int] = None
    sections: list[Section] = field(default_factory=list)

    @property
    def color_table(self) -> list[Colour]:
        return self.colour_table

    @property
    def plain_text(self) -> str:
        """Get the text of all top-level sections without formatting."""
        return "".join(section.text for section in self.sections)

    @property
    def tables(self) -> list["Table"]:
        """Tables anchored in the document body, in order."""
        return [s.table for s in self.sections if s.table is not None]

    def __str__(self) -> str:
        lines = ["RTF Document:", "  Font Table:"]
        for number in sorted(self.font_table):
            lines.append(f"    {self.font_table[number]}")

        lines.append("  Colour Table:")
        for idx, colour in enumerate(self.colour_table):
            lines.append(f"    {idx}: {colour}")

        lines.append("  Body:")
        lines.append("")
        for section in self.sections:
            lines.append(repr(section.modifiers))
            lines.append(section.text)

        return "\n".join(lines) + "\n"
