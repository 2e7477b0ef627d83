"""Control-word tokenizer.

A control word starts with a backslash and is either a run of letters
with an optional signed integer argument (``\\fs24``, ``\\trleft-108``),
a hex escape (``\\'e9``) or a single non-letter control symbol
(``\\{``, ``\\~``, ``\\*``).
"""

import logging
import re
from enum import Enum
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

_CONTROL_WORD = re.compile(r"([a-zA-Z]+)(-?\d+)?(\*)?")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]{1,2}")


class Control(Enum):
    """Every control word the main dispatcher recognises."""

    # Document header
    RTF = "rtf"
    ANSI = "ansi"
    MAC = "mac"
    PC = "pc"
    PCA = "pca"
    ANSICPG = "ansicpg"
    DEFF = "deff"

    # Destinations handed to sub-parsers
    FONTTBL = "fonttbl"
    COLORTBL = "colortbl"
    STYLESHEET = "stylesheet"
    INFO = "info"
    IGNORABLE = "*"

    # Character formatting
    F = "f"
    FS = "fs"
    B = "b"
    I = "i"
    UL = "ul"
    ULNONE = "ulnone"
    SUPER = "super"
    SUB = "sub"
    NOSUPERSUB = "nosupersub"
    STRIKE = "strike"
    SCAPS = "scaps"
    CF = "cf"
    CB = "cb"
    PLAIN = "plain"

    # Paragraph formatting
    PARD = "pard"
    QL = "ql"
    QR = "qr"
    QJ = "qj"
    QC = "qc"
    FI = "fi"
    LI = "li"
    RI = "ri"
    SB = "sb"
    SA = "sa"

    # Page margins
    MARGL = "margl"
    MARGR = "margr"
    MARGT = "margt"
    MARGB = "margb"

    # Characters and escapes
    HEX = "hex"
    U = "u"
    UC = "uc"
    LBRACE = "{"
    RBRACE = "}"
    BACKSLASH = "\\"

    # Boundary words
    PAR = "par"
    LINE = "line"
    NEWLINE = "\n"
    CARRIAGE_RETURN = "\r"
    TAB = "tab"
    EMDASH = "emdash"
    ENDASH = "endash"
    LQUOTE = "lquote"
    RQUOTE = "rquote"
    LDBLQUOTE = "ldblquote"
    RDBLQUOTE = "rdblquote"
    NBSP = "~"

    # Tables
    TROWD = "trowd"
    TRGAPH = "trgaph"
    TRLEFT = "trleft"
    CELLX = "cellx"
    INTBL = "intbl"
    CELL = "cell"
    ROW = "row"

    # Pictures
    PICT = "pict"
    WBITMAP = "wbitmap"
    JPEGBLIP = "jpegblip"
    PNGBLIP = "pngblip"
    EMFBLIP = "emfblip"
    WMETAFILE = "wmetafile"
    PICW = "picw"
    PICH = "pich"
    PICWGOAL = "picwgoal"
    PICHGOAL = "pichgoal"
    PICSCALEX = "picscalex"
    PICSCALEY = "picscaley"

    UNKNOWN = "<unknown>"

    @classmethod
    def lookup(cls, name: str) -> "Control":
        """Resolve a control name, falling back to UNKNOWN."""
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class Token(NamedTuple):
    """A lexed control word.

    Attributes:
        name: The control name ('hex' for hex escapes)
        value: Integer argument, decoded character for hex escapes, or None
        pos: Position of the first character after the control word
    """

    name: str
    value: Optional[object]
    pos: int

    @property
    def control(self) -> Control:
        return Control.lookup(self.name)


def decode_hex(digits: str, encoding: Optional[str] = None) -> Optional[str]:
    """Decode the hex digits of a \\'hh escape into a character.

    Without an encoding the byte value is used as the code point.
    """
    try:
        byte = int(digits, 16)
    except ValueError:
        logger.warning("Invalid hex escape \\'%s", digits)
        return None

    if encoding:
        return bytes([byte]).decode(encoding, errors="replace")
    return chr(byte)


def parse_control(src: str, pos: int = 0, encoding: Optional[str] = None) -> Token:
    """Lex one control word starting just after its backslash.

    Args:
        src: The source text
        pos: Position of the first character after the backslash
        encoding: Codec used to decode hex escapes

    Returns:
        Token with the name, optional value and the position to resume at
    """
    if pos >= len(src):
        return Token("", None, pos)

    if src[pos] == "'":
        # Only the digits actually present belong to the escape
        digits = _HEX_DIGITS.match(src, pos + 1)
        if digits is None:
            logger.warning("Hex escape without digits at %d", pos)
            return Token("hex", None, pos + 1)
        return Token("hex", decode_hex(digits.group(), encoding), digits.end())

    match = _CONTROL_WORD.match(src, pos)
    if match is None:
        # Control symbol: the character itself is the word
        return Token(src[pos], None, pos + 1)

    name, digits, star = match.groups()
    value = int(digits) if digits is not None else None
    pos = match.end()

    # One delimiting space belongs to the control word
    if star is None and src[pos : pos + 1] == " ":
        pos += 1

    return Token(name, value, pos)


def skip_group(src: str, pos: int) -> int:
    """Consume the rest of the current group.

    Args:
        src: The source text
        pos: A position inside the group to skip

    Returns:
        Position of the group's closing brace (len(src) if never closed)
    """
    group = 1
    length = len(src)

    while pos < length:
        char = src[pos]
        if char == "\\":
            pos += 2
            continue

        if char == "{":
            group += 1
        elif char == "}":
            group -= 1
            if group == 0:
                return pos
        pos += 1

    return length
