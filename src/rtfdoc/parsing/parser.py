"""RTF parser: the main scan loop and control word dispatch."""

import codecs
import logging
import re
from typing import Optional

from rtfdoc.config import get_settings
from rtfdoc.errors import InvalidDocument
from rtfdoc.formatting.ir import CharacterSet, Document, Section, twips_to_points
from rtfdoc.formatting.table import Cell, Table
from rtfdoc.parsing.colour_table import parse_colour_table
from rtfdoc.parsing.controls import Control, parse_control, skip_group
from rtfdoc.parsing.font_table import parse_font_table
from rtfdoc.parsing.state import ParseState

logger = logging.getLogger(__name__)

_OPENING = re.compile(r"[\s\ufeff]*(?=\{\\rtf\d)")

CHARACTER_SETS = {
    Control.ANSI: CharacterSet.ANSI,
    Control.MAC: CharacterSet.MAC,
    Control.PC: CharacterSet.PC,
    Control.PCA: CharacterSet.PCA,
}

# Boolean character formatting; an argument of 0 turns the property off
TOGGLES = {
    Control.B: "bold",
    Control.I: "italic",
    Control.UL: "underline",
    Control.SUPER: "superscript",
    Control.SUB: "subscript",
    Control.STRIKE: "strikethrough",
    Control.SCAPS: "smallcaps",
}

JUSTIFICATION = {
    Control.QL: "left",
    Control.QR: "right",
    Control.QJ: "full",
    Control.QC: "center",
}

# Modifiers whose argument is a distance in twips
DISTANCES = {
    Control.FI: "first_line_indent",
    Control.LI: "left_indent",
    Control.RI: "right_indent",
    Control.MARGL: "left_margin",
    Control.MARGR: "right_margin",
    Control.MARGT: "top_margin",
    Control.MARGB: "bottom_margin",
    Control.SB: "space_before",
    Control.SA: "space_after",
    Control.PICW: "picture_width",
    Control.PICH: "picture_height",
    Control.PICWGOAL: "picture_width_goal",
    Control.PICHGOAL: "picture_height_goal",
}

PICTURE_FORMATS = {
    Control.WBITMAP: "bmp",
    Control.JPEGBLIP: "jpeg",
    Control.PNGBLIP: "png",
    Control.EMFBLIP: "emf",
    Control.WMETAFILE: "wmf",
}

PICTURE_SCALES = {
    Control.PICSCALEX: "picture_scale_x",
    Control.PICSCALEY: "picture_scale_y",
}

# Words that emit their own section: (marker modifier, emitted text)
BOUNDARIES = {
    Control.PAR: ("paragraph", ""),
    Control.LINE: ("newline", "\n"),
    Control.NEWLINE: ("newline", "\n"),
    Control.TAB: ("tab", "\t"),
    Control.EMDASH: ("emdash", "--"),
    Control.ENDASH: ("endash", "-"),
    Control.LQUOTE: ("lquote", "'"),
    Control.RQUOTE: ("rquote", "'"),
    Control.LDBLQUOTE: ("ldblquote", '"'),
    Control.RDBLQUOTE: ("rdblquote", '"'),
    Control.NBSP: ("nbsp", " "),
}

LITERALS = {
    Control.LBRACE: "{",
    Control.RBRACE: "}",
    Control.BACKSLASH: "\\",
}

SKIPPED_DESTINATIONS = {Control.STYLESHEET, Control.INFO, Control.IGNORABLE}

NO_OPS = {Control.RTF, Control.INTBL, Control.CARRIAGE_RETURN}

LINE_SEPARATOR = 8232


class Parser:
    """Parse RTF markup into a Document.

    A parser keeps the state of the parse it is running, so an instance
    must not be shared between threads. Sequential reuse is fine: every
    call to parse() starts from a fresh state.
    """

    def __init__(
        self,
        encoding: Optional[str] = None,
        warn_unknown_controls: Optional[bool] = None,
    ) -> None:
        """Create a parser.

        Args:
            encoding: Codec for \\'hh escapes (default: settings, then the
                document's \\ansicpgN, then latin-1)
            warn_unknown_controls: Log unrecognised control words
                (default: settings)
        """
        settings = get_settings()
        self.encoding = encoding if encoding is not None else settings.encoding
        if warn_unknown_controls is None:
            warn_unknown_controls = settings.warn_unknown_controls
        self.warn_unknown_controls = warn_unknown_controls
        self._code_page_encoding: Optional[str] = None
        self.state = ParseState(Document())

    @property
    def doc(self) -> Document:
        return self.state.document

    @property
    def current_section(self) -> Section:
        return self.state.current_section

    @property
    def hex_encoding(self) -> Optional[str]:
        return self.encoding or self._code_page_encoding

    def parse(self, src: str) -> Document:
        """Parse a complete RTF document.

        Args:
            src: The RTF source text

        Returns:
            The parsed Document

        Raises:
            InvalidDocument: If the opening {\\rtf is missing or the braces
                do not balance
        """
        opening = _OPENING.match(src)
        if opening is None:
            raise InvalidDocument("Opening \\rtf1 missing")

        self.state = ParseState(Document())
        self._code_page_encoding = None

        state = self.state
        pos = opening.end()
        length = len(src)
        group_level = 0

        while pos < length:
            char = src[pos]
            pos += 1

            if char == "\\":
                name, value, pos = parse_control(src, pos, self.hex_encoding)
                pos = self.handle_control(name, value, src, pos)

            elif char == "{":
                state.pending_skip = 0
                state.push_group()
                group_level += 1

            elif char == "}":
                state.pending_skip = 0
                state.pop_group()
                group_level -= 1
                if group_level < 0:
                    raise InvalidDocument(f"Unbalanced {{}}s: unexpected '}}' at {pos - 1}")

            elif char in "\r\n":
                continue

            elif state.pending_skip:
                state.pending_skip -= 1

            else:
                state.append_text(char)

        if group_level != 0:
            raise InvalidDocument("Unbalanced {}s")

        return state.finish()

    def parse_control(self, src: str, pos: int = 0):
        """Lex one control word; see rtfdoc.parsing.controls.parse_control."""
        return parse_control(src, pos, self.hex_encoding)

    def parse_font_table(self, src: str, pos: int) -> int:
        return parse_font_table(src, pos, self.doc, self.hex_encoding)

    def parse_colour_table(self, src: str, pos: int) -> int:
        return parse_colour_table(src, pos, self.doc)

    def handle_control(self, name: str, value, src: Optional[str], pos: int) -> int:
        """Apply one control word to the parse state.

        Args:
            name: The control name
            value: Its argument (the decoded character for hex escapes)
            src: The source text, needed by the destination sub-parsers
            pos: Position just after the control word

        Returns:
            The position to continue scanning from
        """
        state = self.state
        control = Control.lookup(name)

        if control is Control.HEX:
            if value is not None:
                self._append_fallback_aware(value)
            return pos
        state.pending_skip = 0

        if control is Control.FONTTBL:
            return self.parse_font_table(src, pos)
        elif control is Control.COLORTBL:
            return self.parse_colour_table(src, pos)
        elif control in SKIPPED_DESTINATIONS:
            return skip_group(src, pos)

        elif control in NO_OPS:
            pass
        elif control in CHARACTER_SETS:
            self.doc.character_set = CHARACTER_SETS[control]
        elif control is Control.ANSICPG:
            self._set_code_page(value)
        elif control is Control.DEFF:
            self.doc.default_font = value or 0

        elif control is Control.F:
            state.set_modifier("font", self.doc.font_table.get(value))
        elif control is Control.FS:
            # RTF font sizes are in half-points
            state.set_modifier("font_size", (value or 0) / 2.0)
        elif control in TOGGLES:
            if value == 0:
                state.remove_modifier(TOGGLES[control])
            else:
                state.set_modifier(TOGGLES[control], True)
        elif control is Control.ULNONE:
            state.remove_modifier("underline")
        elif control is Control.NOSUPERSUB:
            state.remove_modifier("superscript", "subscript")
        elif control is Control.CF:
            state.set_modifier("foreground_colour", self._colour(value))
        elif control is Control.CB:
            state.set_modifier("background_colour", self._colour(value))
        elif control in JUSTIFICATION:
            state.set_modifier("justification", JUSTIFICATION[control])
        elif control in DISTANCES:
            state.set_modifier(DISTANCES[control], twips_to_points(value or 0))
        elif control in (Control.PARD, Control.PLAIN):
            state.reset_formatting()

        elif control in BOUNDARIES:
            marker, text = BOUNDARIES[control]
            state.emit_section({marker: True}, text)
        elif control in LITERALS:
            state.append_text(LITERALS[control])
        elif control is Control.U:
            self._unicode(value, src, pos)
        elif control is Control.UC:
            state.unicode_skip = max(value or 0, 0)

        elif control is Control.PICT:
            state.set_modifier("picture", True)
        elif control in PICTURE_FORMATS:
            state.set_modifier("picture_format", PICTURE_FORMATS[control])
        elif control in PICTURE_SCALES:
            state.set_modifier(PICTURE_SCALES[control], value)

        elif control is Control.TROWD:
            self._start_row()
        elif control is Control.TRGAPH:
            self._require_table(name).half_gap = twips_to_points(value or 0)
        elif control is Control.TRLEFT:
            self._require_table(name).left_margin = twips_to_points(value or 0)
        elif control is Control.CELLX:
            row = self._require_table(name).current_row
            row.end_positions.append(twips_to_points(value or 0))
        elif control is Control.CELL:
            self._end_cell(name)
        elif control is Control.ROW:
            self._end_row(name)

        elif self.warn_unknown_controls:
            logger.warning("Unknown control %r with %s at %d", name, value, pos)

        return pos

    # -- characters ----------------------------------------------------------

    def _append_fallback_aware(self, text: str) -> None:
        state = self.state
        if state.pending_skip:
            state.pending_skip -= 1
        else:
            state.append_text(text)

    def _unicode(self, value: Optional[int], src: Optional[str], pos: int) -> None:
        state = self.state
        if value is None:
            return

        if value == LINE_SEPARATOR:
            state.emit_section({"newline": True}, "\n")
        else:
            if value < 0:
                value += 65536
            if not 0 <= value <= 0x10FFFF:
                logger.warning("Unicode escape \\u%d out of range at %d", value, pos)
                return
            self._append_code_point(value)

        state.pending_skip = state.unicode_skip
        # A '*' fallback directly after the number is eaten by the tokenizer
        if src and state.pending_skip and src[pos - 1 : pos] == "*":
            state.pending_skip -= 1

    def _append_code_point(self, value: int) -> None:
        section = self.state.current_section
        text = section.text
        if 0xDC00 <= value <= 0xDFFF and text and 0xD800 <= ord(text[-1]) <= 0xDBFF:
            # Join a UTF-16 surrogate pair written as two \u escapes
            high = ord(text[-1])
            section.text = text[:-1]
            value = 0x10000 + ((high - 0xD800) << 10) + (value - 0xDC00)
        section.text += chr(value)

    def _colour(self, index: Optional[int]):
        table = self.doc.colour_table
        if index is None or not 0 <= index < len(table):
            logger.debug("Colour index %s not in colour table", index)
            return None
        return table[index]

    def _set_code_page(self, code_page: Optional[int]) -> None:
        self.doc.code_page = code_page
        if code_page is None:
            return
        try:
            self._code_page_encoding = codecs.lookup(f"cp{code_page}").name
        except LookupError:
            logger.warning("No codec for code page %d, hex escapes use latin-1", code_page)
            self._code_page_encoding = None

    # -- tables --------------------------------------------------------------

    def _require_table(self, name: str) -> Table:
        table = self.state.active_table
        if table is None:
            raise InvalidDocument(f"\\{name} outside of a table")
        return table

    def _current_table(self) -> Optional[Table]:
        context = self.state.current_context
        if isinstance(context, Cell):
            return context.table
        if context.sections:
            return context.sections[-1].table
        return None

    def _start_row(self) -> None:
        state = self.state
        state.add_section()

        table = self._current_table()
        if table is None:
            table = Table()
            state.emit_section({"table": table})
        else:
            self._leave_cell()
            table.add_row()

        state.active_table = table
        state.push_context(table.current_row.current_cell)

    def _end_cell(self, name: str) -> None:
        state = self.state
        row = self._require_table(name).current_row

        cell = state.current_cell
        if cell is None:
            # More cells than declared columns
            cell = row.new_cell()
            state.push_context(cell)

        if state.current_section.text or not cell.sections:
            state.force_section()
        state.pop_context()

        if not row.is_full:
            state.push_context(row.add_cell())

    def _end_row(self, name: str) -> None:
        state = self.state
        table = self._require_table(name)

        state.add_section()
        self._leave_cell()
        if not table.current_row.has_content:
            logger.debug("Discarding empty table row")
            table.remove_current_row()

        state.active_table = None

    def _leave_cell(self) -> None:
        cell = self.state.current_cell
        if cell is None:
            return

        self.state.pop_context()
        row = cell.row
        if not cell.sections and len(row.cells) > 1 and row.cells[-1] is cell:
            row.cells.pop()
