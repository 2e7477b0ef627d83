"""Tests for the font table sub-parser."""

import logging

import pytest

from rtfdoc.formatting.ir import Document, FontFamily, FontTheme, Pitch
from rtfdoc.parsing.font_table import parse_font_table


@pytest.fixture
def document() -> Document:
    return Document()


class TestFontTableInDocument:
    """Tests for font tables inside complete documents."""

    def test_sets_font_table(self, parser):
        """Test that fonts land in the document's font table."""
        doc = parser.parse("{\\rtf1{\\fonttbl{\\f0\\froman Times;}{\\f1\\fnil Arial;}}}")

        font = doc.font_table[0]
        assert font.family_command == FontFamily.ROMAN
        assert font.name == "Times"
        assert doc.font_table[1].name == "Arial"

    def test_empty_font_table(self, parser):
        """Test an empty font table followed by a colour table."""
        src = (
            "{\\rtf1\\ansi\\ansicpg1252\\cocoartf1187\n{\\fonttbl}\n"
            "{\\colortbl;\\red255\\green255\\blue255;}\n}"
        )
        doc = parser.parse(src)

        assert doc.font_table == {}
        assert len(doc.colour_table) == 2

    def test_body_follows_font_table(self, parser, hello_world_src):
        """Test that parsing resumes after the font table group."""
        doc = parser.parse(hello_world_src)

        assert doc.plain_text == "Hello, World!"


class TestParseFontTable:
    """Tests for parse_font_table."""

    def test_grouped_entries(self, document):
        """Test fonts wrapped in their own groups."""
        parse_font_table("{\\f0\\froman Times New Roman;}{\\f1\\fnil Arial;}}}", 0, document)
        tbl = document.font_table

        assert len(tbl) == 2
        assert tbl[0].family_command == FontFamily.ROMAN
        assert tbl[0].name == "Times New Roman"
        assert tbl[1].family_command == FontFamily.NIL
        assert tbl[1].name == "Arial"

    def test_without_braces(self, document):
        """Test an entry written without its own group."""
        parse_font_table("\\f0\\froman\\fcharset0 TimesNewRomanPSMT;}}", 0, document)

        assert document.font_table[0].name == "TimesNewRomanPSMT"

    def test_several_entries_without_braces(self, document):
        """Test ';' separated entries at the table level."""
        parse_font_table("\\f0 Times;\\f1 Arial;}", 0, document)

        assert document.font_table[0].name == "Times"
        assert document.font_table[1].name == "Arial"

    def test_line_breaks(self, document):
        """Test that CR and LF between entries are ignored."""
        src = "{\\f0\\froman Times New Roman;}\r{\\f1\\fnil Arial;}\n}}"
        parse_font_table(src, 0, document)
        tbl = document.font_table

        assert len(tbl) == 2
        assert tbl[0].name == "Times New Roman"
        assert tbl[1].name == "Arial"

    def test_family_is_optional(self, document):
        """Test that fonts default to the nil family."""
        parse_font_table("{\\f0 Times New Roman;}}}", 0, document)

        assert document.font_table[0].family_command == FontFamily.NIL
        assert document.font_table[0].name == "Times New Roman"

    @pytest.mark.parametrize("word", ["fswiss", "fmodern", "fscript", "fdecor", "ftech", "fbidi"])
    def test_families(self, document, word):
        """Test every family word."""
        parse_font_table(f"{{\\f0\\{word} Font;}}}}", 0, document)

        assert document.font_table[0].family_command == FontFamily(word[1:])

    def test_sparse_numbering(self, document):
        """Test that font numbers need not be sequential."""
        parse_font_table("{\\f77\\froman Times New Roman;}{\\f3\\fnil Arial;}}}", 0, document)
        tbl = document.font_table

        assert tbl[77].family_command == FontFamily.ROMAN
        assert tbl[77].name == "Times New Roman"
        assert tbl[3].name == "Arial"

    def test_alternate_name(self, document):
        """Test the {\\*\\falt ...} destination."""
        parse_font_table("{\\f0\\froman Times New Roman{\\*\\falt Courier New};}}", 0, document)

        assert document.font_table[0].name == "Times New Roman"
        assert document.font_table[0].alternate_name == "Courier New"

    def test_returns_closing_brace(self, document):
        """Test that the position of the table's closing brace is returned."""
        src = "{\\f0\\froman Times New Roman{\\*\\falt Courier New};}}"

        assert parse_font_table(src, 0, document) == len(src) - 1

    def test_panose(self, document):
        """Test the {\\*\\panose ...} destination."""
        src = (
            "{\\f0\\froman\\fcharset0\\fprq2{\\*\\panose 02020603050405020304}"
            "Times New Roman{\\*\\falt Courier New};}}"
        )
        parse_font_table(src, 0, document)
        font = document.font_table[0]

        assert font.panose == "02020603050405020304"
        assert font.name == "Times New Roman"
        assert font.alternate_name == "Courier New"

    @pytest.mark.parametrize(
        "word",
        ["flomajor", "fhimajor", "fdbmajor", "fbimajor", "flominor", "fhiminor", "fdbminor", "fbiminor"],
    )
    def test_theme(self, document, word):
        """Test the theme font words."""
        parse_font_table(f"{{\\f0\\{word} Times New Roman;}}}}", 0, document)

        assert document.font_table[0].name == "Times New Roman"
        assert document.font_table[0].theme == FontTheme(word[1:])

    @pytest.mark.parametrize(
        "code,pitch",
        [(0, Pitch.DEFAULT), (1, Pitch.FIXED), (2, Pitch.VARIABLE)],
    )
    def test_pitch(self, document, code, pitch):
        """Test \\fprqN."""
        parse_font_table(f"{{\\f0\\fprq{code} Times New Roman;}}}}", 0, document)

        assert document.font_table[0].name == "Times New Roman"
        assert document.font_table[0].pitch == pitch

    def test_unknown_pitch(self, document):
        """Test a pitch code outside 0-2."""
        parse_font_table("{\\f0\\fprq7 Times;}}", 0, document)

        assert document.font_table[0].pitch is None

    def test_non_tagged_name(self, document):
        """Test the {\\*\\fname ...} destination."""
        parse_font_table("{\\f0{\\*\\fname Arial;}Times New Roman;}}", 0, document)

        assert document.font_table[0].name == "Times New Roman"
        assert document.font_table[0].non_tagged_name == "Arial"

    def test_charset(self, document):
        """Test \\fcharsetN."""
        parse_font_table("{\\f0\\fcharset87 Times New Roman;}}", 0, document)

        assert document.font_table[0].character_set == 87

    def test_hex_in_name(self, document):
        """Test hex escapes inside a font name."""
        parse_font_table("{\\f0 Caf\\'e9;}}", 0, document)

        assert document.font_table[0].name == "Café"

    def test_hex_in_name_with_encoding(self, document):
        """Test that hex escapes use the given encoding."""
        parse_font_table("{\\f0 \\'cf\\'f0;}}", 0, document, encoding="cp1251")

        assert document.font_table[0].name == "Пр"

    def test_trailing_terminators_removed(self, document):
        """Test that every trailing ';' is stripped."""
        parse_font_table("{\\f0 Times;;}}", 0, document)

        assert document.font_table[0].name == "Times"

    def test_entry_without_number_is_dropped(self, document, caplog):
        """Test that a font without \\fN is skipped with a warning."""
        caplog.set_level(logging.WARNING, logger="rtfdoc")
        parse_font_table("{\\froman Orphan;}{\\f1 Arial;}}", 0, document)

        assert list(document.font_table) == [1]
        assert "Orphan" in caplog.text

    @pytest.mark.parametrize("word", ["fontemb", "fontfile", "unknowndest"])
    def test_unknown_destination_is_skipped(self, document, word):
        """Test that other {\\*\\...} groups inside an entry add no text."""
        src = f"{{\\f0\\fnil{{\\*\\{word} data {{nested}}}}Arial;}}}}"
        end = parse_font_table(src, 0, document)

        assert document.font_table[0].name == "Arial"
        assert end == len(src) - 1

    def test_embedded_font_in_document(self, parser):
        """Test an embedded font payload inside a complete document."""
        doc = parser.parse("{\\rtf1 {\\fonttbl{\\f0\\fnil{\\*\\fontemb data}Arial;}}x}")

        assert doc.font_table[0].name == "Arial"
        assert doc.plain_text == "x"

    def test_unicode_in_name(self, document):
        """Test that the fallback character after \\uN is not part of the name."""
        parse_font_table("{\\f0 \\u23435?\\u20307?;}}", 0, document)

        assert document.font_table[0].name == "宋体"
