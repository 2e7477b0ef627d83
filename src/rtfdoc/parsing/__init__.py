"""Parsing engine: tokenizer, dispatcher and table sub-parsers."""

from rtfdoc.parsing.controls import Control, Token, parse_control, skip_group
from rtfdoc.parsing.colour_table import parse_colour_table
from rtfdoc.parsing.font_table import parse_font_table
from rtfdoc.parsing.parser import Parser
from rtfdoc.parsing.state import ParseState

__all__ = [
    "Control",
    "Token",
    "parse_control",
    "skip_group",
    "parse_colour_table",
    "parse_font_table",
    "Parser",
    "ParseState",
]
