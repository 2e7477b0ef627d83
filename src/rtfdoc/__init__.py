"""rtfdoc - parse Rich Text Format markup into a structured document model."""

from typing import Optional

from rtfdoc.errors import InvalidDocument
from rtfdoc.formatting import (
    Cell,
    Colour,
    Color,
    Document,
    Font,
    Row,
    Section,
    Table,
)
from rtfdoc.parsing import Parser

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "InvalidDocument",
    "Cell",
    "Colour",
    "Color",
    "Document",
    "Font",
    "Row",
    "Section",
    "Table",
    "Parser",
    "parse",
]


def parse(src: str, encoding: Optional[str] = None) -> Document:
    """Parse RTF source text into a Document with a fresh Parser."""
    return Parser(encoding=encoding).parse(src)
