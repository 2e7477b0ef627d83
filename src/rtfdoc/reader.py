"""Load Rich Text Format (.rtf) files from disk."""

from pathlib import Path
from typing import Optional

from rtfdoc.config import get_settings
from rtfdoc.formatting.ir import Document
from rtfdoc.parsing.parser import Parser

SUPPORTED_EXTENSIONS = (".rtf",)


def read_text(path: Path, input_encoding: Optional[str] = None) -> str:
    """Read the raw markup of an RTF file.

    RTF is 7-bit by design; undecodable bytes are dropped rather than
    failing the read.
    """
    encoding = input_encoding or get_settings().input_encoding
    return path.read_text(encoding=encoding, errors="ignore")


def read_document(
    path: Path,
    input_encoding: Optional[str] = None,
    parser: Optional[Parser] = None,
) -> Document:
    """Read and parse an RTF file.

    Args:
        path: Path to the .rtf file
        input_encoding: Codec for the file bytes (default: settings)
        parser: Parser to use (default: a new Parser)

    Returns:
        The parsed Document
    """
    parser = parser or Parser()
    return parser.parse(read_text(path, input_encoding))
