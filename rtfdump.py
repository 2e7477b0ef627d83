#!/usr/bin/env python3
"""
rtfdoc - dump the structure of an RTF document

Simple usage:
    python rtfdump.py letter.rtf            # Fonts, colours and sections
    python rtfdump.py letter.rtf --text     # Plain text only
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from rtfdoc.cli import app

if __name__ == "__main__":
    app()
