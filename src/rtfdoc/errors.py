"""Exceptions raised by the RTF parser."""


class InvalidDocument(ValueError):
    """Raised when the input is not a structurally valid RTF document.

    Covers a missing opening ``{\\rtf`` marker, unbalanced braces and
    table control words that appear with no table to apply to.
    """
