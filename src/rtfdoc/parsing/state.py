"""Mutable state for a single parse.

The formatting stack holds one modifier frame per open group; the top
frame is the formatting of the section currently being filled. The context
stack records where finished sections go: the document body at the bottom,
or a table cell while a table row is being read.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from rtfdoc.formatting.ir import BLACKLISTED, Document, Section
from rtfdoc.formatting.table import Cell, Table

Context = Union[Document, Cell]


def inherit(frame: dict[str, Any]) -> dict[str, Any]:
    """Copy a modifier frame, dropping the boundary-only keys."""
    return {key: value for key, value in frame.items() if key not in BLACKLISTED}


@dataclass
class ParseState:
    """Formatting and context stacks owned by one parse call.

    Attributes:
        document: The document being built
        formatting_stack: Modifier frames, one per open group
        context_stack: Section sinks; the document is always at the bottom
        current_section: The section collecting text right now
        active_table: Table whose row is being defined, if any
        unicode_skip: Fallback characters following each \\uN (\\ucN)
        pending_skip: Fallback characters still to drop
    """

    document: Document
    formatting_stack: list[dict[str, Any]] = field(default_factory=lambda: [{}])
    context_stack: list[Context] = field(default_factory=list)
    current_section: Section = field(default_factory=Section)
    active_table: Optional[Table] = None
    unicode_skip: int = 1
    pending_skip: int = 0

    def __post_init__(self) -> None:
        if not self.context_stack:
            self.context_stack.append(self.document)
        self.current_section.modifiers = self.formatting_stack[-1]

    @property
    def current_formatting(self) -> dict[str, Any]:
        return self.formatting_stack[-1]

    @property
    def current_context(self) -> Context:
        return self.context_stack[-1]

    @property
    def current_cell(self) -> Optional[Cell]:
        context = self.current_context
        return context if isinstance(context, Cell) else None

    # -- sections ------------------------------------------------------------

    def append_text(self, text: str) -> None:
        self.current_section.text += text

    def add_section(self) -> None:
        """Close the current section if it holds any text."""
        if self.current_section.text:
            self.force_section()

    def force_section(self) -> Section:
        """Close the current section, even when empty, and start a new one."""
        closed = self.current_section
        self.current_context.sections.append(closed)

        self.formatting_stack[-1] = inherit(self.formatting_stack[-1])
        self.current_section = Section(modifiers=self.formatting_stack[-1])
        return closed

    def emit_section(self, modifiers: dict[str, Any], text: str = "") -> Section:
        """Emit a standalone section carrying extra one-off modifiers.

        Pending text is closed first. The extra modifiers are not written
        to the formatting stack, so they never reach the next section.
        """
        self.add_section()
        self.current_section.text = text
        self.current_section.modifiers = {**self.current_formatting, **modifiers}
        return self.force_section()

    # -- formatting ----------------------------------------------------------

    def set_modifier(self, key: str, value: Any) -> None:
        self.add_section()
        self.current_formatting[key] = value

    def remove_modifier(self, *keys: str) -> None:
        self.add_section()
        for key in keys:
            self.current_formatting.pop(key, None)

    def reset_formatting(self) -> None:
        self.add_section()
        self.current_formatting.clear()

    def push_group(self) -> None:
        self.add_section()
        self.formatting_stack.append(inherit(self.current_formatting))
        self.current_section.modifiers = self.current_formatting

    def pop_group(self) -> None:
        self.add_section()
        if len(self.formatting_stack) > 1:
            self.formatting_stack.pop()
        self.current_section.modifiers = self.current_formatting

    # -- contexts ------------------------------------------------------------

    def push_context(self, cell: Cell) -> None:
        self.context_stack.append(cell)

    def pop_context(self) -> Optional[Context]:
        if len(self.context_stack) > 1:
            return self.context_stack.pop()
        return None

    def finish(self) -> Document:
        """Close a trailing section that still holds text."""
        self.add_section()
        return self.document
