"""Pytest fixtures for rtfdoc tests."""

import logging

import pytest
from pathlib import Path

from rtfdoc import config
from rtfdoc.parsing.parser import Parser


HELLO_WORLD = (
    "{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 Times New Roman;}}"
    "\\f0 \\fs60 Hello, World!}"
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default settings, untouched by the environment."""
    for name in ("RTFDOC_WARN_UNKNOWN", "RTFDOC_ENCODING", "RTFDOC_INPUT_ENCODING"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_settings", None)
    yield
    config._settings = None


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def parser() -> Parser:
    """A parser with unknown-control warnings enabled."""
    return Parser(warn_unknown_controls=True)


@pytest.fixture
def doc(parser: Parser):
    """The document of the parser fixture."""
    return parser.doc


@pytest.fixture
def hello_world_src() -> str:
    """A minimal complete RTF document."""
    return HELLO_WORLD


@pytest.fixture
def table_src() -> str:
    """A document with text around a three column table."""
    return (
        "{\\rtf1 Before Table"
        "\\trowd\\trgaph180\\cellx1440\\cellx2880\\cellx1000"
        "\\pard\\intbl fee.\\cell"
        "\\pard\\intbl fie.\\cell"
        "\\pard\\intbl foe.\\cell\\row "
        "After table}"
    )


@pytest.fixture
def tmp_rtf_file(tmp_path: Path, hello_world_src: str) -> Path:
    """Create a temporary .rtf file for testing."""
    file_path = tmp_path / "hello.rtf"
    file_path.write_text(hello_world_src, encoding="utf-8")
    return file_path
