"""Base parser protocol and parse errors."""

from __future__ import annotations

from typing import Protocol

from dotparser.config import ParseConfig
from dotparser.events import GraphEvent


class ParseError(ValueError):
    """Raised when diagram text cannot be turned into an event stream."""


class DotParseError(ParseError):
    """Raised by the DOT parser in strict mode for a line it cannot interpret."""

    def __init__(self, line_no: int, line: str) -> None:
        super().__init__(f"line {line_no}: unrecognized statement: {line}")
        self.line_no = line_no
        self.line = line


class Parser(Protocol):
    """Protocol that all diagram parsers must implement."""

    def parse(self, src: str, config: ParseConfig | None = None) -> list[GraphEvent]:
        """Parse source text into an ordered event stream."""
        ...
