"""Parser registry: auto-detect diagram format and dispatch to the right parser."""

from __future__ import annotations

import re

from dotparser.config import ParseConfig
from dotparser.events import GraphEvent
from dotparser.parsers.base import DotParseError, ParseError, Parser
from dotparser.parsers.dot import DotParser, parse_dot
from dotparser.parsers.plantuml import PlantUMLParser, parse_plantuml

_PLANTUML_LINE_RE = re.compile(
    r"^(@startuml\b|(participant|actor|boundary|control|entity|database|collections|queue)\s"
    r"|(activate|deactivate)\s)"
)
# Alice -> Bob: hello
_PLANTUML_MESSAGE_RE = re.compile(r'^("[^"]*"|[A-Za-z0-9_.]+)\s*[-<>\\/~=]+\s*("[^"]*"|[A-Za-z0-9_.]+)\s*:')
_DOT_LINE_RE = re.compile(r"^(strict\s+)?(di)?graph\b|^subgraph\b")


def detect_type(src: str) -> str:
    """Detect the diagram format from source text. Returns 'dot' or 'plantuml'.

    The first line that is a DOT header or a PlantUML statement decides.
    """
    for line in src.split("\n"):
        line = line.strip()
        if not line or line.startswith("//") or line.startswith("'"):
            continue
        if _DOT_LINE_RE.match(line):
            return "dot"
        if _PLANTUML_LINE_RE.match(line) or _PLANTUML_MESSAGE_RE.match(line):
            return "plantuml"
    return "dot"  # default


_PARSERS: dict[str, type[Parser]] = {
    "dot": DotParser,
    "plantuml": PlantUMLParser,
}


def parse(src: str, config: ParseConfig | None = None) -> list[GraphEvent]:
    """Parse diagram text into events, detecting the format unless the config names one."""
    config = config or ParseConfig()
    diagram_format = config.diagram_format or detect_type(src)
    parser_cls = _PARSERS.get(diagram_format)
    if parser_cls is None:
        raise ValueError(f"Unsupported diagram format: {diagram_format}")
    return parser_cls().parse(src, config)


__all__ = [
    "DotParseError",
    "DotParser",
    "ParseError",
    "PlantUMLParser",
    "detect_type",
    "parse",
    "parse_dot",
    "parse_plantuml",
]
