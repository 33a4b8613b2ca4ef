"""Centralized configuration for dotparser."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ParseConfig:
    """Configuration for the parsing pipeline."""

    strict: bool = False
    diagram_format: str | None = None
