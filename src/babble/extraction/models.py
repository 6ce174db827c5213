"""Data structures shared by the scanner, classifier and emitter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(slots=True)
class RegistryEntry:
    """One extracted string and its generated key."""

    key: str
    text: str
    used: bool = False


class LineKind(str, Enum):
    """Classification tags for a single body line."""

    CODE = "code"
    FENCE = "fence"
    REFERENCE = "reference"
    HEADER = "header"
    DIRECTIVE = "directive"
    STRUCTURAL = "structural"
    PROSE = "prose"
    PASSTHROUGH = "passthrough"


@dataclass(slots=True)
class LineClass:
    """Result of classifying one body line.

    `prefix` holds the header marker for headers and `text` the span to extract
    (header text, whole prose line, or directive type for directive openers).
    """

    kind: LineKind
    prefix: str = ""
    text: str = ""


@dataclass(slots=True)
class ScanState:
    """Transient per-document state for the line scanner."""

    in_front_matter: bool = False
    front_matter_done: bool = False
    in_code_block: bool = False
    current_front_matter_key: str | None = None
    directive_buffer: list[str] = field(default_factory=list)

    @property
    def in_multiline_directive(self) -> bool:
        return bool(self.directive_buffer)


@dataclass(slots=True)
class RewrittenDocument:
    """Rewritten line sequence consumed by every per-language emission.

    A multi-line directive occupies a single element containing newlines.
    """

    lines: list[str] = field(default_factory=list)
    trailing_newline: bool = False
    front_matter_start: int | None = None
    front_matter_end: int | None = None

    @property
    def has_front_matter(self) -> bool:
        return self.front_matter_start is not None and self.front_matter_end is not None
