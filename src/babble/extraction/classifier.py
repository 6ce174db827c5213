"""Body line classification and rewriting into key references."""

from __future__ import annotations

import re

from babble.extraction.directives import DirectiveRewriter, directive_type
from babble.extraction.models import LineClass, LineKind
from babble.extraction.registry import KeyRegistry
from babble.extraction.syntax import (
    FENCE_RE,
    has_word_character,
    meta_reference,
    referenced_keys,
)

HEADER_CONTEXT = "header"
PARA_CONTEXT = "para"

_HEADER_RE = re.compile(r"^(#+\s+)(.+)$")
# Fenced divs, HTML comments, table rows and thematic breaks.
_STRUCTURAL_RE = re.compile(r"^(::|<!--|\||(\*\s*){3,}$|(-\s*){3,}$|(_\s*){3,}$)")
_METADATA_LINE_RE = re.compile(r"^[\w-]+:\s*")


def classify(line: str, in_code_block: bool = False) -> LineClass:
    """Classify one body line without touching any state.

    Rules are evaluated in priority order: code region, existing reference,
    header, directive opener, structural marker, prose.
    """

    if in_code_block:
        return LineClass(LineKind.CODE)
    if FENCE_RE.match(line):
        return LineClass(LineKind.FENCE)
    if referenced_keys(line):
        return LineClass(LineKind.REFERENCE)

    header = _HEADER_RE.match(line)
    if header is not None and has_word_character(header.group(2)):
        return LineClass(LineKind.HEADER, prefix=header.group(1), text=header.group(2))

    name = directive_type(line)
    if name is not None:
        return LineClass(LineKind.DIRECTIVE, text=name)

    if _STRUCTURAL_RE.match(line):
        return LineClass(LineKind.STRUCTURAL)

    if (
        line.strip()
        and has_word_character(line)
        and not line.startswith(("#", "{{<"))
        and not _METADATA_LINE_RE.match(line)
    ):
        return LineClass(LineKind.PROSE, text=line)

    return LineClass(LineKind.PASSTHROUGH)


class ContentClassifier:
    """Apply the classification of a body line to produce its rewritten form."""

    def __init__(self, registry: KeyRegistry, directives: DirectiveRewriter) -> None:
        self._registry = registry
        self._directives = directives

    def rewrite(self, line: str, in_code_block: bool = False) -> str:
        result = classify(line, in_code_block)

        if result.kind is LineKind.REFERENCE:
            for key in referenced_keys(line):
                self._registry.mark_used(key)
            return line

        if result.kind is LineKind.HEADER:
            key = self._registry.register(result.text, HEADER_CONTEXT)
            if key is None:
                return line
            self._registry.mark_used(key)
            return f"{result.prefix}{meta_reference(key)}"

        if result.kind is LineKind.DIRECTIVE:
            return self._directives.rewrite(line, result.text)

        if result.kind is LineKind.PROSE:
            key = self._registry.register(result.text, PARA_CONTEXT)
            if key is None:
                return line
            self._registry.mark_used(key)
            return meta_reference(key)

        return line
