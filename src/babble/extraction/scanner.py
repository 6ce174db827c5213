"""Single top-to-bottom pass that rewrites a document into key references."""

from __future__ import annotations

import logging

from babble.extraction.classifier import ContentClassifier
from babble.extraction.directives import DirectiveRewriter, closes_directive, directive_type
from babble.extraction.frontmatter import FrontMatterTransformer, field_name
from babble.extraction.models import RewrittenDocument, ScanState
from babble.extraction.registry import KeyRegistry
from babble.extraction.syntax import FENCE_RE, FRONT_MATTER_DELIMITER, referenced_keys

logger = logging.getLogger(__name__)


class DocumentScanner:
    """Track front matter, code fences and multi-line directives while rewriting lines."""

    def __init__(
        self,
        registry: KeyRegistry,
        *,
        front_matter: FrontMatterTransformer | None = None,
        directives: DirectiveRewriter | None = None,
        content: ContentClassifier | None = None,
    ) -> None:
        self._registry = registry
        self._front_matter = front_matter or FrontMatterTransformer(registry)
        self._directives = directives or DirectiveRewriter(registry)
        self._content = content or ContentClassifier(registry, self._directives)

    def scan(self, lines: list[str], *, trailing_newline: bool = False) -> RewrittenDocument:
        state = ScanState()
        document = RewrittenDocument(trailing_newline=trailing_newline)

        for line in lines:
            if state.in_multiline_directive:
                state.directive_buffer.append(line)
                if closes_directive(line):
                    block = "\n".join(state.directive_buffer)
                    state.directive_buffer = []
                    self._emit(document, self._directives.rewrite(block))
                continue

            if line == FRONT_MATTER_DELIMITER and not state.front_matter_done:
                if state.in_front_matter:
                    state.in_front_matter = False
                    state.front_matter_done = True
                    document.front_matter_end = len(document.lines)
                else:
                    state.in_front_matter = True
                    document.front_matter_start = len(document.lines)
                self._emit(document, line)
                continue

            if state.in_front_matter:
                name = field_name(line)
                if name is not None:
                    state.current_front_matter_key = name
                self._emit(document, self._front_matter.transform(line, state.current_front_matter_key))
                continue

            if line.strip():
                state.front_matter_done = True

            if FENCE_RE.match(line):
                state.in_code_block = not state.in_code_block
            elif not state.in_code_block and directive_type(line) and not closes_directive(line):
                state.directive_buffer = [line]
                continue

            self._emit(document, self._content.rewrite(line, state.in_code_block))

        if state.in_multiline_directive:
            logger.warning("Unterminated directive block left untouched: %r", state.directive_buffer[0])
            self._emit(document, "\n".join(state.directive_buffer))
        if state.in_front_matter:
            logger.warning("Front matter block is never closed")

        return document

    def _emit(self, document: RewrittenDocument, text: str) -> None:
        document.lines.append(text)
        for key in referenced_keys(text):
            self._registry.mark_used(key)
