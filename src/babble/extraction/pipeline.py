"""Extraction run: one registry, one scan, one emission per language."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Iterable

from babble.extraction.config import BabbleConfig
from babble.extraction.document import (
    ExtractionError,
    collect_metadata_texts,
    has_generated_block,
    parse_front_matter,
    read_document,
    split_lines,
    write_document,
)
from babble.extraction.emitter import LocalizedEmitter
from babble.extraction.frontmatter import META_CONTEXT
from babble.extraction.models import RewrittenDocument
from babble.extraction.registry import KeyRegistry
from babble.extraction.scanner import DocumentScanner

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExtractionResult:
    """Outcome of extracting one document into per-language files."""

    source_path: Path
    document: str | None
    skipped: bool = False
    keys: list[str] = field(default_factory=list)
    written: dict[str, Path] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.document is not None and not self.errors


class ExtractionRun:
    """State owned by a single extraction: the key registry and its scanner."""

    def __init__(self, config: BabbleConfig, *, preregistered: Iterable[str] = ()) -> None:
        self.config = config
        self.registry = KeyRegistry()
        for text in preregistered:
            self.registry.register(text, META_CONTEXT)
        self._scanner = DocumentScanner(self.registry)

    def scan(self, text: str) -> RewrittenDocument:
        lines, trailing_newline = split_lines(text)
        return self._scanner.scan(lines, trailing_newline=trailing_newline)

    def localize(self, text: str) -> dict[str, str]:
        """Render every configured language; empty when the text is already localized."""

        lines, _ = split_lines(text)
        if has_generated_block(lines):
            return {}

        emitter = LocalizedEmitter(self.scan(text), self.registry, source_lang=self.config.source_lang)
        return {lang: emitter.render(lang) for lang in self.config.languages}


def run_extraction(
    path: str | Path,
    config: BabbleConfig | None = None,
    *,
    preregistered: Iterable[str] | None = None,
) -> ExtractionResult:
    """Extract `path` and write `<base>.<lang>.<ext>` for every configured language.

    Unreadable input, an invalid `babble` section and unwritable outputs are
    logged and reported in the result rather than raised.
    """

    source = Path(path)
    try:
        text = read_document(source)
    except ExtractionError as exc:
        logger.error("%s", exc)
        return ExtractionResult(source_path=source, document=None, errors={"input": str(exc)})

    lines, _ = split_lines(text)
    if has_generated_block(lines):
        logger.info("Found existing langstrings in %s, nothing to extract", source)
        return ExtractionResult(source_path=source, document=text, skipped=True)

    meta = parse_front_matter(lines)
    if config is None:
        try:
            config = BabbleConfig.from_metadata(meta, source)
        except ValueError as exc:
            logger.error("Configuration error: %s (path=%s)", exc, source)
            return ExtractionResult(source_path=source, document=text, errors={"config": str(exc)})
    if preregistered is None:
        preregistered = collect_metadata_texts(meta)

    run = ExtractionRun(config, preregistered=preregistered)
    emitter = LocalizedEmitter(run.scan(text), run.registry, source_lang=config.source_lang)
    result = ExtractionResult(source_path=source, document=text, keys=emitter.keys)

    for lang in config.languages:
        target = config.output_path(lang)
        try:
            write_document(target, emitter.render(lang))
        except ExtractionError as exc:
            logger.error("%s", exc)
            result.errors[lang] = str(exc)
            continue
        result.written[lang] = target
        logger.info("Created %s", target)

    return result
