"""CLI command that extracts translatable strings into per-language documents."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from babble.extraction.config import BabbleConfig
from babble.extraction.document import ExtractionError, parse_front_matter, read_document, split_lines
from babble.extraction.pipeline import run_extraction

logger = logging.getLogger(__name__)


def _split_languages(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [part.strip() for part in raw.split(",") if part.strip()]


def _build_config(args: argparse.Namespace, source_path: Path) -> BabbleConfig:
    defaults = BabbleConfig.from_env()
    try:
        lines, _ = split_lines(read_document(source_path))
    except ExtractionError:
        # run_extraction reports the unreadable input.
        lines = []
    return BabbleConfig.from_metadata(
        parse_front_matter(lines),
        source_path,
        defaults=defaults,
        languages=_split_languages(args.languages),
        source_lang=args.source_lang,
        output_dir=args.output_dir,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract translatable strings into per-language documents")
    parser.add_argument("path", help="Source document (.qmd)")
    parser.add_argument("--languages", help="Comma separated language list, overrides babble.languages")
    parser.add_argument("--source-lang", help="Language whose text fills the generated block")
    parser.add_argument("--output-dir", help="Directory for generated files (defaults to the input's directory)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        format="%(levelname)s: %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
        force=True,
    )

    source_path = Path(args.path)
    try:
        config = _build_config(args, source_path)
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    result = run_extraction(source_path, config)

    payload = {
        "path": str(source_path),
        "skipped": result.skipped,
        "languages": list(config.languages),
        "source_lang": config.source_lang,
        "keys": result.keys,
        "written": {lang: str(target) for lang, target in result.written.items()},
        "errors": result.errors,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
