"""Reading, splitting and writing of source documents."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
from typing import Any

from charset_normalizer import from_bytes
import yaml

from babble.extraction.syntax import FRONT_MATTER_DELIMITER, GENERATED_BLOCK_FIELD

logger = logging.getLogger(__name__)

_GENERATED_BLOCK_RE = re.compile(rf"^{GENERATED_BLOCK_FIELD}:")
PRE_REGISTERED_FIELDS = ("title", "description")


@dataclass(slots=True)
class ExtractionError(Exception):
    """Domain error for unreadable inputs and unwritable outputs."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


def decode_document(raw: bytes) -> str:
    """Decode UTF-8 (BOM tolerated), falling back to charset detection."""

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best is None or not best.encoding:
        raise UnicodeDecodeError("utf-8", raw, 0, len(raw), "could not detect document encoding")
    logger.warning("Input is not UTF-8, decoding as %s", best.encoding)
    return raw.decode(best.encoding)


def read_document(path: str | Path) -> str:
    source = Path(path)
    try:
        raw = source.read_bytes()
    except OSError as exc:
        raise ExtractionError(source, f"Cannot open input file: {exc.strerror or exc}") from exc

    try:
        return decode_document(raw)
    except UnicodeDecodeError as exc:
        raise ExtractionError(source, f"Cannot decode input file: {exc.reason}") from exc


def write_document(path: str | Path, text: str) -> None:
    target = Path(path)
    try:
        target.write_text(text, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise ExtractionError(target, f"Cannot create file: {exc.strerror or exc}") from exc


def split_lines(text: str) -> tuple[list[str], bool]:
    """Split into lines, reporting whether the text ended with a newline."""

    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    if not normalized:
        return [], False
    trailing_newline = normalized.endswith("\n")
    lines = normalized.split("\n")
    if trailing_newline:
        lines.pop()
    return lines, trailing_newline


def front_matter_lines(lines: list[str]) -> list[str] | None:
    """Lines between the opening and closing delimiters, or None without front matter."""

    start: int | None = None
    for index, line in enumerate(lines):
        if start is None:
            if line == FRONT_MATTER_DELIMITER:
                start = index
            elif line.strip():
                return None
        elif line == FRONT_MATTER_DELIMITER:
            return lines[start + 1 : index]
    return None


def parse_front_matter(lines: list[str]) -> dict[str, Any]:
    """Parse front matter into a mapping of plain strings; malformed YAML degrades to `{}`.

    BaseLoader keeps scalars such as `no` or `on` as text instead of YAML 1.1 booleans.
    """

    block = front_matter_lines(lines)
    if not block:
        return {}
    try:
        data = yaml.load("\n".join(block), Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        logger.warning("Front matter is not valid YAML, using defaults: %s", exc)
        return {}
    return data if isinstance(data, dict) else {}


def has_generated_block(lines: list[str]) -> bool:
    """True when the front matter already carries a top-level `langstrings` block."""

    block = front_matter_lines(lines)
    return block is not None and any(_GENERATED_BLOCK_RE.match(line) for line in block)


def _stringify(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        return str(value).strip() or None
    if isinstance(value, list):
        parts = [part for part in (_stringify(item) for item in value) if part]
        return " ".join(parts) or None
    return None


def collect_metadata_texts(meta: dict[str, Any]) -> list[str]:
    """Stringified title/description values for pre-registration."""

    texts: list[str] = []
    for field_name in PRE_REGISTERED_FIELDS:
        text = _stringify(meta.get(field_name))
        if text:
            texts.append(text)
    return texts
