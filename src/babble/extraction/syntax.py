"""Reference syntax shared by the rewriting and emission stages."""

from __future__ import annotations

import re

FRONT_MATTER_DELIMITER = "---"
GENERATED_BLOCK_FIELD = "langstrings"
CONFIG_SECTION_FIELD = "babble"

META_REFERENCE_RE = re.compile(r"\{\{<\s*meta\s+langstrings\.(\w+)\s*>\}\}")
ATTRIBUTE_REFERENCE_RE = re.compile(r"\"t:(\w+)\"")
DIRECTIVE_OPEN_RE = re.compile(r"^\{\{<\s*([\w-]+)")
DIRECTIVE_CLOSE_RE = re.compile(r">\}\}\s*$")
FENCE_RE = re.compile(r"^```")
WORD_RE = re.compile(r"\w")


def meta_reference(key: str) -> str:
    """Body / front-matter reference to a generated key."""

    return f"{{{{< meta langstrings.{key} >}}}}"


def attribute_reference(key: str) -> str:
    """Directive attribute value pointing at a generated key."""

    return f"t:{key}"


def referenced_keys(text: str) -> list[str]:
    """Return every key referenced by `text`, in order of appearance."""

    keys = [match.group(1) for match in META_REFERENCE_RE.finditer(text)]
    keys.extend(match.group(1) for match in ATTRIBUTE_REFERENCE_RE.finditer(text))
    return keys


def has_word_character(text: str) -> bool:
    return bool(WORD_RE.search(text))
