"""Line-level rewriting of the YAML front-matter block."""

from __future__ import annotations

import re

import yaml

from babble.extraction.registry import KeyRegistry
from babble.extraction.syntax import META_REFERENCE_RE, has_word_character, meta_reference

TRANSLATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "subtitle",
        "author",
        "abstract",
        "keywords",
        "summary",
        "caption",
        "alt",
        "label",
    }
)

META_CONTEXT = "meta"

_FIELD_RE = re.compile(r"^([\w-]+):")
_SCALAR_RE = re.compile(r"^([\w-]+):\s*(.*)$")
_QUOTED_ITEM_RE = re.compile(r'^(\s+)-\s+"([^"]+)"')
_SKIP_RE = re.compile(r"^\s*(#|$)")


def field_name(line: str) -> str | None:
    """Return the top-level field a front-matter line starts, if any."""

    match = _FIELD_RE.match(line)
    return match.group(1) if match else None


def strip_quotes(value: str) -> str:
    """Remove one layer of matching surrounding quotes."""

    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def decode_scalar(value: str) -> str:
    """Decode a scalar value the way the front-matter parser reads it.

    Quoted values get their YAML escapes resolved (`\\"`, `''`); anything that
    does not load as a single string only loses one layer of quotes.
    """

    try:
        decoded = yaml.load(value, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        return strip_quotes(value)
    return decoded if isinstance(decoded, str) else strip_quotes(value)


class FrontMatterTransformer:
    """Rewrite allow-listed metadata values into key references."""

    def __init__(self, registry: KeyRegistry, fields: frozenset[str] = TRANSLATABLE_FIELDS) -> None:
        self._registry = registry
        self._fields = fields

    def transform(self, line: str, current_field: str | None) -> str:
        if _SKIP_RE.match(line) or META_REFERENCE_RE.search(line):
            return line

        item = _QUOTED_ITEM_RE.match(line)
        if item is not None:
            if current_field not in self._fields:
                return line
            indent, text = item.groups()
            key = self._register(text)
            if key is None:
                return line
            return f'{indent}- "{meta_reference(key)}"'

        scalar = _SCALAR_RE.match(line)
        if scalar is not None:
            name, value = scalar.groups()
            if name not in self._fields or not value.strip():
                return line
            key = self._register(decode_scalar(value.strip()))
            if key is None:
                return line
            return f'{name}: "{meta_reference(key)}"'

        return line

    def _register(self, text: str) -> str | None:
        if not has_word_character(text):
            return None
        key = self._registry.register(text, META_CONTEXT)
        self._registry.mark_used(key)
        return key
