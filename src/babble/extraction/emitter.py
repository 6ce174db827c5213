"""Per-language reconstruction of a rewritten document."""

from __future__ import annotations

import re

from babble.extraction.models import RegistryEntry, RewrittenDocument
from babble.extraction.registry import KeyRegistry
from babble.extraction.syntax import CONFIG_SECTION_FIELD, FRONT_MATTER_DELIMITER, GENERATED_BLOCK_FIELD

_LANG_RE = re.compile(r"^lang:\s*")
_DRAFT_RE = re.compile(r"^draft:\s*")
_CONFIG_SECTION_RE = re.compile(rf"^{CONFIG_SECTION_FIELD}:")
_INDENTED_RE = re.compile(r"^\s+\S")


def escape_yaml_value(text: str) -> str:
    """Double-quote a value, escaping backslashes and double quotes."""

    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class LocalizedEmitter:
    """Render the shared rewritten document once per target language."""

    def __init__(self, document: RewrittenDocument, registry: KeyRegistry, *, source_lang: str) -> None:
        self._document = document
        self._source_lang = source_lang
        self._entries = registry.used_entries()

    @property
    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def render(self, lang: str) -> str:
        document = self._document
        if document.has_front_matter:
            start = document.front_matter_start
            end = document.front_matter_end
            assert start is not None and end is not None
            lines = [
                *document.lines[:start],
                FRONT_MATTER_DELIMITER,
                *self._rebuild_front_matter(document.lines[start + 1 : end], lang),
                *self.generated_block(lang),
                FRONT_MATTER_DELIMITER,
                *document.lines[end + 1 :],
            ]
        else:
            lines = [
                FRONT_MATTER_DELIMITER,
                f"lang: {lang}",
                *self.generated_block(lang),
                FRONT_MATTER_DELIMITER,
                *document.lines,
            ]

        text = "\n".join(lines)
        if document.trailing_newline:
            text += "\n"
        return text

    def generated_block(self, lang: str) -> list[str]:
        """Draft marker (non-source languages) followed by the `langstrings` block."""

        is_source = lang == self._source_lang
        lines: list[str] = [] if is_source else ["draft: true"]
        if not self._entries:
            lines.append(f"{GENERATED_BLOCK_FIELD}: {{}}")
            return lines

        lines.append(f"{GENERATED_BLOCK_FIELD}:")
        for entry in self._entries:
            lines.append(self._entry_line(entry, is_source))
        return lines

    def _entry_line(self, entry: RegistryEntry, is_source: bool) -> str:
        if is_source:
            return f"  {entry.key}: {escape_yaml_value(entry.text)}"
        return f'  {entry.key}: "" # {entry.text}'

    def _rebuild_front_matter(self, lines: list[str], lang: str) -> list[str]:
        output: list[str] = []
        pending_blank: list[str] = []
        in_config_section = False
        lang_seen = False
        drop_draft = lang != self._source_lang

        for line in lines:
            if in_config_section:
                if not line.strip():
                    pending_blank.append(line)
                    continue
                if _INDENTED_RE.match(line):
                    pending_blank = []
                    continue
                in_config_section = False
                output.extend(pending_blank)
                pending_blank = []

            if _CONFIG_SECTION_RE.match(line):
                in_config_section = True
            elif _LANG_RE.match(line):
                output.append(f"lang: {lang}")
                lang_seen = True
            elif drop_draft and _DRAFT_RE.match(line):
                continue
            else:
                output.append(line)

        output.extend(pending_blank)
        if not lang_seen:
            output.insert(0, f"lang: {lang}")
        return output
