"""Key generation, deduplication and usage tracking for extracted strings."""

from __future__ import annotations

import logging
import re
import unicodedata

from babble.extraction.models import RegistryEntry
from babble.extraction.syntax import has_word_character

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_NON_WORD_RE = re.compile(r"[^A-Za-z0-9_]+")

SLUG_FALLBACK = "text"
SLUG_MAX_LENGTH = 50
SLUG_TRUNCATED_LENGTH = 40


def slugify(text: str) -> str:
    """Convert text into an ASCII slug usable inside a YAML key."""

    if not text:
        return SLUG_FALLBACK

    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM_RE.sub("_", folded.lower()).strip("_")
    if not slug:
        return SLUG_FALLBACK
    if len(slug) > SLUG_MAX_LENGTH:
        slug = slug[:SLUG_TRUNCATED_LENGTH].rstrip("_")
    return slug


def normalize_context(context: str) -> str:
    """Reduce a context tag (possibly a hyphenated directive name) to word characters."""

    cleaned = _NON_WORD_RE.sub("_", context).strip("_")
    return cleaned or SLUG_FALLBACK


class KeyRegistry:
    """Per-run registry mapping keys to extracted text and back."""

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}
        self._keys_by_text: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def register(self, text: str | None, context: str) -> str | None:
        """Return the key for `text`, minting one on first sight.

        Returns None when there is nothing worth translating.
        """

        if not text or not has_word_character(text):
            return None

        existing = self._keys_by_text.get(text)
        if existing is not None:
            return existing

        key = self._unique_key(f"{normalize_context(context)}_{slugify(text)}")
        self._entries[key] = RegistryEntry(key=key, text=text)
        self._keys_by_text[text] = key
        logger.debug("Stored %s = %r", key, text)
        return key

    def mark_used(self, key: str | None) -> None:
        if not key:
            return
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Reference to unknown key ignored: %s", key)
            return
        entry.used = True

    def text_for(self, key: str) -> str | None:
        entry = self._entries.get(key)
        return entry.text if entry is not None else None

    def key_for(self, text: str) -> str | None:
        return self._keys_by_text.get(text)

    def used_entries(self) -> list[RegistryEntry]:
        """Used entries in lexicographic key order."""

        return [self._entries[key] for key in sorted(self._entries) if self._entries[key].used]

    def _unique_key(self, base: str) -> str:
        key = base
        counter = 1
        while key in self._entries:
            counter += 1
            key = f"{base}_{counter}"
        return key
