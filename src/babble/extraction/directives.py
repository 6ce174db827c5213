"""Directive block (`{{< type attr="value" >}}`) attribute extraction."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re

from babble.extraction.registry import KeyRegistry
from babble.extraction.syntax import DIRECTIVE_CLOSE_RE, DIRECTIVE_OPEN_RE, attribute_reference

logger = logging.getLogger(__name__)

_ATTRIBUTE_RE = re.compile(r"""(\w+)\s*=\s*(?:'([^'\n]*)'|"([^"\n]*)")""")
_EXPRESSION_PREFIX = "`"
_REFERENCE_PREFIX = "t:"


@dataclass(slots=True)
class DirectiveAttribute:
    name: str
    value: str
    quote: str


def directive_type(text: str) -> str | None:
    """Return the directive name when `text` opens a directive block."""

    match = DIRECTIVE_OPEN_RE.match(text)
    return match.group(1) if match else None


def closes_directive(line: str) -> bool:
    return bool(DIRECTIVE_CLOSE_RE.search(line))


def parse_attributes(text: str) -> list[DirectiveAttribute] | None:
    """Parse `name="value"` / `name='value'` pairs of a closed block.

    Returns None when the block cannot be parsed cleanly (unclosed block,
    unmatched quotes or positional arguments), so callers leave it untouched.
    """

    opener = DIRECTIVE_OPEN_RE.match(text)
    closer = DIRECTIVE_CLOSE_RE.search(text)
    if opener is None or closer is None or closer.start() < opener.end():
        return None

    inner = text[opener.end() : closer.start()]
    attributes: list[DirectiveAttribute] = []
    for match in _ATTRIBUTE_RE.finditer(inner):
        if match.group(2) is not None:
            attributes.append(DirectiveAttribute(match.group(1), match.group(2), "'"))
        else:
            attributes.append(DirectiveAttribute(match.group(1), match.group(3), '"'))

    if _ATTRIBUTE_RE.sub("", inner).strip():
        return None
    return attributes


def format_directive(name: str, attributes: list[DirectiveAttribute]) -> str:
    """Render a block on multiple lines with column-aligned attribute names."""

    width = max((len(attribute.name) for attribute in attributes), default=0)
    lines = [f"{{{{< {name}"]
    for attribute in attributes:
        padding = " " * (width - len(attribute.name))
        lines.append(f"  {attribute.name}{padding} = {attribute.quote}{attribute.value}{attribute.quote}")
    lines.append(">}}")
    return "\n".join(lines)


class DirectiveRewriter:
    """Replace translatable attribute values of directive blocks with key references."""

    def __init__(self, registry: KeyRegistry) -> None:
        self._registry = registry
        self._rewritten: dict[str, str] = {}

    def rewrite(self, text: str, name: str | None = None) -> str:
        """Rewrite one directive block; identical blocks are rewritten only once."""

        cached = self._rewritten.get(text)
        if cached is not None:
            return cached

        result = self._rewrite(text, name or directive_type(text))
        self._rewritten[text] = result
        return result

    def _rewrite(self, text: str, name: str | None) -> str:
        if not name:
            return text

        attributes = parse_attributes(text)
        if attributes is None:
            logger.debug("Leaving unparseable %s directive untouched", name)
            return text

        modified = False
        for attribute in attributes:
            if attribute.quote != '"' or not self._is_translatable(attribute.value):
                continue
            key = self._registry.register(attribute.value, name)
            if key is None:
                continue
            self._registry.mark_used(key)
            attribute.value = attribute_reference(key)
            modified = True

        if not modified:
            return text
        return format_directive(name, attributes)

    @staticmethod
    def _is_translatable(value: str) -> bool:
        return not value.startswith((_EXPRESSION_PREFIX, _REFERENCE_PREFIX))
