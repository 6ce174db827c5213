"""Options record for one extraction run."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import Any, Iterable, Mapping

from babble.extraction.syntax import CONFIG_SECTION_FIELD

DEFAULT_LANGUAGES = ("en",)
DEFAULT_SOURCE_LANG = "en"
DEFAULT_BASE_NAME = "index"
DEFAULT_EXTENSION = "qmd"

_LANGUAGE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def _normalize_languages(raw: Iterable[Any]) -> tuple[str, ...]:
    languages: list[str] = []
    for item in raw:
        if isinstance(item, bool):
            raise ValueError(f"Language identifier parsed as a boolean: {item!r}; quote it in YAML")
        value = str(item).strip()
        if not value:
            raise ValueError("Language identifiers cannot be empty")
        if not _LANGUAGE_RE.match(value):
            raise ValueError(f"Invalid language identifier: {value!r}")
        if value not in languages:
            languages.append(value)
    if not languages:
        raise ValueError("At least one language must be configured")
    return tuple(languages)


def _coerce_languages(raw: Any) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return _normalize_languages(part for part in raw.split(",") if part.strip())
    if isinstance(raw, Iterable):
        return _normalize_languages(raw)
    return _normalize_languages([raw])


def _validate_source_lang(raw: Any) -> str:
    if isinstance(raw, bool):
        raise ValueError(f"Source language parsed as a boolean: {raw!r}; quote it in YAML")
    value = str(raw).strip()
    if not value or not _LANGUAGE_RE.match(value):
        raise ValueError(f"Invalid source language: {value!r}")
    return value


def derive_base_name(input_path: str | Path | None) -> str:
    """Strip the directory and every extension from the input file name."""

    if input_path is None:
        return DEFAULT_BASE_NAME
    name = Path(input_path).name
    base = name.split(".", 1)[0]
    return base or DEFAULT_BASE_NAME


def derive_extension(input_path: str | Path | None) -> str:
    if input_path is None:
        return DEFAULT_EXTENSION
    suffix = Path(input_path).suffix
    return suffix[1:] if len(suffix) > 1 else DEFAULT_EXTENSION


@dataclass(frozen=True, slots=True)
class BabbleConfig:
    """Validated extraction options."""

    languages: tuple[str, ...] = DEFAULT_LANGUAGES
    source_lang: str = DEFAULT_SOURCE_LANG
    base_name: str = DEFAULT_BASE_NAME
    extension: str = DEFAULT_EXTENSION
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        languages = _coerce_languages(self.languages)
        if languages is None:
            raise ValueError("At least one language must be configured")
        object.__setattr__(self, "languages", languages)
        object.__setattr__(self, "source_lang", _validate_source_lang(self.source_lang))
        if not self.base_name:
            raise ValueError("base_name cannot be empty")

    def output_path(self, lang: str) -> Path:
        """`<base_name>.<lang>.<extension>` inside the output directory."""

        filename = f"{self.base_name}.{lang}.{self.extension}"
        if self.output_dir is None:
            return Path(filename)
        return self.output_dir / filename

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BabbleConfig":
        """Defaults from BABBLE_LANGUAGES, BABBLE_SOURCE_LANG and BABBLE_OUTPUT_DIR."""

        source: Mapping[str, str] = os.environ if environ is None else environ

        languages_raw = source.get("BABBLE_LANGUAGES", "").strip()
        source_lang_raw = source.get("BABBLE_SOURCE_LANG", DEFAULT_SOURCE_LANG).strip()
        output_dir_raw = source.get("BABBLE_OUTPUT_DIR", "").strip()

        if not source_lang_raw:
            raise ValueError("BABBLE_SOURCE_LANG cannot be empty")

        languages = _coerce_languages(languages_raw) if languages_raw else DEFAULT_LANGUAGES
        return cls(
            languages=languages,
            source_lang=source_lang_raw,
            output_dir=Path(output_dir_raw) if output_dir_raw else None,
        )

    @classmethod
    def from_metadata(
        cls,
        meta: Mapping[str, Any],
        input_path: str | Path | None = None,
        *,
        defaults: "BabbleConfig | None" = None,
        languages: Iterable[str] | None = None,
        source_lang: str | None = None,
        output_dir: str | Path | None = None,
    ) -> "BabbleConfig":
        """Build options from parsed front matter.

        Precedence: explicit arguments, then the document's `babble` section
        (and its `lang` field for the source language), then `defaults`.
        """

        base = defaults or cls()
        section = meta.get(CONFIG_SECTION_FIELD)
        if not isinstance(section, Mapping):
            section = {}

        resolved_languages = _coerce_languages(languages) or _coerce_languages(section.get("languages")) or base.languages

        resolved_source = source_lang or section.get("source_lang") or meta.get("lang") or base.source_lang

        resolved_output = Path(output_dir) if output_dir is not None else base.output_dir
        if resolved_output is None and input_path is not None:
            resolved_output = Path(input_path).parent

        return cls(
            languages=resolved_languages,
            source_lang=resolved_source,
            base_name=derive_base_name(input_path),
            extension=derive_extension(input_path),
            output_dir=resolved_output,
        )
