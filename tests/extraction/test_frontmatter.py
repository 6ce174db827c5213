from __future__ import annotations

from babble.extraction.frontmatter import FrontMatterTransformer, decode_scalar, field_name, strip_quotes
from babble.extraction.registry import KeyRegistry


def _transformer() -> tuple[FrontMatterTransformer, KeyRegistry]:
    registry = KeyRegistry()
    return FrontMatterTransformer(registry), registry


def test_allow_listed_scalar_becomes_reference() -> None:
    transformer, registry = _transformer()

    result = transformer.transform('title: "My Report"', "title")

    assert result == 'title: "{{< meta langstrings.meta_my_report >}}"'
    assert registry.text_for("meta_my_report") == "My Report"
    assert [entry.key for entry in registry.used_entries()] == ["meta_my_report"]


def test_single_quoted_and_bare_scalars_are_unquoted_once() -> None:
    transformer, registry = _transformer()

    transformer.transform("subtitle: 'A subtitle'", "subtitle")
    transformer.transform("description: Plain words", "description")

    assert registry.key_for("A subtitle") == "meta_a_subtitle"
    assert registry.key_for("Plain words") == "meta_plain_words"


def test_other_fields_pass_through() -> None:
    transformer, registry = _transformer()

    for line in ["format: html", "lang: en", "date: 2024-01-01", "", "# comment", "  nested: value"]:
        assert transformer.transform(line, "format") == line
    assert len(registry) == 0


def test_quoted_list_items_under_allow_listed_field() -> None:
    transformer, registry = _transformer()

    result = transformer.transform('  - "Jane Doe"', "author")
    skipped = transformer.transform('  - "python"', "categories")

    assert result == '  - "{{< meta langstrings.meta_jane_doe >}}"'
    assert skipped == '  - "python"'
    assert len(registry) == 1


def test_values_without_word_characters_pass_through() -> None:
    transformer, _ = _transformer()

    assert transformer.transform('title: "---"', "title") == 'title: "---"'
    assert transformer.transform('  - "..."', "keywords") == '  - "..."'
    assert transformer.transform("title:", "title") == "title:"


def test_existing_references_are_not_registered_again() -> None:
    transformer, registry = _transformer()
    line = 'title: "{{< meta langstrings.meta_x >}}"'

    assert transformer.transform(line, "title") == line
    assert len(registry) == 0


def test_field_name_and_strip_quotes() -> None:
    assert field_name("title: x") == "title"
    assert field_name("  - item") is None
    assert strip_quotes('"quoted"') == "quoted"
    assert strip_quotes("'quoted'") == "quoted"
    assert strip_quotes('"mismatched\'') == '"mismatched\''


def test_quoted_scalars_are_decoded_like_the_yaml_parser() -> None:
    transformer, registry = _transformer()

    transformer.transform('title: "A \\"b\\""', "title")
    transformer.transform("subtitle: 'It''s'", "subtitle")
    transformer.transform("description: Words # trailing comment", "description")

    assert registry.key_for('A "b"') == "meta_a_b"
    assert registry.key_for("It's") == "meta_it_s"
    assert registry.key_for("Words") == "meta_words"


def test_decode_scalar_falls_back_for_non_strings() -> None:
    assert decode_scalar("[a, b]") == "[a, b]"
    assert decode_scalar('"unterminated') == '"unterminated'
    assert decode_scalar("Note: x") == "Note: x"
