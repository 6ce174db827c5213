from __future__ import annotations

from babble.extraction.registry import KeyRegistry, normalize_context, slugify


def test_slugify_lowercases_and_collapses_separators() -> None:
    assert slugify("A Quarto report") == "a_quarto_report"
    assert slugify("  Hello,   World!! ") == "hello_world"
    assert slugify("snake__case--text") == "snake_case_text"


def test_slugify_falls_back_for_empty_slug() -> None:
    assert slugify("") == "text"
    assert slugify("!!! ???") == "text"
    assert slugify("Привет") == "text"


def test_slugify_folds_accents_to_ascii() -> None:
    assert slugify("Café crème") == "cafe_creme"


def test_slugify_truncates_long_slugs_and_retrims() -> None:
    text = "word " * 20
    slug = slugify(text)

    assert len(slug) <= 40
    assert not slug.endswith("_")
    assert slug.startswith("word_word")


def test_slugify_keeps_slugs_up_to_fifty_characters() -> None:
    text = "a" * 50
    assert slugify(text) == text
    assert slugify("a" * 51) == "a" * 40


def test_normalize_context_replaces_hyphens() -> None:
    assert normalize_context("my-video") == "my_video"
    assert normalize_context("---") == "text"


def test_register_returns_none_for_untranslatable_text() -> None:
    registry = KeyRegistry()

    assert registry.register("", "para") is None
    assert registry.register(None, "para") is None
    assert registry.register("--- ***", "para") is None
    assert len(registry) == 0


def test_register_is_idempotent_for_identical_text() -> None:
    registry = KeyRegistry()

    first = registry.register("Welcome.", "para")
    second = registry.register("Welcome.", "para")
    third = registry.register("Welcome.", "header")

    assert first == "para_welcome"
    assert second == first
    assert third == first
    assert len(registry) == 1


def test_register_suffixes_colliding_keys() -> None:
    registry = KeyRegistry()

    first = registry.register("Hello world", "para")
    second = registry.register("Hello, world!", "para")
    third = registry.register("hello WORLD", "para")

    assert (first, second, third) == ("para_hello_world", "para_hello_world_2", "para_hello_world_3")
    assert registry.text_for(second) == "Hello, world!"
    assert registry.key_for("hello WORLD") == third


def test_distinct_texts_never_share_a_key() -> None:
    registry = KeyRegistry()
    texts = ["Intro", "intro", "INTRO!", "Intro.", "Intro?"]

    keys = [registry.register(text, "header") for text in texts]

    assert len(set(keys)) == len(texts)


def test_only_used_keys_are_reported_in_sorted_order() -> None:
    registry = KeyRegistry()
    zeta = registry.register("Zeta", "para")
    registry.register("Unused", "para")
    alpha = registry.register("Alpha", "para")

    registry.mark_used(zeta)
    registry.mark_used(alpha)
    registry.mark_used("para_unknown")
    registry.mark_used(None)

    assert [entry.key for entry in registry.used_entries()] == ["para_alpha", "para_zeta"]
    assert "para_unknown" not in registry
