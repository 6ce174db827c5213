from __future__ import annotations

from babble.extraction.models import RewrittenDocument
from babble.extraction.registry import KeyRegistry
from babble.extraction.scanner import DocumentScanner


def _scan(lines: list[str]) -> tuple[list[str], KeyRegistry, RewrittenDocument]:
    registry = KeyRegistry()
    document = DocumentScanner(registry).scan(lines)
    return document.lines, registry, document


def test_front_matter_and_body_are_rewritten() -> None:
    lines, registry, document = _scan(
        [
            "---",
            'title: "Report"',
            "format: html",
            "---",
            "",
            "# Overview",
            "Body text here.",
        ]
    )

    assert lines == [
        "---",
        'title: "{{< meta langstrings.meta_report >}}"',
        "format: html",
        "---",
        "",
        "# {{< meta langstrings.header_overview >}}",
        "{{< meta langstrings.para_body_text_here >}}",
    ]
    assert document.front_matter_start == 0
    assert document.front_matter_end == 3
    assert [entry.key for entry in registry.used_entries()] == [
        "header_overview",
        "meta_report",
        "para_body_text_here",
    ]


def test_list_items_are_attributed_to_the_last_field() -> None:
    lines, registry, _ = _scan(
        [
            "---",
            "author:",
            '  - "Ada Lovelace"',
            "categories:",
            '  - "math"',
            "---",
        ]
    )

    assert lines[2] == '  - "{{< meta langstrings.meta_ada_lovelace >}}"'
    assert lines[4] == '  - "math"'
    assert len(registry) == 1


def test_code_blocks_are_not_extracted() -> None:
    lines, registry, _ = _scan(["```python", "# not a header", "print('x')", "```", "After code."])

    assert lines[:4] == ["```python", "# not a header", "print('x')", "```"]
    assert lines[4] == "{{< meta langstrings.para_after_code >}}"
    assert len(registry) == 1


def test_multiline_directive_is_buffered_and_rewritten_once() -> None:
    lines, registry, _ = _scan(
        [
            "{{< video",
            '    src="https://example.com/v.mp4"',
            '    title="Demo"',
            ">}}",
            "Closing words.",
        ]
    )

    assert lines[0] == "\n".join(
        [
            "{{< video",
            '  src   = "t:video_https_example_com_v_mp4"',
            '  title = "t:video_demo"',
            ">}}",
        ]
    )
    assert lines[1] == "{{< meta langstrings.para_closing_words >}}"
    assert {entry.key for entry in registry.used_entries()} == {
        "video_https_example_com_v_mp4",
        "video_demo",
        "para_closing_words",
    }


def test_unterminated_directive_is_emitted_as_is() -> None:
    lines, registry, _ = _scan(["Intro line.", '{{< video title="Never closed"', "still open"])

    assert lines == [
        "{{< meta langstrings.para_intro_line >}}",
        '{{< video title="Never closed"\nstill open',
    ]
    assert len(registry) == 1


def test_horizontal_rule_after_front_matter_is_not_a_delimiter() -> None:
    lines, registry, document = _scan(["---", "lang: en", "---", "First.", "---", "title: Not metadata"])

    assert document.front_matter_end == 2
    assert lines[4] == "---"
    assert lines[5] == "title: Not metadata"
    assert len(registry) == 1


def test_document_without_front_matter() -> None:
    lines, _, document = _scan(["Hello there.", "---", "More text."])

    assert document.has_front_matter is False
    assert lines == [
        "{{< meta langstrings.para_hello_there >}}",
        "---",
        "{{< meta langstrings.para_more_text >}}",
    ]


def test_unused_preregistered_keys_stay_unused() -> None:
    registry = KeyRegistry()
    registry.register("Only in the tree", "meta")
    scanner = DocumentScanner(registry)

    scanner.scan(["Body."])

    assert [entry.key for entry in registry.used_entries()] == ["para_body"]
