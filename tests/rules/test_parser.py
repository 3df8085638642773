"""Tests for the rules document parser."""

from pathlib import Path

import pytest

from code_rules.errors import (
    InvalidEncodingError,
    InvalidFrontmatterError,
    MissingRulesFileError,
)
from code_rules.rules.models import ExampleKind
from code_rules.rules.parser import parse_rules_file, parse_rules_text


def test_parse_title_and_categories(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    assert document.title == "Team Rules"
    assert list(document.categories) == [
        "Critical Rules",
        "Naming Conventions",
        "Formatting",
    ]


def test_parse_entries_in_document_order(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    assert [entry.title for entry in document.entries] == [
        "No Ternary Operators",
        "Early Returns",
        "Descriptive Names",
        "Two Space Indentation",
        "Keep lines short",
    ]


def test_parse_statement_and_example_pair(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    entry = document.find_entry("no ternary operators")
    assert entry is not None
    assert entry.category == "Critical Rules"
    assert entry.statement == "Use explicit if/else statements."
    assert entry.has_example_pair
    assert entry.correct_example.kind == ExampleKind.CORRECT
    assert entry.correct_example.language == "ts"
    assert "if (a)" in entry.correct_example.code
    assert entry.incorrect_example.code == "a ? b() : c();"


def test_parse_markers_inside_code(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    entry = document.find_entry("Descriptive Names")
    assert entry is not None
    assert entry.has_example_pair
    assert "active_users" in entry.correct_example.code


def test_parse_entry_without_examples(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    entry = document.find_entry("Early Returns")
    assert entry is not None
    assert entry.correct_example is None
    assert entry.incorrect_example is None
    assert entry.statement == "Return early instead of nesting."


def test_parse_bullet_category(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    entries = document.entries_in("formatting")
    assert [entry.title for entry in entries] == [
        "Two Space Indentation",
        "Keep lines short",
    ]
    assert entries[0].statement == "indent with two spaces."
    assert entries[1].statement == "Keep lines short."


def test_parse_checklist_links(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    assert [(item.text, item.rule_title) for item in document.checklist] == [
        ("No ternary operators", "No Ternary Operators"),
        ("Early returns everywhere", "Early Returns"),
        ("Descriptive names", "Descriptive Names"),
    ]
    assert document.checklist[1].checked is True


def test_statement_stops_at_first_example() -> None:
    text = (
        "## Testing\n\n### Rule\n\nBefore.\n\n"
        "✅ CORRECT\n\n```\ngood()\n```\n\nAfter the example.\n\n"
        "❌ INCORRECT\n\n```\nbad()\n```\n"
    )
    entry = parse_rules_text(text).entries[0]
    assert entry.statement == "Before."
    assert entry.correct_example.code == "good()"
    assert entry.incorrect_example.code == "bad()"


def test_unmarked_code_is_not_an_example() -> None:
    text = "## Testing\n\n### Rule\n\nStatement.\n\n```\nplain()\n```\n"
    entry = parse_rules_text(text).entries[0]
    assert entry.correct_example is None
    assert entry.incorrect_example is None


def test_soft_marker_is_case_insensitive() -> None:
    text = (
        "## Testing\n\n### Rule\n\nStatement.\n\nCorrect example:\n\n```\nok()\n```\n"
        "Incorrect:\n\n```\nnope()\n```\n"
    )
    entry = parse_rules_text(text).entries[0]
    assert entry.has_example_pair


def test_title_falls_back_to_file_stem(tmp_path: Path) -> None:
    path = tmp_path / "style-guide.md"
    path.write_text("## Testing\n\n### Rule\n\nStatement.\n", encoding="utf-8")
    document = parse_rules_file(path)
    assert document.title == "style-guide"
    assert document.name == "style-guide"
    assert document.source_path == path


def test_parse_frontmatter() -> None:
    text = (
        "---\n"
        "description: Team standards\n"
        "globs:\n"
        '  - "*.ts"\n'
        "always_apply: true\n"
        "---\n"
        "# Rules\n\n## Testing\n\n### Rule\n\nStatement.\n"
    )
    document = parse_rules_text(text)
    assert document.metadata.description == "Team standards"
    assert document.metadata.globs == ["*.ts"]
    assert document.metadata.always_apply is True
    assert document.headings[0].line == 7


def test_parse_no_frontmatter_defaults(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    assert document.metadata.description == ""
    assert document.metadata.globs == []
    assert document.metadata.always_apply is False


def test_invalid_frontmatter_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.md"
    path.write_text("---\n- just\n- a list\n---\n# Rules\n", encoding="utf-8")
    with pytest.raises(InvalidFrontmatterError):
        parse_rules_file(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingRulesFileError):
        parse_rules_file(tmp_path / "missing.md")


def test_empty_text() -> None:
    document = parse_rules_text("")
    assert document.title == "Rules"
    assert document.entries == []
    assert document.headings == []


def test_entries_are_immutable(sample_rules: str) -> None:
    entry = parse_rules_text(sample_rules).entries[0]
    with pytest.raises(AttributeError):
        entry.title = "changed"  # type: ignore[misc]


def test_extra_labelled_examples_are_kept() -> None:
    text = (
        "## Testing\n\n### Rule\n\nStatement.\n\n"
        "**CORRECT:**\n\n```\na()\n```\n\n"
        "**INCORRECT:**\n\n```\nb()\n```\n\n"
        "**CORRECT:**\n\n```\nc()\n```\n"
    )
    entry = parse_rules_text(text).entries[0]
    assert entry.correct_example.code == "a()"
    assert entry.incorrect_example.code == "b()"
    assert [example.code for example in entry.extra_examples] == ["c()"]
    assert entry.example_count(ExampleKind.CORRECT) == 2
    assert entry.example_count(ExampleKind.INCORRECT) == 1


def test_label_without_code_is_recorded() -> None:
    text = "## Testing\n\n### Rule\n\nStatement.\n\n**CORRECT:**\n\n## Formatting\n"
    entry = parse_rules_text(text).entries[0]
    assert entry.correct_example is None
    assert entry.dangling_label_line == 7


def test_prose_starting_with_label_word_stays_in_statement() -> None:
    text = (
        "## Testing\n\n### Rule\n\n"
        "Correct: always do X.\n\n"
        "CORRECT usage matters here.\n"
    )
    entry = parse_rules_text(text).entries[0]
    assert entry.statement == "Correct: always do X. CORRECT usage matters here."
    assert entry.dangling_label_line == 0


def test_ordered_list_category_becomes_entries() -> None:
    text = "## Formatting\n\n1. Two space indentation.\n2. Trailing commas.\n"
    entries = parse_rules_text(text).entries_in("Formatting")
    assert [entry.title for entry in entries] == [
        "Two space indentation",
        "Trailing commas",
    ]


def test_rule_heading_before_first_category_is_recorded() -> None:
    document = parse_rules_text(
        "# Rules\n\n### Stray\n\nBody.\n\n## Testing\n\n### Rule\n\nBody.\n"
    )
    assert [heading.title for heading in document.stray_headings] == ["Stray"]
    assert [entry.title for entry in document.entries] == ["Rule"]


def test_non_utf8_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "latin.md"
    path.write_bytes(b"\xff\xfe# R\xe8gles\n")
    with pytest.raises(InvalidEncodingError) as exc_info:
        parse_rules_file(path)
    assert "Invalid encoding" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
