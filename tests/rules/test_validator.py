"""Tests for structural validation of rules documents."""

from pathlib import Path

from code_rules.rules.parser import parse_rules_file, parse_rules_text
from code_rules.rules.validator import (
    IssueCode,
    IssueSeverity,
    validate_document,
    validate_text,
)


def test_sample_document_is_clean(sample_rules: str) -> None:
    report = validate_text(sample_rules)
    assert report.issues == []
    assert report.is_valid()
    assert report.is_valid(strict=True)


def test_bundled_rules_file_is_clean() -> None:
    path = Path(__file__).resolve().parents[2] / "OPENCODE_RULES.md"
    document = parse_rules_file(path)
    report = validate_document(document)
    assert report.issues == []
    assert len(document.categories) == 6


def test_orphan_example() -> None:
    text = "## Testing\n\n### Rule\n\nBody.\n\n**CORRECT:**\n\n```\nok()\n```\n"
    report = validate_text(text)
    assert IssueCode.ORPHAN_EXAMPLE in report.codes()
    assert not report.is_valid()
    issue = report.errors[0]
    assert issue.line == 9


def test_empty_statement_and_title() -> None:
    text = "## Testing\n\n###\n\n### Named\n\n**CORRECT:**\n\n```\na\n```\n\n**INCORRECT:**\n\n```\nb\n```\n"
    report = validate_text(text)
    codes = [issue.code for issue in report.issues]
    assert IssueCode.EMPTY_TITLE in codes
    assert codes.count(IssueCode.EMPTY_STATEMENT) == 2


def test_unclosed_fence() -> None:
    report = validate_text("## Testing\n\n### Rule\n\nBody.\n\n```\nnever closed\n")
    assert IssueCode.UNCLOSED_FENCE in report.codes()
    assert not report.is_valid()


def test_malformed_heading() -> None:
    report = validate_text("#Rules\n\n## Testing\n\n### Rule\n\nBody.\n")
    assert IssueCode.MALFORMED_HEADING in report.codes()


def test_heading_level_skip_is_warning() -> None:
    report = validate_text("# Rules\n\n### Orphan level\n\n## Testing\n\n### Rule\n\nBody.\n")
    skips = [issue for issue in report.issues if issue.code == IssueCode.HEADING_LEVEL_SKIP]
    assert len(skips) == 1
    assert skips[0].severity == IssueSeverity.WARNING
    assert report.is_valid()
    assert not report.is_valid(strict=True)


def test_duplicate_titles() -> None:
    text = "## Testing\n\n### Rule\n\nOne.\n\n## Formatting\n\n### rule\n\nTwo.\n"
    report = validate_text(text)
    duplicates = [i for i in report.issues if i.code == IssueCode.DUPLICATE_TITLE]
    assert len(duplicates) == 1


def test_unknown_category_and_extra_categories() -> None:
    text = "## Security\n\n### Rule\n\nBody.\n"
    assert IssueCode.UNKNOWN_CATEGORY in validate_text(text).codes()
    report = validate_text(text, extra_categories=["security"])
    assert IssueCode.UNKNOWN_CATEGORY not in report.codes()


def test_unlinked_checklist_item() -> None:
    text = "## Testing\n\n### Rule One\n\nBody.\n\n## Checklist\n\n- [ ] Something else\n"
    report = validate_text(text)
    unlinked = [i for i in report.issues if i.code == IssueCode.UNLINKED_CHECKLIST_ITEM]
    assert len(unlinked) == 1
    assert unlinked[0].line == 9


def test_empty_document() -> None:
    report = validate_text("# Only a title\n")
    assert IssueCode.EMPTY_DOCUMENT in report.codes()


def test_validate_document_uses_parsed_content(sample_rules: str) -> None:
    document = parse_rules_text(sample_rules)
    assert validate_document(document).is_valid(strict=True)


def test_unbalanced_extra_example_is_orphan() -> None:
    text = (
        "## Testing\n\n### Rule\n\nBody.\n\n"
        "**CORRECT:**\n\n```\na()\n```\n\n"
        "**INCORRECT:**\n\n```\nb()\n```\n\n"
        "**CORRECT:**\n\n```\nc()\n```\n"
    )
    report = validate_text(text)
    assert IssueCode.ORPHAN_EXAMPLE in report.codes()
    assert not report.is_valid()


def test_balanced_extra_examples_are_valid() -> None:
    text = (
        "## Testing\n\n### Rule\n\nBody.\n\n"
        "**CORRECT:**\n\n```\na()\n```\n\n"
        "**INCORRECT:**\n\n```\nb()\n```\n\n"
        "**CORRECT:**\n\n```\nc()\n```\n\n"
        "**INCORRECT:**\n\n```\nd()\n```\n"
    )
    assert validate_text(text).is_valid(strict=True)


def test_label_without_code_block_is_orphan() -> None:
    text = "## Testing\n\n### Rule\n\nBody.\n\n**CORRECT:**\n\n## Formatting\n\n- Keep it short.\n"
    report = validate_text(text)
    orphans = [issue for issue in report.errors if issue.code == IssueCode.ORPHAN_EXAMPLE]
    assert len(orphans) == 1
    assert orphans[0].line == 7


def test_empty_category_is_warning() -> None:
    report = validate_text("## Testing\n\n### Rule\n\nBody.\n\n## Formatting\n\nJust prose.\n")
    empty = [issue for issue in report.issues if issue.code == IssueCode.EMPTY_CATEGORY]
    assert len(empty) == 1
    assert empty[0].severity == IssueSeverity.WARNING
    assert "Formatting" in empty[0].message


def test_ordered_list_category_is_not_empty() -> None:
    text = "## Formatting\n\n1. Two space indentation.\n2. Trailing commas.\n"
    report = validate_text(text)
    assert IssueCode.EMPTY_CATEGORY not in report.codes()
    assert IssueCode.EMPTY_DOCUMENT not in report.codes()


def test_rule_heading_outside_category_is_warning() -> None:
    report = validate_text(
        "# Rules\n\n## Overview\n\n### Stray\n\nBody.\n", extra_categories=["Overview"]
    )
    assert IssueCode.ORPHAN_RULE not in report.codes()

    report = validate_text("# Rules\n\n### Stray\n\nBody.\n\n## Testing\n\n### Rule\n\nBody.\n")
    orphans = [issue for issue in report.issues if issue.code == IssueCode.ORPHAN_RULE]
    assert len(orphans) == 1
    assert orphans[0].line == 3
    assert orphans[0].severity == IssueSeverity.WARNING
