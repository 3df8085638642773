"""Structural checks for rule documents.

Each check inspects the parsed document (or the raw markdown scan) and emits
``ValidationIssue`` records. Nothing here evaluates the example code.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from code_rules.rules.markdown import MarkdownScan, scan_blocks
from code_rules.rules.models import ExampleKind, RuleCategory, RuleDocument
from code_rules.rules.parser import parse_rules_text, split_frontmatter
from code_rules.rules.serializer import outline_roundtrip_matches

logger = logging.getLogger(__name__)


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class IssueCode(str, Enum):
    EMPTY_TITLE = "empty-title"
    EMPTY_STATEMENT = "empty-statement"
    ORPHAN_EXAMPLE = "orphan-example"
    UNCLOSED_FENCE = "unclosed-fence"
    MALFORMED_HEADING = "malformed-heading"
    HEADING_LEVEL_SKIP = "heading-level-skip"
    OUTLINE_ROUNDTRIP = "outline-roundtrip"
    DUPLICATE_TITLE = "duplicate-title"
    UNKNOWN_CATEGORY = "unknown-category"
    UNLINKED_CHECKLIST_ITEM = "unlinked-checklist-item"
    EMPTY_DOCUMENT = "empty-document"
    EMPTY_CATEGORY = "empty-category"
    ORPHAN_RULE = "orphan-rule"


@dataclass(frozen=True)
class ValidationIssue:
    code: IssueCode
    severity: IssueSeverity
    message: str
    line: int = 0


@dataclass
class ValidationReport:
    name: str
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [
            issue for issue in self.issues if issue.severity == IssueSeverity.WARNING
        ]

    def is_valid(self, strict: bool = False) -> bool:
        if strict:
            return not self.issues
        return not self.errors

    def codes(self) -> set[IssueCode]:
        return {issue.code for issue in self.issues}


def _error(code: IssueCode, message: str, line: int = 0) -> ValidationIssue:
    return ValidationIssue(code=code, severity=IssueSeverity.ERROR, message=message, line=line)


def _warning(code: IssueCode, message: str, line: int = 0) -> ValidationIssue:
    return ValidationIssue(
        code=code, severity=IssueSeverity.WARNING, message=message, line=line
    )


def check_markdown(scan: MarkdownScan) -> Iterable[ValidationIssue]:
    if scan.unclosed_fence is not None:
        yield _error(
            IssueCode.UNCLOSED_FENCE,
            "code fence is never closed",
            scan.unclosed_fence,
        )
    for line, text in scan.malformed_headings:
        yield _error(IssueCode.MALFORMED_HEADING, f"malformed heading '{text}'", line)

    previous = 0
    for heading in scan.headings:
        if previous and heading.level > previous + 1:
            yield _warning(
                IssueCode.HEADING_LEVEL_SKIP,
                f"heading level jumps from h{previous} to h{heading.level}",
                heading.line,
            )
        previous = heading.level


def check_entries(
    document: RuleDocument, extra_categories: Iterable[str] = ()
) -> Iterable[ValidationIssue]:
    if not document.entries:
        yield _error(IssueCode.EMPTY_DOCUMENT, "document contains no rule entries")

    accepted = {name.strip().lower() for name in extra_categories}
    for category in document.categories:
        if RuleCategory.match(category) is None and category.lower() not in accepted:
            yield _warning(
                IssueCode.UNKNOWN_CATEGORY, f"unknown category '{category}'"
            )
        if not document.categories[category]:
            yield _warning(
                IssueCode.EMPTY_CATEGORY, f"category '{category}' has no rule entries"
            )

    for heading in document.stray_headings:
        yield _warning(
            IssueCode.ORPHAN_RULE,
            f"rule heading '{heading.title}' is not under a category",
            heading.line,
        )

    for entry in document.entries:
        label = entry.title or f"entry at line {entry.line}"
        if not entry.title.strip():
            yield _error(IssueCode.EMPTY_TITLE, "rule entry has an empty title", entry.line)
        if not entry.statement.strip():
            yield _error(
                IssueCode.EMPTY_STATEMENT,
                f"rule '{label}' has an empty statement",
                entry.line,
            )
        correct = entry.example_count(ExampleKind.CORRECT)
        incorrect = entry.example_count(ExampleKind.INCORRECT)
        if correct != incorrect:
            first = entry.examples[0]
            yield _error(
                IssueCode.ORPHAN_EXAMPLE,
                f"rule '{label}' has {correct} CORRECT and {incorrect} INCORRECT examples",
                first.line,
            )
        if entry.dangling_label_line:
            yield _error(
                IssueCode.ORPHAN_EXAMPLE,
                f"rule '{label}' has an example label not followed by a code block",
                entry.dangling_label_line,
            )

    counts = Counter(entry.title.lower() for entry in document.entries if entry.title)
    reported: set[str] = set()
    for entry in document.entries:
        key = entry.title.lower()
        if counts.get(key, 0) > 1 and key not in reported:
            reported.add(key)
            yield _warning(
                IssueCode.DUPLICATE_TITLE,
                f"rule title '{entry.title}' appears {counts[key]} times",
                entry.line,
            )


def check_checklist(document: RuleDocument) -> Iterable[ValidationIssue]:
    for item in document.checklist:
        if item.rule_title is None:
            yield _warning(
                IssueCode.UNLINKED_CHECKLIST_ITEM,
                f"checklist item '{item.text}' does not restate a rule title",
                item.line,
            )


def validate_document(
    document: RuleDocument,
    text: Optional[str] = None,
    extra_categories: Iterable[str] = (),
) -> ValidationReport:
    source = document.content if text is None else text
    _, body, offset = split_frontmatter(source, document.source_path)
    scan = scan_blocks(body, line_offset=offset)

    report = ValidationReport(name=document.name)
    report.issues.extend(check_markdown(scan))
    if not outline_roundtrip_matches(body):
        report.issues.append(
            _error(
                IssueCode.OUTLINE_ROUNDTRIP,
                "re-serialized heading outline does not match the original order",
            )
        )
    report.issues.extend(check_entries(document, extra_categories))
    report.issues.extend(check_checklist(document))
    report.issues.sort(key=lambda issue: (issue.line, issue.code.value))

    logger.debug(
        "validated %s: %d errors, %d warnings",
        report.name,
        len(report.errors),
        len(report.warnings),
    )
    return report


def validate_text(text: str, extra_categories: Iterable[str] = ()) -> ValidationReport:
    document = parse_rules_text(text)
    return validate_document(document, text, extra_categories)
