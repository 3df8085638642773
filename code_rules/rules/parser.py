"""Parse markdown rule documents into structured Rule Entries."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from code_rules.constants import CHECKLIST_HEADING
from code_rules.errors import (
    InvalidEncodingError,
    InvalidFrontmatterError,
    MissingRulesFileError,
)
from code_rules.rules.markdown import Block, BlockKind, scan_blocks
from code_rules.rules.models import (
    ChecklistItem,
    CodeExample,
    ExampleKind,
    Heading,
    RuleDocument,
    RuleDocumentMetadata,
    RuleEntry,
)

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)
# A prose line is a label only when it holds nothing but the label word.
_LABEL_LINE_RE = re.compile(
    r"^[\W_]*(correct|incorrect)(?:\s+examples?)?[\W_]*$", re.IGNORECASE
)
_CODE_MARKER_RE = re.compile(r"^[\W_]*(CORRECT|INCORRECT)\b")
_ENUMERATOR_RE = re.compile(r"^\d+[.)]\s+")
_BOLD_TITLE_RE = re.compile(r"^\*\*(.+?)\*\*\s*[:\-–—]?\s*(.*)$")
_NORMALIZE_RE = re.compile(r"[^a-z0-9]+")


def _label_kind(text: str) -> Optional[ExampleKind]:
    match = _LABEL_LINE_RE.match(text)
    if match is None:
        return None
    return ExampleKind(match.group(1).lower())


def _code_marker_kind(code: str) -> Optional[ExampleKind]:
    stripped = code.strip()
    if not stripped:
        return None
    match = _CODE_MARKER_RE.match(stripped.splitlines()[0])
    if match is None:
        return None
    return ExampleKind(match.group(1).lower())


def _clean_title(title: str) -> str:
    return _ENUMERATOR_RE.sub("", title.strip()).strip()


def normalize_title(text: str) -> str:
    return _NORMALIZE_RE.sub(" ", text.lower()).strip()


@dataclass
class _EntryBuilder:
    title: str
    category: str
    line: int
    statement: list[str] = field(default_factory=list)
    correct: Optional[CodeExample] = None
    incorrect: Optional[CodeExample] = None
    extra: list[CodeExample] = field(default_factory=list)
    pending: Optional[ExampleKind] = None
    pending_line: int = 0
    dangling_line: int = 0

    @property
    def has_examples(self) -> bool:
        return self.correct is not None or self.incorrect is not None or bool(self.extra)

    def _set_pending(self, kind: ExampleKind, line: int) -> None:
        if self.pending is not None and not self.dangling_line:
            self.dangling_line = self.pending_line
        self.pending = kind
        self.pending_line = line

    def add_text(self, block: Block) -> None:
        kind = _label_kind(block.text)
        if kind is not None:
            self._set_pending(kind, block.line)
            return
        if not self.has_examples:
            self.statement.append(block.text)

    def add_code(self, block: Block) -> None:
        kind = self.pending
        self.pending = None
        if kind is None:
            kind = _code_marker_kind(block.text)
        if kind is None:
            return

        example = CodeExample(
            kind=kind, code=block.text, language=block.language, line=block.line
        )
        if kind == ExampleKind.CORRECT and self.correct is None:
            self.correct = example
        elif kind == ExampleKind.INCORRECT and self.incorrect is None:
            self.incorrect = example
        else:
            self.extra.append(example)

    def build(self) -> RuleEntry:
        dangling = self.dangling_line
        if not dangling and self.pending is not None:
            dangling = self.pending_line
        return RuleEntry(
            title=self.title,
            statement=" ".join(part for part in self.statement if part).strip(),
            category=self.category,
            correct_example=self.correct,
            incorrect_example=self.incorrect,
            extra_examples=tuple(self.extra),
            dangling_label_line=dangling,
            line=self.line,
        )


def _entry_from_bullet(block: Block, category: str) -> RuleEntry:
    match = _BOLD_TITLE_RE.match(block.text)
    if match:
        title = match.group(1).strip().rstrip(":")
        statement = match.group(2).strip() or title
    else:
        title = block.text.rstrip(".").strip()
        statement = block.text
    return RuleEntry(title=title, statement=statement, category=category, line=block.line)


def _link_checklist(
    items: list[ChecklistItem], entries: list[RuleEntry]
) -> list[ChecklistItem]:
    titles = sorted(
        ((normalize_title(entry.title), entry.title) for entry in entries),
        key=lambda pair: len(pair[0]),
        reverse=True,
    )
    linked: list[ChecklistItem] = []
    for item in items:
        haystack = f" {normalize_title(item.text)} "
        rule_title = None
        for needle, title in titles:
            if needle and f" {needle} " in haystack:
                rule_title = title
                break
        linked.append(
            ChecklistItem(
                text=item.text, checked=item.checked, line=item.line, rule_title=rule_title
            )
        )
    return linked


def split_frontmatter(
    text: str, source: Optional[Path] = None
) -> tuple[RuleDocumentMetadata, str, int]:
    """Return (metadata, body, body_line_offset) for a rules text."""
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return RuleDocumentMetadata(), text, 0

    try:
        raw = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        raise InvalidFrontmatterError(source or Path("<text>"), str(exc)) from exc
    if not isinstance(raw, dict):
        raise InvalidFrontmatterError(source or Path("<text>"), "expected a mapping")

    globs = raw.get("globs", [])
    if isinstance(globs, str):
        globs = [globs]
    if not isinstance(globs, list):
        globs = []

    metadata = RuleDocumentMetadata(
        description=str(raw.get("description", "") or ""),
        globs=[str(g) for g in globs],
        always_apply=bool(raw.get("always_apply", raw.get("alwaysApply", False))),
    )
    body = text[match.end() :]
    return metadata, body, text[: match.end()].count("\n")


def parse_rules_text(text: str, source_path: Optional[Path] = None) -> RuleDocument:
    metadata, body, offset = split_frontmatter(text, source_path)
    scan = scan_blocks(body, line_offset=offset)

    title = ""
    categories: dict[str, list[RuleEntry]] = {}
    checklist: list[ChecklistItem] = []
    stray: list[Heading] = []

    category: Optional[str] = None
    in_checklist = False
    builder: Optional[_EntryBuilder] = None
    section_bullets: list[Block] = []

    def finish_entry() -> None:
        nonlocal builder
        if builder is not None and category is not None:
            categories[category].append(builder.build())
        builder = None

    def finish_section() -> None:
        finish_entry()
        if category is not None and not categories[category]:
            categories[category].extend(
                _entry_from_bullet(block, category) for block in section_bullets
            )
        section_bullets.clear()

    for block in scan.blocks:
        if block.kind == BlockKind.HEADING and block.level <= 2:
            finish_section()
            in_checklist = False
            category = None
            if block.level == 1:
                if not title:
                    title = block.text
                continue
            if block.text.strip().lower().endswith(CHECKLIST_HEADING):
                in_checklist = True
                continue
            category = block.text
            categories.setdefault(category, [])
            continue

        if block.kind == BlockKind.HEADING and block.level == 3:
            if category is None:
                stray.append(Heading(level=block.level, title=block.text, line=block.line))
                continue
            finish_entry()
            builder = _EntryBuilder(
                title=_clean_title(block.text), category=category, line=block.line
            )
            continue

        if in_checklist:
            if block.kind in (BlockKind.CHECKLIST, BlockKind.BULLET):
                checklist.append(
                    ChecklistItem(text=block.text, checked=block.checked, line=block.line)
                )
            continue

        if builder is not None:
            if block.kind == BlockKind.CODE:
                builder.add_code(block)
            elif block.kind != BlockKind.BLANK:
                builder.add_text(block)
            continue

        if category is not None and block.kind == BlockKind.BULLET:
            section_bullets.append(block)

    finish_section()

    if not title:
        title = source_path.stem if source_path is not None else "Rules"

    document = RuleDocument(
        title=title,
        source_path=source_path,
        metadata=metadata,
        headings=scan.headings,
        categories=categories,
        stray_headings=stray,
        content=text,
    )
    document.checklist = _link_checklist(checklist, document.entries)
    logger.debug(
        "parsed %s: %d categories, %d entries, %d checklist items",
        document.name,
        len(categories),
        len(document.entries),
        len(document.checklist),
    )
    return document


def parse_rules_file(path: Path) -> RuleDocument:
    if not path.exists() or not path.is_file():
        raise MissingRulesFileError(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(path, f"expected UTF-8, {exc.reason}") from exc
    return parse_rules_text(text, source_path=path)
