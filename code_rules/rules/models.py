"""Rule document data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class RuleCategory(str, Enum):
    CRITICAL_RULES = "Critical Rules"
    NAMING_CONVENTIONS = "Naming Conventions"
    CODE_STRUCTURE = "Code Structure"
    TESTING = "Testing"
    DOCUMENTATION = "Documentation"
    FORMATTING = "Formatting"

    @classmethod
    def match(cls, name: str) -> Optional["RuleCategory"]:
        normalized = name.strip().lower()
        for category in cls:
            if category.value.lower() == normalized:
                return category
        return None


class ExampleKind(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class CodeExample:
    kind: ExampleKind
    code: str
    language: str = ""
    line: int = 0


@dataclass(frozen=True)
class RuleEntry:
    title: str
    statement: str
    category: str
    correct_example: Optional[CodeExample] = None
    incorrect_example: Optional[CodeExample] = None
    extra_examples: tuple[CodeExample, ...] = ()
    dangling_label_line: int = 0
    line: int = 0

    @property
    def has_example_pair(self) -> bool:
        return self.correct_example is not None and self.incorrect_example is not None

    @property
    def examples(self) -> list[CodeExample]:
        paired = [self.correct_example, self.incorrect_example]
        return [example for example in paired if example is not None] + list(
            self.extra_examples
        )

    def example_count(self, kind: ExampleKind) -> int:
        return sum(1 for example in self.examples if example.kind == kind)

    def as_dict(self) -> dict:
        return {
            "title": self.title,
            "statement": self.statement,
            "category": self.category,
            "correct_example": _example_dict(self.correct_example),
            "incorrect_example": _example_dict(self.incorrect_example),
            "extra_examples": [_example_dict(example) for example in self.extra_examples],
            "line": self.line,
        }


@dataclass(frozen=True)
class ChecklistItem:
    text: str
    checked: bool = False
    line: int = 0
    rule_title: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "text": self.text,
            "checked": self.checked,
            "rule_title": self.rule_title,
            "line": self.line,
        }


@dataclass(frozen=True)
class Heading:
    level: int
    title: str
    line: int = 0


@dataclass(frozen=True)
class RuleDocumentMetadata:
    description: str = ""
    globs: list[str] = field(default_factory=list)
    always_apply: bool = False


@dataclass
class RuleDocument:
    title: str
    source_path: Optional[Path] = None
    metadata: RuleDocumentMetadata = field(default_factory=RuleDocumentMetadata)
    headings: list[Heading] = field(default_factory=list)
    categories: dict[str, list[RuleEntry]] = field(default_factory=dict)
    checklist: list[ChecklistItem] = field(default_factory=list)
    stray_headings: list[Heading] = field(default_factory=list)
    content: str = ""

    @property
    def name(self) -> str:
        if self.source_path is not None:
            return self.source_path.stem
        return self.title

    @property
    def entries(self) -> list[RuleEntry]:
        result: list[RuleEntry] = []
        for entries in self.categories.values():
            result.extend(entries)
        return result

    def entries_in(self, category: str) -> list[RuleEntry]:
        normalized = category.strip().lower()
        for name, entries in self.categories.items():
            if name.lower() == normalized:
                return list(entries)
        return []

    def find_entry(self, title: str) -> Optional[RuleEntry]:
        normalized = title.strip().lower()
        for entry in self.entries:
            if entry.title.lower() == normalized:
                return entry
        return None

    def as_dict(self) -> dict:
        return {
            "title": self.title,
            "source": str(self.source_path) if self.source_path is not None else None,
            "metadata": {
                "description": self.metadata.description,
                "globs": list(self.metadata.globs),
                "always_apply": self.metadata.always_apply,
            },
            "categories": [
                {
                    "name": name,
                    "entries": [entry.as_dict() for entry in entries],
                }
                for name, entries in self.categories.items()
            ],
            "checklist": [item.as_dict() for item in self.checklist],
        }


def _example_dict(example: Optional[CodeExample]) -> Optional[dict]:
    if example is None:
        return None
    return {
        "kind": example.kind.value,
        "language": example.language,
        "code": example.code,
        "line": example.line,
    }
