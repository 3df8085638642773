from code_rules.rules.models import (
    ChecklistItem,
    CodeExample,
    ExampleKind,
    Heading,
    RuleCategory,
    RuleDocument,
    RuleDocumentMetadata,
    RuleEntry,
)
from code_rules.rules.parser import parse_rules_file, parse_rules_text
from code_rules.rules.repository import RulesRepository
from code_rules.rules.validator import ValidationReport, validate_document, validate_text

__all__ = [
    "ChecklistItem",
    "CodeExample",
    "ExampleKind",
    "Heading",
    "RuleCategory",
    "RuleDocument",
    "RuleDocumentMetadata",
    "RuleEntry",
    "RulesRepository",
    "ValidationReport",
    "parse_rules_file",
    "parse_rules_text",
    "validate_document",
    "validate_text",
]
