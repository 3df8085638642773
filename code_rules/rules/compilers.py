"""Rule document compilers for external consumers."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from enum import Enum
from functools import lru_cache
from pathlib import Path

import yaml
from jsonschema import Draft202012Validator

from code_rules.constants import AGENTS_FILENAME
from code_rules.errors import InvalidExportSchemaError
from code_rules.rules.models import RuleDocument
from code_rules.rules.serializer import serialize_document
from code_rules.utils import format_schema_error, load_json_schema


class ExportFormat(str, Enum):
    JSON = "json"
    CURSOR = "cursor"
    AGENTS = "agents"


@lru_cache(maxsize=1)
def _export_validator() -> Draft202012Validator:
    schema_path = Path(__file__).resolve().parent / "schema.json"
    return Draft202012Validator(load_json_schema(schema_path))


def validate_export(payload: dict) -> None:
    error = next(iter(_export_validator().iter_errors(payload)), None)
    if error is not None:
        raise InvalidExportSchemaError(format_schema_error(error))


class IRuleCompiler(ABC):
    @abstractmethod
    def compile(self, document: RuleDocument) -> tuple[str, str]:
        """Return (filename, compiled_content) for the target consumer."""


class JsonRuleCompiler(IRuleCompiler):
    """Compile to schema-checked JSON for programmatic consumers."""

    def compile(self, document: RuleDocument) -> tuple[str, str]:
        payload = document.as_dict()
        validate_export(payload)
        return f"{document.name}.json", json.dumps(payload, indent=2) + "\n"


class CursorRuleCompiler(IRuleCompiler):
    """Compile to Cursor .mdc format with camelCase frontmatter."""

    def compile(self, document: RuleDocument) -> tuple[str, str]:
        filename = f"{document.name}.mdc"
        fm: dict = {}
        if document.metadata.description:
            fm["description"] = document.metadata.description
        if document.metadata.globs:
            fm["globs"] = document.metadata.globs
        fm["alwaysApply"] = document.metadata.always_apply

        body = serialize_document(
            RuleDocument(
                title=document.title,
                categories=document.categories,
                checklist=document.checklist,
            )
        )
        parts: list[str] = []
        parts.append("---")
        parts.append(yaml.dump(fm, default_flow_style=False, sort_keys=False).rstrip())
        parts.append("---")
        parts.append("")
        parts.append(body)
        return filename, "\n".join(parts)


class AgentsRuleCompiler(IRuleCompiler):
    """Compile to an AGENTS.md section, one heading level below the document."""

    def compile(self, document: RuleDocument) -> tuple[str, str]:
        header = f"## {document.metadata.description or document.title}"
        parts = [header, ""]
        for category, entries in document.categories.items():
            if not entries:
                continue
            parts.extend([f"### {category}", ""])
            for entry in entries:
                parts.append(f"- **{entry.title}**: {entry.statement}".rstrip())
            parts.append("")
        return AGENTS_FILENAME, "\n".join(parts).rstrip() + "\n"


_COMPILERS: dict[ExportFormat, type[IRuleCompiler]] = {
    ExportFormat.JSON: JsonRuleCompiler,
    ExportFormat.CURSOR: CursorRuleCompiler,
    ExportFormat.AGENTS: AgentsRuleCompiler,
}


def compiler_for(export_format: ExportFormat | str) -> IRuleCompiler:
    return _COMPILERS[ExportFormat(export_format)]()
