"""Serialize rule documents and their heading outlines back to markdown."""

from __future__ import annotations

import yaml

from code_rules.rules.markdown import extract_headings
from code_rules.rules.models import CodeExample, Heading, RuleDocument, RuleEntry


def serialize_outline(headings: list[Heading]) -> str:
    return "\n".join(f"{'#' * heading.level} {heading.title}".rstrip() for heading in headings)


def outline_signature(headings: list[Heading]) -> list[tuple[int, str]]:
    return [(heading.level, heading.title) for heading in headings]


def outline_roundtrip_matches(text: str) -> bool:
    original = extract_headings(text)
    reparsed = extract_headings(serialize_outline(original))
    return outline_signature(original) == outline_signature(reparsed)


def _fence_for(code: str) -> str:
    longest = 0
    run = 0
    for char in code:
        run = run + 1 if char == "`" else 0
        longest = max(longest, run)
    return "`" * max(3, longest + 1)


def _serialize_example(label: str, example: CodeExample) -> list[str]:
    fence = _fence_for(example.code)
    return [
        f"**{label}:**",
        "",
        f"{fence}{example.language}",
        example.code,
        fence,
        "",
    ]


def _serialize_entry(entry: RuleEntry) -> list[str]:
    parts = [f"### {entry.title}", ""]
    if entry.statement:
        parts.extend([entry.statement, ""])
    if entry.correct_example is not None:
        parts.extend(_serialize_example("CORRECT", entry.correct_example))
    if entry.incorrect_example is not None:
        parts.extend(_serialize_example("INCORRECT", entry.incorrect_example))
    for example in entry.extra_examples:
        parts.extend(_serialize_example(example.kind.value.upper(), example))
    return parts


def serialize_document(document: RuleDocument) -> str:
    fm: dict = {}
    if document.metadata.description:
        fm["description"] = document.metadata.description
    if document.metadata.globs:
        fm["globs"] = document.metadata.globs
    if document.metadata.always_apply:
        fm["always_apply"] = True

    parts: list[str] = []
    if fm:
        parts.append("---")
        parts.append(yaml.dump(fm, default_flow_style=False, sort_keys=False).rstrip())
        parts.append("---")
        parts.append("")

    parts.extend([f"# {document.title}", ""])
    for category, entries in document.categories.items():
        parts.extend([f"## {category}", ""])
        for entry in entries:
            parts.extend(_serialize_entry(entry))

    if document.checklist:
        parts.extend(["## Checklist", ""])
        for item in document.checklist:
            mark = "x" if item.checked else " "
            parts.append(f"- [{mark}] {item.text}")
        parts.append("")

    return "\n".join(parts).rstrip() + "\n"
