"""Line-oriented markdown scanning for rule documents.

Only the subset of markdown that rule documents rely on is recognized:
ATX headings, fenced code blocks, checklist items, top-level bullets
(ordered or not) and plain text lines. Everything else is treated as text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from code_rules.rules.models import Heading

_HEADING_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_CLOSING_HASHES_RE = re.compile(r"(?:^|[ \t]+)#+$")
_MALFORMED_HEADING_RE = re.compile(r"^(?:#{7,}(?:[ \t]|$)|#+[^#\s])")
_FENCE_RE = re.compile(r"^(`{3,}|~{3,})(.*)$")
_CHECKLIST_RE = re.compile(r"^[ \t]*[-*+][ \t]+\[([ xX])\][ \t]+(.*)$")
_BULLET_RE = re.compile(r"^(?:[-*+]|\d+[.)])[ \t]+(.*)$")


class BlockKind(str, Enum):
    HEADING = "heading"
    CODE = "code"
    CHECKLIST = "checklist"
    BULLET = "bullet"
    TEXT = "text"
    BLANK = "blank"


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    line: int
    text: str = ""
    level: int = 0
    language: str = ""
    checked: bool = False


@dataclass
class MarkdownScan:
    blocks: list[Block] = field(default_factory=list)
    malformed_headings: list[tuple[int, str]] = field(default_factory=list)
    unclosed_fence: Optional[int] = None

    @property
    def headings(self) -> list[Heading]:
        return [
            Heading(level=block.level, title=block.text, line=block.line)
            for block in self.blocks
            if block.kind == BlockKind.HEADING
        ]


def _strip_indent(line: str) -> tuple[int, str]:
    stripped = line.lstrip(" ")
    return len(line) - len(stripped), stripped


def _parse_heading(stripped: str) -> Optional[tuple[int, str]]:
    match = _HEADING_RE.match(stripped)
    if not match:
        return None
    level = len(match.group(1))
    title = match.group(2) or ""
    title = _CLOSING_HASHES_RE.sub("", title).strip()
    return level, title


def _is_closing_fence(stripped: str, marker: str) -> bool:
    if not stripped.startswith(marker[0] * len(marker)):
        return False
    run = len(stripped) - len(stripped.lstrip(marker[0]))
    return run >= len(marker) and not stripped[run:].strip()


def scan_blocks(text: str, line_offset: int = 0) -> MarkdownScan:
    scan = MarkdownScan()
    lines = text.splitlines()

    fence_marker: Optional[str] = None
    fence_line = 0
    fence_language = ""
    fence_body: list[str] = []

    for index, raw in enumerate(lines):
        line_no = index + 1 + line_offset
        indent, stripped = _strip_indent(raw)

        if fence_marker is not None:
            if indent <= 3 and _is_closing_fence(stripped, fence_marker):
                scan.blocks.append(
                    Block(
                        kind=BlockKind.CODE,
                        line=fence_line,
                        text="\n".join(fence_body),
                        language=fence_language,
                    )
                )
                fence_marker = None
                fence_body = []
            else:
                fence_body.append(raw)
            continue

        if not stripped.strip():
            scan.blocks.append(Block(kind=BlockKind.BLANK, line=line_no))
            continue

        if indent <= 3:
            fence = _FENCE_RE.match(stripped)
            if fence and not (fence.group(1)[0] == "`" and "`" in fence.group(2)):
                fence_marker = fence.group(1)
                fence_line = line_no
                info = fence.group(2).strip()
                fence_language = info.split()[0] if info else ""
                continue

            heading = _parse_heading(stripped)
            if heading is not None:
                level, title = heading
                scan.blocks.append(
                    Block(kind=BlockKind.HEADING, line=line_no, text=title, level=level)
                )
                continue

            if _MALFORMED_HEADING_RE.match(stripped):
                scan.malformed_headings.append((line_no, stripped.rstrip()))
                scan.blocks.append(
                    Block(kind=BlockKind.TEXT, line=line_no, text=stripped.rstrip())
                )
                continue

        checklist = _CHECKLIST_RE.match(raw)
        if checklist:
            scan.blocks.append(
                Block(
                    kind=BlockKind.CHECKLIST,
                    line=line_no,
                    text=checklist.group(2).strip(),
                    checked=checklist.group(1).lower() == "x",
                )
            )
            continue

        bullet = _BULLET_RE.match(raw)
        if bullet:
            scan.blocks.append(
                Block(kind=BlockKind.BULLET, line=line_no, text=bullet.group(1).strip())
            )
            continue

        scan.blocks.append(Block(kind=BlockKind.TEXT, line=line_no, text=raw.strip()))

    if fence_marker is not None:
        scan.unclosed_fence = fence_line
        scan.blocks.append(
            Block(
                kind=BlockKind.CODE,
                line=fence_line,
                text="\n".join(fence_body),
                language=fence_language,
            )
        )

    return scan


def extract_headings(text: str) -> list[Heading]:
    return scan_blocks(text).headings
