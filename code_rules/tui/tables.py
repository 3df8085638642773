from collections import Counter

from rich.console import Group
from rich.markup import escape
from rich.padding import Padding
from rich.panel import Panel
from rich.table import Column, Table
from rich.text import Text

from code_rules.rules.models import ExampleKind, Heading, RuleDocument, RuleEntry
from code_rules.rules.validator import ValidationReport
from code_rules.tui.enums import SEVERITY_STYLE, UIStyle


def _example_marker(entry: RuleEntry) -> str:
    correct = entry.example_count(ExampleKind.CORRECT)
    if correct and correct == entry.example_count(ExampleKind.INCORRECT):
        label = "pair" if correct == 1 else f"{correct} pairs"
        return f"[{UIStyle.GREEN.value}]{label}[/{UIStyle.GREEN.value}]"
    if entry.examples:
        return f"[{UIStyle.RED.value}]orphan[/{UIStyle.RED.value}]"
    return f"[{UIStyle.DIM.value}]-[/{UIStyle.DIM.value}]"


class DocumentTable:
    @staticmethod
    def summary_block(document: RuleDocument, source: str):
        paired = sum(1 for entry in document.entries if entry.has_example_pair)
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Title", escape(document.title))
        table.add_row("Source", escape(source))
        table.add_row("Categories", str(len(document.categories)))
        table.add_row("Rules", str(len(document.entries)))
        table.add_row("Example pairs", str(paired))
        table.add_row("Checklist", str(len(document.checklist)))
        return table

    @staticmethod
    def entries_table(entries: list[RuleEntry], verbose: bool = False) -> Table:
        table = Table(
            Column(header="Rule", width=32, overflow="fold"),
            Column(header="Examples", width=9),
            Column(header="Statement", overflow="ellipsis" if not verbose else "fold"),
            expand=True,
            header_style="bold",
        )
        for entry in entries:
            table.add_row(
                escape(entry.title), _example_marker(entry), escape(entry.statement)
            )
        return table

    @staticmethod
    def documents_table(items: list[tuple[str, RuleDocument]]) -> Table:
        table = Table(
            Column(header="Document", width=28),
            Column(header="Path", overflow="ellipsis"),
            Column(header="Rules", width=7, justify="right"),
            Column(header="Categories", width=11, justify="right"),
            expand=True,
            header_style="bold",
        )
        for path, document in items:
            table.add_row(
                escape(document.title),
                escape(path),
                str(len(document.entries)),
                str(len(document.categories)),
            )
        return table


class ValidationTable:
    @staticmethod
    def summary_block(report: ValidationReport, strict: bool):
        counts = Counter(issue.code.value for issue in report.issues)
        chips = [f"{key}={value}" for key, value in sorted(counts.items()) if value > 0]
        if not chips:
            chips = ["none"]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Document", escape(report.name))
        table.add_row("Mode", "strict" if strict else "default")
        table.add_row("Errors", str(len(report.errors)))
        table.add_row("Warnings", str(len(report.warnings)))
        table.add_row("Checks", "  ".join(chips))
        return table

    @staticmethod
    def issues_table(report: ValidationReport) -> Table:
        table = Table(
            Column(header="Line", width=6, justify="right"),
            Column(header="Severity", width=9),
            Column(header="Check", width=24),
            Column(header="Message", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for issue in report.issues:
            style = SEVERITY_STYLE.get(issue.severity, UIStyle.WHITE.value)
            table.add_row(
                str(issue.line) if issue.line else "",
                f"[{style}]{issue.severity.value}[/{style}]",
                issue.code.value,
                escape(issue.message),
            )
        return table

    @staticmethod
    def result_panel(report: ValidationReport, strict: bool) -> Panel:
        valid = report.is_valid(strict=strict)
        table = Table(show_header=False, box=None)
        table.add_row("[bold]result[/bold]", "valid" if valid else "invalid")
        table.add_row("[bold]errors[/bold]", str(len(report.errors)))
        table.add_row("[bold]warnings[/bold]", str(len(report.warnings)))
        return Panel(
            table,
            title="validate",
            border_style=UIStyle.GREEN.value if valid else UIStyle.RED.value,
        )


class OutlineTable:
    @staticmethod
    def outline(headings: list[Heading]):
        if not headings:
            return Text("No headings found.", style=UIStyle.DIM.value)
        lines = []
        for heading in headings:
            marker = "#" * heading.level
            line = Text(f"{marker} ", style=UIStyle.DIM.value)
            line.append(heading.title, style="bold" if heading.level <= 2 else "")
            line.append(f"  :{heading.line}", style=UIStyle.DIM.value)
            lines.append(Padding(line, (0, 0, 0, 2 * (heading.level - 1))))
        return Group(*lines)


class ChecklistTable:
    @staticmethod
    def checklist_table(document: RuleDocument) -> Table:
        table = Table(
            Column(header="Done", width=5),
            Column(header="Item", overflow="fold"),
            Column(header="Rule", width=32, overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for item in document.checklist:
            done = "[x]" if item.checked else "[ ]"
            if item.rule_title is None:
                rule = f"[{UIStyle.YELLOW.value}](unlinked)[/{UIStyle.YELLOW.value}]"
            else:
                rule = escape(item.rule_title)
            table.add_row(escape(done), escape(item.text), rule)
        return table
