from rich.console import Console

from code_rules.rules.models import RuleDocument
from code_rules.rules.validator import ValidationReport
from code_rules.tui.enums import UIStyle
from code_rules.tui.sections import UISection
from code_rules.tui.tables import (
    ChecklistTable,
    DocumentTable,
    OutlineTable,
    ValidationTable,
)
from code_rules.utils import compact_home_path, compact_home_paths_in_text

_CATEGORY_STYLES = (
    UIStyle.CYAN.value,
    UIStyle.MAGENTA.value,
    UIStyle.GREEN.value,
    UIStyle.BLUE.value,
)


def _source_label(document: RuleDocument) -> str:
    if document.source_path is None:
        return "<text>"
    return compact_home_path(document.source_path)


class RulesConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_document(
        self, document: RuleDocument, category: str | None = None, verbose: bool = False
    ) -> None:
        self.console.print(
            UISection.wrap(
                "rules overview",
                DocumentTable.summary_block(document, source=_source_label(document)),
                style=UIStyle.BLUE.value,
            )
        )

        categories = list(document.categories.items())
        if category is not None:
            categories = [
                (name, entries)
                for name, entries in categories
                if name.lower() == category.strip().lower()
            ]
            if not categories:
                self.console.print(
                    UISection.note(
                        "rules",
                        f"No category named '{category}'.",
                        style=UIStyle.YELLOW.value,
                    )
                )
                return

        if not any(entries for _, entries in categories):
            self.console.print(
                UISection.note("rules", "No rules found.", style=UIStyle.DIM.value)
            )
            return

        for index, (name, entries) in enumerate(categories):
            if not entries:
                continue
            self.console.print(
                UISection.wrap(
                    name.lower(),
                    DocumentTable.entries_table(entries, verbose=verbose),
                    style=_CATEGORY_STYLES[index % len(_CATEGORY_STYLES)],
                )
            )

    def render_documents(self, items: list[tuple[str, RuleDocument]]) -> None:
        if not items:
            self.console.print(
                UISection.note(
                    "documents", "No rule documents found.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "documents",
                DocumentTable.documents_table(
                    [(compact_home_path(path), document) for path, document in items]
                ),
                style=UIStyle.BLUE.value,
            )
        )

    def render_validation(self, report: ValidationReport, strict: bool = False) -> None:
        self.console.print(
            UISection.wrap(
                "validation overview",
                ValidationTable.summary_block(report, strict=strict),
                style=UIStyle.BLUE.value,
            )
        )
        if report.issues:
            self.console.print(
                UISection.wrap(
                    "issues",
                    ValidationTable.issues_table(report),
                    style=UIStyle.RED.value if report.errors else UIStyle.YELLOW.value,
                )
            )
        else:
            self.console.print(
                UISection.note("issues", "No issues found.", style=UIStyle.DIM.value)
            )
        self.console.print(ValidationTable.result_panel(report, strict=strict))

    def render_outline(self, document: RuleDocument, roundtrip: bool | None = None) -> None:
        self.console.print(
            UISection.wrap(
                "outline",
                OutlineTable.outline(document.headings),
                style=UIStyle.BLUE.value,
                subtitle=_source_label(document),
            )
        )
        if roundtrip is None:
            return
        if roundtrip:
            self.console.print(
                UISection.note(
                    "round-trip",
                    "Section ordering preserved.",
                    style=UIStyle.GREEN.value,
                )
            )
        else:
            self.console.print(
                UISection.note(
                    "round-trip",
                    "Section ordering changed after re-serialization.",
                    style=UIStyle.RED.value,
                )
            )

    def render_checklist(self, document: RuleDocument) -> None:
        if not document.checklist:
            self.console.print(
                UISection.note(
                    "checklist", "No checklist items.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "checklist",
                ChecklistTable.checklist_table(document),
                style=UIStyle.CYAN.value,
            )
        )

    def render_export_saved(self, export_format: str, path: str) -> None:
        self.console.print(
            UISection.note(
                "export",
                f"Exported [bold]{export_format}[/bold]\n"
                f"{compact_home_paths_in_text(path)}",
                style=UIStyle.GREEN.value,
            )
        )
