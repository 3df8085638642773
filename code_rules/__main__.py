import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console

from code_rules.config import ConfigRepository, RulesConfig
from code_rules.errors import RulesAppError
from code_rules.rules.compilers import ExportFormat, compiler_for
from code_rules.rules.models import RuleDocument
from code_rules.rules.repository import RulesRepository
from code_rules.rules.serializer import outline_roundtrip_matches
from code_rules.rules.validator import validate_document
from code_rules.tui import RulesConsoleUI
from code_rules.utils import write_text


FORMAT_VALUES = [item.value for item in ExportFormat]


def _path_argument():
    return click.argument("path", required=False)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _config_from_obj(obj: Dict[str, Any]) -> RulesConfig:
    try:
        return ConfigRepository(obj.get("config_dir")).load()
    except RulesAppError as exc:
        raise click.ClickException(str(exc))


def _repository_from_obj(obj: Dict[str, Any], config: RulesConfig) -> RulesRepository:
    return RulesRepository(obj["root"], rules_filename=config.rules_file)


def _load_document(obj: Dict[str, Any], path: Optional[str]) -> tuple[RuleDocument, RulesConfig]:
    config = _config_from_obj(obj)
    repository = _repository_from_obj(obj, config)
    try:
        document = repository.load(path)
    except RulesAppError as exc:
        raise click.ClickException(str(exc))
    return document, config


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--root",
    type=click.Path(path_type=Path, file_okay=False),
    default=".",
    show_default=True,
    help="Directory holding the rules file and rules/ folder.",
)
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Override the config directory.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, root: Path, config_dir: Optional[Path], verbose: bool) -> None:
    """Load, validate and export markdown coding-rule documents."""
    _configure_logging(verbose)
    ctx.obj = {"root": root, "config_dir": config_dir, "verbose": verbose}


@cli.command(help="Show rule entries grouped by category.")
@_path_argument()
@click.option("--category", "-c", default=None, help="Only show one category.")
@click.pass_obj
def show(obj: Dict[str, Any], path: Optional[str], category: Optional[str]) -> None:
    ui = RulesConsoleUI(Console())
    document, _ = _load_document(obj, path)
    ui.render_document(document, category=category, verbose=obj["verbose"])


@cli.command(help="Check the structural invariants of a rules document.")
@_path_argument()
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
@click.pass_obj
def validate(obj: Dict[str, Any], path: Optional[str], strict: bool) -> None:
    ui = RulesConsoleUI(Console())
    document, config = _load_document(obj, path)
    strict_mode = strict or config.strict

    report = validate_document(document, extra_categories=config.categories)
    ui.render_validation(report, strict=strict_mode)

    if not report.is_valid(strict=strict_mode):
        raise click.exceptions.Exit(1)


@cli.command(help="Print the heading outline of a rules document.")
@_path_argument()
@click.option("--check", is_flag=True, help="Verify the outline survives re-serialization.")
@click.pass_obj
def outline(obj: Dict[str, Any], path: Optional[str], check: bool) -> None:
    ui = RulesConsoleUI(Console())
    document, _ = _load_document(obj, path)

    roundtrip = outline_roundtrip_matches(document.content) if check else None
    ui.render_outline(document, roundtrip=roundtrip)

    if roundtrip is False:
        raise click.exceptions.Exit(1)


@cli.command(help="Show checklist items and the rules they restate.")
@_path_argument()
@click.pass_obj
def checklist(obj: Dict[str, Any], path: Optional[str]) -> None:
    ui = RulesConsoleUI(Console())
    document, _ = _load_document(obj, path)
    ui.render_checklist(document)


@cli.command(help="Export a rules document for another tool.")
@_path_argument()
@click.option(
    "--format",
    "export_format",
    type=click.Choice(FORMAT_VALUES, case_sensitive=False),
    default=None,
    help="Output format (defaults to the configured export_format).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write to a file or directory instead of stdout.",
)
@click.pass_obj
def export(
    obj: Dict[str, Any],
    path: Optional[str],
    export_format: Optional[str],
    output: Optional[Path],
) -> None:
    document, config = _load_document(obj, path)
    selected = (export_format or config.export_format).lower()

    try:
        filename, content = compiler_for(selected).compile(document)
    except RulesAppError as exc:
        raise click.ClickException(str(exc))

    if output is None:
        click.echo(content, nl=False)
        return

    target = output / filename if output.is_dir() else output
    write_text(target, content)
    RulesConsoleUI(Console()).render_export_saved(selected, str(target))


@cli.command("list", help="List discovered rule documents.")
@click.pass_obj
def list_documents(obj: Dict[str, Any]) -> None:
    ui = RulesConsoleUI(Console())
    config = _config_from_obj(obj)
    repository = _repository_from_obj(obj, config)

    try:
        documents = repository.load_all()
    except RulesAppError as exc:
        raise click.ClickException(str(exc))
    items = [(str(document.source_path), document) for document in documents]
    ui.render_documents(items)


def main() -> int:
    try:
        result = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    # Non-standalone click returns the exit code of a raised Exit.
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
