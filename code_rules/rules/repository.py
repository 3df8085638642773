"""Read-only discovery of rule documents."""

from __future__ import annotations

import logging
from pathlib import Path

from code_rules.constants import RULES_DIRNAME, RULES_FILENAME
from code_rules.errors import MissingRulesFileError
from code_rules.rules.models import RuleDocument
from code_rules.rules.parser import parse_rules_file

logger = logging.getLogger(__name__)


class RulesRepository:
    def __init__(self, root: Path, rules_filename: str = RULES_FILENAME) -> None:
        self._root = root
        self._rules_filename = rules_filename

    @property
    def root(self) -> Path:
        return self._root

    @property
    def default_path(self) -> Path:
        return self._root / self._rules_filename

    @property
    def rules_dir(self) -> Path:
        return self._root / RULES_DIRNAME

    def discover(self) -> list[Path]:
        paths: list[Path] = []
        if self.default_path.is_file():
            paths.append(self.default_path)
        if self.rules_dir.is_dir():
            for child in sorted(self.rules_dir.iterdir()):
                if child.is_file() and child.suffix == ".md" and not child.name.startswith("."):
                    paths.append(child)
        logger.debug("discovered %d rule documents under %s", len(paths), self._root)
        return paths

    def resolve(self, name: str | None = None) -> Path:
        if not name:
            return self.default_path
        candidate = Path(name).expanduser()
        if candidate.is_absolute():
            return candidate
        # Relative names resolve against the root first, the working directory last.
        rooted = self._root / candidate
        if rooted.is_file():
            return rooted
        named = self.rules_dir / (name if name.endswith(".md") else f"{name}.md")
        if named.exists():
            return named
        if candidate.exists():
            return candidate
        return rooted

    def load(self, name: str | None = None) -> RuleDocument:
        path = self.resolve(name)
        if not path.is_file():
            raise MissingRulesFileError(path)
        return parse_rules_file(path)

    def load_all(self) -> list[RuleDocument]:
        return [parse_rules_file(path) for path in self.discover()]
