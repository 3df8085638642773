import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft202012Validator

from code_rules.constants import (
    CONFIG_DIRNAME,
    CONFIG_FILENAME,
    RULES_FILE_ENV,
    RULES_FILENAME,
)
from code_rules.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from code_rules.utils import format_schema_error, load_json_schema, read_json_safe


@dataclass(frozen=True)
class RulesConfig:
    rules_file: str = RULES_FILENAME
    strict: bool = False
    categories: list[str] = field(default_factory=list)
    export_format: str = "json"


def default_config_root() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / CONFIG_DIRNAME


class ConfigRepository:
    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or default_config_root()
        schema_path = Path(__file__).resolve().parent / "config_schema.json"
        self._validator = Draft202012Validator(load_json_schema(schema_path))

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self._root / CONFIG_FILENAME

    def load(self) -> RulesConfig:
        payload, error = read_json_safe(self.config_path)
        if error is not None:
            raise InvalidJsonFormatError(self.config_path, error)
        if payload is None:
            payload = {}
        self._validate(payload)

        env_rules_file = os.environ.get(RULES_FILE_ENV)
        return RulesConfig(
            rules_file=env_rules_file or payload.get("rules_file", RULES_FILENAME),
            strict=bool(payload.get("strict", False)),
            categories=list(payload.get("categories", [])),
            export_format=payload.get("export_format", "json"),
        )

    def _validate(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise InvalidConfigSchemaError(self.config_path, "must be a JSON object")
        error = next(iter(self._validator.iter_errors(payload)), None)
        if error is not None:
            raise InvalidConfigSchemaError(self.config_path, format_schema_error(error))
