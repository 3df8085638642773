from pathlib import Path


class RulesAppError(Exception):
    """Base user-facing application error."""


class RulesFileError(RulesAppError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingRulesFileError(RulesFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing rules file")


class InvalidJsonFormatError(RulesFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(RulesFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class InvalidFrontmatterError(RulesFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid YAML frontmatter ({detail})")


class InvalidExportSchemaError(RulesAppError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Exported document does not match schema ({detail})")


class InvalidEncodingError(RulesFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid encoding ({detail})")
