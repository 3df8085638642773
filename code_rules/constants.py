from typing import Final


RULES_FILENAME: Final[str] = "OPENCODE_RULES.md"
RULES_DIRNAME: Final[str] = "rules"
AGENTS_FILENAME: Final[str] = "AGENTS.md"

CONFIG_DIRNAME: Final[str] = "code-rules"
CONFIG_FILENAME: Final[str] = "config.json"
RULES_FILE_ENV: Final[str] = "CODE_RULES_FILE"

CHECKLIST_HEADING: Final[str] = "checklist"
