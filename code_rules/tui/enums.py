from enum import Enum

from code_rules.rules.validator import IssueSeverity


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


SEVERITY_STYLE = {
    IssueSeverity.ERROR: UIStyle.RED.value,
    IssueSeverity.WARNING: UIStyle.YELLOW.value,
}
