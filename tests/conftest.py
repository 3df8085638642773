import sys
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


SAMPLE_RULES = """# Team Rules

Intro paragraph that is not a rule.

## Critical Rules

### No Ternary Operators

Use explicit if/else statements.

**CORRECT:**

```ts
if (a) {
  b();
}
```

**INCORRECT:**

```ts
a ? b() : c();
```

### Early Returns

Return early instead of nesting.

## Naming Conventions

### 1. Descriptive Names

Name things after what they hold.

```python
# CORRECT
active_users = filter_active(users)
```

```python
# INCORRECT
x = filter_active(users)
```

## Formatting

- **Two Space Indentation**: indent with two spaces.
- Keep lines short.

## Checklist

- [ ] No ternary operators
- [x] Early returns everywhere
- [ ] Descriptive names
"""


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.delenv("CODE_RULES_FILE", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def sample_rules() -> str:
    return SAMPLE_RULES


@pytest.fixture
def rules_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_rules(rules_root: Path):
    def _write(text: str, name: str = "OPENCODE_RULES.md") -> Path:
        path = rules_root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_root(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "code-rules"


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
