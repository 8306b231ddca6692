from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _clear_caches() -> None:
    from typedpaths import config as paths_config, context as paths_context

    paths_config.get_settings.cache_clear()
    paths_context.get_context.cache_clear()


@pytest.fixture(autouse=True)
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run every test inside a fresh working directory with its own home directory."""

    root = tmp_path.resolve()
    current = root / "workspace"
    current.mkdir()
    home = root / "home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    for name in ("TYPEDPATHS_SANDBOX", "TYPEDPATHS_ENCODING", "TYPEDPATHS_TEMP_PREFIX", "TYPEDPATHS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(current)
    _clear_caches()

    yield current

    _clear_caches()


@pytest.fixture
def outside(workspace: Path) -> Path:
    """A directory next to the working directory, outside the sandbox."""

    path = workspace.parent / "outside"
    path.mkdir()
    return path


@pytest.fixture
def home(workspace: Path) -> Path:
    return workspace.parent / "home"
